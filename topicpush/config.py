"""Service configuration read from the process environment."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from topicpush.utils.env import default_env_path, load_env_file

load_env_file(default_env_path(), override=False)

DEFAULT_TOPIC = "sample"
_TOPIC_RE = re.compile(r"^[a-zA-Z0-9\-_.~%]+$")


@dataclass(frozen=True)
class Settings:
  """Typed settings for the topicpush service."""

  environment: str
  debug: bool
  allowed_origins: tuple[str, ...]
  port: int
  topic: str
  report_subscribe_errors: bool
  notification_timezone: str
  notification_timezone_label: str
  notification_data: str
  require_cron_header: bool
  log_dir: str
  log_max_bytes: int
  log_backup_count: int
  log_http_4xx: bool
  firebase_project_id: str | None
  firebase_service_account_json_path: str | None


def _parse_origins(raw: str | None) -> tuple[str, ...]:
  origins = [origin.strip() for origin in (raw or "").split(",") if origin.strip()]

  if not origins:
    raise ValueError("TOPICPUSH_ALLOWED_ORIGINS must include at least one origin.")

  if "*" in origins:
    raise ValueError("TOPICPUSH_ALLOWED_ORIGINS must not include wildcard origins.")

  return tuple(origins)


def _parse_bool(raw: str | None, *, default: bool = False) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None or raw.strip() == "":
    return default

  return raw.strip().lower() in {"1", "true", "yes", "on"}


def parse_topic(raw: str | None) -> str:
  """Normalize a topic name and check it against the FCM topic grammar."""
  topic = (raw or DEFAULT_TOPIC).strip()
  # FCM accepts bare names or the /topics/ prefixed form.
  if topic.startswith("/topics/"):
    topic = topic[len("/topics/") :]

  if not _TOPIC_RE.fullmatch(topic):
    raise ValueError(f"not a valid topic name: {topic!r}")

  return topic


def _parse_timezone(raw: str | None) -> str:
  name = (raw or "Asia/Tokyo").strip()
  try:
    ZoneInfo(name)
  except (ZoneInfoNotFoundError, ValueError) as exc:
    raise ValueError(f"TOPICPUSH_NOTIFICATION_TIMEZONE is not a known zone: {name!r}") from exc

  return name


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("TOPICPUSH_ENV", "development").lower()
  debug = _parse_bool(os.getenv("TOPICPUSH_DEBUG"))

  port = int(os.getenv("PORT", "8080"))
  if not 0 < port < 65536:
    raise ValueError("PORT must be between 1 and 65535.")

  log_max_bytes = int(os.getenv("TOPICPUSH_LOG_MAX_BYTES", "5242880"))  # 5MB default
  if log_max_bytes <= 0:
    raise ValueError("TOPICPUSH_LOG_MAX_BYTES must be a positive integer.")

  log_backup_count = int(os.getenv("TOPICPUSH_LOG_BACKUP_COUNT", "10"))
  if log_backup_count < 0:
    raise ValueError("TOPICPUSH_LOG_BACKUP_COUNT must be zero or a positive integer.")

  return Settings(
    environment=environment,
    debug=debug,
    allowed_origins=_parse_origins(os.getenv("TOPICPUSH_ALLOWED_ORIGINS", "http://localhost:8080")),
    port=port,
    topic=parse_topic(os.getenv("TOPICPUSH_TOPIC")),
    report_subscribe_errors=_parse_bool(os.getenv("TOPICPUSH_REPORT_SUBSCRIBE_ERRORS"), default=True),
    notification_timezone=_parse_timezone(os.getenv("TOPICPUSH_NOTIFICATION_TIMEZONE")),
    notification_timezone_label=(os.getenv("TOPICPUSH_NOTIFICATION_TIMEZONE_LABEL") or "JST").strip(),
    notification_data=os.getenv("TOPICPUSH_NOTIFICATION_DATA", "hogehogehoge"),
    require_cron_header=_parse_bool(os.getenv("TOPICPUSH_REQUIRE_CRON_HEADER"), default=True),
    log_dir=(os.getenv("TOPICPUSH_LOG_DIR") or "./logs").strip(),
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
    log_http_4xx=_parse_bool(os.getenv("TOPICPUSH_LOG_HTTP_4XX")),
    firebase_project_id=_optional_str(os.getenv("FIREBASE_PROJECT_ID")),
    firebase_service_account_json_path=_optional_str(os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON_PATH")),
  )
