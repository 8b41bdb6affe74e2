"""Scheduled broadcast of the current time to the notification topic."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from topicpush.config import DEFAULT_TOPIC
from topicpush.messaging.contracts import TopicMessage, TopicMessenger
from topicpush.notifications.lock import NotificationLock

logger = logging.getLogger(__name__)


def format_local_time(now: datetime, zone: ZoneInfo) -> str:
  """Render ``now`` in ``zone`` as ``2020-06-08 21:15:30.5 +0900 Asia/Tokyo``.

  Trailing zeros of the fractional second are trimmed and a whole second
  carries no fraction at all.
  """
  local = now.astimezone(zone)
  fraction = f"{local.microsecond:06d}".rstrip("0")
  seconds = f"{local:%Y-%m-%d %H:%M:%S}"
  if fraction:
    seconds = f"{seconds}.{fraction}"
  return f"{seconds} {local:%z} {zone.key}"


class NotificationJob:
  """Sends at most one topic notification per UTC hour."""

  def __init__(self, messenger: TopicMessenger, lock: NotificationLock, *, topic: str = DEFAULT_TOPIC, timezone: str = "Asia/Tokyo", timezone_label: str = "JST", data_value: str = "hogehogehoge") -> None:
    self._messenger = messenger
    self._lock = lock
    self._topic = topic
    self._zone = ZoneInfo(timezone)
    self._timezone_label = timezone_label
    self._data_value = data_value

  def build_message(self, now: datetime) -> TopicMessage:
    return TopicMessage(topic=self._topic, title=f"now({self._timezone_label})", body=format_local_time(now, self._zone), data={"data": self._data_value})

  def run(self, now: datetime | None = None) -> str:
    """Take the hourly lock, send the message and return the provider message id.

    Raises ``NotificationLockUnavailableError`` when this hour was already
    served and ``MessagingProviderError`` when delivery fails.
    """
    now = now or datetime.now(UTC)
    self._lock.acquire(now)

    message_id = self._messenger.send(self.build_message(now))
    logger.info("result: %s", message_id)
    return message_id
