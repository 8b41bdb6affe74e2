"""Minimal .env reader used before settings are resolved."""

from __future__ import annotations

import os
from pathlib import Path


def default_env_path() -> Path:
  """Locate the .env file next to the project root."""

  return Path(__file__).resolve().parents[2] / ".env"


def load_env_file(path: Path, *, override: bool = False) -> None:
  """Copy KEY=VALUE lines from ``path`` into ``os.environ``."""

  if not path.is_file():
    return

  for raw_line in path.read_text(encoding="utf-8").splitlines():
    line = raw_line.strip()
    if not line or line.startswith("#"):
      continue
    if line.startswith("export "):
      line = line[len("export ") :].lstrip()
    key, sep, value = line.partition("=")
    if not sep:
      continue
    key = key.strip()
    value = _unquote(value.strip())
    if not key:
      continue
    if not override and key in os.environ:
      continue
    os.environ[key] = value


def _unquote(value: str) -> str:
  if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
    return value[1:-1]
  return value
