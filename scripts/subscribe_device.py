"""Subscribe one device registration token to the notification topic."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from topicpush.config import get_settings, parse_topic
from topicpush.messaging.factory import build_topic_messenger
from topicpush.subscription.trigger import SubscriptionTrigger

logger = logging.getLogger("scripts.subscribe_device")


def _topic_arg(raw: str) -> str:
  # Apply the same grammar as TOPICPUSH_TOPIC so bad names never reach FCM.
  try:
    return parse_topic(raw)
  except ValueError as exc:
    raise argparse.ArgumentTypeError(str(exc)) from exc


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
  parser = argparse.ArgumentParser(description=__doc__)
  parser.add_argument("token", help="FCM registration token of the device")
  parser.add_argument("--topic", type=_topic_arg, default=None, help="override the configured topic")
  parser.add_argument("--ignore-errors", action="store_true", help="always report 'Subscribed!' even when the subscription fails")
  return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
  args = _parse_args(argv)
  settings = get_settings()
  # The CLI flag can only switch error reporting off, never back on.
  report_errors = settings.report_subscribe_errors and not args.ignore_errors
  trigger = SubscriptionTrigger(build_topic_messenger(settings), topic=args.topic or settings.topic, report_errors=report_errors)

  logger.info("Subscribing device to topic %s", trigger.topic)
  outcome = asyncio.run(trigger.activate(args.token))
  print(outcome.diagnostic)
  return 0 if outcome.subscribed else 1


if __name__ == "__main__":
  logging.basicConfig(level=logging.INFO)
  sys.exit(main())
