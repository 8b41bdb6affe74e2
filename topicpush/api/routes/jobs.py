from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from topicpush.config import Settings, get_settings
from topicpush.messaging.contracts import MessagingError
from topicpush.notifications.factory import build_notification_job
from topicpush.notifications.job import NotificationJob
from topicpush.notifications.lock import NotificationLockError

router = APIRouter()
logger = logging.getLogger(__name__)

CRON_HEADER = "X-Appengine-Cron"


def get_notification_job(settings: Annotated[Settings, Depends(get_settings)]) -> NotificationJob:
  return build_notification_job(settings)


@router.api_route("/_job", methods=["GET", "POST"], response_class=PlainTextResponse)
async def run_notification_job(
  settings: Annotated[Settings, Depends(get_settings)], job: Annotated[NotificationJob, Depends(get_notification_job)], cron_header: Annotated[str | None, Header(alias=CRON_HEADER)] = None
) -> str:
  """Cron entry point: broadcast the current time to the topic once per hour."""
  # App Engine strips this header from external requests, so only cron can set it.
  if settings.require_cron_header and cron_header != "true":
    logger.warning("Rejected /_job call without %s header", CRON_HEADER)
    return "error"

  # Run the blocking lock and send off the event loop.
  try:
    await run_in_threadpool(job.run)
  except (NotificationLockError, MessagingError) as exc:
    # Lock contention and provider rejections are expected; skip the traceback.
    logger.error("Notification job failed: %s", exc)
    return "error"
  except Exception:  # noqa: BLE001
    # Firestore commit exhaustion and credential failures answer "error" too.
    logger.exception("Notification job failed unexpectedly")
    return "error"

  return "done"
