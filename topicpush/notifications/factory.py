"""Factory helpers for the notification job."""

from __future__ import annotations

import logging

from topicpush.config import Settings
from topicpush.core.firebase import get_firestore_client
from topicpush.messaging.factory import build_topic_messenger
from topicpush.notifications.job import NotificationJob
from topicpush.notifications.lock import FirestoreNotificationLock, InMemoryNotificationLock, NotificationLock

logger = logging.getLogger(__name__)

# Shared so the hourly guard holds across requests in one process.
_process_lock = InMemoryNotificationLock()


def build_notification_lock(settings: Settings) -> NotificationLock:
  """Prefer the Firestore-backed lock; fall back to the process-local one."""
  # Skip the Firestore lookup entirely when no project is configured.
  client = get_firestore_client() if settings.firebase_project_id else None
  if client is None:
    logger.debug("Firestore unavailable; using in-memory notification lock.")
    return _process_lock
  return FirestoreNotificationLock(client)


def build_notification_job(settings: Settings) -> NotificationJob:
  # Messenger and lock follow the same Firebase configuration.
  return NotificationJob(
    build_topic_messenger(settings),
    build_notification_lock(settings),
    topic=settings.topic,
    timezone=settings.notification_timezone,
    timezone_label=settings.notification_timezone_label,
    data_value=settings.notification_data,
  )
