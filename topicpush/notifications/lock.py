"""Once-per-hour guard for the topic notification job."""

from __future__ import annotations

import logging
import threading
from datetime import UTC, datetime
from typing import Protocol

from google.cloud import firestore

logger = logging.getLogger(__name__)

LOCK_COLLECTION = "Lock"
LOCK_DOCUMENT = "Notification"
LOCK_FIELD = "Date"


class NotificationLockError(Exception):
  """Base class for notification lock failures."""


class NotificationLockUnavailableError(NotificationLockError):
  """Raised when a notification was already sent in the current hour."""


def hour_bucket(moment: datetime) -> datetime:
  """Truncate ``moment`` to the start of its UTC hour."""
  if moment.tzinfo is None:
    moment = moment.replace(tzinfo=UTC)
  return moment.astimezone(UTC).replace(minute=0, second=0, microsecond=0)


def _same_hour(previous: object, now: datetime) -> bool:
  return isinstance(previous, datetime) and hour_bucket(previous) == hour_bucket(now)


class NotificationLock(Protocol):
  def acquire(self, now: datetime) -> None:
    """Record ``now`` as the last send time or raise if this hour is taken."""


class FirestoreNotificationLock(NotificationLock):
  """Lock stored in ``Lock/Notification`` and updated in a Firestore transaction."""

  def __init__(self, client: firestore.Client) -> None:
    self._client = client

  def acquire(self, now: datetime) -> None:
    doc_ref = self._client.collection(LOCK_COLLECTION).document(LOCK_DOCUMENT)
    _acquire_in_transaction(self._client.transaction(), doc_ref, now)
    logger.info("Notification lock taken for hour %s", hour_bucket(now).isoformat())


@firestore.transactional
def _acquire_in_transaction(transaction: firestore.Transaction, doc_ref: firestore.DocumentReference, now: datetime) -> None:
  snapshot = doc_ref.get(transaction=transaction)
  if snapshot.exists:
    previous = (snapshot.to_dict() or {}).get(LOCK_FIELD)
    if _same_hour(previous, now):
      raise NotificationLockUnavailableError("failed to take lock")

  transaction.set(doc_ref, {LOCK_FIELD: now})


class InMemoryNotificationLock(NotificationLock):
  """Process-local lock for development and tests."""

  def __init__(self) -> None:
    self._mutex = threading.Lock()
    self._last: datetime | None = None

  @property
  def last_acquired(self) -> datetime | None:
    return self._last

  def acquire(self, now: datetime) -> None:
    with self._mutex:
      if _same_hour(self._last, now):
        raise NotificationLockUnavailableError("failed to take lock")
      self._last = now
