from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest

from topicpush.messaging.contracts import MessagingProviderError
from topicpush.notifications.job import NotificationJob, format_local_time
from topicpush.notifications.lock import InMemoryNotificationLock, NotificationLockUnavailableError, _acquire_in_transaction, hour_bucket

NOW = datetime(2020, 6, 8, 12, 15, 30, tzinfo=UTC)


def test_hour_bucket_treats_naive_times_as_utc():
  assert hour_bucket(datetime(2020, 6, 8, 12, 59)) == datetime(2020, 6, 8, 12, tzinfo=UTC)


def test_in_memory_lock_allows_one_acquire_per_hour():
  lock = InMemoryNotificationLock()
  lock.acquire(NOW)

  with pytest.raises(NotificationLockUnavailableError):
    lock.acquire(NOW + timedelta(minutes=30))

  lock.acquire(NOW + timedelta(hours=1))
  assert lock.last_acquired == NOW + timedelta(hours=1)


def test_in_memory_lock_does_not_block_same_hour_on_another_day():
  lock = InMemoryNotificationLock()
  lock.acquire(NOW)

  lock.acquire(NOW + timedelta(days=1))


def test_job_builds_time_notification_for_topic(fake_messenger):
  job = NotificationJob(fake_messenger, InMemoryNotificationLock())

  message = job.build_message(NOW)

  assert message.topic == "sample"
  assert message.title == "now(JST)"
  assert message.body == "2020-06-08 21:15:30 +0900 Asia/Tokyo"
  assert message.data == {"data": "hogehogehoge"}


def test_local_time_trims_fractional_zeros():
  assert format_local_time(NOW.replace(microsecond=500000), ZoneInfo("Asia/Tokyo")) == "2020-06-08 21:15:30.5 +0900 Asia/Tokyo"
  assert format_local_time(NOW.replace(microsecond=120), ZoneInfo("UTC")) == "2020-06-08 12:15:30.00012 +0000 UTC"


def test_job_sends_once_per_hour(fake_messenger):
  job = NotificationJob(fake_messenger, InMemoryNotificationLock())

  assert job.run(NOW) == "projects/demo/messages/1"
  with pytest.raises(NotificationLockUnavailableError):
    job.run(NOW + timedelta(minutes=5))

  assert len(fake_messenger.sent) == 1


def test_job_propagates_delivery_failure(fake_messenger):
  fake_messenger.raise_on_send = True
  job = NotificationJob(fake_messenger, InMemoryNotificationLock())

  with pytest.raises(MessagingProviderError):
    job.run(NOW)


def _snapshot(exists: bool, data: dict | None = None) -> MagicMock:
  snapshot = MagicMock()
  snapshot.exists = exists
  snapshot.to_dict.return_value = data
  return snapshot


def test_firestore_lock_writes_date_when_document_missing():
  transaction = MagicMock()
  doc_ref = MagicMock()
  doc_ref.get.return_value = _snapshot(False)

  _acquire_in_transaction.to_wrap(transaction, doc_ref, NOW)

  doc_ref.get.assert_called_once_with(transaction=transaction)
  transaction.set.assert_called_once_with(doc_ref, {"Date": NOW})


def test_firestore_lock_rejects_same_hour():
  transaction = MagicMock()
  doc_ref = MagicMock()
  doc_ref.get.return_value = _snapshot(True, {"Date": NOW - timedelta(minutes=10)})

  with pytest.raises(NotificationLockUnavailableError):
    _acquire_in_transaction.to_wrap(transaction, doc_ref, NOW)

  transaction.set.assert_not_called()


def test_firestore_lock_accepts_previous_hour():
  transaction = MagicMock()
  doc_ref = MagicMock()
  doc_ref.get.return_value = _snapshot(True, {"Date": NOW - timedelta(hours=1)})

  _acquire_in_transaction.to_wrap(transaction, doc_ref, NOW)

  transaction.set.assert_called_once()
