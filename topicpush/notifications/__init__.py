from topicpush.notifications.job import NotificationJob
from topicpush.notifications.lock import NotificationLockError, NotificationLockUnavailableError

__all__ = ["NotificationJob", "NotificationLockError", "NotificationLockUnavailableError"]
