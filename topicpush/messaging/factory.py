"""Factory helpers for the messaging backend."""

from __future__ import annotations

from topicpush.config import Settings
from topicpush.core.firebase import firebase_available
from topicpush.messaging.contracts import TopicMessenger
from topicpush.messaging.sender import FirebaseTopicMessenger, NullTopicMessenger


def build_topic_messenger(settings: Settings) -> TopicMessenger:
  """Use FCM when Firebase is configured, otherwise the null messenger."""
  # Talk to FCM only once a project is configured and the Admin SDK came up.
  if settings.firebase_project_id and firebase_available():
    return FirebaseTopicMessenger()

  # Local and test runs keep every request in-process.
  return NullTopicMessenger()
