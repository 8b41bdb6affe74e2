"""Topic messaging implementations."""

from __future__ import annotations

import logging

from firebase_admin import exceptions as firebase_exceptions
from firebase_admin import messaging
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError

from topicpush.messaging.contracts import MessagingProviderError, TopicMessage, TopicMessenger, TopicSubscriptionResult

logger = logging.getLogger(__name__)

DISABLED_REASON = "messaging-disabled"

# Errors the Admin SDK raises for FCM rejections, bad arguments and missing credentials.
_SDK_ERRORS = (firebase_exceptions.FirebaseError, GoogleAuthError, GoogleAPIError, ValueError)


class FirebaseTopicMessenger(TopicMessenger):
  """Firebase Cloud Messaging backed messenger using the default Admin SDK app."""

  def subscribe(self, topic: str, tokens: list[str]) -> TopicSubscriptionResult:
    try:
      response = messaging.subscribe_to_topic(tokens, topic)
    except _SDK_ERRORS as exc:
      raise MessagingProviderError(f"Topic subscription failed: {exc}") from exc

    errors = [error.reason for error in response.errors]
    logger.debug("subscribe_to_topic topic=%s success=%s failure=%s", topic, response.success_count, response.failure_count)
    return TopicSubscriptionResult(success_count=response.success_count, failure_count=response.failure_count, errors=errors)

  def send(self, message: TopicMessage) -> str:
    fcm_message = messaging.Message(topic=message.topic, notification=messaging.Notification(title=message.title, body=message.body), data=dict(message.data))
    try:
      return messaging.send(fcm_message)
    except _SDK_ERRORS as exc:
      raise MessagingProviderError(f"Topic message delivery failed: {exc}") from exc


class NullTopicMessenger(TopicMessenger):
  """Stand-in used when Firebase is not configured; nothing leaves the process."""

  def subscribe(self, topic: str, tokens: list[str]) -> TopicSubscriptionResult:
    logger.debug("Messaging disabled; dropping subscription topic=%s tokens=%d", topic, len(tokens))
    return TopicSubscriptionResult(success_count=0, failure_count=len(tokens), errors=[DISABLED_REASON] * len(tokens))

  def send(self, message: TopicMessage) -> str:
    logger.debug("Messaging disabled; dropping message topic=%s", message.topic)
    return ""
