"""Contracts for the external topic messaging backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class TopicMessage:
  """A notification broadcast to every device subscribed to ``topic``."""

  topic: str
  title: str
  body: str
  data: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TopicSubscriptionResult:
  """Outcome of a topic subscription request for a batch of device tokens."""

  success_count: int
  failure_count: int
  errors: list[str] = field(default_factory=list)

  @property
  def first_error(self) -> str | None:
    if self.failure_count <= 0:
      return None
    if self.errors:
      return self.errors[0]
    return "unknown-error"


class MessagingError(Exception):
  """Base class for messaging backend failures."""


class MessagingProviderError(MessagingError):
  """Raised when the messaging provider rejects or fails a request."""


class TopicMessenger(Protocol):
  """Subscribe devices to topics and broadcast messages to them."""

  def subscribe(self, topic: str, tokens: list[str]) -> TopicSubscriptionResult:
    """Register device tokens on ``topic`` synchronously."""

  def send(self, message: TopicMessage) -> str:
    """Send a topic message synchronously and return the provider message id."""
