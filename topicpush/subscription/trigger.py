"""Subscribe a device to the notification topic on user activation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from starlette.concurrency import run_in_threadpool

from topicpush.config import DEFAULT_TOPIC
from topicpush.messaging.contracts import MessagingError, TopicMessenger

logger = logging.getLogger("topicpush.subscription")

SUBSCRIBED_MESSAGE = "Subscribed!"
FAILED_MESSAGE_PREFIX = "Subscribe failed: "


@dataclass(frozen=True)
class SubscriptionOutcome:
  """Result of one activation, as reported by the completion handler."""

  topic: str
  error: str | None
  diagnostic: str

  @property
  def subscribed(self) -> bool:
    return self.error is None


class SubscriptionTrigger:
  """Issues one topic subscription per activation and reports its completion.

  Activations are independent: the trigger keeps no per-request state, so
  concurrent calls to :meth:`activate` never observe each other.

  With ``report_errors`` disabled the completion handler ignores the error and
  always reports ``"Subscribed!"``, matching the behaviour of the
  mobile sample client.
  """

  def __init__(self, messenger: TopicMessenger, *, topic: str = DEFAULT_TOPIC, report_errors: bool = True) -> None:
    self._messenger = messenger
    self._topic = topic
    self._report_errors = report_errors

  @property
  def topic(self) -> str:
    return self._topic

  async def activate(self, registration_token: str) -> SubscriptionOutcome:
    """Subscribe ``registration_token`` to the topic and emit one diagnostic."""
    error: str | None = None
    # Run the blocking SDK call off the event loop; every outcome funnels into the completion handler.
    try:
      result = await run_in_threadpool(self._messenger.subscribe, self._topic, [registration_token])
      error = result.first_error
    except MessagingError as exc:
      error = str(exc) or type(exc).__name__
    except Exception as exc:  # noqa: BLE001
      # Errors outside the messaging contract still complete the activation.
      error = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__

    return self._on_complete(error)

  def activate_with_callback(self, registration_token: str, completion: Callable[[SubscriptionOutcome], None]) -> asyncio.Task[SubscriptionOutcome]:
    """Fire-and-forget form of :meth:`activate`; ``completion`` runs when it finishes."""

    def _done(task: asyncio.Task[SubscriptionOutcome]) -> None:
      # A cancelled activation never completed, so there is nothing to report.
      if task.cancelled():
        return
      exc = task.exception()
      if exc is not None:
        logger.error("Subscription task failed: %s", exc, exc_info=exc)
        return
      completion(task.result())

    # Keep a done callback on the task so failures are logged rather than lost.
    task = asyncio.create_task(self.activate(registration_token))
    task.add_done_callback(_done)
    return task

  def _on_complete(self, error: str | None) -> SubscriptionOutcome:
    # Report failures distinctly only when error reporting is enabled.
    if error is not None and self._report_errors:
      diagnostic = f"{FAILED_MESSAGE_PREFIX}{error}"
      logger.error(diagnostic)
      return SubscriptionOutcome(topic=self._topic, error=error, diagnostic=diagnostic)

    # Without error reporting the completion error is discarded entirely.
    logger.info(SUBSCRIBED_MESSAGE)
    return SubscriptionOutcome(topic=self._topic, error=None, diagnostic=SUBSCRIBED_MESSAGE)
