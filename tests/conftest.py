"""Shared fixtures: isolated settings and an in-process messaging fake."""

from __future__ import annotations

import threading

import pytest
from httpx import ASGITransport, AsyncClient

from topicpush.config import get_settings
from topicpush.messaging.contracts import MessagingProviderError, TopicMessage, TopicSubscriptionResult


class FakeMessenger:
  """Records calls; fails subscriptions when ``subscribe_error`` or ``raise_on_subscribe`` is set."""

  def __init__(self) -> None:
    self.subscribe_calls: list[tuple[str, list[str]]] = []
    self.sent: list[TopicMessage] = []
    self.subscribe_error: str | None = None
    self.raise_on_subscribe = False
    self.raise_on_send = False
    self._mutex = threading.Lock()

  def subscribe(self, topic: str, tokens: list[str]) -> TopicSubscriptionResult:
    with self._mutex:
      self.subscribe_calls.append((topic, list(tokens)))
    if self.raise_on_subscribe:
      raise MessagingProviderError("Topic subscription failed: backend unavailable")
    if self.subscribe_error:
      return TopicSubscriptionResult(success_count=0, failure_count=len(tokens), errors=[self.subscribe_error] * len(tokens))
    return TopicSubscriptionResult(success_count=len(tokens), failure_count=0)

  def send(self, message: TopicMessage) -> str:
    if self.raise_on_send:
      raise MessagingProviderError("Topic message delivery failed: quota exceeded")
    self.sent.append(message)
    return f"projects/demo/messages/{len(self.sent)}"


@pytest.fixture
def anyio_backend() -> str:
  return "asyncio"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
  for name in ("FIREBASE_PROJECT_ID", "FIREBASE_SERVICE_ACCOUNT_JSON_PATH", "TOPICPUSH_TOPIC", "TOPICPUSH_REPORT_SUBSCRIBE_ERRORS", "TOPICPUSH_REQUIRE_CRON_HEADER"):
    monkeypatch.delenv(name, raising=False)
  get_settings.cache_clear()
  yield
  get_settings.cache_clear()


@pytest.fixture
def fake_messenger() -> FakeMessenger:
  return FakeMessenger()


@pytest.fixture
async def async_client():
  from topicpush.main import app

  async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
    yield client
  app.dependency_overrides.clear()
