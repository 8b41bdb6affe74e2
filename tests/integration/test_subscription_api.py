from __future__ import annotations

import pytest
from google.auth.exceptions import DefaultCredentialsError

from topicpush.api.routes.subscriptions import get_subscription_trigger
from topicpush.messaging.sender import FirebaseTopicMessenger
from topicpush.subscription.trigger import SubscriptionTrigger


@pytest.mark.anyio
async def test_subscribe_page_renders_single_subscribe_button(async_client):
  response = await async_client.get("/")

  assert response.status_code == 200
  assert response.headers["content-type"].startswith("text/html")
  assert response.text.count("<button") == 1
  assert ">Subscribe</button>" in response.text


@pytest.mark.anyio
async def test_subscribe_endpoint_reports_success(async_client, fake_messenger):
  from topicpush.main import app

  app.dependency_overrides[get_subscription_trigger] = lambda: SubscriptionTrigger(fake_messenger)

  response = await async_client.post("/v1/subscriptions", json={"token": " device-token "})

  assert response.status_code == 200
  assert response.json() == {"topic": "sample", "subscribed": True, "diagnostic": "Subscribed!"}
  assert fake_messenger.subscribe_calls == [("sample", ["device-token"])]
  assert "x-request-id" in response.headers


@pytest.mark.anyio
async def test_subscribe_endpoint_reports_failure_in_body(async_client, fake_messenger):
  from topicpush.main import app

  fake_messenger.subscribe_error = "invalid-argument"
  app.dependency_overrides[get_subscription_trigger] = lambda: SubscriptionTrigger(fake_messenger)

  response = await async_client.post("/v1/subscriptions", json={"token": "device-token"})

  assert response.status_code == 200
  assert response.json() == {"topic": "sample", "subscribed": False, "diagnostic": "Subscribe failed: invalid-argument"}


@pytest.mark.anyio
@pytest.mark.parametrize("payload", [{"token": ""}, {"token": "   "}, {}, {"token": "t", "topic": "other"}])
async def test_subscribe_endpoint_rejects_bad_payloads(async_client, fake_messenger, payload):
  from topicpush.main import app

  app.dependency_overrides[get_subscription_trigger] = lambda: SubscriptionTrigger(fake_messenger)

  response = await async_client.post("/v1/subscriptions", json=payload)

  assert response.status_code == 422
  assert fake_messenger.subscribe_calls == []


@pytest.mark.anyio
async def test_subscribe_without_firebase_uses_null_messenger(async_client):
  response = await async_client.post("/v1/subscriptions", json={"token": "device-token"})

  assert response.status_code == 200
  assert response.json()["diagnostic"] == "Subscribe failed: messaging-disabled"


@pytest.mark.anyio
async def test_health(async_client):
  response = await async_client.get("/health")

  assert response.status_code == 200
  assert response.json()["status"] == "ok"


@pytest.mark.anyio
async def test_subscribe_endpoint_reports_missing_credentials_in_body(async_client, monkeypatch):
  from topicpush.main import app

  def _raise(tokens, topic):
    raise DefaultCredentialsError("Your default credentials were not found.")

  monkeypatch.setattr("topicpush.messaging.sender.messaging.subscribe_to_topic", _raise)
  app.dependency_overrides[get_subscription_trigger] = lambda: SubscriptionTrigger(FirebaseTopicMessenger())

  response = await async_client.post("/v1/subscriptions", json={"token": "device-token"})

  assert response.status_code == 200
  body = response.json()
  assert body["subscribed"] is False
  assert body["diagnostic"].startswith("Subscribe failed: Topic subscription failed: ")
