"""Subscribe page and the subscription endpoint behind its button."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from topicpush.config import Settings, get_settings
from topicpush.messaging.factory import build_topic_messenger
from topicpush.subscription.trigger import SubscriptionTrigger

router = APIRouter()

_SUBSCRIBE_PAGE = """<!doctype html>
<html>
  <head><meta charset="utf-8"><title>topicpush</title></head>
  <body>
    <input id="token" type="hidden">
    <button id="subscribe" type="button">Subscribe</button>
    <script>
      document.getElementById("subscribe").addEventListener("click", async () => {
        const token = window.topicpushRegistrationToken || document.getElementById("token").value;
        const response = await fetch("/v1/subscriptions", {method: "POST", headers: {"content-type": "application/json"}, body: JSON.stringify({token})});
        const payload = await response.json();
        console.log(payload.diagnostic || payload.detail);
      });
    </script>
  </body>
</html>
"""


class SubscribeRequest(BaseModel):
  """Device registration token issued by the client messaging SDK."""

  token: str = Field(min_length=1, max_length=4096)
  model_config = ConfigDict(extra="forbid")

  @field_validator("token")
  @classmethod
  def validate_token(cls, value: str) -> str:
    normalized = value.strip()
    if not normalized:
      raise PydanticCustomError("subscribe_token_blank", "token must not be blank.")
    return normalized


class SubscribeResponse(BaseModel):
  topic: str
  subscribed: bool
  diagnostic: str


def get_subscription_trigger(settings: Annotated[Settings, Depends(get_settings)]) -> SubscriptionTrigger:
  """Build a trigger bound to the configured topic and messenger."""
  return SubscriptionTrigger(build_topic_messenger(settings), topic=settings.topic, report_errors=settings.report_subscribe_errors)


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def subscribe_page() -> str:
  return _SUBSCRIBE_PAGE


@router.post("/v1/subscriptions", response_model=SubscribeResponse)
async def subscribe(payload: SubscribeRequest, trigger: Annotated[SubscriptionTrigger, Depends(get_subscription_trigger)]) -> SubscribeResponse:
  """Subscribe one device to the notification topic.

  Provider failures are reported in the body, never as an HTTP error.
  """
  outcome = await trigger.activate(payload.token)
  return SubscribeResponse(topic=outcome.topic, subscribed=outcome.subscribed, diagnostic=outcome.diagnostic)
