import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from topicpush.config import get_settings
from topicpush.core.firebase import initialize_firebase
from topicpush.core.logging import initialize_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Set up logging and Firebase before serving requests."""
  settings = get_settings()
  logger = logging.getLogger("topicpush.core.lifespan")

  try:
    initialize_logging(settings)
  except RuntimeError:
    # File logging is optional; stdout logging still works through uvicorn.
    logger.warning("Logging setup failed; continuing with default handlers.", exc_info=True)

  if initialize_firebase():
    logger.info("Startup complete; messaging topic=%s", settings.topic)
  else:
    logger.warning("Startup complete without Firebase; subscriptions and notifications are disabled.")

  yield
