import logging

import uvicorn

from topicpush.config import get_settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("topicpush.entrypoint")


def main() -> None:
  settings = get_settings()
  logger.info("Starting topicpush on port %s", settings.port)
  uvicorn.run("topicpush.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
  main()
