"""Run the latest-video transcript pipeline once.

Exits 0 and logs the transcript on success, exits 1 on any stage failure or
invalid configuration.
"""
import asyncio
import logging
import sys

from pydantic import ValidationError

from models.errors import PipelineError
from services.pipeline_service import PipelineService
from utils.env import Settings
from utils.logging_config import setup_logging

logger = logging.getLogger("main")


def main() -> int:
    try:
        settings = Settings()
    except ValidationError as e:
        setup_logging()
        logger.error(f"Invalid configuration: {e}")
        return 1

    setup_logging(settings.LOG_LEVEL)
    try:
        result = asyncio.run(PipelineService(settings).run())
    except PipelineError as e:
        logger.error(f"Pipeline failed at stage {e.stage}: {e.message}")
        return 1

    logger.info(f"Transcript for {result.video.url}:\n{result.transcript}")
    if result.post:
        logger.info(f"Blog post: {result.post.title}\n{result.post.content}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
