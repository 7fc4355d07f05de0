import sys

from loguru import logger

from dailyflip.core.config import LOG_LEVEL, LOG_FILE


def setup_logging() -> None:
    """Configure loguru sinks for the application."""

    # Drop the default handler
    logger.remove()

    logger.add(
        sys.stdout,
        level=LOG_LEVEL,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{module}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )

    if LOG_FILE:
        logger.add(
            LOG_FILE,
            level="INFO",
            rotation="10 MB",
            retention="10 days",
            compression="zip"
        )
