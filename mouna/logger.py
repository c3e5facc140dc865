import sys

from loguru import logger

from mouna.config import Settings


def configure_logging(settings: Settings):
    """Reset loguru sinks: stderr always, plus a rotating file when LOG_FILE is set."""
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)
    if settings.LOG_FILE:
        logger.add(settings.LOG_FILE, rotation="500 MB", level=settings.LOG_LEVEL, delay=True)
    return logger
