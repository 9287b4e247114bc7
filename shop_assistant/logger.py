"""Consistent logging across shop_assistant modules."""
import logging

from shop_assistant.config import settings


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger with basic configuration.

    Log level is controlled by the LOG_LEVEL setting. Default INFO.
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    # Configure root logger only once.
    if not logging.getLogger().handlers:
        logging.basicConfig(
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            level=level,
        )
    logger = logging.getLogger(name or "shop_assistant")
    logger.setLevel(level)
    return logger
