"""
Logging configuration helper.

Call configure_logging() once at process start; modules then use
logging.getLogger(__name__).
"""

import logging

from app.core.config import get_settings

_LOGGING_CONFIGURED = False


def configure_logging() -> None:
    """Configure process-wide logging from settings."""
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    _LOGGING_CONFIGURED = True
