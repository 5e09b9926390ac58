"""
Opsight settings.

- Loads a .env file if present (for local dev), unless OPSIGHT_TEST_MODE is set
- Logging configuration for the opsight.* loggers
"""

import logging.config
import os

from dotenv import load_dotenv

if os.environ.get("OPSIGHT_TEST_MODE", "").lower() not in ("true", "1", "yes"):
    load_dotenv()


# =============================================================================
# LOGGING
# =============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "opsight": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
    },
}


def configure_logging() -> None:
    """Apply LOGGING. Embedding applications with their own config skip this."""
    logging.config.dictConfig(LOGGING)
