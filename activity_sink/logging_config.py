"""Logging setup for the service process."""

import sys
from logging.config import dictConfig

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Send every log record to stdout using a single console handler."""

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "default",
                },
            },
            "loggers": {
                # The search client logs every request at INFO.
                "elastic_transport": {"level": "WARNING"},
            },
            "root": {
                "level": level.upper(),
                "handlers": ["console"],
            },
        }
    )


__all__ = ["LOG_FORMAT", "setup_logging"]
