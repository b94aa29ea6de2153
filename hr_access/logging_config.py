"""Logging configuration for the API process."""

import logging.config
import sys

from hr_access.config import settings


def build_logging_config(level: str, fmt: str) -> dict:
    """
    Build a dictConfig for the given level and formatter name.

    Args:
        level: Root log level name (e.g. "INFO")
        fmt: "json" for structured logs, "console" for human-readable lines
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
                "json_ensure_ascii": False,
            },
            "console": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json" if fmt == "json" else "console",
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "hr_access": {
                "handlers": ["console"],
                "level": level.upper(),
                "propagate": False,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": "WARNING",
        },
    }


def configure_logging() -> None:
    """Configure logging from settings. Safe to call more than once."""
    logging.config.dictConfig(build_logging_config(settings.LOG_LEVEL, settings.LOG_FORMAT))
