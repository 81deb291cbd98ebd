"""
Centralized logging configuration for pathbench.

Every module obtains its logger through :func:`get_logger` so that all
records end up under the ``pathbench`` hierarchy and share one handler set.
Third-party loggers get fixed levels: asyncpg and httpx stay at WARNING
because the load phases would otherwise log every round-trip.
"""

import functools
import logging
import logging.config
import os
import sys
import time
from typing import Any, Dict

LOG_LEVEL_ENV = "PATHBENCH_LOG_LEVEL"
LOG_ENV_ENV = "PATHBENCH_ENV"
LOG_FILE_ENV = "PATHBENCH_LOG_FILE"

THIRD_PARTY_LEVELS = {
    "uvicorn": "INFO",
    "fastapi": "INFO",
    "asyncpg": "WARNING",
    "httpx": "WARNING",
}

DEVELOPMENT_FORMAT = "%(asctime)s | %(name)-28s | %(levelname)-8s | %(message)s"
PRODUCTION_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s | %(pathname)s:%(lineno)d"
FILE_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s"


def get_log_level() -> str:
    """Log level from ``PATHBENCH_LOG_LEVEL``, INFO by default."""
    return os.getenv(LOG_LEVEL_ENV, "INFO").upper()


def get_log_format() -> str:
    if os.getenv(LOG_ENV_ENV, "development").lower() == "production":
        return PRODUCTION_FORMAT
    return DEVELOPMENT_FORMAT


def _logger_entry(level: str, handlers: list) -> Dict[str, Any]:
    return {"level": level, "handlers": list(handlers), "propagate": False}


def get_logging_config() -> Dict[str, Any]:
    """
    Build the ``dictConfig`` mapping for the current environment.

    ``PATHBENCH_LOG_FILE`` adds a rotating file handler to the ``pathbench``
    logger only; third-party output stays on the console.
    """
    log_level = get_log_level()
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "standard",
            "stream": sys.stdout,
        },
    }
    pathbench_handlers = ["console"]

    log_file = os.getenv(LOG_FILE_ENV)
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "detailed",
            "filename": log_file,
            "maxBytes": 10 * 1024 * 1024,
            "backupCount": 5,
        }
        pathbench_handlers.append("file")

    loggers = {"pathbench": _logger_entry(log_level, pathbench_handlers)}
    for name, level in THIRD_PARTY_LEVELS.items():
        loggers[name] = _logger_entry(level, ["console"])

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": get_log_format(), "datefmt": "%Y-%m-%d %H:%M:%S"},
            "detailed": {"format": FILE_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
        },
        "handlers": handlers,
        "loggers": loggers,
        "root": {"level": "WARNING", "handlers": ["console"]},
    }


def setup_logging() -> None:
    logging.config.dictConfig(get_logging_config())

    logger = logging.getLogger("pathbench.logging")
    logger.info("Logging configured with level: %s", get_log_level())
    if os.getenv(LOG_FILE_ENV):
        logger.info("File logging enabled: %s", os.getenv(LOG_FILE_ENV))


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the ``pathbench`` hierarchy.

    Args:
        name: Logger name, typically ``__name__``; ``"__main__"`` maps to
            ``pathbench.main``

    Returns:
        Logger instance
    """
    if name == "__main__":
        name = "pathbench.main"
    elif not name.startswith("pathbench"):
        name = f"pathbench.{name}"
    return logging.getLogger(name)


def log_performance(logger: logging.Logger, operation: str):
    """
    Decorator that logs how long a coroutine function takes.

    Used for the unmeasured setup steps (seeding, cleanup) whose cost is
    reported in the log only and never as a benchmark sample.

    Args:
        logger: Logger instance to use
        operation: Name of the step being timed
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    "Operation '%s' failed after %.3fs: %s",
                    operation,
                    time.perf_counter() - start_time,
                    e,
                )
                raise
            logger.info(
                "Operation '%s' completed in %.3fs", operation, time.perf_counter() - start_time
            )
            return result

        return wrapper

    return decorator


if not logging.getLogger().handlers:
    setup_logging()
