"""Structured logging configuration for fr8coach."""

import logging
import sys
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fr8coach.core.config import Settings


class StructuredFormatter(logging.Formatter):
    """key=value structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured output."""
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "module": record.module,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        if hasattr(record, "request_id"):
            log_data["request_id"] = record.request_id

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        parts = [f"{k}={v}" for k, v in log_data.items()]
        return " ".join(parts)


PACKAGE_LOGGER = "fr8coach"


def configure_logging(settings: "Settings") -> None:
    """
    Set the package log level from an app's settings.

    Module loggers leave their own level unset, so they follow this one.

    Args:
        settings: Settings the app was built with
    """
    level = logging.DEBUG if settings.FR8_ENV == "dev" else logging.INFO
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

        # INFO until configure_logging runs
        package_logger = logging.getLogger(PACKAGE_LOGGER)
        if package_logger.level == logging.NOTSET:
            package_logger.setLevel(logging.INFO)

    return logger


def log_with_context(logger: logging.Logger, level: int, msg: str, **kwargs: Any) -> None:
    """
    Log with additional context fields.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        msg: Log message
        **kwargs: Additional context fields (e.g., request_id)
    """
    extra: dict[str, Any] = {"extra_data": kwargs}
    if "request_id" in kwargs:
        extra["request_id"] = kwargs.pop("request_id")
        extra["extra_data"] = kwargs

    logger.log(level, msg, extra=extra)
