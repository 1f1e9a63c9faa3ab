"""Logging utilities for the agent."""

import logging
import sys

from .redact import redact_sensitive_text

_LOGGER_NAME = "autopilot"


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance for the agent.

    Args:
        name: Optional sub-logger name. If None, returns the root agent logger.

    Returns:
        The requested logger.
    """
    if name:
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)


class RedactingFilter(logging.Filter):
    """Masks secrets in the rendered message of every record passing through."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_sensitive_text(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    level: int | str = logging.INFO, format_str: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
) -> None:
    """Setup default logging configuration for the agent.

    This adds a StreamHandler with secret redaction to the agent's root logger.
    Should typically be called by the application (the CLI does), not the library itself.

    Args:
        level: Logging level.
        format_str: Log format string.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)

    # Avoid adding multiple handlers if called multiple times
    if any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_str))
    handler.addFilter(RedactingFilter())
    logger.addHandler(handler)


# Set default NullHandler to avoid "No handler found" warnings
logging.getLogger(_LOGGER_NAME).addHandler(logging.NullHandler())
