"""Centralized logging configuration for the random delete service."""

import json
import logging
from typing import Any, Optional


# Configure logger
logger = logging.getLogger("airtable_random_delete")
handler = logging.StreamHandler()
formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Child of the service logger, so module records share its handler and level."""
    return logger.getChild(name)


def log_error(
    operation: str,
    error: Exception,
    context: Optional[dict[str, Any]] = None,
) -> None:
    """
    Log an error with context.

    Args:
        operation (str): What was being attempted, e.g. "Airtable responses.delete".
        error (Exception): The exception that was raised.
        context (dict[str, Any] | None): Additional context about the error.
    """
    payload = {
        "operation": operation,
        "error_type": type(error).__name__,
        "error_message": str(error),
        "context": context or {},
    }
    logger.error(json.dumps(payload, default=str))


def set_log_level(level: str) -> None:
    """
    Set the logging level.

    Args:
        level (str): Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logger.setLevel(numeric_level)
