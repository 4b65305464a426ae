"""
Structured logging helpers.

Values passed as log context (ids, enums, timestamps, collections) are
flattened to short strings so a bad value can never break a log call.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Convert a context value to a bounded string.

    Args:
        value: Value to convert
        max_length: Length after which the string is cut

    Returns:
        str: Printable representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, Enum):
            text = str(value.value)
        elif isinstance(value, (UUID, str)):
            text = str(value)
        elif isinstance(value, datetime):
            text = value.isoformat()
        elif isinstance(value, (list, tuple, set)):
            text = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            text = f"dict({len(value)} keys)"
        else:
            text = str(value)
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"

    if len(text) > max_length:
        return text[:max_length] + f"... (truncated, {len(text)} total)"
    return text


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """Log ``message`` with every context value attached as a record attribute."""
    logger.log(level, message, extra={key: safe_log_value(val) for key, val in context.items()})


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log a handled exception at ERROR with its traceback and context.

    Usable outside an ``except`` block: the traceback comes from ``exc``.
    """
    extra = {key: safe_log_value(val) for key, val in context.items()}
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(f"{message}: {type(exc).__name__}: {exc}", exc_info=exc, extra=extra)
