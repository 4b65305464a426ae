"""
Error handling utilities.

Maps the chatflow exception hierarchy onto HTTP status codes so every
router reports failures the same way.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from chatflow.core.exceptions import (
    ChatflowException,
    NotFoundError,
    PersistenceError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def http_error_for(error: ChatflowException, committed: dict[str, str] | None = None) -> HTTPException:
    """
    Build the HTTPException for a chatflow error.

    Args:
        error: The domain error
        committed: Ids of anything already persisted before the failure

    Returns:
        HTTPException: 400, 404, 502 or 500 with a structured detail
    """
    if isinstance(error, ValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, NotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, TransportError):
        status_code = status.HTTP_502_BAD_GATEWAY
    elif isinstance(error, PersistenceError):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    detail: dict[str, Any] = {"message": error.message}
    if committed:
        detail["committed"] = committed
    return HTTPException(status_code=status_code, detail=detail)


def handle_chatflow_errors(func: F) -> F:
    """
    Decorator turning chatflow errors raised by an endpoint into HTTPExceptions.

    NotFound and validation errors are logged as warnings, everything else
    as errors.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except (NotFoundError, ValidationError) as e:
            logger.warning(f"{func.__module__}:{func.__name__} - {e}")
            raise http_error_for(e) from e
        except ChatflowException as e:
            logger.error(f"{func.__module__}:{func.__name__} - {type(e).__name__}: {e}")
            raise http_error_for(e) from e

    return wrapper
