"""
Exception hierarchy for the chat orchestration backend.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class ChatflowException(Exception):
    """Base exception for all chatflow errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ChatflowException):
    """Raised when input validation fails (e.g. an attachment is rejected)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field or file name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class PersistenceError(ChatflowException):
    """Raised when a create/read/update/delete against the store fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        entity: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize persistence error.

        Args:
            message: Error message
            operation: Gateway operation that failed (create_session, append_message, ...)
            entity: Entity kind involved (session, message, attachment)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        if entity:
            details["entity"] = entity
        super().__init__(message, details)


class NotFoundError(PersistenceError):
    """Raised when a requested entity no longer exists."""

    def __init__(
        self,
        entity: str,
        entity_id: Any,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize not found error.

        Args:
            entity: Entity kind (session, message)
            entity_id: ID of the missing entity
            details: Additional context
        """
        details = details or {}
        details["entity_id"] = str(entity_id)
        self.entity_id = entity_id
        super().__init__(
            f"{entity.capitalize()} not found: {entity_id}",
            entity=entity,
            details=details,
        )


class TransportError(ChatflowException):
    """Raised when an upload or the inference dispatch fails on the wire."""

    def __init__(
        self,
        message: str,
        target: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize transport error.

        Args:
            message: Error message
            target: Remote target (bucket key, webhook URL)
            status_code: HTTP status returned by the remote side, if any
            details: Additional context
        """
        details = details or {}
        if target:
            details["target"] = target
        if status_code is not None:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, details)
