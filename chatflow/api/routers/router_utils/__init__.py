"""Shared helpers for API routers."""

from .error_handling import handle_chatflow_errors, http_error_for

__all__ = ["handle_chatflow_errors", "http_error_for"]
