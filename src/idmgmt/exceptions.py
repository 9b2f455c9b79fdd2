"""
Exceptions raised by the management client.

ArgumentError signals caller misuse and is always raised synchronously,
before any request is dispatched. ManagementAPIError carries remote failures
and is delivered through the awaitable or the callback.
"""

from __future__ import annotations

from typing import Any, Optional


class ManagementError(Exception):
    """Base exception for management client errors."""
    pass


class ArgumentError(ManagementError):
    """Raised when a manager or resource is called with invalid arguments."""
    pass


class ManagementAPIError(ManagementError):
    """Raised when the management API request fails."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error
        self.body = body

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"({self.status_code}) {self.message}"
