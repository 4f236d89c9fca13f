"""
Error types shared by the HTTP layer, services and controllers.

Transport and API failures all derive from APIError so callers that do not
care about the cause can catch one type. Callers that do care branch on the
subclass instead of parsing messages.
"""

from __future__ import annotations

from typing import Any, Optional


class APIError(RuntimeError):
    """Raised for HTTP / parsing errors."""


class NetworkError(APIError):
    """Connection refused, DNS failure, reset, and similar transport errors."""


class RequestTimeoutError(APIError):
    """The request did not complete within the client timeout."""


class HTTPStatusError(APIError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class ValidationError(ValueError):
    """A form field failed local validation. Never raised by services."""

    def __init__(self, field: str, message: str, *, cause: Optional[Exception] = None):
        super().__init__(message)
        self.field = field
        self.message = message
        self.cause = cause
