"""Exceptions raised by the admin console."""

from typing import Any, Dict, Optional


class ConsoleError(Exception):
    """Base exception for admin console errors."""

    pass


class TransportError(ConsoleError):
    """Raised when the remote API cannot be reached."""

    pass


class ApiError(ConsoleError):
    """Raised when the remote API answers with a non-2xx status."""

    def __init__(self, status: int, message: str, payload: Any = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.payload = payload


class AuthorizationError(ConsoleError):
    """Raised when the acting principal may not perform a workflow action."""

    pass


class InvalidTransitionError(ConsoleError):
    """Raised when a job is not in a stage the requested action accepts."""

    pass


class ValidationError(ConsoleError):
    """Raised when required input is missing or malformed."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}


class SessionError(ConsoleError):
    """Raised when no signed-in admin identity is available."""

    pass


class JobNotFoundError(ConsoleError):
    """Raised when a job id is not in the cached job list."""

    pass


class UnsupportedOperationError(ConsoleError):
    """Raised for operations the remote API offers no endpoint for."""

    pass


class RequestCancelled(ConsoleError):
    """Raised when an in-flight request is abandoned through its token."""

    pass
