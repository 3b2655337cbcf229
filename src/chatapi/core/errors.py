"""Project-wide custom exceptions.

Routers, services and the auth dependency raise these instead of FastAPI's
``HTTPException`` so that every failure leaves the API in the same shape,
``{"error": "<message>"}``. Each class carries the HTTP status it maps to and
a message that is safe to show to the client; anything that must stay on the
server (driver errors, stack traces) travels as ``__cause__`` and is logged by
the exception handlers in ``chatapi.api.main``.

Add new errors here rather than scattering small ``class XError(Exception):``
definitions across the codebase.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator


class ChatApiError(Exception):
    """Base class for all errors that map to an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(ChatApiError):
    """Missing, malformed, invalid or expired bearer token."""

    status_code = 401
    default_message = "Authentication required. Please provide a valid token."


class ValidationError(ChatApiError):
    """Missing, empty or malformed input field."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(ChatApiError):
    status_code = 404
    default_message = "Not found"


class InternalError(ChatApiError):
    """Unexpected store or library failure; the detail is logged, never returned."""

    status_code = 500
    default_message = "Internal server error"


@contextmanager
def internal_errors(message: str) -> Iterator[None]:
    """Convert anything unexpected raised inside the block into ``InternalError``.

    Errors of the project taxonomy pass through untouched.
    """
    try:
        yield
    except ChatApiError:
        raise
    except Exception as exc:
        raise InternalError(message) from exc


__all__ = [
    "ChatApiError",
    "Unauthenticated",
    "ValidationError",
    "NotFoundError",
    "InternalError",
    "internal_errors",
]
