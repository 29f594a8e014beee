"""
Duet Backend — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the error cases the API reports.
How:   Each exception carries a client-safe message and an optional context
       dict. Global handlers registered in main.py map them to HTTP status
       codes and a structured JSON body.
Who:   Raised by services and middleware; caught by global handlers.

Exception Hierarchy:
    DuetError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests

The derived-state core never raises these: it degrades to neutral values
(0%, "0.00", no selection). Only the service layer turns missing rows and
bad requests into exceptions.
"""

from typing import Any, Dict, Optional


class DuetError(Exception):
    """
    Base exception for all Duet application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (returned as `details` for client
                  errors, only logged for server errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(DuetError):
    """
    Raised when a request is well-formed but breaks a business rule.

    Examples: neither `relationshipId` nor `userId` given, a malformed
    `MM-YYYY` month filter, a third user commenting on a journal entry.
    Schema-level problems are still reported by FastAPI as 422.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(DuetError):
    """Raised when a requested row does not exist (or is soft-deleted)."""

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id is not None:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class ConflictError(DuetError):
    """
    Raised when a create would duplicate a unique identity.

    Example: registering a user whose `social_id` or `uuid` already exists.
    The existing row's id is passed in context so the client can recover.
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(DuetError):
    """
    Raised when a database operation fails unexpectedly.

    The client always gets a generic message; the context (operation,
    original exception type) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(DuetError):
    """Raised when a client exceeds the per-IP request rate limit."""

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
