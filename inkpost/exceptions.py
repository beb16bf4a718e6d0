"""
Inkpost Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions, one per failure kind.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching HTTP status.
Who:   Raised by services and the Authentication Gate; caught by global handlers.

Exception Hierarchy:
    InkpostError (base)
    ├── ValidationError           → 400 Bad Request (client can fix)
    ├── AuthenticationError       → 401 Unauthorized
    ├── NotFoundError             → 404 Not Found
    ├── IntegrityViolationError   → 409 Conflict (constraint / reference failure)
    └── DatabaseError             → 500 Internal Server Error (infrastructure)

The `context` dict is logged server-side only; responses carry `message`.
"""

from typing import Any, Dict, Optional


class InkpostError(Exception):
    """
    Base exception for all Inkpost application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(InkpostError):
    """
    Raised when client input is well-formed JSON but not acceptable.

    When:  Update request with no fields to change.
    HTTP:  400 Bad Request

    Schema-level failures (missing fields, wrong types) are reported by
    FastAPI's RequestValidationError instead and mapped to 422.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthenticationError(InkpostError):
    """
    Raised by the Authentication Gate.

    The message distinguishes a missing credential from an invalid or
    expired one. HTTP: 401 with `WWW-Authenticate: Bearer`.
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(InkpostError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert None into
    this exception.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class IntegrityViolationError(InkpostError):
    """
    Raised when the datastore rejects a write on a constraint.

    When:  Comment pointing at a post that does not exist, duplicate email.
    HTTP:  409 Conflict
    """

    def __init__(
        self,
        message: str = "The request conflicts with existing data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(InkpostError):
    """
    Raised when a database operation fails for infrastructure reasons.

    When:  Connection lost, timeout, unexpected driver error.
    HTTP:  500 Internal Server Error, always with a generic message.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
