"""
Reprint Backend — Custom Exception Hierarchy
==============================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Services raise these instead of returning error dicts; global handlers
       registered in main.py turn them into the JSON error envelope with the
       right HTTP status.
How:   Each exception carries a user-safe message and an optional context
       dict. Context is logged server-side and never returned to the client.

Exception Hierarchy:
    ReprintError (base)
    ├── ValidationError       → 400 Bad Request (missing/invalid field)
    ├── DuplicateKeyError     → 400 Bad Request (unique constraint violation)
    ├── AuthenticationError   → 401 Unauthorized
    ├── NotFoundError         → 404 Not Found
    └── DatabaseError         → 500 Internal Server Error (generic message)

None of these are retried. Each request fails independently.
"""

from typing import Any, Dict, Optional


class ReprintError(Exception):
    """
    Base exception for all Reprint application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        details:  Optional extra user-facing explanation (returned as "details")
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        details: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.details = details
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ReprintError):
    """
    Raised when client input fails a business rule.

    When:    Empty title or author, negative quantities,
             available_quantity greater than quantity.
    HTTP:    400 Bad Request

    Type errors in the request body or query string never reach this class;
    FastAPI raises RequestValidationError for those and main.py maps it to
    the same 400 envelope.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        details: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, details=details, context=ctx)
        self.field = field


class DuplicateKeyError(ReprintError):
    """
    Raised when a write would violate a uniqueness rule.

    When:    A configured unique catalog field (CATALOG_UNIQUE_FIELDS) already
             holds the value, the store reports a unique violation, or a
             signup reuses an email.
    HTTP:    400 Bad Request, with a specific "already exists" message
    """

    def __init__(
        self,
        message: str = "Book already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class AuthenticationError(ReprintError):
    """Credentials did not match any known user. HTTP 401."""

    def __init__(
        self,
        message: str = "Invalid credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ReprintError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /api/books/{id} with an id that has no row.
    HTTP:    404 Not Found

    SQLAlchemy reports a missing row as None or as zero affected rows, not as
    an exception. The service layer converts both into this error.
    """

    def __init__(
        self,
        resource: str = "Book",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class DatabaseError(ReprintError):
    """
    Raised when a store operation fails for any other reason.

    When:    Connection lost, malformed query, unexpected constraint failure.
    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The original
        exception type and SQL state are kept in `context` and logged only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
