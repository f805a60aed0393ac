"""
Notes API — Custom Exception Hierarchy
=======================================

What:  Typed failure outcomes raised at the Note Store boundary.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) map each type
       to a fixed HTTP status and JSON body.
Who:   NoteStore raises InvalidIdError, NotFoundError and StoreUnavailableError.
       ValidationError is reserved for field rules beyond the schema types;
       malformed bodies arrive as FastAPI RequestValidationError and share
       its 400 response.

Exception Hierarchy:
    NotesAPIError (base)
    ├── ValidationError        → 400 Bad Request
    ├── InvalidIdError         → 400 Bad Request
    ├── NotFoundError          → 404 Not Found
    └── StoreUnavailableError  → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class NotesAPIError(Exception):
    """
    Base exception for all Notes API errors.

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


class ValidationError(NotesAPIError):
    """
    Raised when a value breaks a field rule.

    When:    Reserved; no field rule beyond "title/text are strings" exists
             yet, and schema typing already enforces that one.
    HTTP:    400 Bad Request
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


class InvalidIdError(NotesAPIError):
    """
    Raised when a path identifier is not a well-formed note id.

    When:    GET/PUT/DELETE /notes/{id} where {id} is not a UUID.
    HTTP:    400 Bad Request
    """

    def __init__(self, raw_id: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["raw_id"] = raw_id
        super().__init__(message=f"'{raw_id}' is not a valid note id", context=ctx)
        self.raw_id = raw_id


class NotFoundError(NotesAPIError):
    """
    Raised when a well-formed id matches no stored record.

    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the store converts that None
    into this exception so routes never branch on it.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreUnavailableError(NotesAPIError):
    """
    Raised when the database is unreachable or a query fails.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The driver's
        error type is kept in `context` and only ever logged server-side.
    """

    def __init__(
        self,
        message: str = "The note store is unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
