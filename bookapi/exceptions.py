"""
Book API — Custom Exception Hierarchy
=====================================

What:  Application-specific exceptions for the few error scenarios the service has.
How:   Each exception carries a message and optional context dict.
       Global exception handlers (registered in main.py) turn request-time
       exceptions into structured JSON error responses.

Exception Hierarchy:
    BookAPIError (base)
    ├── ValidationError  → 400 Bad Request (client can fix)
    └── ApiSpecError     → raised at startup, never reaches a client
"""

from typing import Any, Dict, Optional


class BookAPIError(Exception):
    """
    Base exception for all Book API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BookAPIError):
    """
    Raised when client input cannot be interpreted.

    When:    GET /books/{id} with an id that is not an integer.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Book id must be an integer, got 'abc'",
            "details": {"field": "id", "value": "abc"}
        }
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


class ApiSpecError(BookAPIError):
    """
    Raised when the API specification declaration is malformed or, in strict
    mode, does not match the routes registered on the application.

    When:    During create_app(), before the server accepts any request.
    """

    def __init__(
        self,
        message: str = "Invalid API specification",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
