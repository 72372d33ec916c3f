"""
Book API — Pydantic Request/Response Schemas
============================================

What:  Pydantic models defining the API contract for the books resource.
How:   FastAPI serializes Book responses with these models, and the OpenAPI
       generator (openapi.py) turns them into components.schemas entries.
When:  Serialized on every response; rendered into the docs once at startup.

Book is a documentation/type contract only: there is no storage behind it,
so id uniqueness is not enforced and every instance is built per request.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Book(BaseModel):
    """
    What:  The only domain entity exposed by the API.
    Who:   Returned by GET /books/{id}; declared as body and list response
           of the documented POST /books operation.
    """
    id: int = Field(description="Book identifier")
    title: str = Field(description="Book title")
    description: Optional[str] = Field(
        default=None,
        description="Free-form description of the book",
    )


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Book id must be an integer, got 'abc'",
            "details": {"field": "id", "value": "abc"},
            "request_id": "1f0c9a2b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
