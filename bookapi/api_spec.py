"""
Book API — API Specification Declaration
========================================

What:  Structural description of the documented API: paths, HTTP methods,
       request bodies and response shapes, grouped under tags.
How:   Plain dataclasses. openapi.py turns a list of ApiSpec objects into an
       OpenAPI document and checks them against the application's routes.

Shapes:
    A request body or response shape is a Pydantic model class (Book) or a
    list of one (List[Book]).

Declaring a path does not register a route. POST /books is declared here
but has no runtime route; the startup route check reports it.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel

from bookapi.schemas.book import Book
from bookapi.services.book_service import book_service


@dataclass(frozen=True)
class Operation:
    """
    One documented (path, method) pair.

    Attributes:
        summary:      Short one-line summary shown in the docs UI
        description:  Longer human-readable description
        body:         Request body model, or None for operations without a body
        responses:    Status code → response shape
        handler:      Function implementing the operation; its name becomes
                      the OpenAPI operationId
        path_params:  Python type per path parameter; parameters missing here
                      are documented as strings
    """
    summary: Optional[str] = None
    description: Optional[str] = None
    body: Optional[Type[BaseModel]] = None
    responses: Dict[int, Any] = field(default_factory=dict)
    handler: Optional[Callable[..., Any]] = None
    path_params: Dict[str, type] = field(default_factory=dict)


@dataclass(frozen=True)
class ApiSpec:
    """A group of documented paths sharing the same tags."""
    tags: List[str]
    paths: Dict[str, Dict[str, Operation]]


BOOK_API_SPEC = ApiSpec(
    tags=["Book"],
    paths={
        "/books/{id}": {
            "get": Operation(
                summary="Get book by id",
                responses={200: Book},
                handler=book_service.get_book_by_id,
            ),
        },
        "/books": {
            "post": Operation(
                description="Create book",
                body=Book,
                responses={200: List[Book]},
                handler=book_service.create_book,
            ),
        },
    },
)

API_SPECS: List[ApiSpec] = [BOOK_API_SPEC]
