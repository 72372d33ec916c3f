"""
Book API — Books Route Handlers
===============================

What:  Handles GET /books/{id}.
How:   Passes the raw path parameter to BookService, which parses the id and
       synthesizes the Book. Non-integer ids surface as ValidationError (400)
       through the global exception handler.
"""

import logging

from fastapi import APIRouter

from bookapi.schemas.book import Book, ErrorResponse
from bookapi.services.book_service import book_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Book"])


@router.get(
    "/books/{book_id}",
    response_model=Book,
    responses={
        200: {"description": "The requested book", "model": Book},
        400: {"description": "Book id is not an integer", "model": ErrorResponse},
    },
    summary="Get book by id",
)
async def get_book(book_id: str) -> Book:
    """
    Return the book with the given id.

    The id is taken as a string so that malformed values reach the service
    layer and produce the API's own error format instead of FastAPI's 422.
    """
    return book_service.get_book_by_id(book_id)
