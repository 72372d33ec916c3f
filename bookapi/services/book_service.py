"""
Book API — Book Service (Handler Layer)
=======================================

What:  Pure functions mapping request input to Book payloads.
How:   No storage: get_book_by_id() fabricates a constant Book for any id,
       create_book() echoes the submitted Book back as a one-item list.
Who:   get_book_by_id() is called by GET /books/{id}; create_book() is the
       handler referenced by the POST /books declaration in api_spec.py.

Id parsing:
    " 42 " → 42, "+7" → 7, "-3" → -3
    "abc", "", "4.5", "1_000", "٤٢" → ValidationError (400)
"""

import logging
import re
from typing import List

from bookapi.exceptions import ValidationError
from bookapi.schemas.book import Book

logger = logging.getLogger(__name__)

PLACEHOLDER_TITLE = "Book Title"
PLACEHOLDER_DESCRIPTION = "Book Description"

BOOK_ID_PATTERN = re.compile(r"[+-]?[0-9]+")


class BookService:
    """
    Stateless handler layer for the books resource.

    Responsibilities:
        - get_book_by_id(): parse the path id and synthesize a Book
        - create_book(): contract-only counterpart of the documented POST /books
    """

    def parse_book_id(self, raw_id: str) -> int:
        """
        Convert a path parameter into an integer book id.

        Only ASCII digits with an optional sign are accepted; int() alone
        would also take "1_000" and non-ASCII digits such as "٤٢".

        Raises:
            ValidationError: If raw_id is not an integer literal.
        """
        candidate = raw_id.strip()
        if not BOOK_ID_PATTERN.fullmatch(candidate):
            logger.debug("Rejected non-integer book id %r", raw_id)
            raise ValidationError(
                message=f"Book id must be an integer, got '{raw_id}'",
                field="id",
                context={"value": raw_id},
            )
        return int(candidate)

    def get_book_by_id(self, raw_id: str) -> Book:
        """
        Return the Book for the given id.

        The title and description are fixed placeholders; only the id
        reflects the request.
        """
        book_id = self.parse_book_id(raw_id)
        return Book(
            id=book_id,
            title=PLACEHOLDER_TITLE,
            description=PLACEHOLDER_DESCRIPTION,
        )

    def create_book(self, book: Book) -> List[Book]:
        """Accept a Book and return the resulting collection."""
        return [book]


# Module-level singleton
book_service = BookService()
