"""
Book API — Book Service Unit Tests
==================================

What:  Tests for BookService id parsing and Book synthesis.
How:   Calls the service directly; no HTTP involved.
"""

import pytest

from bookapi.exceptions import ValidationError
from bookapi.schemas.book import Book
from bookapi.services.book_service import BookService


class TestParseBookId:
    """Tests for converting the path parameter to an integer."""

    def setup_method(self):
        self.service = BookService()

    def test_plain_integer(self):
        assert self.service.parse_book_id("42") == 42

    def test_surrounding_whitespace_is_ignored(self):
        assert self.service.parse_book_id(" 42 ") == 42

    def test_signed_integers(self):
        assert self.service.parse_book_id("+7") == 7
        assert self.service.parse_book_id("-3") == -3

    def test_zero(self):
        assert self.service.parse_book_id("0") == 0

    @pytest.mark.parametrize("raw", ["abc", "", "4.5", "12abc", "0x10", "1_000", "\u0664\u0662", "+", "4 2"])
    def test_non_integer_rejected(self, raw):
        """Anything that is not an integer literal raises ValidationError on the id field."""
        with pytest.raises(ValidationError, match="must be an integer") as exc_info:
            self.service.parse_book_id(raw)
        assert exc_info.value.field == "id"
        assert exc_info.value.context["value"] == raw


class TestGetBookById:
    """Tests for the GET /books/{id} handler logic."""

    def setup_method(self):
        self.service = BookService()

    def test_returns_placeholder_book(self):
        book = self.service.get_book_by_id("42")
        assert book == Book(id=42, title="Book Title", description="Book Description")

    def test_only_id_depends_on_input(self):
        first = self.service.get_book_by_id("1")
        second = self.service.get_book_by_id("2")
        assert first.id == 1
        assert second.id == 2
        assert first.title == second.title
        assert first.description == second.description

    def test_invalid_id_raises(self):
        with pytest.raises(ValidationError):
            self.service.get_book_by_id("abc")


class TestCreateBook:
    """Tests for the documented-only POST /books handler."""

    def test_returns_list_with_submitted_book(self):
        book = Book(id=5, title="Dune")
        result = BookService().create_book(book)
        assert result == [book]
        assert result[0].description is None
