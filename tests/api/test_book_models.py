"""
Unit tests for Pydantic models.
Tests aliases, derived fields and validation edge cases.
"""

import pytest
from pydantic import ValidationError

from api.models import Book, BookPayload, BookSummary


def make_book(**overrides):
    data = {
        "id": "abc",
        "name": "Test Book",
        "pageCount": 100,
        "readPage": 40,
        "insertedAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-01-01T00:00:00.000Z",
    }
    data.update(overrides)
    return Book(**data)


class TestBookPayload:
    """Test cases for BookPayload model."""

    def test_defaults(self):
        payload = BookPayload()

        assert payload.name is None
        assert payload.year is None
        assert payload.page_count == 0
        assert payload.read_page == 0
        assert payload.reading is False

    def test_camel_case_aliases(self, sample_book_data):
        payload = BookPayload(**sample_book_data)

        assert payload.page_count == 529
        assert payload.read_page == 120

    def test_populate_by_field_name(self):
        payload = BookPayload(name="Book", page_count=10, read_page=5)

        assert payload.page_count == 10
        assert payload.read_page == 5

    def test_negative_page_count_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            BookPayload(name="Book", pageCount=-1)

        assert "greater than or equal to 0" in str(exc_info.value)

    def test_non_integer_read_page_rejected(self):
        with pytest.raises(ValidationError):
            BookPayload(name="Book", readPage="many")


class TestBook:
    """Test cases for Book model."""

    def test_finished_is_derived(self):
        assert make_book(readPage=40).finished is False
        assert make_book(readPage=100).finished is True

    def test_finished_follows_read_page(self):
        book = make_book(readPage=40)

        book.read_page = 100

        assert book.finished is True

    def test_serializes_with_camel_case_keys(self):
        data = make_book(publisher="Pub").model_dump(by_alias=True)

        assert data == {
            "id": "abc",
            "name": "Test Book",
            "year": None,
            "author": None,
            "summary": None,
            "publisher": "Pub",
            "pageCount": 100,
            "readPage": 40,
            "reading": False,
            "insertedAt": "2024-01-01T00:00:00.000Z",
            "updatedAt": "2024-01-01T00:00:00.000Z",
            "finished": False,
        }

    def test_id_is_immutable(self):
        book = make_book()

        with pytest.raises(ValidationError):
            book.id = "other"

    def test_inserted_at_is_immutable(self):
        book = make_book()

        with pytest.raises(ValidationError):
            book.inserted_at = "2030-01-01T00:00:00.000Z"

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            make_book(name="")

    def test_to_summary(self):
        summary = make_book(publisher="Pub").to_summary()

        assert summary == BookSummary(id="abc", name="Test Book", publisher="Pub")
