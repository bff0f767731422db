"""
In-memory book store backing the bookshelf API.

The store owns an ordered list of ``Book`` records. Records are kept in
insertion order and every operation is a linear scan guarded by a single
lock, since FastAPI runs synchronous endpoints in a worker thread pool.
Id generation and the clock are injected so tests can make them
deterministic.
"""

import secrets
import string
import threading
from datetime import datetime, timezone
from typing import Callable, List, Optional

import structlog

from api.exceptions import BookNotFoundError, BookValidationError, StorageConfirmationError
from api.models import Book, BookPayload, BookQueryParams, BookSummary

logger = structlog.get_logger(__name__)

ID_ALPHABET = string.ascii_letters + string.digits + "_-"
DEFAULT_ID_LENGTH = 16


def generate_book_id(length: int = DEFAULT_ID_LENGTH) -> str:
    """Generate a random URL-safe identifier of a fixed length."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string, e.g. ``2024-01-01T00:00:00.000Z``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _flag(value: bool) -> str:
    return "1" if value else "0"


class BookStore:
    """Ordered in-memory collection of books."""

    def __init__(
        self,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], str]] = None
    ):
        """
        Initialize the store.

        Args:
            id_factory: Callable returning a fresh book id
            clock: Callable returning the current timestamp string
        """
        self._books: List[Book] = []
        self._lock = threading.Lock()
        self._id_factory = id_factory or generate_book_id
        self._clock = clock or utc_timestamp

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)

    @staticmethod
    def _validate(payload: BookPayload) -> None:
        if not payload.name:
            raise BookValidationError(BookValidationError.MISSING_NAME, "missing name")
        if payload.read_page > payload.page_count:
            raise BookValidationError(
                BookValidationError.READ_PAGE_EXCEEDS_PAGE_COUNT,
                "readPage exceeds pageCount"
            )

    def _index_of(self, book_id: str) -> int:
        for index, book in enumerate(self._books):
            if book.id == book_id:
                return index
        return -1

    def add_book(self, payload: BookPayload) -> str:
        """
        Add a new book.

        Args:
            payload: Book fields supplied by the caller

        Returns:
            The id of the new book

        Raises:
            BookValidationError: If the name is missing or readPage exceeds pageCount
            StorageConfirmationError: If the book cannot be found after insertion
        """
        self._validate(payload)

        with self._lock:
            book_id = self._id_factory()
            while self._index_of(book_id) != -1:
                book_id = self._id_factory()

            timestamp = self._clock()
            book = Book(
                id=book_id,
                inserted_at=timestamp,
                updated_at=timestamp,
                **payload.model_dump()
            )
            self._books.append(book)

            if self._index_of(book_id) == -1:
                raise StorageConfirmationError(book_id)

        logger.info("Book added", book_id=book_id, name=book.name)
        return book_id

    def list_books(self, query_params: Optional[BookQueryParams] = None) -> List[BookSummary]:
        """
        List book summaries in insertion order.

        Only one filter is applied: name if given, otherwise reading,
        otherwise finished.

        Args:
            query_params: Optional filters

        Returns:
            Summaries of the matching books
        """
        query_params = query_params or BookQueryParams()

        with self._lock:
            books = self._books
            if query_params.name:
                needle = query_params.name.lower()
                books = [b for b in books if needle in b.name.lower()]
            elif query_params.reading:
                books = [b for b in books if _flag(b.reading) == query_params.reading]
            elif query_params.finished:
                books = [b for b in books if _flag(b.finished) == query_params.finished]

            return [b.to_summary() for b in books]

    def get_book(self, book_id: str) -> Book:
        """
        Get a single book by id.

        Raises:
            BookNotFoundError: If no book has that id
        """
        with self._lock:
            index = self._index_of(book_id)
            if index == -1:
                raise BookNotFoundError(book_id)
            return self._books[index].model_copy()

    def update_book(self, book_id: str, payload: BookPayload) -> Book:
        """
        Replace every mutable field of a book.

        Validation runs before the existence check.

        Args:
            book_id: Book identifier
            payload: New book fields

        Returns:
            A copy of the updated book

        Raises:
            BookValidationError: If the name is missing or readPage exceeds pageCount
            BookNotFoundError: If no book has that id
        """
        self._validate(payload)

        with self._lock:
            index = self._index_of(book_id)
            if index == -1:
                raise BookNotFoundError(book_id)

            book = self._books[index]
            for field, value in payload.model_dump().items():
                setattr(book, field, value)
            book.updated_at = self._clock()
            updated = book.model_copy()

        logger.info("Book updated", book_id=book_id, finished=updated.finished)
        return updated

    def delete_book(self, book_id: str) -> None:
        """
        Delete a book.

        Raises:
            BookNotFoundError: If no book has that id
        """
        with self._lock:
            index = self._index_of(book_id)
            if index == -1:
                raise BookNotFoundError(book_id)
            del self._books[index]

        logger.info("Book deleted", book_id=book_id)
