"""
Exceptions raised by the book store.
"""


class BookStoreError(Exception):
    """Base exception for book store operations."""


class BookValidationError(BookStoreError):
    """Raised when a book payload fails validation."""

    MISSING_NAME = "missing_name"
    READ_PAGE_EXCEEDS_PAGE_COUNT = "read_page_exceeds_page_count"

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class BookNotFoundError(BookStoreError):
    """Raised when no book has the requested id."""

    def __init__(self, book_id: str):
        super().__init__(f"Book with ID '{book_id}' not found")
        self.book_id = book_id


class StorageConfirmationError(BookStoreError):
    """Raised when a freshly added book cannot be found in the store."""

    def __init__(self, book_id: str):
        super().__init__(f"Book with ID '{book_id}' was not stored")
        self.book_id = book_id
