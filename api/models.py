"""
API models and schemas for the bookshelf application.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field


class BookPayload(BaseModel):
    """Request body for creating or updating a book."""
    name: Optional[str] = Field(None, description="Book title")
    year: Optional[int] = Field(None, description="Publication year")
    author: Optional[str] = Field(None, description="Book author")
    summary: Optional[str] = Field(None, description="Short summary")
    publisher: Optional[str] = Field(None, description="Book publisher")
    page_count: int = Field(0, ge=0, alias="pageCount", description="Total number of pages")
    read_page: int = Field(0, ge=0, alias="readPage", description="Last page read")
    reading: bool = Field(False, description="Whether the book is currently being read")

    model_config = {
        "populate_by_name": True
    }


class Book(BaseModel):
    """Stored book record."""
    id: str = Field(..., frozen=True, description="Unique book identifier")
    name: str = Field(..., min_length=1, description="Book title")
    year: Optional[int] = Field(None, description="Publication year")
    author: Optional[str] = Field(None, description="Book author")
    summary: Optional[str] = Field(None, description="Short summary")
    publisher: Optional[str] = Field(None, description="Book publisher")
    page_count: int = Field(0, ge=0, alias="pageCount", description="Total number of pages")
    read_page: int = Field(0, ge=0, alias="readPage", description="Last page read")
    reading: bool = Field(False, description="Whether the book is currently being read")
    inserted_at: str = Field(..., frozen=True, alias="insertedAt", description="Creation timestamp")
    updated_at: str = Field(..., alias="updatedAt", description="Last update timestamp")

    model_config = {
        "populate_by_name": True
    }

    @computed_field
    @property
    def finished(self) -> bool:
        """A book is finished once the last page has been read."""
        return self.read_page == self.page_count

    def to_summary(self) -> "BookSummary":
        return BookSummary(id=self.id, name=self.name, publisher=self.publisher)


class BookSummary(BaseModel):
    """Reduced book projection returned by list queries."""
    id: str = Field(..., description="Unique book identifier")
    name: str = Field(..., description="Book title")
    publisher: Optional[str] = Field(None, description="Book publisher")


class BookQueryParams(BaseModel):
    """
    Query parameters for book listing.

    Only one filter is applied per query, in the order name, reading, finished.
    """
    name: Optional[str] = Field(None, description="Case-insensitive substring of the book name")
    reading: Optional[str] = Field(None, description="Reading flag, '1' or '0'")
    finished: Optional[str] = Field(None, description="Finished flag, '1' or '0'")


class BookIdData(BaseModel):
    bookId: str = Field(..., description="Identifier of the created book")


class BookCreatedResponse(BaseModel):
    """Response model for a created book."""
    status: str = Field("success", description="Response status")
    message: str = Field(..., description="Human-readable message")
    data: BookIdData


class BookListData(BaseModel):
    books: List[BookSummary] = Field(..., description="List of book summaries")


class BookListResponse(BaseModel):
    """Response model for book listing."""
    status: str = Field("success", description="Response status")
    data: BookListData


class BookDetailData(BaseModel):
    book: Book


class BookDetailResponse(BaseModel):
    """Response model for a single book."""
    status: str = Field("success", description="Response status")
    data: BookDetailData


class MessageResponse(BaseModel):
    """Response model for updates and deletions."""
    status: str = Field("success", description="Response status")
    message: str = Field(..., description="Human-readable message")


class ErrorResponse(BaseModel):
    """Error response model."""
    status: str = Field(..., description="'fail' for client errors, 'error' for server errors")
    message: str = Field(..., description="Error message")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    books_count: int = Field(..., description="Number of stored books")
