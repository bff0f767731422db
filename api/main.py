"""
FastAPI main application for the Bookshelf API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from functools import partial
from typing import Optional

from fastapi import FastAPI, HTTPException, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.config import config as api_config
from api.exceptions import BookNotFoundError, BookValidationError, StorageConfirmationError
from api.models import (
    BookPayload, BookQueryParams, BookCreatedResponse, BookIdData,
    BookListResponse, BookListData, BookDetailResponse, BookDetailData,
    MessageResponse, ErrorResponse, HealthResponse
)
from api.store import BookStore, generate_book_id
from utilities.logger import bind_request_context, get_logger, setup_logging

logger = get_logger(__name__)

MSG_ADDED = "Buku berhasil ditambahkan"
MSG_UPDATED = "Buku berhasil diperbarui"
MSG_DELETED = "Buku berhasil dihapus"
MSG_NOT_FOUND = "Buku tidak ditemukan"
MSG_ADD_FAILED = "Buku gagal ditambahkan"
MSG_UPDATE_NOT_FOUND = "Gagal memperbarui buku. Id tidak ditemukan"
MSG_DELETE_NOT_FOUND = "Buku gagal dihapus. Id tidak ditemukan"
MSG_INVALID_PAYLOAD = "Gagal memproses permintaan. Payload tidak valid"
MSG_SERVER_ERROR = "Terjadi kegagalan pada server"

VALIDATION_MESSAGES = {
    BookValidationError.MISSING_NAME: "Mohon isi nama buku",
    BookValidationError.READ_PAGE_EXCEEDS_PAGE_COUNT: "readPage tidak boleh lebih besar dari pageCount",
}


def _validation_detail(action: str, error: BookValidationError) -> str:
    return f"Gagal {action} buku. {VALIDATION_MESSAGES[error.reason]}"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(
        log_level=api_config.log_level,
        log_format=api_config.log_format,
        log_file=api_config.log_file,
        debug=api_config.debug
    )
    logger.info("Starting Bookshelf API")

    app.state.book_store = BookStore(
        id_factory=partial(generate_book_id, api_config.book_id_length)
    )

    yield

    logger.info("Shutting down Bookshelf API", books_count=len(app.state.book_store))


def get_book_store(request: Request) -> BookStore:
    """Return the store owned by the running application."""
    return request.app.state.book_store


# Create FastAPI application
app = FastAPI(
    title=api_config.api_title,
    description=api_config.api_description,
    version=api_config.api_version,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.cors_origins,
    allow_credentials=api_config.cors_allow_credentials,
    allow_methods=api_config.cors_allow_methods,
    allow_headers=api_config.cors_allow_headers,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Bind the request to every log event and log its outcome."""
    bind_request_context(request.method, request.url.path)
    response = await call_next(request)
    logger.info("Request completed", status_code=response.status_code)
    return response


# Exception handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    """Handle HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            status="error" if exc.status_code >= 500 else "fail",
            message=exc.detail
        ).model_dump(),
        headers=exc.headers
    )


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request, exc: RequestValidationError):
    """Handle malformed request bodies and parameters."""
    logger.warning("Invalid request", path=request.url.path, errors=str(exc.errors()))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(status="fail", message=MSG_INVALID_PAYLOAD).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), error_type=type(exc).__name__, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            status="error",
            message=MSG_SERVER_ERROR
        ).model_dump()
    )


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check(store: BookStore = Depends(get_book_store)):
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=api_config.api_version,
        books_count=len(store)
    )


# Books endpoints
@app.post(
    "/books",
    response_model=BookCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Books"]
)
def add_book(payload: BookPayload, store: BookStore = Depends(get_book_store)):
    """
    Add a book to the shelf.

    - **name**: Book title (required)
    - **pageCount**: Total number of pages
    - **readPage**: Last page read, must not exceed pageCount
    """
    try:
        book_id = store.add_book(payload)
    except BookValidationError as e:
        logger.warning("Rejected new book", reason=e.reason)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_validation_detail("menambahkan", e)
        )
    except StorageConfirmationError as e:
        logger.error("Book could not be confirmed after insertion", book_id=e.book_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=MSG_ADD_FAILED
        )

    return BookCreatedResponse(message=MSG_ADDED, data=BookIdData(bookId=book_id))


@app.get("/books", response_model=BookListResponse, tags=["Books"])
def get_books(
    name: Optional[str] = None,
    reading: Optional[str] = None,
    finished: Optional[str] = None,
    store: BookStore = Depends(get_book_store)
):
    """
    Get the summaries of all books, optionally filtered.

    - **name**: Case-insensitive substring of the book name
    - **reading**: `1` for books being read, `0` otherwise (ignored when name is given)
    - **finished**: `1` for finished books, `0` otherwise (ignored when name or reading is given)
    """
    query_params = BookQueryParams(name=name, reading=reading, finished=finished)
    books = store.list_books(query_params)
    return BookListResponse(data=BookListData(books=books))


@app.get("/books/{book_id}", response_model=BookDetailResponse, tags=["Books"])
def get_book(book_id: str, store: BookStore = Depends(get_book_store)):
    """
    Get a single book by ID.

    - **book_id**: Book identifier
    """
    try:
        book = store.get_book(book_id)
    except BookNotFoundError:
        logger.info("Book not found", book_id=book_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MSG_NOT_FOUND
        )

    return BookDetailResponse(data=BookDetailData(book=book))


@app.put("/books/{book_id}", response_model=MessageResponse, tags=["Books"])
def update_book(book_id: str, payload: BookPayload, store: BookStore = Depends(get_book_store)):
    """
    Replace every editable field of a book.

    - **book_id**: Book identifier
    """
    try:
        store.update_book(book_id, payload)
    except BookValidationError as e:
        logger.warning("Rejected book update", book_id=book_id, reason=e.reason)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=_validation_detail("memperbarui", e)
        )
    except BookNotFoundError:
        logger.info("Book not found", book_id=book_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MSG_UPDATE_NOT_FOUND
        )

    return MessageResponse(message=MSG_UPDATED)


@app.delete("/books/{book_id}", response_model=MessageResponse, tags=["Books"])
def delete_book(book_id: str, store: BookStore = Depends(get_book_store)):
    """
    Delete a book.

    - **book_id**: Book identifier
    """
    try:
        store.delete_book(book_id)
    except BookNotFoundError:
        logger.info("Book not found", book_id=book_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=MSG_DELETE_NOT_FOUND
        )

    return MessageResponse(message=MSG_DELETED)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=api_config.debug,
        log_level=api_config.log_level.lower()
    )
