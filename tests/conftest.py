"""
Pytest configuration and shared fixtures.
"""

import itertools

import pytest
from fastapi.testclient import TestClient

from api.main import app, get_book_store
from api.models import BookPayload
from api.store import BookStore


@pytest.fixture
def id_factory():
    """Deterministic id generator: book-0001, book-0002, ..."""
    counter = itertools.count(1)
    return lambda: f"book-{next(counter):04d}"


@pytest.fixture
def clock():
    """Clock that advances one minute on every call."""
    ticks = itertools.count()
    return lambda: f"2024-01-01T00:{next(ticks):02d}:00.000Z"


@pytest.fixture
def book_store(id_factory, clock):
    """Create an empty store with deterministic ids and timestamps."""
    return BookStore(id_factory=id_factory, clock=clock)


@pytest.fixture
def client(book_store):
    """Create test client backed by the test store."""
    app.dependency_overrides[get_book_store] = lambda: book_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_book_data():
    """Sample request body for a book."""
    return {
        "name": "Laskar Pelangi",
        "year": 2005,
        "author": "Andrea Hirata",
        "summary": "Ten children and their school on Belitung island.",
        "publisher": "Bentang Pustaka",
        "pageCount": 529,
        "readPage": 120,
        "reading": True,
    }


@pytest.fixture
def sample_payload(sample_book_data):
    """Sample book payload model."""
    return BookPayload(**sample_book_data)
