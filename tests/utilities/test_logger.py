"""
Tests for the structured logging setup.
"""

import logging

import pytest
import structlog

from utilities.logger import bind_request_context, get_logger, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    structlog.reset_defaults()


def test_log_file_is_created(tmp_path, restore_logging):
    log_file = tmp_path / "logs" / "api.log"

    setup_logging(log_level="INFO", log_format="json", log_file=str(log_file))
    get_logger("bookshelf.test").info("Book added", book_id="abc")

    assert log_file.exists()
    contents = log_file.read_text()
    assert '"event": "Book added"' in contents
    assert '"book_id": "abc"' in contents


def test_console_format(tmp_path, restore_logging):
    log_file = tmp_path / "console.log"

    setup_logging(log_level="WARNING", log_format="console", log_file=str(log_file))
    logger = get_logger("bookshelf.test")
    logger.info("Hidden event")
    logger.warning("Visible event")

    contents = log_file.read_text()
    assert "Hidden event" not in contents
    assert "Visible event" in contents


def test_request_context_is_bound(tmp_path, restore_logging):
    log_file = tmp_path / "requests.log"

    setup_logging(log_level="INFO", log_format="json", log_file=str(log_file))
    bind_request_context("GET", "/books/abc")
    try:
        get_logger("bookshelf.test").info("Book not found", book_id="abc")
    finally:
        structlog.contextvars.clear_contextvars()

    contents = log_file.read_text()
    assert '"method": "GET"' in contents
    assert '"path": "/books/abc"' in contents


def test_request_context_replaces_previous_request(tmp_path, restore_logging):
    log_file = tmp_path / "requests.log"

    setup_logging(log_level="INFO", log_format="json", log_file=str(log_file))
    bind_request_context("DELETE", "/books/first")
    bind_request_context("GET", "/books")
    try:
        get_logger("bookshelf.test").info("Request completed", status_code=200)
    finally:
        structlog.contextvars.clear_contextvars()

    contents = log_file.read_text()
    assert "/books/first" not in contents
    assert '"path": "/books"' in contents
