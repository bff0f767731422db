"""
FastAPI RESTful API for the Bookshelf application.

This package provides a small REST API for:
- Adding, updating and deleting books
- Listing books with name, reading and finished filters
- Fetching a single book by id
"""
