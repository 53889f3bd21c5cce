"""
SQLAlchemy Models Package

Model Relationships:
- User -> Review: One-to-Many (a user writes many reviews)
- Book -> Review: One-to-Many (a book collects many reviews)
- User -> Book: provenance only (books.created_by), no relationship loaded

Import all models here so Alembic discovers them for migrations and the
application has a single import point.
"""

from bookreview.models.user import User
from bookreview.models.book import Book
from bookreview.models.review import Review

__all__ = [
    "User",
    "Book",
    "Review",
]
