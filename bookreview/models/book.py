"""
Book Model

The central model of the catalogue.

Books are created by an authenticated user and never updated or deleted
through the API. Rating information (average, count) is NOT stored here:
it is recomputed from the reviews table every time a book is displayed,
see bookreview.services.ratings.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreview.database import Base
from bookreview.models.user import generate_id

if TYPE_CHECKING:
    from bookreview.models.review import Review


class Book(Base):
    """
    Book model representing books in the catalogue.

    Table: books

    Fields:
    - title, author, genre: searched and filtered case-insensitively
    - description: free text summary
    - published_year: 1000 up to the current year
    - created_by: id of the user who added the book (provenance only)

    Indexes:
    - title, author, genre: for filtering and search
    - created_at: listings are ordered newest first

    Example:
        book = Book(
            title="1984",
            author="George Orwell",
            genre="Dystopian",
            description="A dystopian novel set in a totalitarian society.",
            published_year=1949,
            created_by=user.id,
        )
    """

    __tablename__ = "books"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_id,
    )

    title: Mapped[str] = mapped_column(
        String(500),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(255),
        index=True,
        nullable=False,
        comment="Author name as entered"
    )

    genre: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
        comment="Free-form genre label"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Book description or summary"
    )

    published_year: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Year of first publication"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        index=True,
        nullable=False,
    )

    # Provenance only: no edit/delete authorization is derived from it
    created_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        comment="User who added the book"
    )

    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        # Upper bound (current year) moves, so only the floor lives in the schema
        CheckConstraint("published_year >= 1000", name="ck_book_published_year"),
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', author='{self.author}')"
