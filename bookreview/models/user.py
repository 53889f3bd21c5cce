"""
User Model

Represents a registered reader. Users are created once at signup and
never modified afterwards.

SQLAlchemy 2.0 Features Used:
- mapped_column(): Define columns with full type support
- Mapped[]: Type hint wrapper for SQLAlchemy columns
- relationship(): Define relationships between models
"""

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookreview.database import Base

if TYPE_CHECKING:
    from bookreview.models.review import Review


def generate_id() -> str:
    """Opaque identifiers shared by every table."""
    return str(uuid.uuid4())


class User(Base):
    """
    User model representing registered users.

    Table: users

    Indexes:
    - Primary key on id
    - email: Unique index for login lookups (case-sensitive as stored)

    Example:
        user = User(
            email="reader@example.com",
            hashed_password=hash_password("secret1"),
            name="Avid Reader",
        )
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_id,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="User's email address (used for login)"
    )

    # Never serialized to clients
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name shown next to reviews"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        comment="When the user registered"
    )

    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"User(id={self.id}, email='{self.email}', name='{self.name}')"
