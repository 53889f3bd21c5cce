"""
User persistence.

Users are written once at signup. Email uniqueness is checked by the
signup handler for a friendly message and enforced by the unique index
on users.email, which closes the race between two concurrent signups.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookreview.database import violates_constraint
from bookreview.exceptions import ConflictError
from bookreview.models import User

logger = logging.getLogger(__name__)


def create_user(db: Session, email: str, hashed_password: str, name: str) -> User:
    """
    Insert a new user.

    The insert runs inside a SAVEPOINT so a unique violation only undoes
    this statement and leaves the surrounding session usable.

    Raises:
        ConflictError: if the email is already registered
    """
    user = User(email=email, hashed_password=hashed_password, name=name)

    try:
        with db.begin_nested():
            db.add(user)
    except IntegrityError as exc:
        if not violates_constraint(exc, "ix_users_email", "users.email"):
            raise
        logger.warning(f"Signup conflict on email: {email}")
        raise ConflictError("User with this email already exists") from None

    db.commit()
    db.refresh(user)
    return user


def find_user_by_email(db: Session, email: str) -> User | None:
    """Exact, case-sensitive lookup."""
    stmt = select(User).where(User.email == email)
    return db.execute(stmt).scalar_one_or_none()


def find_user_by_id(db: Session, user_id: str) -> User | None:
    return db.get(User, user_id)
