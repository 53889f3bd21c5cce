"""
pytest Fixtures for Book Review API Tests

Shared fixtures used across all test files.

For database tests, we use:
- session scope for the engine (tables created once)
- function scope for sessions: each test runs inside an outer transaction
  that is rolled back afterwards, so tests never see each other's rows

Services call commit() and begin_nested(); the session joins the outer
transaction in "create_savepoint" mode, so its own work runs inside a
SAVEPOINT, those commits only release savepoints, and the final rollback
still undoes everything.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting, sets a test secret key and keeps the
# application engine off PostgreSQL
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"

from collections.abc import Generator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bookreview.database import Base, get_db
from bookreview.main import app
from bookreview.models import Book, Review, User
from bookreview.services.security import create_access_token, hash_password

API = "/api/v1"

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory keeps the suite fast and self-contained. Production runs
# on PostgreSQL; nothing here relies on PostgreSQL-only features.


@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps the single connection alive for the whole session.
    Without it, the in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite defers BEGIN until the first DML statement, which breaks
    # SAVEPOINT handling; take over transaction control explicitly.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    Everything the test writes is rolled back afterwards.
    """
    connection = engine.connect()
    transaction = connection.begin()

    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=connection,
        join_transaction_mode="create_savepoint",
    )
    session = TestSessionLocal()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client wired to the test session.

    get_db is overridden so every request shares db_session.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# HELPERS
# =============================================================================
def get_auth_header(user: User) -> dict[str, str]:
    """Authorization header carrying a valid token for user."""
    token = create_access_token({"id": user.id, "email": user.email, "name": user.name})
    return {"Authorization": f"Bearer {token}"}


def make_user(db: Session, email: str, name: str, password: str = "secret1") -> User:
    user = User(email=email, hashed_password=hash_password(password), name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_book(
    db: Session,
    created_by: User,
    title: str = "1984",
    author: str = "George Orwell",
    genre: str = "Dystopian",
    published_year: int = 1949,
    created_at: datetime | None = None,
) -> Book:
    book = Book(
        title=title,
        author=author,
        genre=genre,
        description=f"{title} by {author}.",
        published_year=published_year,
        created_by=created_by.id,
    )
    if created_at is not None:
        book.created_at = created_at
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


def make_review(
    db: Session,
    book: Book,
    user: User,
    rating: int,
    comment: str = "Worth reading.",
    created_at: datetime | None = None,
) -> Review:
    review = Review(book_id=book.id, user_id=user.id, rating=rating, comment=comment)
    if created_at is not None:
        review.created_at = created_at
        review.updated_at = created_at
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


def minutes_ago(minutes: int) -> datetime:
    return datetime.now(UTC) - timedelta(minutes=minutes)


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """A registered user whose password is "secret1"."""
    return make_user(db_session, "reader@example.com", "Avid Reader")


@pytest.fixture
def second_user(db_session: Session) -> User:
    return make_user(db_session, "critic@example.com", "Second Critic")


@pytest.fixture
def sample_book(db_session: Session, sample_user: User) -> Book:
    """George Orwell's 1984, added by sample_user."""
    return make_book(db_session, sample_user)


@pytest.fixture
def sample_review(db_session: Session, sample_book: Book, sample_user: User) -> Review:
    """A 5-star review of sample_book by sample_user."""
    return make_review(
        db_session,
        sample_book,
        sample_user,
        rating=5,
        comment="A chilling and prophetic classic.",
        created_at=minutes_ago(10),
    )


@pytest.fixture
def auth_headers(sample_user: User) -> dict[str, str]:
    return get_auth_header(sample_user)


@pytest.fixture
def second_auth_headers(second_user: User) -> dict[str, str]:
    return get_auth_header(second_user)


@pytest.fixture
def unknown_user_headers() -> dict[str, str]:
    """A correctly signed token for a user id that is not in the database."""
    token = create_access_token({"id": "ghost", "email": "ghost@example.com", "name": "Ghost"})
    return {"Authorization": f"Bearer {token}"}
