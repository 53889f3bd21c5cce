"""
Database Configuration Module

Sets up SQLAlchemy 2.0 for the Book Review API.

We use SYNCHRONOUS SQLAlchemy with the "session per request" pattern:
1. Request arrives → create a new session
2. Use session for all database operations in that request
3. Commit on success, rollback on failure
4. Close session when request ends

PostgreSQL is the production store; SQLite URLs are accepted for local
development and tests.
"""

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from bookreview.config import get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
# - pool_size / max_overflow: connection pool bounds (not valid for SQLite)
# - pool_pre_ping: test connection health before using
# - echo: log SQL statements in debug mode

def _engine_options() -> dict:
    if settings.is_sqlite:
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
    }


engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(),
)


# =============================================================================
# Session Factory
# =============================================================================
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Code before yield creates the session, the route handler uses it,
    and the finally block closes it even if the handler raised.

    Usage in Routes:
        @router.get("/books")
        def list_books(db: DbSession):
            ...

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables() -> None:
    """
    Create all database tables.

    WARNING: In production, use Alembic migrations instead.
    """
    Base.metadata.create_all(bind=engine)



def violates_constraint(exc: IntegrityError, name: str, columns: str) -> bool:
    """
    Tell whether an IntegrityError came from one specific unique constraint.

    PostgreSQL (psycopg2) reports the constraint name in the error
    diagnostics. SQLite only names the columns, e.g.
    "UNIQUE constraint failed: reviews.book_id, reviews.user_id", so
    columns is matched against that message.

    Args:
        exc: The error raised by flush/commit
        name: Constraint or unique index name, e.g. "uq_review_book_user"
        columns: SQLite's column list, e.g. "reviews.book_id, reviews.user_id"
    """
    diag = getattr(exc.orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None)
    if constraint_name is not None:
        return constraint_name == name

    message = str(exc.orig)
    return name in message or f"UNIQUE constraint failed: {columns}" in message
