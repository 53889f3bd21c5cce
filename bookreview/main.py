"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() returns a configured app
   - Tests import the module-level `app` and override get_db

2. Lifespan Events
   - startup: log configuration, create tables for SQLite dev databases
   - shutdown: dispose the connection pool

3. Middleware Stack
   - Rate limiting (slowapi)
   - CORS: Allow cross-origin requests
   - Request logging: method, path, status, duration

4. Exception Handlers
   - Every error is rendered as {"error": "<message>"}
   - Validation failures become a single readable 400 message
   - Database and unexpected errors are logged and hidden behind a 500
"""

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookreview import __version__
from bookreview.config import get_settings
from bookreview.database import create_tables, engine
from bookreview.dependencies import DbSession
from bookreview.exceptions import APIError
from bookreview.routers import (
    auth_router,
    books_router,
    reviews_router,
    search_router,
)
from bookreview.services.rate_limiter import limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
# Configure logging before creating the app
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield: Runs on startup
    Code after yield: Runs on shutdown
    """
    # ----- STARTUP -----
    logger.info(f"Starting {settings.app_name} ({settings.environment})...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"API version: {settings.api_version}")

    if settings.is_sqlite:
        # PostgreSQL schemas are managed by Alembic
        create_tables()
        logger.info("SQLite database detected - tables created")

    yield  # Application runs here

    # ----- SHUTDOWN -----
    logger.info(f"Shutting down {settings.app_name}...")
    engine.dispose()


# =============================================================================
# Error Formatting
# =============================================================================
def error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": message},
        headers=headers,
    )


def validation_message(exc: RequestValidationError) -> str:
    """
    Reduce a RequestValidationError to one human-readable sentence.

    - missing field        -> "<field> is required"
    - field validator text -> passed through as written
    - anything else        -> "<field>: <pydantic message>"
    """
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    error = errors[0]
    loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
    field = loc[-1] if loc else None
    error_type = error.get("type")

    if error_type == "json_invalid":
        return "Request body is not valid JSON"

    if error_type == "missing":
        return f"{field} is required" if field else "Request body is required"

    if error_type == "value_error":
        cause = error.get("ctx", {}).get("error")
        if cause is not None:
            return str(cause)

    message = error.get("msg", "Invalid request")
    return f"{field}: {message}" if field else message


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Book Review API

Browse books, read reviews, and share your own.

### Features
- **Books**: Add books, list them with author/genre filters
- **Reviews**: One review per user per book, editable by its author
- **Ratings**: Average rating and review count on every book
- **Search**: Case-insensitive title/author search

### Authentication
Signup and login return a bearer token. Send it as
`Authorization: Bearer <token>` to add books and write reviews.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    # Attach the limiter to the app state so it can be accessed by decorators
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Request Logging
    # -------------------------------------------------------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({duration_ms:.1f} ms)"
        )
        return response

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        """Render domain errors raised by routes, dependencies and services."""
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Body/query validation failures are client errors: 400, not 422."""
        message = validation_message(exc)
        logger.debug(f"Validation failed on {request.url.path}: {message}")
        return error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Unknown routes and wrong methods, in the same error format."""
        message = exc.detail
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = "Route not found"
        return error_response(exc.status_code, str(message), getattr(exc, "headers", None))

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error for debugging while hiding details from users.
        """
        logger.error(f"Database error: {exc}", exc_info=True)
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "A database error occurred. Please try again later.",
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        In production, hide internal errors from users.
        In debug mode, show more details.
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)

        if settings.debug:
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))

        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    # prefix="/api/v1" creates versioned URLs: /api/v1/books, /api/v1/search
    api_prefix = f"/api/{settings.api_version}"

    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(books_router, prefix=api_prefix)
    app.include_router(reviews_router, prefix=api_prefix)
    app.include_router(search_router, prefix=api_prefix)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and can reach its database.",
    )
    def health_check(db: DbSession) -> dict:
        """
        Health check endpoint.

        Used by load balancers and container orchestrators. Reports
        "degraded" instead of failing when the database is unreachable.
        """
        try:
            db.execute(text("SELECT 1"))
            database = "connected"
        except SQLAlchemyError as e:
            logger.warning(f"Health check could not reach the database: {e}")
            database = "unavailable"

        return {
            "status": "healthy" if database == "connected" else "degraded",
            "app": settings.app_name,
            "version": __version__,
            "database": database,
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn bookreview.main:app

app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# python -m bookreview.main

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookreview.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
