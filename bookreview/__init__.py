"""
Book Review API Package

Users register, log in, add books to a shared catalogue and leave one
star rating with a comment per book. Anyone can browse, filter and search
the catalogue.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine, session factory and declarative base
- exceptions.py: API error taxonomy rendered as {"error": message}
- validators.py: Pure validation helpers (email, password, rating, pagination)
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions (session, pagination, auth)
- models/: SQLAlchemy ORM models (User, Book, Review)
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Persistence, rating aggregation, credentials, rate limiting
"""

__version__ = "0.1.0"
