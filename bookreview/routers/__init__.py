"""
API Routers Package

Router Structure:
- auth.py: /api/v1/auth/* endpoints (signup, login, current user)
- books.py: /api/v1/books/* endpoints
- reviews.py: /api/v1/books/{id}/reviews and /api/v1/reviews/* endpoints
- search.py: /api/v1/search endpoint

Each router is imported and registered in main.py.
"""

from bookreview.routers.auth import router as auth_router
from bookreview.routers.books import router as books_router
from bookreview.routers.reviews import router as reviews_router
from bookreview.routers.search import router as search_router

__all__ = [
    "auth_router",
    "books_router",
    "reviews_router",
    "search_router",
]
