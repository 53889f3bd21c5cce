"""
Test Suite for the Book Review API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_validators.py: Pure validation and pagination helpers
- test_security.py: Password hashing and bearer tokens
- test_services.py: Persistence, rating aggregation, listing and search
- test_auth.py: /api/v1/auth endpoints
- test_books.py: /api/v1/books endpoints
- test_reviews.py: review endpoints and the end-to-end flow
- test_search.py: /api/v1/search endpoint
- test_app.py: health check, error format, client IP detection

Running Tests:
    pytest
    pytest tests/test_reviews.py -v
"""
