"""
Services Package

Business logic kept separate from HTTP handling so it can be tested
against a bare database session.

Current services:
- users.py: User persistence
- books.py: Book persistence, filtered listing and search
- reviews.py: Review persistence and per-book review listing
- ratings.py: Rating aggregation (average rounded half-up, review count)
- security.py: Password hashing and bearer tokens
- rate_limiter.py: Rate limiting with slowapi
"""
