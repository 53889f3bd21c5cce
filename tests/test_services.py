"""
Tests for the service layer, run directly against a database session.

Covers:
- Rating aggregation (zero reviews, half-up rounding, stable results)
- Book listing (filters, ordering, pagination) and search
- Review and user persistence, including the uniqueness rules
"""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookreview.exceptions import ConflictError
from bookreview.models import Book, Review, User
from bookreview.services.books import create_book, list_books, search_books
from bookreview.services.ratings import (
    RatingSummary,
    average_from_totals,
    get_book_average_rating,
)
from bookreview.services.reviews import (
    create_review,
    delete_review,
    find_reviews_by_book_id,
    update_review,
)
from bookreview.services.security import hash_password
from bookreview.services.users import create_user, find_user_by_email
from tests.conftest import make_book, make_review, make_user, minutes_ago


# =============================================================================
# Rating Aggregation
# =============================================================================


class TestAverageFromTotals:
    @pytest.mark.parametrize(
        "rating_sum, review_count, expected",
        [
            (17, 4, 4.3),   # 4.25 rounds half-up
            (69, 20, 3.5),  # 3.45 rounds half-up
            (10, 3, 3.3),
            (11, 3, 3.7),
            (5, 1, 5.0),
        ],
    )
    def test_rounds_half_up_to_one_decimal(self, rating_sum, review_count, expected):
        assert average_from_totals(rating_sum, review_count) == expected

    def test_no_reviews_is_zero(self):
        assert average_from_totals(None, 0) == 0.0
        assert average_from_totals(None, None) == 0.0


class TestGetBookAverageRating:
    def test_book_without_reviews(self, db_session: Session, sample_book: Book):
        summary = get_book_average_rating(db_session, sample_book.id)

        assert summary == RatingSummary(average_rating=0.0, total_reviews=0)

    def test_book_with_reviews(self, db_session: Session, sample_book: Book):
        for i, rating in enumerate([4, 5, 4, 4]):
            user = make_user(db_session, f"r{i}@example.com", f"Reader {i}")
            make_review(db_session, sample_book, user, rating)

        summary = get_book_average_rating(db_session, sample_book.id)

        assert summary.average_rating == 4.3
        assert summary.total_reviews == 4

    def test_repeated_calls_agree(self, db_session: Session, sample_review: Review):
        first = get_book_average_rating(db_session, sample_review.book_id)
        second = get_book_average_rating(db_session, sample_review.book_id)

        assert first == second == RatingSummary(average_rating=5.0, total_reviews=1)


# =============================================================================
# Books
# =============================================================================


class TestCreateBook:
    def test_create_book(self, db_session: Session, sample_user: User):
        book = create_book(
            db_session,
            {
                "title": "Dune",
                "author": "Frank Herbert",
                "genre": "Science Fiction",
                "description": "Desert planet politics.",
                "published_year": 1965,
            },
            created_by=sample_user.id,
        )

        assert book.id
        assert book.created_by == sample_user.id
        assert book.created_at is not None


class TestListBooks:
    def test_books_carry_rating_summary(self, db_session: Session, sample_review: Review):
        books, total = list_books(db_session)

        assert total == 1
        assert books[0].book.id == sample_review.book_id
        assert books[0].rating == RatingSummary(average_rating=5.0, total_reviews=1)

    def test_unreviewed_book_has_zero_rating(self, db_session: Session, sample_book: Book):
        books, _ = list_books(db_session)

        assert books[0].rating == RatingSummary()

    def test_newest_first(self, db_session: Session, sample_user: User):
        old = make_book(db_session, sample_user, title="Old", created_at=minutes_ago(30))
        new = make_book(db_session, sample_user, title="New", created_at=minutes_ago(1))
        middle = make_book(db_session, sample_user, title="Middle", created_at=minutes_ago(10))

        books, _ = list_books(db_session)

        assert [b.book.id for b in books] == [new.id, middle.id, old.id]

    def test_filters_are_case_insensitive_and_combined(self, db_session: Session, sample_user: User):
        make_book(db_session, sample_user, title="1984", author="George Orwell", genre="Dystopian")
        make_book(db_session, sample_user, title="Animal Farm", author="George Orwell", genre="Satire")
        make_book(db_session, sample_user, title="Brave New World", author="Aldous Huxley", genre="Dystopian")

        by_author, total_author = list_books(db_session, author="ORWELL")
        by_genre, total_genre = list_books(db_session, genre="dystop")
        both, total_both = list_books(db_session, author="orwell", genre="dystopian")

        assert total_author == 2
        assert total_genre == 2
        assert total_both == 1
        assert both[0].book.title == "1984"

    def test_page_beyond_last_is_empty(self, db_session: Session, sample_user: User):
        for i in range(3):
            make_book(db_session, sample_user, title=f"Book {i}")

        books, total = list_books(db_session, page=5, limit=2)

        assert books == []
        assert total == 3

    def test_pagination_slices(self, db_session: Session, sample_user: User):
        for i in range(5):
            make_book(db_session, sample_user, title=f"Book {i}", created_at=minutes_ago(10 - i))

        page_one, _ = list_books(db_session, page=1, limit=2)
        page_three, total = list_books(db_session, page=3, limit=2)

        assert [b.book.title for b in page_one] == ["Book 4", "Book 3"]
        assert [b.book.title for b in page_three] == ["Book 0"]
        assert total == 5


class TestSearchBooks:
    def test_matches_title_or_author(self, db_session: Session, sample_user: User):
        make_book(db_session, sample_user, title="Dune Messiah", author="Frank Herbert")
        make_book(db_session, sample_user, title="Sand Stories", author="Alex Duneworth")
        make_book(db_session, sample_user, title="Foundation", author="Isaac Asimov")

        books, total = search_books(db_session, "dune")

        assert total == 2
        assert {b.book.title for b in books} == {"Dune Messiah", "Sand Stories"}

    def test_wildcards_match_literally(self, db_session: Session, sample_user: User):
        make_book(db_session, sample_user, title="100% Pure")
        make_book(db_session, sample_user, title="Plain Title")

        books, total = search_books(db_session, "%")

        assert total == 1
        assert books[0].book.title == "100% Pure"

    def test_no_matches(self, db_session: Session, sample_book: Book):
        books, total = search_books(db_session, "tolkien")

        assert books == []
        assert total == 0


# =============================================================================
# Reviews
# =============================================================================


class TestReviewPersistence:
    def test_create_review(self, db_session: Session, sample_book: Book, sample_user: User):
        review = create_review(db_session, sample_book.id, sample_user.id, 4, "Good.")

        assert review.id
        assert review.created_at is not None
        items, total = find_reviews_by_book_id(db_session, sample_book.id)
        assert total == 1
        assert items[0].review.id == review.id

    def test_duplicate_review_conflicts(self, db_session: Session, sample_review: Review):
        with pytest.raises(ConflictError) as exc_info:
            create_review(db_session, sample_review.book_id, sample_review.user_id, 3, "Again.")

        assert exc_info.value.message == "You have already reviewed this book"
        # The original review is untouched and the session is still usable
        summary = get_book_average_rating(db_session, sample_review.book_id)
        assert summary == RatingSummary(average_rating=5.0, total_reviews=1)

    def test_unknown_user_is_not_reported_as_duplicate(self, db_session: Session, sample_book: Book):
        with pytest.raises(IntegrityError):
            create_review(db_session, sample_book.id, "ghost", 4, "Who wrote this?")

        assert get_book_average_rating(db_session, sample_book.id) == RatingSummary()

    def test_update_only_given_fields(self, db_session: Session, sample_review: Review):
        created_at = sample_review.created_at
        updated_at = sample_review.updated_at

        review = update_review(db_session, sample_review, rating=2)

        assert review.rating == 2
        assert review.comment == "A chilling and prophetic classic."
        assert review.created_at == created_at
        assert review.updated_at != updated_at

    def test_delete_review(self, db_session: Session, sample_review: Review):
        book_id = sample_review.book_id

        assert delete_review(db_session, sample_review) is True
        assert get_book_average_rating(db_session, book_id) == RatingSummary()

    def test_reviews_listed_newest_first_with_author_name(
        self,
        db_session: Session,
        sample_review: Review,
        second_user: User,
    ):
        newer = make_review(
            db_session,
            sample_review.book,
            second_user,
            rating=3,
            created_at=minutes_ago(1),
        )

        items, total = find_reviews_by_book_id(db_session, sample_review.book_id)

        assert total == 2
        assert [i.review.id for i in items] == [newer.id, sample_review.id]
        assert [i.user_name for i in items] == ["Second Critic", "Avid Reader"]


# =============================================================================
# Users
# =============================================================================


class TestUserPersistence:
    def test_duplicate_email_conflicts(self, db_session: Session, sample_user: User):
        with pytest.raises(ConflictError) as exc_info:
            create_user(db_session, sample_user.email, hash_password("secret1"), "Someone Else")

        assert exc_info.value.message == "User with this email already exists"

    def test_email_lookup_is_case_sensitive(self, db_session: Session, sample_user: User):
        assert find_user_by_email(db_session, "reader@example.com").id == sample_user.id
        assert find_user_by_email(db_session, "READER@example.com") is None
