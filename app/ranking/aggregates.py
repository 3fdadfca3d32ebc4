"""Per-book review aggregates exposed as derived query columns.

Each aggregate is its own correlated scalar subquery over ``reviews`` with
its own date predicate, so a count and an average with different windows can
sit in the same statement without affecting each other.
"""

from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import func, select
from sqlalchemy.sql.expression import ScalarSelect

from app.infrastructure.database.models import BookModel, ReviewModel
from app.ranking.window import Window, apply_date_range

if TYPE_CHECKING:
    from app.ranking.query import RankingQuery

REVIEWS_COUNT = "reviews_count"
REVIEWS_AVG_RATING = "reviews_avg_rating"


def reviews_count_expr(
    start: Optional[datetime] = None, end: Optional[datetime] = None
) -> ScalarSelect:
    """Number of reviews of the enclosing book created inside the window (0 if none)."""
    stmt = select(func.count(ReviewModel.id)).where(ReviewModel.book_id == BookModel.id)
    stmt = apply_date_range(stmt, ReviewModel.created_at, start, end)
    return stmt.correlate(BookModel).scalar_subquery()


def reviews_avg_rating_expr(
    start: Optional[datetime] = None, end: Optional[datetime] = None
) -> ScalarSelect:
    """Mean rating of the enclosing book's reviews inside the window (NULL if none)."""
    stmt = select(func.avg(ReviewModel.rating)).where(ReviewModel.book_id == BookModel.id)
    stmt = apply_date_range(stmt, ReviewModel.created_at, start, end)
    return stmt.correlate(BookModel).scalar_subquery()


def with_count(
    query: "RankingQuery", start: Optional[datetime] = None, end: Optional[datetime] = None
) -> "RankingQuery":
    """Annotate ``query`` with ``reviews_count`` over the given window.

    Applying it again replaces the previous window instead of adding a second column.
    """
    return replace(query, count_window=Window(start, end))


def with_avg_rating(
    query: "RankingQuery", start: Optional[datetime] = None, end: Optional[datetime] = None
) -> "RankingQuery":
    """Annotate ``query`` with ``reviews_avg_rating`` over the given window."""
    return replace(query, avg_window=Window(start, end))
