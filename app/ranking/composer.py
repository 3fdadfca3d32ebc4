"""Composable ranking operations over ``RankingQuery`` plans.

Every function takes a plan and returns a new one, so rankings compose by
plain function application::

    plan = min_reviews(highest_rated(popular(RankingQuery(), start, end), start, end), 2)

Re-applying an aggregate replaces its window and the last ordering applied
becomes the primary sort key.
"""

from dataclasses import replace
from datetime import datetime
from typing import Optional
from uuid import UUID

from app.ranking.aggregates import REVIEWS_AVG_RATING, REVIEWS_COUNT, with_avg_rating, with_count
from app.ranking.query import CREATED_AT, RankingQuery


def popular(
    query: RankingQuery, start: Optional[datetime] = None, end: Optional[datetime] = None
) -> RankingQuery:
    """Order by number of reviews in the window, most reviewed first."""
    return replace(with_count(query, start, end), order_by=REVIEWS_COUNT)


def highest_rated(
    query: RankingQuery, start: Optional[datetime] = None, end: Optional[datetime] = None
) -> RankingQuery:
    """Order by average rating in the window; books with no reviews there sort last."""
    return replace(with_avg_rating(query, start, end), order_by=REVIEWS_AVG_RATING)


def min_reviews(query: RankingQuery, minimum: int) -> RankingQuery:
    """Keep only books with at least ``minimum`` reviews.

    Reuses the plan's windowed count when one is present; otherwise counts
    all reviews.
    """
    if isinstance(minimum, bool) or not isinstance(minimum, int):
        raise TypeError(f"minimum must be an int, got {type(minimum).__name__}")
    if query.count_window is None:
        query = with_count(query)
    return replace(query, min_reviews=minimum)


def latest(query: RankingQuery) -> RankingQuery:
    """Newest books first."""
    return replace(query, order_by=CREATED_AT)


def title(query: RankingQuery, text: str) -> RankingQuery:
    """Case-insensitive substring match on the book title."""
    return replace(query, title=text)


def only(query: RankingQuery, book_id: UUID) -> RankingQuery:
    return replace(query, book_id=book_id)
