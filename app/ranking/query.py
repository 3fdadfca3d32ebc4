"""Immutable ranking query plan.

A ``RankingQuery`` only describes what to compute.  The composer functions in
``app/ranking/composer.py`` and ``app/ranking/aggregates.py`` each return a
new plan, and ``statement()`` compiles the final plan into a lazy SQLAlchemy
``Select`` that a repository executes.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy import Select, select

from app.infrastructure.database.models import BookModel
from app.ranking.aggregates import (
    REVIEWS_AVG_RATING,
    REVIEWS_COUNT,
    reviews_avg_rating_expr,
    reviews_count_expr,
)
from app.ranking.window import Window

CREATED_AT = "created_at"


@dataclass(frozen=True)
class RankingQuery:
    """Plan for a list of books annotated with review aggregates.

    ``order_by`` holds a single column name: applying a new ordering replaces
    the previous one rather than adding a secondary key.  Rows are always
    tie-broken by book id so identical inputs give identical orderings.
    """

    count_window: Optional[Window] = None
    avg_window: Optional[Window] = None
    order_by: Optional[str] = None
    min_reviews: Optional[int] = None
    title: Optional[str] = None
    book_id: Optional[UUID] = None

    @property
    def columns(self) -> tuple[str, ...]:
        """Names of the derived columns this plan adds to each row."""
        names = []
        if self.count_window is not None:
            names.append(REVIEWS_COUNT)
        if self.avg_window is not None:
            names.append(REVIEWS_AVG_RATING)
        return tuple(names)

    def statement(self) -> Select:
        stmt = select(BookModel)
        order_targets = {CREATED_AT: BookModel.created_at}

        count_expr = None
        if self.count_window is not None:
            count_expr = reviews_count_expr(self.count_window.start, self.count_window.end)
            count_column = count_expr.label(REVIEWS_COUNT)
            stmt = stmt.add_columns(count_column)
            order_targets[REVIEWS_COUNT] = count_column

        if self.avg_window is not None:
            avg_column = reviews_avg_rating_expr(
                self.avg_window.start, self.avg_window.end
            ).label(REVIEWS_AVG_RATING)
            stmt = stmt.add_columns(avg_column)
            order_targets[REVIEWS_AVG_RATING] = avg_column

        if self.title:
            stmt = stmt.where(BookModel.title.icontains(self.title, autoescape=True))
        if self.book_id is not None:
            stmt = stmt.where(BookModel.id == self.book_id)

        # Threshold compares the per-book aggregate, never the raw review rows.
        if self.min_reviews is not None:
            if count_expr is None:
                raise ValueError("min_reviews needs a reviews_count column")
            stmt = stmt.where(count_expr >= self.min_reviews)

        if self.order_by is not None:
            if self.order_by not in order_targets:
                raise ValueError(f"Cannot order by unselected column: {self.order_by}")
            stmt = stmt.order_by(order_targets[self.order_by].desc().nulls_last())
        return stmt.order_by(BookModel.id)
