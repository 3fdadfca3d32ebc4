"""Domain entities for book rankings."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID


@dataclass
class Book:
    id: UUID
    title: str
    author: str
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Review:
    id: UUID
    book_id: UUID
    rating: int
    text: str
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class RankedBook:
    """A book annotated with review aggregates computed by a ranking query.

    Aggregates are never stored: each is computed per query, optionally
    restricted to a time window.  A column the query did not request is
    ``None``.  ``reviews_avg_rating`` is also ``None`` when no review falls
    inside the window, which is distinct from an average of 0.
    """

    book: Book
    reviews_count: Optional[int] = None
    reviews_avg_rating: Optional[float] = None
