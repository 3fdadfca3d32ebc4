"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.entities import RankedBook


# ---------------------------------------------------------------------------
# Books
# ---------------------------------------------------------------------------
class BookCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)


class BookUpdate(BaseModel):
    """Book update request (metadata only)."""

    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)


class BookResponse(BaseModel):
    id: UUID
    title: str
    author: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RankedBookResponse(BookResponse):
    """Book plus the review aggregates computed by the ranking query."""

    reviews_count: Optional[int] = None
    reviews_avg_rating: Optional[float] = None

    @classmethod
    def from_ranked(cls, ranked: RankedBook) -> "RankedBookResponse":
        return cls(
            **BookResponse.model_validate(ranked.book).model_dump(),
            reviews_count=ranked.reviews_count,
            reviews_avg_rating=ranked.reviews_avg_rating,
        )


class RankedBookListResponse(BaseModel):
    books: list[RankedBookResponse]
    page: int
    limit: int
    filter: Optional[str] = None


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
class ReviewCreateRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    text: str = Field(..., min_length=1)


class ReviewUpdateRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    text: str = Field(..., min_length=1)


class ReviewResponse(BaseModel):
    id: UUID
    book_id: UUID
    rating: int
    text: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
