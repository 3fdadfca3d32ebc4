"""Book API routes (CRUD, rankings, reviews)."""

import logging
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.schemas import (
    BookCreate,
    BookResponse,
    BookUpdate,
    RankedBookListResponse,
    RankedBookResponse,
    ReviewCreateRequest,
    ReviewResponse,
    ReviewUpdateRequest,
)
from app.core.dependencies import get_book_service, get_review_service
from app.domain.services import IBookService, IReviewService
from app.ranking.presets import RankingPreset

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/books", tags=["books"])
reviews_router = APIRouter(prefix="/reviews", tags=["reviews"])


# ---------------------------------------------------------------------------
# CRUD & rankings
# ---------------------------------------------------------------------------
@router.post("/", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
async def create_book(
    body: BookCreate,
    book_service: Annotated[IBookService, Depends(get_book_service)],
) -> BookResponse:
    book = await book_service.create_book(body.title, body.author)
    return BookResponse.model_validate(book)


@router.get("/", response_model=RankedBookListResponse)
async def list_books(
    book_service: Annotated[IBookService, Depends(get_book_service)],
    title: Optional[str] = None,
    preset: Annotated[Optional[RankingPreset], Query(alias="filter")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> RankedBookListResponse:
    """List books, optionally ranked by a preset.

    ``filter`` is one of ``popular-last-month``, ``popular-last-6-months``,
    ``highest-rated-last-month`` or ``highest-rated-last-6-months``.  Without
    it books are listed newest first.  Every row carries ``reviews_count``
    and ``reviews_avg_rating`` (``null`` when the book has no review in the
    preset's window).
    """
    skip = (page - 1) * limit
    books = await book_service.list_books(title=title, preset=preset, skip=skip, limit=limit)
    return RankedBookListResponse(
        books=[RankedBookResponse.from_ranked(b) for b in books],
        page=page,
        limit=limit,
        filter=preset.value if preset else None,
    )


@router.get("/{book_id}", response_model=RankedBookResponse)
async def get_book(
    book_id: UUID,
    book_service: Annotated[IBookService, Depends(get_book_service)],
) -> RankedBookResponse:
    """Get a book with its all-time review count and average (cached)."""
    detail = await book_service.get_book_detail(book_id)
    if not detail:
        raise HTTPException(status_code=404, detail="Book not found")
    return RankedBookResponse.from_ranked(detail)


@router.put("/{book_id}", response_model=BookResponse)
async def update_book(
    book_id: UUID,
    body: BookUpdate,
    book_service: Annotated[IBookService, Depends(get_book_service)],
) -> BookResponse:
    """Update book details."""
    updated = await book_service.update_book(book_id, body.title, body.author)
    if not updated:
        raise HTTPException(status_code=404, detail="Book not found")
    return BookResponse.model_validate(updated)


@router.delete("/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: UUID,
    book_service: Annotated[IBookService, Depends(get_book_service)],
) -> None:
    """Remove a book and its reviews."""
    deleted = await book_service.delete_book(book_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Book not found")


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------
@router.get("/{book_id}/reviews", response_model=list[ReviewResponse])
async def list_reviews(
    book_id: UUID,
    review_service: Annotated[IReviewService, Depends(get_review_service)],
) -> list[ReviewResponse]:
    try:
        reviews = await review_service.list_reviews(book_id)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return [ReviewResponse.model_validate(r) for r in reviews]


@router.post(
    "/{book_id}/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED
)
async def create_review(
    book_id: UUID,
    body: ReviewCreateRequest,
    review_service: Annotated[IReviewService, Depends(get_review_service)],
) -> ReviewResponse:
    try:
        review = await review_service.create_review(book_id, body.rating, body.text)
    except LookupError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ReviewResponse.model_validate(review)


@reviews_router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_id: UUID,
    body: ReviewUpdateRequest,
    review_service: Annotated[IReviewService, Depends(get_review_service)],
) -> ReviewResponse:
    try:
        review = await review_service.update_review(review_id, body.rating, body.text)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    return ReviewResponse.model_validate(review)


@reviews_router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: UUID,
    review_service: Annotated[IReviewService, Depends(get_review_service)],
) -> None:
    deleted = await review_service.delete_review(review_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Review not found")
