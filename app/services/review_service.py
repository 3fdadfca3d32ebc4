"""Review service with business logic."""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from app.domain.entities import Review
from app.domain.repositories import IBookRepository, IReviewRepository
from app.domain.services import IReviewService

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class ReviewService(IReviewService):
    """Handles review creation, edits and removal."""

    def __init__(self, review_repository: IReviewRepository, book_repository: IBookRepository):
        self.review_repository = review_repository
        self.book_repository = book_repository

    async def create_review(self, book_id: UUID, rating: int, text: str) -> Review:
        """Create a review for an existing book."""
        book = await self.book_repository.get_by_id(book_id)
        if not book:
            raise LookupError("Book not found")
        self._check_rating(rating)

        now = datetime.utcnow()
        review = Review(
            id=uuid4(),
            book_id=book_id,
            rating=rating,
            text=text,
            created_at=now,
            updated_at=now,
        )
        created = await self.review_repository.create(review)
        logger.info("Review created: %s for book %s", created.id, book_id)
        return created

    async def list_reviews(self, book_id: UUID) -> list[Review]:
        book = await self.book_repository.get_by_id(book_id)
        if not book:
            raise LookupError("Book not found")
        return await self.review_repository.get_by_book(book_id)

    async def update_review(self, review_id: UUID, rating: int, text: str) -> Optional[Review]:
        review = await self.review_repository.get_by_id(review_id)
        if not review:
            return None
        self._check_rating(rating)
        review.rating = rating
        review.text = text
        return await self.review_repository.update(review)

    async def delete_review(self, review_id: UUID) -> bool:
        return await self.review_repository.delete(review_id)

    @staticmethod
    def _check_rating(rating: int) -> None:
        if not MIN_RATING <= rating <= MAX_RATING:
            raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
