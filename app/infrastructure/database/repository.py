"""Repository implementations."""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.entities import Book, RankedBook, Review
from app.domain.events import LifecycleEvents
from app.domain.repositories import IBookRepository, IRankingRepository, IReviewRepository
from app.infrastructure.database.models import BookModel, ReviewModel
from app.ranking.aggregates import REVIEWS_AVG_RATING, REVIEWS_COUNT
from app.ranking.query import RankingQuery

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Book Repository
# ---------------------------------------------------------------------------
class BookRepository(IBookRepository):

    def __init__(self, session: AsyncSession, events: Optional[LifecycleEvents[Book]] = None):
        self.session = session
        self.events = events or LifecycleEvents("book")

    async def create(self, book: Book) -> Book:
        db_book = BookModel(
            id=book.id,
            title=book.title,
            author=book.author,
            created_at=book.created_at,
            updated_at=book.updated_at,
        )
        self.session.add(db_book)
        await self.session.commit()
        await self.session.refresh(db_book)
        created = self._to_entity(db_book)
        await self.events.created(created)
        return created

    async def get_by_id(self, book_id: UUID) -> Optional[Book]:
        result = await self.session.execute(select(BookModel).where(BookModel.id == book_id))
        db_book = result.scalar_one_or_none()
        return self._to_entity(db_book) if db_book else None

    async def update(self, book: Book) -> Book:
        result = await self.session.execute(select(BookModel).where(BookModel.id == book.id))
        db_book = result.scalar_one()
        db_book.title = book.title
        db_book.author = book.author
        db_book.updated_at = datetime.utcnow()
        await self.session.commit()
        await self.session.refresh(db_book)
        updated = self._to_entity(db_book)
        await self.events.updated(updated)
        return updated

    async def delete(self, book_id: UUID) -> bool:
        result = await self.session.execute(select(BookModel).where(BookModel.id == book_id))
        db_book = result.scalar_one_or_none()
        if not db_book:
            return False
        deleted = self._to_entity(db_book)
        await self.session.delete(db_book)
        await self.session.commit()
        await self.events.deleted(deleted)
        return True

    @staticmethod
    def _to_entity(model: BookModel) -> Book:
        return Book(
            id=model.id,
            title=model.title,
            author=model.author,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


# ---------------------------------------------------------------------------
# Review Repository
# ---------------------------------------------------------------------------
class ReviewRepository(IReviewRepository):

    def __init__(self, session: AsyncSession, events: Optional[LifecycleEvents[Review]] = None):
        self.session = session
        self.events = events or LifecycleEvents("review")

    async def create(self, review: Review) -> Review:
        db_review = ReviewModel(
            id=review.id,
            book_id=review.book_id,
            rating=review.rating,
            text=review.text,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )
        self.session.add(db_review)
        await self.session.commit()
        await self.session.refresh(db_review)
        created = self._to_entity(db_review)
        await self.events.created(created)
        return created

    async def get_by_id(self, review_id: UUID) -> Optional[Review]:
        result = await self.session.execute(select(ReviewModel).where(ReviewModel.id == review_id))
        db_review = result.scalar_one_or_none()
        return self._to_entity(db_review) if db_review else None

    async def get_by_book(self, book_id: UUID) -> list[Review]:
        result = await self.session.execute(
            select(ReviewModel)
            .where(ReviewModel.book_id == book_id)
            .order_by(ReviewModel.created_at.desc())
        )
        return [self._to_entity(r) for r in result.scalars().all()]

    async def update(self, review: Review) -> Review:
        result = await self.session.execute(select(ReviewModel).where(ReviewModel.id == review.id))
        db_review = result.scalar_one()
        db_review.rating = review.rating
        db_review.text = review.text
        db_review.updated_at = datetime.utcnow()
        await self.session.commit()
        await self.session.refresh(db_review)
        updated = self._to_entity(db_review)
        await self.events.updated(updated)
        return updated

    async def delete(self, review_id: UUID) -> bool:
        result = await self.session.execute(select(ReviewModel).where(ReviewModel.id == review_id))
        db_review = result.scalar_one_or_none()
        if not db_review:
            return False
        deleted = self._to_entity(db_review)
        await self.session.delete(db_review)
        await self.session.commit()
        await self.events.deleted(deleted)
        return True

    @staticmethod
    def _to_entity(model: ReviewModel) -> Review:
        return Review(
            id=model.id,
            book_id=model.book_id,
            rating=model.rating,
            text=model.text,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


# ---------------------------------------------------------------------------
# Ranking Repository
# ---------------------------------------------------------------------------
class RankingRepository(IRankingRepository):
    """Executes ``RankingQuery`` plans."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def fetch(self, query: RankingQuery, skip: int = 0, limit: int = 100) -> list[RankedBook]:
        stmt = query.statement().offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        return [self._to_ranked(row) for row in result.all()]

    @staticmethod
    def _to_ranked(row) -> RankedBook:
        mapping = row._mapping
        count = mapping.get(REVIEWS_COUNT)
        avg = mapping.get(REVIEWS_AVG_RATING)
        return RankedBook(
            book=BookRepository._to_entity(row[0]),
            reviews_count=int(count) if count is not None else None,
            # PostgreSQL returns Decimal for AVG(integer)
            reviews_avg_rating=float(avg) if avg is not None else None,
        )
