"""Dependency injection container."""

import redis.asyncio as aioredis
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import Clock, SystemClock
from app.core.redis_client import get_redis
from app.domain.entities import Book, Review
from app.domain.events import LifecycleEvents
from app.domain.repositories import ICache, IBookRepository, IRankingRepository, IReviewRepository
from app.domain.services import IBookService, IReviewService
from app.infrastructure.cache.redis_cache import RedisCache
from app.infrastructure.database.connection import get_db
from app.infrastructure.database.repository import BookRepository, RankingRepository, ReviewRepository
from app.ranking.presets import RankingPresets
from app.services.book_service import BookService
from app.services.review_service import ReviewService


# ---------------------------------------------------------------------------
# Infrastructure providers
# ---------------------------------------------------------------------------
def get_clock() -> Clock:
    return SystemClock()


def get_cache(client: aioredis.Redis = Depends(get_redis)) -> ICache:
    return RedisCache(client)


def get_book_events(request: Request) -> LifecycleEvents[Book]:
    """Registry created in the application lifespan (see ``app/main.py``)."""
    return request.app.state.book_events


def get_review_events(request: Request) -> LifecycleEvents[Review]:
    return request.app.state.review_events


def get_ranking_presets(clock: Clock = Depends(get_clock)) -> RankingPresets:
    return RankingPresets(clock)


# ---------------------------------------------------------------------------
# Repository providers
# ---------------------------------------------------------------------------
async def get_book_repository(
    session: AsyncSession = Depends(get_db),
    events: LifecycleEvents[Book] = Depends(get_book_events),
) -> IBookRepository:
    return BookRepository(session, events)


async def get_review_repository(
    session: AsyncSession = Depends(get_db),
    events: LifecycleEvents[Review] = Depends(get_review_events),
) -> IReviewRepository:
    return ReviewRepository(session, events)


async def get_ranking_repository(session: AsyncSession = Depends(get_db)) -> IRankingRepository:
    return RankingRepository(session)


# ---------------------------------------------------------------------------
# Service providers
# ---------------------------------------------------------------------------
async def get_book_service(
    repo: IBookRepository = Depends(get_book_repository),
    ranking_repo: IRankingRepository = Depends(get_ranking_repository),
    cache: ICache = Depends(get_cache),
    presets: RankingPresets = Depends(get_ranking_presets),
) -> IBookService:
    """Get book service with dependencies."""
    return BookService(
        book_repository=repo,
        ranking_repository=ranking_repo,
        cache=cache,
        presets=presets,
    )


async def get_review_service(
    review_repo: IReviewRepository = Depends(get_review_repository),
    book_repo: IBookRepository = Depends(get_book_repository),
) -> IReviewService:
    return ReviewService(review_repository=review_repo, book_repository=book_repo)
