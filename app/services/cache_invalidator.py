"""Keeps the book detail cache consistent with book and review mutations."""

import logging
from typing import Optional
from uuid import UUID

from app.core.redis_client import book_cache_key
from app.domain.entities import Book, Review
from app.domain.events import LifecycleEvents
from app.domain.repositories import ICache

logger = logging.getLogger(__name__)


class BookCacheInvalidator:
    """Evicts ``book:<id>`` whenever the book, or one of its reviews, changes.

    Eviction runs inside the mutation (listeners are awaited before the
    repository call returns) but never fails it: a cache fault is logged and
    the write stands.
    """

    def __init__(self, cache: ICache):
        self.cache = cache

    def subscribe(
        self,
        book_events: LifecycleEvents[Book],
        review_events: Optional[LifecycleEvents[Review]] = None,
    ) -> None:
        book_events.on_updated(self.on_book_changed)
        book_events.on_deleted(self.on_book_changed)
        if review_events is not None:
            # The cached detail carries review aggregates.
            review_events.on_created(self.on_review_changed)
            review_events.on_updated(self.on_review_changed)
            review_events.on_deleted(self.on_review_changed)
        logger.info("Book cache invalidation subscribed")

    async def on_book_changed(self, book: Book) -> None:
        await self.evict(book.id)

    async def on_review_changed(self, review: Review) -> None:
        await self.evict(review.book_id)

    async def evict(self, book_id: UUID) -> None:
        key = book_cache_key(book_id)
        try:
            await self.cache.evict(key)
        except Exception as exc:
            logger.warning("Cache eviction failed for %s: %s", key, exc)
