"""Book service with business logic."""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from pydantic import TypeAdapter, ValidationError

from app.core.redis_client import book_cache_key
from app.domain.entities import Book, RankedBook
from app.domain.repositories import IBookRepository, ICache, IRankingRepository
from app.domain.services import IBookService
from app.ranking.aggregates import with_avg_rating, with_count
from app.ranking.composer import latest, only, title as title_filter
from app.ranking.presets import RankingPreset, RankingPresets
from app.ranking.query import RankingQuery

logger = logging.getLogger(__name__)

_detail_adapter = TypeAdapter(RankedBook)


class BookService(IBookService):
    """Book service handling business logic."""

    def __init__(
        self,
        book_repository: IBookRepository,
        ranking_repository: IRankingRepository,
        cache: ICache,
        presets: RankingPresets,
    ):
        self.book_repository = book_repository
        self.ranking_repository = ranking_repository
        self.cache = cache
        self.presets = presets

    async def create_book(self, title: str, author: str) -> Book:
        now = datetime.utcnow()
        book = Book(id=uuid4(), title=title, author=author, created_at=now, updated_at=now)
        created = await self.book_repository.create(book)
        logger.info("Book record created: %s", created.id)
        return created

    async def get_book(self, book_id: UUID) -> Optional[Book]:
        return await self.book_repository.get_by_id(book_id)

    async def get_book_detail(self, book_id: UUID) -> Optional[RankedBook]:
        """Book plus all-time review count and average, read through the cache.

        A cache fault, or an entry that no longer parses, degrades to a plain
        database lookup.  The fill is tied to the key's version taken before
        the lookup, so an eviction during the lookup drops the fill.
        """
        key = book_cache_key(book_id)
        try:
            version: Optional[int] = await self.cache.version(key)
            cached = await self.cache.get(key)
        except Exception as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)
            version, cached = None, None
        if cached is not None:
            try:
                return _detail_adapter.validate_json(cached)
            except ValidationError as exc:
                logger.warning("Discarding unreadable cache entry %s: %s", key, exc)

        query = only(with_avg_rating(with_count(RankingQuery())), book_id)
        rows = await self.ranking_repository.fetch(query, limit=1)
        if not rows:
            return None
        detail = rows[0]

        if version is not None:
            try:
                await self.cache.fill(key, _detail_adapter.dump_json(detail).decode(), version)
            except Exception as exc:
                logger.warning("Cache write failed for %s: %s", key, exc)
        return detail

    async def list_books(
        self,
        title: Optional[str] = None,
        preset: Optional[RankingPreset] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[RankedBook]:
        """List books with review aggregates.

        With a preset the list is that preset's ranking; otherwise newest
        books first with all-time count and average.
        """
        query = RankingQuery()
        if title:
            query = title_filter(query, title)
        if preset is not None:
            query = self.presets.build(preset, query)
        else:
            query = latest(with_avg_rating(with_count(query)))
        return await self.ranking_repository.fetch(query, skip=skip, limit=limit)

    async def update_book(self, book_id: UUID, title: str, author: str) -> Optional[Book]:
        """Update book metadata.  The repository's ``updated`` event evicts the cached detail."""
        book = await self.book_repository.get_by_id(book_id)
        if not book:
            return None
        book.title = title
        book.author = author
        return await self.book_repository.update(book)

    async def delete_book(self, book_id: UUID) -> bool:
        """Delete a book and its reviews."""
        logger.info("Deleting book: %s", book_id)
        deleted = await self.book_repository.delete(book_id)
        if deleted:
            logger.info("Book deleted: %s", book_id)
        return deleted
