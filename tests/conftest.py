"""Shared pytest fixtures: in-memory SQLite database, cache doubles, seed helpers."""

from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.clock import FixedClock
from app.domain.repositories import ICache
from app.infrastructure.database.models import Base, BookModel, ReviewModel

NOW = datetime(2026, 6, 15, 12, 0, 0)


class InMemoryCache(ICache):
    """Dict-backed cache recording every eviction."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.versions: dict[str, int] = {}
        self.evicted: list[str] = []

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def version(self, key: str) -> int:
        return self.versions.get(key, 0)

    async def fill(self, key: str, value: str, version: int) -> bool:
        if self.versions.get(key, 0) != version:
            return False
        self.data[key] = value
        return True

    async def evict(self, key: str) -> None:
        self.evicted.append(key)
        self.data.pop(key, None)
        self.versions[key] = self.versions.get(key, 0) + 1


class BrokenCache(ICache):
    """Cache whose backend is unreachable."""

    async def get(self, key: str) -> Optional[str]:
        raise ConnectionError("cache down")

    async def version(self, key: str) -> int:
        raise ConnectionError("cache down")

    async def fill(self, key: str, value: str, version: int) -> bool:
        raise ConnectionError("cache down")

    async def evict(self, key: str) -> None:
        raise ConnectionError("cache down")


class Seeder:
    """Inserts books and reviews straight through the ORM, bypassing lifecycle events."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def book(self, title: str = "Dune", author: str = "Frank Herbert",
                   created_at: datetime = NOW) -> BookModel:
        book = BookModel(id=uuid4(), title=title, author=author,
                         created_at=created_at, updated_at=created_at)
        self.session.add(book)
        await self.session.commit()
        return book

    async def reviews(self, book: BookModel, ratings: list[int],
                      days_ago: float = 1) -> list[ReviewModel]:
        created_at = NOW - timedelta(days=days_ago)
        reviews = [
            ReviewModel(id=uuid4(), book_id=book.id, rating=rating, text="Fine read.",
                        created_at=created_at, updated_at=created_at)
            for rating in ratings
        ]
        self.session.add_all(reviews)
        await self.session.commit()
        return reviews


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def seed(session) -> Seeder:
    return Seeder(session)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def cache() -> InMemoryCache:
    return InMemoryCache()
