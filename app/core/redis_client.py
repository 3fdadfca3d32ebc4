"""Async Redis client shared across the application.

Used for:
- Book detail cache (``book:<id>`` entries), evicted on book/review mutations
"""

from typing import AsyncGenerator
from uuid import UUID

import redis.asyncio as aioredis

from app.core.config import settings


def create_redis() -> aioredis.Redis:
    """Build a client from the configured URL (no connection is opened yet)."""
    return aioredis.from_url(settings.redis_url, decode_responses=True)


async def get_redis() -> AsyncGenerator[aioredis.Redis, None]:
    """FastAPI dependency: yield a connected Redis client, close on teardown."""
    client = create_redis()
    try:
        yield client
    finally:
        await client.aclose()


def book_cache_key(book_id: UUID | str) -> str:
    """Cache key holding the detail view of a single book."""
    return f"{settings.book_cache_prefix}{book_id}"
