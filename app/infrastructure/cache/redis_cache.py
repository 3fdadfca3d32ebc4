"""Redis-backed key-value cache."""

import logging
from typing import Optional

import redis.asyncio as aioredis

from app.domain.repositories import ICache

logger = logging.getLogger(__name__)

# KEYS: entry, version counter.  ARGV: payload, version read before the fetch.
_FILL_IF_UNCHANGED = """
if (redis.call('GET', KEYS[2]) or '0') == ARGV[2] then
    redis.call('SET', KEYS[1], ARGV[1])
    return 1
end
return 0
"""

# KEYS: entry, version counter.
_EVICT = """
local removed = redis.call('DEL', KEYS[1])
redis.call('INCR', KEYS[2])
return removed
"""


class RedisCache(ICache):
    """Plain string cache on top of a shared ``redis.asyncio`` client.

    Entries carry no TTL; they live until evicted.  Every entry has a
    ``<key>:v`` counter bumped on eviction, and fills only land while the
    counter still holds the value read before the fetch.  Redis errors
    propagate so callers decide whether a cache fault matters.
    """

    def __init__(self, client: aioredis.Redis):
        self.client = client

    @staticmethod
    def _version_key(key: str) -> str:
        return f"{key}:v"

    async def get(self, key: str) -> Optional[str]:
        return await self.client.get(key)

    async def version(self, key: str) -> int:
        raw = await self.client.get(self._version_key(key))
        return int(raw) if raw else 0

    async def fill(self, key: str, value: str, version: int) -> bool:
        stored = await self.client.eval(
            _FILL_IF_UNCHANGED, 2, key, self._version_key(key), value, version
        )
        if not stored:
            logger.debug("Skipped fill of %s, evicted since version %d", key, version)
        return bool(stored)

    async def evict(self, key: str) -> None:
        # DEL on a missing key returns 0, no error
        removed = await self.client.eval(_EVICT, 2, key, self._version_key(key))
        logger.debug("Evicted %s (%d removed)", key, removed)
