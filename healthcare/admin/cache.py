"""Redis-backed cache for admin view data.

The admin dashboard reads the recent-appointment list from here and only
goes to Appwrite on a miss. Any write to an appointment calls
`revalidate("/admin")`, which drops the cached entry so the next render
sees fresh data.
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis

from healthcare.admin.events import EventEmitter
from healthcare.schemas.appointments import RecentAppointments
from healthcare.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)

_CACHE_KEY_PREFIX = "page:"


def _cache_key(path: str) -> str:
    return f"{_CACHE_KEY_PREFIX}{path}"


class PageCache:
    """Per-route cache of the data behind a rendered page.

    Redis failures never propagate: a broken cache degrades to always-miss.
    """

    def __init__(self, redis: aioredis.Redis, ttl: int, events: EventEmitter) -> None:
        self._redis = redis
        self._ttl = ttl
        self._events = events

    async def get(self, path: str) -> RecentAppointments | None:
        try:
            cached_raw = await self._redis.get(_cache_key(path))
        except Exception:
            logger.warning("Page cache read failed for %s", path)
            return None

        if not cached_raw:
            return None

        logger.debug("Page cache hit: %s", path)
        try:
            return RecentAppointments.model_validate_json(cached_raw)
        except Exception:
            logger.warning("Failed to deserialize cached page %s, re-fetching", path)
            return None

    async def set(self, path: str, value: RecentAppointments) -> None:
        try:
            await self._redis.setex(
                _cache_key(path),
                self._ttl,
                value.model_dump_json(by_alias=True),
            )
        except Exception:
            logger.warning("Failed to cache page %s", path)

    async def revalidate(self, path: str) -> None:
        """Mark the cached render of `path` stale."""
        try:
            await self._redis.delete(_cache_key(path))
        except Exception:
            logger.exception("Failed to revalidate page %s", path)
            return

        logger.info("Page revalidated: %s", path)
        await self._events.emit(SystemEvent(
            event_type=EventType.PAGE_REVALIDATED,
            data={"path": path},
            source_module="admin.cache",
        ))
