"""
Feed Store

Per-user Redis sorted set of serialized sections. Scores are synthetic
millisecond timestamps pushed one expiry horizon into the future, so the set
orders by insertion time and doubles as its own expiry index.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, List, Optional, Sequence

from .models import FeedEntry, Section

logger = logging.getLogger(__name__)

REDIS_KEY_PREFIX = "just-read-feed:"
MAX_FEED_ITEMS = 500
SECTION_TTL_MS = 86_400_000  # 24 hours


class FeedStoreError(Exception):
    """Base exception for feed store errors."""
    pass


class FeedStoreUnavailableError(FeedStoreError):
    """No store connection is configured."""
    pass


def redis_key(user_id: str) -> str:
    return f"{REDIS_KEY_PREFIX}{user_id}"


def _now_ms() -> int:
    return int(time.time() * 1000)


class FeedStore:
    """
    Appends sections to a user's feed and reads them back for pagination.

    The Redis client is injected; passing None models a store whose
    connection was never initialized, and every call then fails fast.
    """

    def __init__(
        self,
        client: Any,
        max_items: int = MAX_FEED_ITEMS,
        ttl_ms: int = SECTION_TTL_MS,
        clock: Callable[[], int] = _now_ms,
    ):
        """
        Args:
            client: redis.asyncio client (decode_responses=True) or None
            max_items: Sections kept per user after each append
            ttl_ms: Expiry horizon added to every rank-score
            clock: Current time in milliseconds
        """
        self._client = client
        self._max_items = max_items
        self._ttl_ms = ttl_ms
        self._clock = clock

    def _require_client(self) -> Any:
        if self._client is None:
            raise FeedStoreUnavailableError("Redis client not available")
        return self._client

    async def append_sections(self, user_id: str, sections: Sequence[Section]) -> int:
        """
        Add sections to the user's feed, then trim and expire in the same transaction.

        Returns:
            Number of sections written
        """
        client = self._require_client()
        if not sections:
            return 0

        key = redis_key(user_id)
        now = self._clock()

        mapping = {
            section.to_json(): now + index + self._ttl_ms
            for index, section in enumerate(sections)
        }

        async with client.pipeline(transaction=True) as pipe:
            pipe.zadd(key, mapping)
            # keep only the top max_items by score
            pipe.zremrangebyrank(key, 0, -(self._max_items + 1))
            pipe.zremrangebyscore(key, "-inf", now)
            logger.info(f"Adding {len(mapping)} feed sections to redis")
            await pipe.execute()

        return len(mapping)

    async def get_sections(
        self,
        user_id: str,
        limit: int,
        max_score: Optional[int] = None,
    ) -> List[FeedEntry]:
        """
        Read sections in descending rank-score order.

        Args:
            user_id: Feed owner
            limit: Max entries to return
            max_score: Exclusive ceiling (a previous page's last score); None for the newest

        Returns:
            Entries with their rank-scores, newest first
        """
        client = self._require_client()
        if limit <= 0:
            return []

        ceiling: Any = max_score - 1 if max_score is not None else "+inf"

        results = await client.zrevrangebyscore(
            redis_key(user_id),
            ceiling,
            "-inf",
            start=0,
            num=limit,
            withscores=True,
        )

        return [
            FeedEntry(section=Section.from_json(member), score=int(score))
            for member, score in results
        ]

    async def count(self, user_id: str) -> int:
        client = self._require_client()
        return await client.zcard(redis_key(user_id))
