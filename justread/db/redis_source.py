"""Redis connection holder for the feed store."""

from __future__ import annotations

import logging
from typing import Optional

import redis.asyncio as redis

from ..config import settings

logger = logging.getLogger(__name__)


class RedisDataSource:
    """Owns the optional Redis client; `client` is None when no URL is configured."""

    def __init__(self, redis_url: Optional[str] = None) -> None:
        self._url = redis_url if redis_url is not None else settings.redis_url
        self._client: Optional[redis.Redis] = None
        if self._url:
            try:
                self._client = redis.from_url(self._url, encoding="utf-8", decode_responses=True)
            except ValueError as exc:
                logger.warning("Failed to initialize Redis client", exc_info=exc)
                self._client = None

    @property
    def client(self) -> Optional[redis.Redis]:
        return self._client

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def ping(self) -> bool:
        if self._client is None:
            return False
        return bool(await self._client.ping())

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


_redis_data_source: Optional[RedisDataSource] = None


def get_redis_data_source() -> RedisDataSource:
    """Get the process-wide Redis data source built from settings."""
    global _redis_data_source
    if _redis_data_source is None:
        _redis_data_source = RedisDataSource()
    return _redis_data_source


async def close_redis_data_source() -> None:
    global _redis_data_source
    if _redis_data_source is not None:
        await _redis_data_source.close()
        _redis_data_source = None


__all__ = ["RedisDataSource", "close_redis_data_source", "get_redis_data_source"]
