"""Redis-based cache service (ICacheService).

Holds short-lived per-actor file listings. Every operation degrades to a
cache miss when Redis is down; nothing here raises to callers. A failed
invalidation suspends the cache until every entry written before it has
expired, so a stale view is never served.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Any

import redis.asyncio as redis

from portal.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class CacheService:
    """Async Redis cache with TTL. Call connect() at startup and disconnect() at shutdown."""

    def __init__(
        self, redis_client: redis.Redis | None = None, settings: Settings | None = None
    ) -> None:
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._connected = redis_client is not None
        self._longest_ttl = self.settings.cache_ttl_file_views
        self._suspended_until = 0.0

    async def connect(self) -> None:
        if self.redis is not None:
            return
        try:
            self.redis = redis.Redis(
                host=self.settings.redis_host,
                port=self.settings.redis_port,
                db=self.settings.redis_db,
                password=(
                    self.settings.redis_password.get_secret_value()
                    if self.settings.redis_password
                    else None
                ),
                decode_responses=True,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            await self.redis.ping()
            self._connected = True
            logger.info(
                "Redis cache connected: %s:%s",
                self.settings.redis_host,
                self.settings.redis_port,
            )
        except (redis.ConnectionError, redis.TimeoutError) as e:
            logger.warning("Redis connection failed: %s. Cache disabled.", e)
            self._connected = False
            self.redis = None

    async def disconnect(self) -> None:
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        return (
            self._connected
            and self.redis is not None
            and time.monotonic() >= self._suspended_until
        )

    def _suspend(self, reason: Exception) -> None:
        self._suspended_until = time.monotonic() + self._longest_ttl
        logger.warning(
            "Cache invalidation failed (%s); cache suspended for %ss",
            reason,
            self._longest_ttl,
        )

    def _log_failure(self, operation: str, key: str, error: Exception) -> None:
        logger.warning("Cache %s failed for %s: %s", operation, key, error)

    async def get(self, key: str) -> Any | None:
        """Return the JSON-decoded value, or None on a miss or when Redis is unavailable."""
        if not self.is_available() or self.redis is None:
            return None
        try:
            value = await self.redis.get(key)
        except redis.RedisError as e:
            self._log_failure("get", key, e)
            return None
        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        if not self.is_available() or self.redis is None:
            return False
        self._longest_ttl = max(self._longest_ttl, ttl)
        try:
            await self.redis.setex(key, ttl, json.dumps(value))
        except redis.RedisError as e:
            self._log_failure("set", key, e)
            return False
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern using SCAN + batched UNLINK."""
        if not self.is_available() or self.redis is None:
            return 0
        chunk_size = 500
        deleted = 0
        try:
            chunk: list[str] = []
            async for key in self.redis.scan_iter(match=pattern):
                chunk.append(key)
                if len(chunk) >= chunk_size:
                    deleted += int(await self.redis.unlink(*chunk) or 0)
                    chunk = []
            if chunk:
                deleted += int(await self.redis.unlink(*chunk) or 0)
        except redis.RedisError as e:
            self._suspend(e)
            return deleted
        if deleted > 0:
            logger.info("Cache INVALIDATE: %s (%s keys)", pattern, deleted)
        return deleted
