"""Cache: optional Redis service for file listing views."""

from portal.infrastructure.cache.redis_cache import CacheService

__all__ = ["CacheService"]
