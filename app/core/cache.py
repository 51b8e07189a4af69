"""AdPulse — Redis Report Cache.

Tag-versioned keys: every entry lives under ``cache:<tag>:v<N>:<key>`` where
N is the current value of ``cache:ver:<tag>``. Invalidating a tag bumps N,
so entries written before the bump are never read again and simply expire.
"""

import json
from typing import Any, Callable, Optional

import redis

from app.config import settings
from app.core.logging import get_logger

logger = get_logger("cache")

APPROVALS_TAG = "approvals"


class ReportCache:
    """JSON cache over Redis. A None client disables caching entirely."""

    def __init__(self, client: Optional[redis.Redis], ttl: int = 300):
        self.client = client
        self.ttl = ttl

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def _version(self, tag: str) -> int:
        raw = self.client.get(f"cache:ver:{tag}")
        return int(raw) if raw else 0

    def _key(self, tag: str, key: str) -> str:
        return f"cache:{tag}:v{self._version(tag)}:{key}"

    def get(self, tag: str, key: str) -> Optional[Any]:
        if not self.enabled:
            return None
        try:
            data = self.client.get(self._key(tag, key))
        except redis.RedisError as e:
            logger.warning(f"Cache read failed for {tag}:{key}: {e}")
            return None
        return json.loads(data) if data else None

    def set(self, tag: str, key: str, value: Any) -> None:
        if not self.enabled:
            return
        try:
            self.client.setex(self._key(tag, key), self.ttl, json.dumps(value))
        except redis.RedisError as e:
            logger.warning(f"Cache write failed for {tag}:{key}: {e}")

    def _pinned_key(self, tag: str, key: str) -> Optional[str]:
        try:
            return self._key(tag, key)
        except redis.RedisError as e:
            logger.warning(f"Cache unavailable for {tag}:{key}: {e}")
            return None

    def invalidate(self, tag: str) -> None:
        if not self.enabled:
            return
        try:
            version = self.client.incr(f"cache:ver:{tag}")
            logger.info(f"Cache tag '{tag}' invalidated (now v{version})")
        except redis.RedisError as e:
            logger.error(f"Cache invalidation failed for '{tag}': {e}")

    def get_or_compute(self, tag: str, key: str, compute: Callable[[], Any]) -> Any:
        """Return the cached value or compute and store it.

        The versioned key is fixed before computing, so a result computed
        across an invalidation is stored under the retired version.
        """
        if not self.enabled:
            return compute()
        full_key = self._pinned_key(tag, key)
        if full_key is None:
            return compute()
        try:
            data = self.client.get(full_key)
        except redis.RedisError as e:
            logger.warning(f"Cache read failed for {tag}:{key}: {e}")
            data = None
        if data:
            return json.loads(data)
        value = compute()
        try:
            self.client.setex(full_key, self.ttl, json.dumps(value))
        except redis.RedisError as e:
            logger.warning(f"Cache write failed for {tag}:{key}: {e}")
        return value


def _build_cache() -> ReportCache:
    if not settings.redis_url:
        logger.info("Cache disabled (no REDIS_URL)")
        return ReportCache(None)
    client = redis.from_url(settings.redis_url, decode_responses=True)
    logger.info("Redis cache configured")
    return ReportCache(client, ttl=settings.cache_ttl_seconds)


report_cache = _build_cache()


def get_cache() -> ReportCache:
    """Dependency — the process-wide report cache."""
    return report_cache
