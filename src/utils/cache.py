"""Redis cache for dashboard aggregates.

Dashboard endpoints recompute scores across every site, so their results
are cached for a few minutes and dropped whenever a write could change
them. Redis is optional: while it is unreachable every operation is a
no-op and callers read straight from the database.
"""

import hashlib
import json
from collections.abc import Awaitable, Callable
from datetime import timedelta
from functools import wraps
from typing import Any, TypeVar

import redis.asyncio as redis

from src.config import get_settings
from src.constants import CACHE_TTL_DASHBOARD
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

F = TypeVar("F", bound=Callable[..., Any])
T = TypeVar("T")

DEFAULT_TTL = timedelta(seconds=CACHE_TTL_DASHBOARD)
DASHBOARD_NAMESPACE = "dashboard"
MAX_KEY_LENGTH = 200


class DashboardCache:
    """JSON values in Redis, degrading to a no-op without a connection."""

    def __init__(self, url: str) -> None:
        self.url = url
        self._client: redis.Redis | None = None
        self.connected = False

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            self._client = redis.from_url(self.url, encoding="utf-8", decode_responses=True)
        return self._client

    async def connect(self) -> bool:
        try:
            await self.client.ping()
            self.connected = True
        except Exception as e:
            logger.warning(f"Redis unreachable at startup: {e}")
            self.connected = False
        return self.connected

    async def ping(self) -> bool:
        """Raises when Redis is unreachable; used by the health check."""
        return await self.client.ping()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self.connected = False

    async def _guarded(self, op: str, key: str, call: Callable[[], Awaitable[T]], default: T) -> T:
        if not self.connected:
            return default
        try:
            return await call()
        except Exception as e:
            logger.debug(f"Cache {op} failed for {key}: {e}")
            return default

    async def get(self, key: str) -> Any | None:
        """Cached value, or None when missing, expired or unavailable."""

        async def _get() -> Any | None:
            raw = await self.client.get(key)
            return json.loads(raw) if raw else None

        return await self._guarded("get", key, _get, None)

    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> bool:
        seconds = int((ttl or DEFAULT_TTL).total_seconds())

        async def _set() -> bool:
            await self.client.setex(key, seconds, json.dumps(value, default=str))
            return True

        return await self._guarded("set", key, _set, False)

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching a glob pattern; returns how many went."""

        async def _delete() -> int:
            keys = [key async for key in self.client.scan_iter(match=pattern)]
            return await self.client.delete(*keys) if keys else 0

        return await self._guarded("delete", pattern, _delete, 0)


cache = DashboardCache(str(settings.redis_url))


def make_cache_key(namespace: str, *args: Any, **kwargs: Any) -> str:
    """Build "namespace:arg:key=value" from call arguments, skipping Nones.

    Keys longer than MAX_KEY_LENGTH are replaced by a digest.
    """
    parts = [namespace]
    parts.extend(str(arg) for arg in args if arg is not None)
    parts.extend(f"{k}={v}" for k, v in sorted(kwargs.items()) if v is not None)
    key = ":".join(parts)

    if len(key) > MAX_KEY_LENGTH:
        key = f"{namespace}:{hashlib.md5(key.encode()).hexdigest()[:12]}"
    return key


def cached(namespace: str, ttl: timedelta | None = None) -> Callable[[F], F]:
    """Cache an async function's JSON-serializable result.

    The first positional argument is the database session and is left out
    of the key.

        @cached("dashboard:trend")
        async def maturity_trend(db, site_id=None, period="6m"):
            ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            key = make_cache_key(namespace, *args[1:], **kwargs)

            hit = await cache.get(key)
            if hit is not None:
                return hit

            result = await func(*args, **kwargs)
            if result is not None:
                await cache.set(key, result, ttl)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


async def invalidate_dashboard_cache() -> None:
    """Drop every cached dashboard aggregate after a write that feeds them."""
    deleted = await cache.delete_pattern(f"{DASHBOARD_NAMESPACE}:*")
    if deleted:
        logger.info(f"Invalidated {deleted} dashboard cache entries")
