"""TTL cache backends for read-mostly reference data (in-memory and Redis).

Nothing in here may be consulted for permission or status decisions.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Any, Protocol

from app.core.config import Settings, get_settings


class CacheBackend(Protocol):
    """Protocol for cache providers (Redis, memory, etc.)."""

    async def get(self, key: str) -> str | None:
        """Get cached value by key."""

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Set cached value with TTL."""

    async def delete(self, key: str) -> None:
        """Delete cached value by key."""

    async def clear(self) -> None:
        """Drop every cached value (used in tests)."""


class InMemoryTTLCache:
    """Per-process cache with absolute expiry per key."""

    def __init__(self, now_provider: Callable[[], float] | None = None) -> None:
        self._entries: dict[str, tuple[float, str]] = {}
        self._lock = asyncio.Lock()
        self._now = now_provider or time.monotonic

    async def get(self, key: str) -> str | None:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._now():
                del self._entries[key]
                return None
            return value

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        async with self._lock:
            self._entries[key] = (self._now() + ttl_seconds, value)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()


class RedisTTLCache:
    """Redis-backed cache shared across app instances."""

    def __init__(self, *, redis_url: str, namespace: str) -> None:
        self._redis_url = redis_url
        self._namespace = namespace
        self._init_lock = asyncio.Lock()
        self._client: Any | None = None

    def _build_storage_key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    async def _ensure_initialized(self) -> None:
        if self._client is not None:
            return

        async with self._init_lock:
            if self._client is None:
                from redis.asyncio import from_url

                self._client = from_url(
                    self._redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )

    async def get(self, key: str) -> str | None:
        await self._ensure_initialized()
        return await self._client.get(self._build_storage_key(key))

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._ensure_initialized()
        await self._client.set(self._build_storage_key(key), value, ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        await self._ensure_initialized()
        await self._client.delete(self._build_storage_key(key))

    async def clear(self) -> None:
        """Delete cache keys for this namespace."""
        await self._ensure_initialized()
        pattern = f"{self._namespace}:*"
        cursor: int = 0
        while True:
            cursor, keys = await self._client.scan(cursor=cursor, match=pattern, count=100)
            if keys:
                await self._client.delete(*keys)
            if int(cursor) == 0:
                break


_territory_cache: CacheBackend | None = None
_territory_cache_signature: tuple[str, str | None, str] | None = None


def _build_territory_cache(settings: Settings) -> CacheBackend:
    if settings.territory_cache_backend == "redis":
        return RedisTTLCache(
            redis_url=settings.redis_url or "",
            namespace=settings.territory_cache_redis_namespace,
        )
    return InMemoryTTLCache()


def get_territory_cache() -> CacheBackend:
    """Return shared territory metadata cache for configured backend."""
    global _territory_cache, _territory_cache_signature
    settings = get_settings()
    signature = (
        settings.territory_cache_backend,
        settings.redis_url,
        settings.territory_cache_redis_namespace,
    )
    if _territory_cache is None or _territory_cache_signature != signature:
        _territory_cache = _build_territory_cache(settings)
        _territory_cache_signature = signature
    return _territory_cache
