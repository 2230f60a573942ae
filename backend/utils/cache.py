"""
Short-lived read-through cache for query results and derived lookups.

Both backends share one contract: `put` only stores when the key is absent
(first writer wins inside the TTL window), entries expire after their TTL,
and there is no capacity bound. Callers may race between `contains`/`get`
and `put`; the worst outcome is a redundant recomputation.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Callable
from typing import Any, Protocol

from redis import Redis

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300


class Cache(Protocol):
    def get(self, key: str) -> Any | None: ...

    def put(self, key: str, value: Any, ttl: int | None = None) -> bool: ...

    def contains(self, key: str) -> bool: ...


class MemoryCache:
    """Process-local cache guarded by a single lock."""

    def __init__(
        self,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def _live_entry(self, key: str) -> tuple[Any, float] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry[1] <= self._clock():
            del self._entries[key]
            return None
        return entry

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._live_entry(key)
            return entry[0] if entry else None

    def put(self, key: str, value: Any, ttl: int | None = None) -> bool:
        if value is None:
            return False
        expires_at = self._clock() + (ttl if ttl is not None else self._default_ttl)
        with self._lock:
            if self._live_entry(key) is not None:
                return False
            self._entries[key] = (value, expires_at)
            return True

    def contains(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for _, expires_at in self._entries.values() if expires_at > now)


class RedisCache:
    """Shared cache for multi-process deployments; values are stored as JSON."""

    def __init__(
        self,
        client: Redis,
        default_ttl: int = DEFAULT_TTL_SECONDS,
        prefix: str = "tree-cache:",
    ):
        self._client = client
        self._default_ttl = default_ttl
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Any | None:
        data = self._client.get(self._key(key))
        if data is None:
            return None
        return json.loads(data)

    def put(self, key: str, value: Any, ttl: int | None = None) -> bool:
        if value is None:
            return False
        stored = self._client.set(
            self._key(key),
            json.dumps(value),
            nx=True,
            ex=ttl if ttl is not None else self._default_ttl,
        )
        return bool(stored)

    def contains(self, key: str) -> bool:
        return bool(self._client.exists(self._key(key)))


def build_cache(backend: str, default_ttl: int, redis_client: Redis | None = None) -> Cache:
    if backend == "redis":
        if redis_client is None:
            raise ValueError("Redis cache backend requires a redis client")
        logger.info("cache_backend_selected backend=redis ttl=%s", default_ttl)
        return RedisCache(redis_client, default_ttl=default_ttl)
    logger.info("cache_backend_selected backend=memory ttl=%s", default_ttl)
    return MemoryCache(default_ttl=default_ttl)
