"""
db/cache.py
-----------
Read-through response cache for upstream API payloads.

Three interchangeable backends, selected by config.RESPONSE_CACHE_BACKEND:

  memory  InMemoryResponseCache  dict + per-entry expiry, guarded by a lock
  redis   RedisResponseCache     JSON strings written with SETEX
  none    NullResponseCache      every lookup misses

Values must be JSON-serialisable. A cache never raises into the caller:
Redis errors are logged and reported as a miss.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import redis

import config
from db.redis_client import build_redis, invalidate_prefix

logger = logging.getLogger(__name__)

MEMORY_CACHE_MAX_ENTRIES = 1024


def make_key(endpoint: str, params: dict[str, Any]) -> str:
    """
    Stable cache key for one upstream call.

    Credentials must be stripped from *params* by the caller; the key is a
    digest of the remaining parameters in sorted order.
    """
    canonical = json.dumps(params, sort_keys=True, default=str)
    digest = hashlib.sha1(canonical.encode("utf-8")).hexdigest()
    return f"{endpoint}:{digest}"


class ResponseCache(ABC):
    """key → JSON payload with a fixed time-to-live."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached payload, or None on miss/expiry."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int) -> None:
        """Store *value* for *ttl* seconds."""

    def get_or_fetch(self, key: str, ttl: int, fetch: Callable[[], Any]) -> Any:
        """
        Return the cached payload for *key*, calling *fetch* on a miss.

        Exceptions from *fetch* propagate and nothing is cached. Two
        concurrent misses on the same key may both call *fetch*.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug("cache hit %s", key)
            return cached
        value = fetch()
        self.set(key, value, ttl)
        return value


# ── In-memory ─────────────────────────────────────────────────────────────────

class InMemoryResponseCache(ResponseCache):
    """
    Process-local TTL cache. Expired entries are swept on every write, and
    past ``max_entries`` the oldest insertions are evicted first.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = MEMORY_CACHE_MAX_ENTRIES,
    ) -> None:
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._max_entries = max_entries

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any, ttl: int) -> None:
        if ttl <= 0:
            return
        with self._lock:
            now = self._clock()
            for stale in [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]:
                del self._entries[stale]
            self._entries.pop(key, None)
            while self._entries and len(self._entries) >= self._max_entries:
                del self._entries[next(iter(self._entries))]
            self._entries[key] = (now + ttl, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# ── Redis ─────────────────────────────────────────────────────────────────────

class RedisResponseCache(ResponseCache):

    def __init__(self, client: redis.Redis, prefix: str = config.REDIS_KEY_PREFIX) -> None:
        self._client = client
        self._prefix = prefix

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self._client.get(self._prefix + key)
        except redis.RedisError as exc:
            logger.warning("Redis get failed for %s, treating as miss: %s", key, exc)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    def set(self, key: str, value: Any, ttl: int) -> None:
        if ttl <= 0:
            return
        try:
            self._client.setex(self._prefix + key, ttl, json.dumps(value, default=str))
        except redis.RedisError as exc:
            logger.warning("Redis set failed for %s: %s", key, exc)

    def clear(self) -> int:
        """Drop every entry under this cache's prefix. Returns keys deleted."""
        try:
            return invalidate_prefix(self._client, self._prefix)
        except redis.RedisError as exc:
            logger.warning("Redis clear failed for %s*: %s", self._prefix, exc)
            return 0


# ── Disabled ──────────────────────────────────────────────────────────────────

class NullResponseCache(ResponseCache):

    def get(self, key: str) -> Optional[Any]:
        return None

    def set(self, key: str, value: Any, ttl: int) -> None:
        return None


def build_cache(backend: str = config.RESPONSE_CACHE_BACKEND) -> ResponseCache:
    """Construct the cache named by *backend* ("memory" | "redis" | "none")."""
    backend = (backend or "memory").strip().lower()
    if backend == "redis":
        return RedisResponseCache(build_redis())
    if backend == "none":
        return NullResponseCache()
    if backend != "memory":
        logger.warning("Unknown RESPONSE_CACHE_BACKEND %r, using in-memory cache", backend)
    return InMemoryResponseCache()
