"""
db/redis_client.py
-------------------
redis-py client factory for the response cache.

Key schema:

  famtrip:cache:{endpoint}:{sha1(params)}
       Type : String (JSON-encoded upstream payload)
       TTL  : per endpoint, CACHE_TTL_* in config.py

Environment variables (set in config.py):
    REDIS_HOST        default: localhost
    REDIS_PORT        default: 6379
    REDIS_DB          default: 0
    REDIS_PASSWORD    default: ""  (empty = no auth)
    REDIS_KEY_PREFIX  default: famtrip:cache:
"""

from __future__ import annotations

from typing import Any

import redis

import config


def build_redis() -> redis.Redis:
    """Create a Redis client from config values. No connection is opened yet."""
    kwargs: dict[str, Any] = {
        "host":             config.REDIS_HOST,
        "port":             config.REDIS_PORT,
        "db":               config.REDIS_DB,
        "decode_responses": True,   # return str, not bytes
        "socket_timeout":   2,
    }
    if config.REDIS_PASSWORD:
        kwargs["password"] = config.REDIS_PASSWORD
    return redis.Redis(**kwargs)


def invalidate_prefix(client: redis.Redis, prefix: str = config.REDIS_KEY_PREFIX) -> int:
    """
    Delete every cache key under *prefix*.

    Returns: number of keys deleted.
    """
    keys = list(client.scan_iter(f"{prefix}*"))
    if keys:
        return client.delete(*keys)
    return 0
