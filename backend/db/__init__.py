"""
db/
----
Storage layer for the family trip recommendation backend.

Storage architecture:
  PostgreSQL (psycopg2): feedback store (FEEDBACK_BACKEND=postgres)
    tables: feedback, pack_stats
    schema: db/schema.sql
    apply:  python scripts/run_migrations.py

  Redis (redis-py): response cache (RESPONSE_CACHE_BACKEND=redis)
    famtrip:cache:{endpoint}:{digest}   TTL = CACHE_TTL_* per endpoint

Public exports (import from here for convenience):
    from db import build_cache, build_pool, get_conn
    from db.repositories import feedback_repo
"""

from db.cache import (
    InMemoryResponseCache, NullResponseCache, RedisResponseCache, ResponseCache, build_cache,
)
from db.connection import build_pool, close_pool, get_conn

__all__ = [
    "ResponseCache",
    "InMemoryResponseCache",
    "RedisResponseCache",
    "NullResponseCache",
    "build_cache",
    "build_pool",
    "close_pool",
    "get_conn",
]
