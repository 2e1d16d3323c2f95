"""
db/connection.py
-----------------
psycopg2 ThreadedConnectionPool factory for the feedback store.

Usage:
    from db.connection import build_pool, get_conn

    pool = build_pool()
    with get_conn(pool) as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")

The context manager borrows a connection from the pool, commits on clean
exit, rolls back on exception, and returns the connection to the pool.
The pool is built once by main.build_container() and injected.

Environment variables (set in config.py):
    POSTGRES_HOST       default: localhost
    POSTGRES_PORT       default: 5432
    POSTGRES_DB         default: famtrip
    POSTGRES_USER       default: famtrip_user
    POSTGRES_PASSWORD   default: famtrip_pass
    POSTGRES_MIN_CONN   default: 1
    POSTGRES_MAX_CONN   default: 10
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

import psycopg2
import psycopg2.pool

import config


def build_pool() -> psycopg2.pool.ThreadedConnectionPool:
    """Create and return a new ThreadedConnectionPool from config values."""
    return psycopg2.pool.ThreadedConnectionPool(
        minconn=config.POSTGRES_MIN_CONN,
        maxconn=config.POSTGRES_MAX_CONN,
        host=config.POSTGRES_HOST,
        port=config.POSTGRES_PORT,
        dbname=config.POSTGRES_DB,
        user=config.POSTGRES_USER,
        password=config.POSTGRES_PASSWORD,
    )


@contextmanager
def get_conn(pool: psycopg2.pool.ThreadedConnectionPool) -> Generator:
    """
    Context manager: borrow a psycopg2 connection from *pool*.

    On success: commits and returns the connection.
    On exception: rolls back and re-raises.
    Always: returns the connection to the pool.
    """
    conn = pool.getconn()
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        pool.putconn(conn)


def close_pool(pool: psycopg2.pool.ThreadedConnectionPool | None) -> None:
    """Close all connections in the pool (call at application shutdown)."""
    if pool is not None and not pool.closed:
        pool.closeall()
