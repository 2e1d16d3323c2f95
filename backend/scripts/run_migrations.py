#!/usr/bin/env python
"""
scripts/run_migrations.py
--------------------------
Applies db/schema.sql (feedback + pack_stats tables) to the configured
Postgres database.

Usage:
    python scripts/run_migrations.py [--dry-run] [--reset]

Exit codes:
    0: schema applied successfully (or dry-run completed)
    1: connection failed or SQL error

Environment variables (all have defaults, override as needed):
    POSTGRES_HOST, POSTGRES_PORT, POSTGRES_DB, POSTGRES_USER, POSTGRES_PASSWORD
    (same vars used by db/connection.py)

Notes:
    - All statements run in one transaction via db.connection.get_conn().
    - Re-running is idempotent: every statement uses IF NOT EXISTS.
    - --reset drops both tables first. Stored feedback is lost.
"""

from __future__ import annotations

import argparse
import pathlib
import re
import sys

# Add the backend directory to sys.path so that config is importable
_BACKEND_DIR = pathlib.Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_BACKEND_DIR))

import psycopg2

import config
from db.connection import build_pool, close_pool, get_conn

_SQL_FILE = _BACKEND_DIR / "db" / "schema.sql"
_RESET_STATEMENTS = ["DROP TABLE IF EXISTS pack_stats", "DROP TABLE IF EXISTS feedback"]


def _read_sql() -> str:
    if not _SQL_FILE.exists():
        raise FileNotFoundError(f"SQL file not found: {_SQL_FILE}")
    return _SQL_FILE.read_text(encoding="utf-8")


def split_statements(sql: str) -> list[str]:
    """Drop /* */ and -- comments, split on semicolons, skip blanks."""
    sql = re.sub(r"/\*.*?\*/", "", sql, flags=re.DOTALL)
    sql = re.sub(r"--[^\n]*", "", sql)
    return [s.strip() for s in sql.split(";") if s.strip()]


def run(dry_run: bool = False, reset: bool = False) -> None:
    statements = split_statements(_read_sql())
    if reset:
        statements = _RESET_STATEMENTS + statements

    print(f"[migrations] SQL file   : {_SQL_FILE}")
    print(f"[migrations] Statements : {len(statements)}")
    print(f"[migrations] Target DB  : {config.POSTGRES_DB} @ "
          f"{config.POSTGRES_HOST}:{config.POSTGRES_PORT}")

    if dry_run:
        print("[migrations] DRY-RUN: no changes applied.")
        for i, stmt in enumerate(statements, 1):
            print(f"  [{i:03d}] {' '.join(stmt.split())[:80]}")
        return

    pool = build_pool()
    try:
        with get_conn(pool) as conn:
            with conn.cursor() as cur:
                for i, stmt in enumerate(statements, 1):
                    try:
                        cur.execute(stmt)
                    except psycopg2.Error as exc:
                        print(f"  [✗] Statement {i} failed: {exc.pgerror or exc}")
                        print("[migrations] ROLLED BACK due to error.")
                        raise
                    print(f"  [✓] {' '.join(stmt.split())[:60]}")
        print(f"[migrations] Done: {len(statements)} statements applied.")
    finally:
        close_pool(pool)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Apply the feedback store schema.")
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Print statements without executing them.",
    )
    parser.add_argument(
        "--reset", action="store_true",
        help="Drop the feedback tables before applying the schema.",
    )
    args = parser.parse_args()
    try:
        run(dry_run=args.dry_run, reset=args.reset)
    except Exception as exc:
        print(f"[migrations] ERROR: {exc}", file=sys.stderr)
        sys.exit(1)
