"""
db/repositories/feedback_repo.py
---------------------------------
SQL for the `feedback` and `pack_stats` tables (schema: db/schema.sql).

All functions accept a psycopg2 connection object.
Commit/rollback is managed by the caller via db.connection.get_conn().
"""

from __future__ import annotations

from typing import Any


def _rows_to_dicts(cur) -> list[dict[str, Any]]:
    cols = [d[0] for d in cur.description]
    return [dict(zip(cols, row)) for row in cur.fetchall()]


# ── feedback table ─────────────────────────────────────────────────────────────

def insert_feedback(conn, row: dict[str, Any]) -> int:
    """
    Insert one feedback row. Returns feedback_id.

    Required keys: pack_id, rating
    Optional keys: feedback, user_agent, ip_hash, created_at
    """
    data = {"feedback": None, "user_agent": None, "ip_hash": None, "created_at": None, **row}
    sql = """
        INSERT INTO feedback (pack_id, rating, feedback, user_agent, ip_hash, created_at)
        VALUES (
            %(pack_id)s, %(rating)s, %(feedback)s, %(user_agent)s, %(ip_hash)s,
            COALESCE(%(created_at)s, now())
        )
        RETURNING feedback_id
    """
    with conn.cursor() as cur:
        cur.execute(sql, data)
        return int(cur.fetchone()[0])


def get_recent_feedback(conn, limit: int = 100) -> list[dict[str, Any]]:
    """Newest first."""
    sql = """
        SELECT feedback_id, pack_id, rating, feedback, user_agent, ip_hash, created_at
        FROM feedback
        ORDER BY created_at DESC, feedback_id DESC
        LIMIT %s
    """
    with conn.cursor() as cur:
        cur.execute(sql, (limit,))
        return _rows_to_dicts(cur)


def get_feedback_for_pack(conn, pack_id: str) -> list[dict[str, Any]]:
    """All feedback for one pack, newest first."""
    sql = """
        SELECT feedback_id, pack_id, rating, feedback, user_agent, ip_hash, created_at
        FROM feedback
        WHERE pack_id = %s
        ORDER BY created_at DESC, feedback_id DESC
    """
    with conn.cursor() as cur:
        cur.execute(sql, (pack_id,))
        return _rows_to_dicts(cur)


# ── pack_stats table ───────────────────────────────────────────────────────────

def upsert_pack_stats(conn, pack_id: str, rating: int) -> None:
    """Add one rating to the running totals for *pack_id* (single statement)."""
    sql = """
        INSERT INTO pack_stats (pack_id, total_rating, count, average_rating)
        VALUES (%(pack_id)s, %(rating)s, 1, %(rating)s)
        ON CONFLICT (pack_id) DO UPDATE SET
            total_rating   = pack_stats.total_rating + EXCLUDED.total_rating,
            count          = pack_stats.count + 1,
            average_rating = ROUND(
                (pack_stats.total_rating + EXCLUDED.total_rating)::numeric
                / (pack_stats.count + 1), 2),
            last_updated   = now()
    """
    with conn.cursor() as cur:
        cur.execute(sql, {"pack_id": pack_id, "rating": rating})


def get_pack_stats(conn, pack_id: str) -> dict[str, Any] | None:
    sql = """
        SELECT pack_id, total_rating, count, average_rating, created_at, last_updated
        FROM pack_stats
        WHERE pack_id = %s
    """
    with conn.cursor() as cur:
        cur.execute(sql, (pack_id,))
        rows = _rows_to_dicts(cur)
        return rows[0] if rows else None
