"""
modules/feedback/feedback_service.py
-------------------------------------
Ratings for recommendation packs.

Two interchangeable stores, selected by config.FEEDBACK_BACKEND:

  memory    InMemoryFeedbackStore   demo only, lost on restart
  postgres  PostgresFeedbackStore   tables feedback / pack_stats

Client addresses are never stored in the clear: only a truncated SHA-256
digest is kept. A failure while updating pack statistics is logged and does
not fail the submission.
"""

from __future__ import annotations

import hashlib
import logging
import threading
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

import psycopg2

from db.connection import build_pool, get_conn
from db.repositories import feedback_repo

logger = logging.getLogger(__name__)

RECENT_LIMIT = 100
RECENT_ECHO = 10
IP_HASH_LENGTH = 16


# ── Records ───────────────────────────────────────────────────────────────────

@dataclass
class FeedbackEntry:
    pack_id: str
    rating: int
    feedback: Optional[str] = None
    user_agent: Optional[str] = None
    ip_hash: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id":        self.id,
            "packId":    self.pack_id,
            "rating":    self.rating,
            "feedback":  self.feedback,
            "timestamp": self.created_at.isoformat(),
            "userAgent": self.user_agent,
            "ipHash":    self.ip_hash,
        }


@dataclass
class PackStats:
    pack_id: str
    total_rating: int = 0
    count: int = 0

    @property
    def average_rating(self) -> float:
        return round(self.total_rating / self.count, 2) if self.count else 0.0

    def add(self, rating: int) -> None:
        self.total_rating += rating
        self.count += 1

    def to_dict(self) -> dict:
        return {
            "packId":        self.pack_id,
            "totalRating":   self.total_rating,
            "count":         self.count,
            "averageRating": self.average_rating,
        }


# ── Pure helpers ──────────────────────────────────────────────────────────────

def hash_ip(ip: Optional[str]) -> Optional[str]:
    if not ip:
        return None
    return hashlib.sha256(ip.encode("utf-8")).hexdigest()[:IP_HASH_LENGTH]


def calculate_feedback_stats(ratings: Iterable[int]) -> dict:
    """
    total, averageRating (2 dp), ratingDistribution, positiveRate
    (% of ratings ≥ 4, 2 dp). Zero / empty for no ratings.
    """
    ratings = list(ratings)
    if not ratings:
        return {"total": 0, "averageRating": 0, "ratingDistribution": {}, "positiveRate": 0}

    total = len(ratings)
    distribution = Counter(ratings)
    positive = sum(1 for r in ratings if r >= 4)
    return {
        "total":              total,
        "averageRating":      round(sum(ratings) / total, 2),
        "ratingDistribution": {str(k): distribution[k] for k in sorted(distribution)},
        "positiveRate":       round(positive / total * 100, 2),
    }


# ─────────────────────────────────────────────────────────────────────────────
# Stores
# ─────────────────────────────────────────────────────────────────────────────

class FeedbackStore(ABC):
    """Persistence for feedback entries and per-pack running stats."""

    @abstractmethod
    def add_feedback(self, entry: FeedbackEntry) -> FeedbackEntry:
        """Persist *entry*; returns it with ``id`` set."""

    @abstractmethod
    def recent_feedback(self, limit: int = RECENT_LIMIT) -> list[FeedbackEntry]:
        """Newest first."""

    @abstractmethod
    def feedback_for_pack(self, pack_id: str) -> list[FeedbackEntry]:
        """Newest first."""

    @abstractmethod
    def update_pack_stats(self, pack_id: str, rating: int) -> None: ...

    @abstractmethod
    def get_pack_stats(self, pack_id: str) -> Optional[PackStats]: ...


class InMemoryFeedbackStore(FeedbackStore):

    def __init__(self) -> None:
        self._entries: list[FeedbackEntry] = []
        self._stats: dict[str, PackStats] = {}
        self._lock = threading.Lock()
        self._next_id = 1

    def add_feedback(self, entry: FeedbackEntry) -> FeedbackEntry:
        with self._lock:
            entry.id = f"fb_{self._next_id}"
            self._next_id += 1
            self._entries.append(entry)
        return entry

    def recent_feedback(self, limit: int = RECENT_LIMIT) -> list[FeedbackEntry]:
        with self._lock:
            return list(reversed(self._entries))[:limit]

    def feedback_for_pack(self, pack_id: str) -> list[FeedbackEntry]:
        with self._lock:
            return [e for e in reversed(self._entries) if e.pack_id == pack_id]

    def update_pack_stats(self, pack_id: str, rating: int) -> None:
        with self._lock:
            self._stats.setdefault(pack_id, PackStats(pack_id)).add(rating)

    def get_pack_stats(self, pack_id: str) -> Optional[PackStats]:
        with self._lock:
            stats = self._stats.get(pack_id)
            if stats is None:
                return None
            return PackStats(stats.pack_id, stats.total_rating, stats.count)


class PostgresFeedbackStore(FeedbackStore):

    def __init__(self, pool) -> None:
        self._pool = pool

    def add_feedback(self, entry: FeedbackEntry) -> FeedbackEntry:
        with get_conn(self._pool) as conn:
            feedback_id = feedback_repo.insert_feedback(conn, {
                "pack_id":    entry.pack_id,
                "rating":     entry.rating,
                "feedback":   entry.feedback,
                "user_agent": entry.user_agent,
                "ip_hash":    entry.ip_hash,
                "created_at": entry.created_at,
            })
        entry.id = str(feedback_id)
        return entry

    def recent_feedback(self, limit: int = RECENT_LIMIT) -> list[FeedbackEntry]:
        with get_conn(self._pool) as conn:
            rows = feedback_repo.get_recent_feedback(conn, limit)
        return [self._to_entry(r) for r in rows]

    def feedback_for_pack(self, pack_id: str) -> list[FeedbackEntry]:
        with get_conn(self._pool) as conn:
            rows = feedback_repo.get_feedback_for_pack(conn, pack_id)
        return [self._to_entry(r) for r in rows]

    def update_pack_stats(self, pack_id: str, rating: int) -> None:
        with get_conn(self._pool) as conn:
            feedback_repo.upsert_pack_stats(conn, pack_id, rating)

    def get_pack_stats(self, pack_id: str) -> Optional[PackStats]:
        with get_conn(self._pool) as conn:
            row = feedback_repo.get_pack_stats(conn, pack_id)
        if row is None:
            return None
        return PackStats(row["pack_id"], int(row["total_rating"]), int(row["count"]))

    @staticmethod
    def _to_entry(row: dict[str, Any]) -> FeedbackEntry:
        return FeedbackEntry(
            id=str(row["feedback_id"]),
            pack_id=row["pack_id"],
            rating=int(row["rating"]),
            feedback=row.get("feedback"),
            user_agent=row.get("user_agent"),
            ip_hash=(row.get("ip_hash") or "").strip() or None,
            created_at=row["created_at"],
        )


# ─────────────────────────────────────────────────────────────────────────────
# FeedbackService
# ─────────────────────────────────────────────────────────────────────────────

class FeedbackService:

    def __init__(self, store: FeedbackStore) -> None:
        self.store = store

    def submit(
        self,
        pack_id: str,
        rating: int,
        feedback: Optional[str] = None,
        user_agent: Optional[str] = None,
        client_ip: Optional[str] = None,
    ) -> FeedbackEntry:
        entry = self.store.add_feedback(FeedbackEntry(
            pack_id=pack_id,
            rating=rating,
            feedback=feedback or None,
            user_agent=user_agent,
            ip_hash=hash_ip(client_ip),
        ))
        logger.info("Feedback received for %s: rating=%d, text=%s", pack_id, rating, bool(feedback))
        try:
            self.store.update_pack_stats(pack_id, rating)
        except (psycopg2.Error, RuntimeError) as exc:
            logger.error("Pack stats update failed for %s: %s", pack_id, exc)
        return entry

    def overall_stats(self) -> dict:
        entries = self.store.recent_feedback(RECENT_LIMIT)
        return {
            "stats":          calculate_feedback_stats(e.rating for e in entries),
            "recentFeedback": [e.to_dict() for e in entries[:RECENT_ECHO]],
        }

    def pack_feedback(self, pack_id: str) -> dict:
        entries = self.store.feedback_for_pack(pack_id)
        running = self.store.get_pack_stats(pack_id)
        return {
            "packId":    pack_id,
            "stats":     calculate_feedback_stats(e.rating for e in entries),
            "packStats": running.to_dict() if running else None,
            "feedbacks": [e.to_dict() for e in entries],
        }


def build_feedback_store(backend: str, pool=None) -> FeedbackStore:
    """Construct the store named by *backend* ("memory" | "postgres")."""
    backend = (backend or "memory").strip().lower()
    if backend == "postgres":
        return PostgresFeedbackStore(pool if pool is not None else build_pool())
    if backend != "memory":
        logger.warning("Unknown FEEDBACK_BACKEND %r, using in-memory store", backend)
    return InMemoryFeedbackStore()
