"""
modules/observability/logger.py
--------------------------------
Per-request pipeline trace: one JSONL file per recommendation request.

    <REQUEST_LOG_DIR>/<request_id>.jsonl

Each line is {"ts", "requestId", "event", "elapsedMs", ...payload}. A trace
opens with "pipeline_start" (the search parameters) and closes with
"pipeline_end" (pack count, demo flags, total time).

Tracing is best effort. If the directory cannot be created or written, a
warning is logged once for that request and its remaining events are
dropped; the request itself carries on.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import config

logger = logging.getLogger(__name__)


class RequestEventLog:
    """Thread-safe JSONL trace writer keyed by request id."""

    def __init__(self, logs_dir: Path | str | None = None) -> None:
        self.logs_dir = Path(logs_dir or config.REQUEST_LOG_DIR)
        self._lock = threading.Lock()
        self._started: dict[str, float] = {}   # request_id -> monotonic start
        self._broken: set[str] = set()

    def begin(self, request_id: str, search_params: dict) -> None:
        with self._lock:
            self._started[request_id] = time.monotonic()
        self.record(request_id, "pipeline_start", **search_params)

    def record(self, request_id: str, event: str, **payload) -> None:
        started = self._started.get(request_id)
        elapsed = round((time.monotonic() - started) * 1000) if started is not None else None
        entry = {
            "ts":        datetime.now(timezone.utc).isoformat(),
            "requestId": request_id,
            "event":     event,
            "elapsedMs": elapsed,
            **payload,
        }
        self._append(request_id, json.dumps(entry, default=str, ensure_ascii=False))

    def end(self, request_id: str, **summary) -> None:
        self.record(request_id, "pipeline_end", **summary)
        with self._lock:
            self._started.pop(request_id, None)
            self._broken.discard(request_id)

    def path_for(self, request_id: str) -> Path:
        return self.logs_dir / f"{request_id}.jsonl"

    def _append(self, request_id: str, line: str) -> None:
        with self._lock:
            if request_id in self._broken:
                return
            try:
                self.logs_dir.mkdir(parents=True, exist_ok=True)
                with open(self.path_for(request_id), "a", encoding="utf-8") as fh:
                    fh.write(line + "\n")
            except OSError as exc:
                self._broken.add(request_id)
                logger.warning("Request trace disabled for %s: %s", request_id, exc)


def build_event_log(enabled: Optional[bool] = None) -> Optional[RequestEventLog]:
    """RequestEventLog when REQUEST_LOG_ENABLED (or *enabled*), else None."""
    enabled = config.REQUEST_LOG_ENABLED if enabled is None else enabled
    return RequestEventLog() if enabled else None
