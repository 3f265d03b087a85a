"""Recent log entries for /api/logs, tagged with the feed source they belong to."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

import structlog

DEFAULT_CAPACITY = 1000


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: str
    logger: str
    message: str
    feed_source: str  # "real", "synthetic", or "" before any source was installed


class RingBufferHandler(logging.Handler):
    """Keeps the newest records in memory.

    The feed source is read from the structlog context of the emitting task,
    so entries can be filtered per source after a fallback or reload.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        super().__init__()
        self._entries: deque[LogEntry] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    def resize(self, capacity: int) -> None:
        """Change the capacity, keeping the newest entries that still fit."""
        with self._lock:
            self._entries = deque(self._entries, maxlen=capacity)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            source = structlog.contextvars.get_contextvars().get("feed_source", "")
            entry = LogEntry(
                timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                level=record.levelname,
                logger=record.name,
                message=self.format(record),
                feed_source=str(source),
            )
        except Exception:
            self.handleError(record)
            return
        with self._lock:
            self._entries.append(entry)

    def get_records(
        self,
        limit: int = 200,
        level: str | None = None,
        source: str | None = None,
    ) -> list[dict]:
        """Newest first, filtered by level name and feed source when given."""
        with self._lock:
            entries = list(self._entries)
        if level:
            entries = [e for e in entries if e.level == level.upper()]
        if source:
            entries = [e for e in entries if e.feed_source == source]
        return [asdict(e) for e in reversed(entries[-limit:])] if limit > 0 else []

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


log_buffer = RingBufferHandler()
log_buffer.setFormatter(logging.Formatter("%(message)s"))
