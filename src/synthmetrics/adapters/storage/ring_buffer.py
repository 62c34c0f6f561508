"""Ring buffer storage adapter for event logs.

Provides bounded in-memory storage that automatically evicts oldest
entries when the buffer is full. Log records are never persisted; the
buffer only backs the ``/logs`` endpoint with the most recent events.
"""

import threading
from collections import deque
from collections.abc import Iterable

from synthmetrics.core.models import LogEntry


class RingBufferLogStorage:
    """Ring buffer implementation of LogStoragePort.

    Stores log entries in a fixed-size circular buffer. When the buffer
    is full, the oldest entry is automatically evicted to make room for
    new entries.

    Args:
        max_size: Maximum number of entries to store.
    """

    def __init__(self, max_size: int = 1000) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._buffer: deque[LogEntry] = deque(maxlen=max_size)
        self._lock = threading.Lock()

    @property
    def max_size(self) -> int:
        return self._buffer.maxlen or 0

    def write(self, entry: LogEntry) -> None:
        """Write a log entry to storage."""
        with self._lock:
            self._buffer.append(entry)

    def read(self, since: float = 0, level: str | None = None) -> Iterable[LogEntry]:
        """Read log entries since the given timestamp.

        Returns entries with timestamp > since, ordered by timestamp ascending.
        When ``level`` is given only entries of that level are returned.
        """
        wanted = level.upper() if level else None
        if wanted == "WARNING":
            wanted = "WARN"
        with self._lock:
            filtered = [
                e
                for e in self._buffer
                if e.timestamp > since and (wanted is None or e.level == wanted)
            ]
        return sorted(filtered, key=lambda e: e.timestamp)

    def count(self) -> int:
        with self._lock:
            return len(self._buffer)

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
