"""Port interfaces for pluggable collaborators.

The core depends only on these protocols. ``random.Random`` satisfies
``RandomSource``; tests supply scripted implementations to force failure
branches deterministically.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar, runtime_checkable

from synthmetrics.core.models import LogEntry

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """Source of randomness for event generation and samplers."""

    def random(self) -> float:
        """Return a float in [0.0, 1.0)."""
        ...

    def uniform(self, a: float, b: float) -> float:
        """Return a float between a and b."""
        ...

    def randint(self, a: int, b: int) -> int:
        """Return an int in [a, b] (both inclusive)."""
        ...

    def randrange(self, start: int, stop: int) -> int:
        """Return an int in [start, stop)."""
        ...

    def choice(self, seq: Sequence[T]) -> T:
        """Return a uniformly chosen element of a non-empty sequence."""
        ...


@runtime_checkable
class LogStoragePort(Protocol):
    """Port for log storage operations.

    Adapters implementing this protocol can store and retrieve log entries.
    Examples: RingBufferLogStorage.
    """

    def write(self, entry: LogEntry) -> None:
        """Write a log entry to storage."""
        ...

    def read(self, since: float = 0, level: str | None = None) -> Iterable[LogEntry]:
        """Read log entries since the given timestamp.

        Args:
            since: Unix timestamp. Returns entries with timestamp > since.
                   Default 0 returns all entries.
            level: Optional level filter (case-insensitive).

        Returns:
            Iterable of LogEntry objects, ordered by timestamp ascending.
        """
        ...
