"""Test doubles shared across test modules."""

from collections.abc import Sequence
from typing import TypeVar

from synthmetrics.core.models import LogEntry
from synthmetrics.core.registry import MetricRegistry

T = TypeVar("T")


class ScriptedRandom:
    """Deterministic RandomSource.

    ``random()`` always returns ``value``; ``choice`` returns the item at
    ``pick`` (wrapped around the sequence length); ranges return their
    lower bound shifted by ``value``.
    """

    def __init__(self, value: float = 0.5, pick: int = 0) -> None:
        self.value = value
        self.pick = pick

    def random(self) -> float:
        return self.value

    def uniform(self, a: float, b: float) -> float:
        return a + (b - a) * self.value

    def randint(self, a: int, b: int) -> int:
        return a

    def randrange(self, start: int, stop: int) -> int:
        return start

    def choice(self, seq: Sequence[T]) -> T:
        return seq[self.pick % len(seq)]


class FailingStorage:
    """LogStoragePort whose writes always raise."""

    def write(self, entry: LogEntry) -> None:
        raise OSError("disk full")

    def read(self, since: float = 0, level: str | None = None) -> list[LogEntry]:
        return []


def series_total(registry: MetricRegistry, name: str, **labels: str) -> float:
    """Sum all series of ``name`` whose labels match the given subset."""
    total = 0.0
    for family in registry.families():
        if family.name != name:
            continue
        for values, value in family.series:
            label_map = dict(zip(family.label_names, values))
            if all(label_map.get(k) == v for k, v in labels.items()):
                total += value  # type: ignore[operator]
    return total


def parse_exposition(text: str) -> dict[str, float]:
    """Map each sample line of a Prometheus exposition to its value."""
    samples: dict[str, float] = {}
    for line in text.splitlines():
        if not line or line.startswith("#"):
            continue
        series, _, value = line.rpartition(" ")
        samples[series] = float(value)
    return samples
