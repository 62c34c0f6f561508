"""Aggregate snapshot: simple JSON view of the business counters."""

import threading
from typing import Any

# Snapshot field names, in the order they are reported
FIELDS = (
    "requestCount",
    "errorCount",
    "userRegistrations",
    "userLogins",
    "productViews",
    "cartOperations",
    "checkouts",
    "totalRevenue",
    "inventoryUpdates",
    "shipments",
    "supportTickets",
)


class AggregateSnapshot:
    """Thread-safe mapping of human-readable counters.

    Mirrors a subset of the metric registry for quick JSON inspection.
    Values only ever grow during the process lifetime.
    """

    def __init__(self) -> None:
        self._values: dict[str, int | float] = {name: 0 for name in FIELDS}
        self._lock = threading.Lock()

    def increment(self, field: str, delta: int | float = 1) -> None:
        """Add ``delta`` to a field.

        Raises:
            KeyError: If ``field`` is not a snapshot field.
            ValueError: If ``delta`` is negative or NaN.
        """
        if not delta >= 0:
            raise ValueError(f"Snapshot field {field!r} cannot be decremented by {delta!r}")
        with self._lock:
            if field not in self._values:
                raise KeyError(field)
            value = self._values[field] + delta
            if isinstance(value, float):
                value = round(value, 2)
            self._values[field] = value

    def get(self, field: str) -> int | float:
        with self._lock:
            return self._values[field]

    def to_dict(self) -> dict[str, Any]:
        """Return a copy of all fields."""
        with self._lock:
            return dict(self._values)
