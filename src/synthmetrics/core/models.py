"""Core domain models for synthetic telemetry."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MetricKind(str, Enum):
    """Kinds of metric families the registry understands."""

    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"


@dataclass(frozen=True)
class LogEntry:
    """A structured log entry.

    Attributes:
        timestamp: Unix timestamp in seconds.
        level: Log level (INFO, WARN, ERROR).
        message: The log message.
        attributes: Additional structured fields (service, correlation ids).
    """

    timestamp: float
    level: str
    message: str
    attributes: dict[str, str | int | float | bool] = field(default_factory=dict)


@dataclass(frozen=True)
class Product:
    """A catalog product used as a label source for generated events."""

    id: str
    name: str
    category: str
    price: float
    stock: int


@dataclass(frozen=True)
class User:
    """A catalog user used as a label source for generated events."""

    id: str
    name: str
    email: str
    tier: str


@dataclass(frozen=True)
class SystemFault:
    """A canned infrastructure failure picked by the system-errors scenario."""

    service: str
    error_type: str
    message: str


@dataclass(frozen=True)
class ScenarioResult:
    """Outcome of a scenario invocation.

    Attributes:
        scenario: Name of the scenario that ran.
        count: Requested number of trials (seconds for high-traffic).
        message: Human-readable summary.
        metrics: Aggregate snapshot taken right after the last trial.
    """

    scenario: str
    count: int | float
    message: str
    metrics: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "count": self.count, "metrics": self.metrics}
