"""synthmetrics - synthetic e-commerce telemetry generator.

Serves Prometheus metrics and NDJSON event logs for a simulated shop and
generates bursts of randomized business events on demand.
"""

from synthmetrics.adapters.storage.ring_buffer import RingBufferLogStorage
from synthmetrics.core.exceptions import (
    DuplicateMetricError,
    InvalidRequestError,
    LabelArityError,
    MetricKindError,
    MetricRegistryError,
    SynthMetricsError,
    UnknownMetricError,
    UnknownScenarioError,
)
from synthmetrics.core.logs import EventLogEmitter
from synthmetrics.core.metrics import create_registry, declare_metrics
from synthmetrics.core.models import LogEntry, MetricKind, ScenarioResult
from synthmetrics.core.registry import MetricRegistry
from synthmetrics.core.scenarios import ScenarioEngine
from synthmetrics.core.snapshot import AggregateSnapshot

__all__ = [
    "AggregateSnapshot",
    "DuplicateMetricError",
    "EventLogEmitter",
    "InvalidRequestError",
    "LabelArityError",
    "LogEntry",
    "MetricKind",
    "MetricKindError",
    "MetricRegistry",
    "MetricRegistryError",
    "RingBufferLogStorage",
    "ScenarioEngine",
    "ScenarioResult",
    "SynthMetricsError",
    "UnknownMetricError",
    "UnknownScenarioError",
    "create_registry",
    "declare_metrics",
]
