"""Thread-safe in-memory metric registry.

Families are declared once with a fixed tuple of label names and then
mutated through ``increment``/``set``/``observe``. Each distinct tuple of
label values is its own series. Request handlers and background samplers
share one registry, so every operation runs under a single lock.
"""

import math
import re
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from synthmetrics.core.encoding.prometheus import encode_families
from synthmetrics.core.exceptions import (
    DuplicateMetricError,
    LabelArityError,
    MetricKindError,
    UnknownMetricError,
)
from synthmetrics.core.models import MetricKind

DEFAULT_HISTOGRAM_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10)

_METRIC_NAME_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
_LABEL_NAME_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

LabelValues = tuple[str, ...]


@dataclass(frozen=True)
class HistogramValue:
    """Point-in-time state of one histogram series.

    Attributes:
        bucket_counts: Cumulative counts, one per bucket boundary.
        sum: Sum of all observed values.
        count: Number of observations (the implicit +Inf bucket).
    """

    bucket_counts: tuple[int, ...]
    sum: float
    count: int


@dataclass(frozen=True)
class FamilySnapshot:
    """Immutable copy of a metric family and all of its series."""

    name: str
    kind: MetricKind
    help: str
    label_names: tuple[str, ...]
    buckets: tuple[float, ...]
    series: tuple[tuple[LabelValues, float | HistogramValue], ...]


@dataclass
class _Histogram:
    buckets: list[int]
    sum: float = 0.0
    count: int = 0


@dataclass
class _Family:
    name: str
    kind: MetricKind
    help: str
    label_names: tuple[str, ...]
    buckets: tuple[float, ...] = ()
    series: dict[LabelValues, float | _Histogram] = field(default_factory=dict)


def _validate_buckets(buckets: Iterable[float]) -> tuple[float, ...]:
    bounds = tuple(float(b) for b in buckets)
    if not bounds:
        raise ValueError("Histogram requires at least one bucket boundary")
    if any(math.isnan(b) for b in bounds):
        raise ValueError("Histogram bucket boundaries must not be NaN")
    if any(b >= nxt for b, nxt in zip(bounds, bounds[1:])):
        raise ValueError("Histogram bucket boundaries must be strictly increasing")
    # +Inf is always implicit
    if math.isinf(bounds[-1]) and bounds[-1] > 0:
        bounds = bounds[:-1]
    return bounds


class MetricRegistry:
    """Registry of counters, gauges and histograms.

    Example:
        ```python
        registry = MetricRegistry()
        registry.register("orders_total", MetricKind.COUNTER, ["status"], "Orders")
        registry.increment("orders_total", ["paid"])
        print(registry.render())
        ```
    """

    def __init__(self) -> None:
        self._families: dict[str, _Family] = {}
        self._lock = threading.Lock()

    def register(
        self,
        name: str,
        kind: MetricKind | str,
        label_names: Sequence[str] = (),
        help: str = "",
        buckets: Iterable[float] | None = None,
    ) -> None:
        """Declare a metric family.

        Args:
            name: Metric name (e.g., "ecommerce_orders_total").
            kind: Counter, gauge or histogram.
            label_names: Names of the label dimensions, fixed for the family.
            help: Help text rendered in the exposition.
            buckets: Histogram bucket boundaries (default: Prometheus standard
                buckets). Ignored for other kinds.

        Raises:
            DuplicateMetricError: If the name is already registered.
            ValueError: If the metric name, a label name or the buckets are invalid.
        """
        kind = MetricKind(kind)
        if not _METRIC_NAME_RE.match(name):
            raise ValueError(f"Invalid metric name: {name!r}")
        labels = tuple(label_names)
        for label in labels:
            if not _LABEL_NAME_RE.match(label) or label.startswith("__"):
                raise ValueError(f"Invalid label name {label!r} for metric {name!r}")
        if len(set(labels)) != len(labels):
            raise ValueError(f"Duplicate label names for metric {name!r}")
        bounds: tuple[float, ...] = ()
        if kind is MetricKind.HISTOGRAM:
            if "le" in labels:
                raise ValueError("Histogram label names must not include 'le'")
            bounds = _validate_buckets(
                DEFAULT_HISTOGRAM_BUCKETS if buckets is None else buckets
            )

        with self._lock:
            if name in self._families:
                raise DuplicateMetricError(name)
            self._families[name] = _Family(
                name=name, kind=kind, help=help, label_names=labels, buckets=bounds
            )

    def increment(
        self, name: str, label_values: Sequence[str] = (), delta: float = 1.0
    ) -> None:
        """Add ``delta`` to a counter series (or a gauge series).

        Raises:
            UnknownMetricError: If the metric is not registered.
            LabelArityError: If the label value count does not match.
            MetricKindError: If the metric is a histogram.
            ValueError: If a counter would be decremented or ``delta`` is NaN.
        """
        with self._lock:
            family, key = self._resolve(name, label_values)
            if family.kind is MetricKind.HISTOGRAM:
                raise MetricKindError(name, family.kind.value, "increment")
            if family.kind is MetricKind.COUNTER and not delta >= 0:
                raise ValueError(f"Counter {name!r} cannot be decremented by {delta!r}")
            current = family.series.get(key, 0.0)
            family.series[key] = float(current) + float(delta)  # type: ignore[arg-type]

    def set(self, name: str, label_values: Sequence[str], value: float) -> None:
        """Set a gauge series to ``value``.

        Raises:
            UnknownMetricError: If the metric is not registered.
            LabelArityError: If the label value count does not match.
            MetricKindError: If the metric is not a gauge.
        """
        with self._lock:
            family, key = self._resolve(name, label_values)
            if family.kind is not MetricKind.GAUGE:
                raise MetricKindError(name, family.kind.value, "set")
            family.series[key] = float(value)

    def observe(self, name: str, label_values: Sequence[str], value: float) -> None:
        """Record one observation in a histogram series.

        Raises:
            UnknownMetricError: If the metric is not registered.
            LabelArityError: If the label value count does not match.
            MetricKindError: If the metric is not a histogram.
            ValueError: If ``value`` is NaN.
        """
        if math.isnan(value):
            raise ValueError(f"Histogram {name!r} cannot observe NaN")
        with self._lock:
            family, key = self._resolve(name, label_values)
            if family.kind is not MetricKind.HISTOGRAM:
                raise MetricKindError(name, family.kind.value, "observe")
            hist = family.series.get(key)
            if hist is None:
                hist = _Histogram(buckets=[0] * len(family.buckets))
                family.series[key] = hist
            assert isinstance(hist, _Histogram)
            for i, bound in enumerate(family.buckets):
                if value <= bound:
                    hist.buckets[i] += 1
                    break
            hist.sum += value
            hist.count += 1

    def get(self, name: str, label_values: Sequence[str] = ()) -> float:
        """Return the current value of one series.

        Histograms return their observation count. Series that have never
        been touched read as 0.
        """
        with self._lock:
            family, key = self._resolve(name, label_values)
            value = family.series.get(key)
            if value is None:
                return 0.0
            if isinstance(value, _Histogram):
                return float(value.count)
            return value

    def total(self, name: str) -> float:
        """Return the sum of all series of a family."""
        with self._lock:
            family = self._family(name)
            return sum(
                float(v.count) if isinstance(v, _Histogram) else v
                for v in family.series.values()
            )

    def names(self) -> list[str]:
        """Return registered metric names in declaration order."""
        with self._lock:
            return list(self._families)

    def kind(self, name: str) -> MetricKind:
        with self._lock:
            return self._family(name).kind

    def families(self) -> list[FamilySnapshot]:
        """Return an immutable copy of every family in declaration order."""
        with self._lock:
            return [self._snapshot(family) for family in self._families.values()]

    def render(self) -> str:
        """Render every family in Prometheus text exposition format."""
        return encode_families(self.families())

    def _family(self, name: str) -> _Family:
        family = self._families.get(name)
        if family is None:
            raise UnknownMetricError(name)
        return family

    def _resolve(
        self, name: str, label_values: Sequence[str]
    ) -> tuple[_Family, LabelValues]:
        family = self._family(name)
        if isinstance(label_values, str):
            # A bare string would otherwise be split into characters
            label_values = (label_values,)
        key = tuple(str(v) for v in label_values)
        if len(key) != len(family.label_names):
            raise LabelArityError(name, len(family.label_names), len(key))
        return family, key

    @staticmethod
    def _snapshot(family: _Family) -> FamilySnapshot:
        series: list[tuple[LabelValues, float | HistogramValue]] = []
        for key in sorted(family.series):
            value = family.series[key]
            if isinstance(value, _Histogram):
                cumulative: list[int] = []
                running = 0
                for count in value.buckets:
                    running += count
                    cumulative.append(running)
                series.append(
                    (key, HistogramValue(tuple(cumulative), value.sum, value.count))
                )
            else:
                series.append((key, value))
        return FamilySnapshot(
            name=family.name,
            kind=family.kind,
            help=family.help,
            label_names=family.label_names,
            buckets=family.buckets,
            series=tuple(series),
        )
