"""Prometheus text exposition encoder (format version 0.0.4)."""

import math
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from synthmetrics.core.models import MetricKind

if TYPE_CHECKING:
    from synthmetrics.core.registry import FamilySnapshot

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def format_value(value: float) -> str:
    """Format a sample value the way Prometheus clients do.

    Args:
        value: Sample value.

    Returns:
        "+Inf", "-Inf", "NaN" or the float repr (e.g. "10.0", "0.25").
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return repr(float(value))


def _escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _format_labels(names: Sequence[str], values: Sequence[str]) -> str:
    if not names:
        return ""
    pairs = ",".join(
        f'{name}="{_escape_label_value(value)}"' for name, value in zip(names, values)
    )
    return "{" + pairs + "}"


def _encode_family(family: "FamilySnapshot") -> list[str]:
    lines = [
        f"# HELP {family.name} {_escape_help(family.help)}",
        f"# TYPE {family.name} {family.kind.value}",
    ]

    if family.kind is MetricKind.HISTOGRAM:
        for label_values, hist in family.series:
            for bound, cumulative in zip(family.buckets, hist.bucket_counts):  # type: ignore[union-attr]
                labels = _format_labels(
                    (*family.label_names, "le"), (*label_values, format_value(bound))
                )
                lines.append(f"{family.name}_bucket{labels} {format_value(cumulative)}")
            labels = _format_labels((*family.label_names, "le"), (*label_values, "+Inf"))
            lines.append(f"{family.name}_bucket{labels} {format_value(hist.count)}")  # type: ignore[union-attr]
            base = _format_labels(family.label_names, label_values)
            lines.append(f"{family.name}_sum{base} {format_value(hist.sum)}")  # type: ignore[union-attr]
            lines.append(f"{family.name}_count{base} {format_value(hist.count)}")  # type: ignore[union-attr]
        return lines

    if not family.series and not family.label_names:
        # Unlabeled families always expose a sample, starting at zero
        lines.append(f"{family.name} 0.0")
        return lines

    for label_values, value in family.series:
        labels = _format_labels(family.label_names, label_values)
        lines.append(f"{family.name}{labels} {format_value(value)}")  # type: ignore[arg-type]
    return lines


def encode_families(families: Iterable["FamilySnapshot"]) -> str:
    """Encode metric families to Prometheus text format.

    Args:
        families: Family snapshots in the order they should be rendered.

    Returns:
        Exposition text ending in a newline, or an empty string if there
        are no families.
    """
    lines: list[str] = []
    for family in families:
        lines.extend(_encode_family(family))

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
