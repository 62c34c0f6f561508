"""NDJSON encoder for log entries."""

import json
from collections.abc import Iterable
from typing import Any

from synthmetrics.core.models import LogEntry

CONTENT_TYPE = "application/x-ndjson"


def _entry_to_dict(entry: LogEntry) -> dict[str, Any]:
    return {
        "timestamp": entry.timestamp,
        "level": entry.level,
        "message": entry.message,
        "attributes": entry.attributes,
    }


def encode_log_line(entry: LogEntry) -> str:
    """Encode a single log entry as one JSON line (no trailing newline).

    Attribute values that are not JSON serializable are stringified.
    """
    return json.dumps(_entry_to_dict(entry), default=str)


def encode_logs(entries: Iterable[LogEntry]) -> str:
    """Encode log entries to newline-delimited JSON.

    Args:
        entries: An iterable of LogEntry objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no entries.
    """
    lines = [encode_log_line(entry) for entry in entries]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
