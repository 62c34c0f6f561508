"""Wire encoders for metrics and logs."""

from synthmetrics.core.encoding.ndjson import encode_log_line, encode_logs
from synthmetrics.core.encoding.prometheus import encode_families, format_value

__all__ = [
    "encode_families",
    "encode_log_line",
    "encode_logs",
    "format_value",
]
