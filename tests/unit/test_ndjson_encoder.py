"""Tests for NDJSON log encoder."""

import json
from datetime import datetime

import pytest

from synthmetrics.core.encoding.ndjson import CONTENT_TYPE, encode_log_line, encode_logs
from synthmetrics.core.models import LogEntry


class TestNdjsonEncoder:
    """Tests for NDJSON encoding of log entries."""

    @pytest.mark.encoding
    def test_encode_single_entry(self) -> None:
        """Single LogEntry encodes to one JSON line."""
        entry = LogEntry(
            timestamp=1702300000.0,
            level="INFO",
            message="New user registered: Alice Johnson",
            attributes={"service": "auth", "user_id": "user_001"},
        )

        result = encode_logs([entry])

        parsed = json.loads(result.strip())
        assert parsed == {
            "timestamp": 1702300000.0,
            "level": "INFO",
            "message": "New user registered: Alice Johnson",
            "attributes": {"service": "auth", "user_id": "user_001"},
        }

    @pytest.mark.encoding
    def test_encode_multiple_entries(self) -> None:
        """Multiple entries are newline-delimited."""
        entries = [
            LogEntry(timestamp=1702300000.0, level="INFO", message="First"),
            LogEntry(timestamp=1702300001.0, level="ERROR", message="Second"),
        ]

        result = encode_logs(entries)

        lines = result.strip().split("\n")
        assert len(lines) == 2
        assert json.loads(lines[0])["message"] == "First"
        assert json.loads(lines[1])["message"] == "Second"

    @pytest.mark.encoding
    def test_encode_empty_iterable(self) -> None:
        """Empty input returns empty string."""
        assert encode_logs([]) == ""

    @pytest.mark.encoding
    def test_output_ends_with_newline(self) -> None:
        entry = LogEntry(timestamp=1702300000.0, level="INFO", message="Test")

        assert encode_logs([entry]).endswith("\n")

    @pytest.mark.encoding
    def test_single_line_has_no_newline(self) -> None:
        """encode_log_line returns exactly one line."""
        entry = LogEntry(timestamp=1702300000.0, level="WARN", message="multi\nline")

        line = encode_log_line(entry)

        assert "\n" not in line
        assert json.loads(line)["message"] == "multi\nline"

    @pytest.mark.encoding
    def test_unserializable_attribute_is_stringified(self) -> None:
        when = datetime(2024, 1, 1, 12, 0, 0)
        entry = LogEntry(
            timestamp=1702300000.0,
            level="INFO",
            message="Test",
            attributes={"when": when},  # type: ignore[dict-item]
        )

        parsed = json.loads(encode_log_line(entry))

        assert parsed["attributes"]["when"] == str(when)

    @pytest.mark.encoding
    def test_content_type(self) -> None:
        assert CONTENT_TYPE == "application/x-ndjson"
