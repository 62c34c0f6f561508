"""Tests for event log creation and emission."""

import json
import logging
import re
import time

import pytest
from tests.helpers import FailingStorage

from synthmetrics.adapters.storage.ring_buffer import RingBufferLogStorage
from synthmetrics.core.logs import EVENTS_LOGGER_NAME, EventLogEmitter, log
from synthmetrics.core.models import LogEntry


class TestLogHelper:
    """Tests for the log() helper function."""

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_log_creates_entry_with_timestamp(self) -> None:
        """log() sets the timestamp to the current time."""
        before = time.time()
        entry = log("info", "auth", "User logged in")
        after = time.time()

        assert isinstance(entry, LogEntry)
        assert before <= entry.timestamp <= after
        assert entry.message == "User logged in"

    @pytest.mark.core
    @pytest.mark.tier(0)
    @pytest.mark.parametrize(
        ("level", "expected"),
        [("info", "INFO"), ("warn", "WARN"), ("warning", "WARN"), ("Error", "ERROR")],
    )
    def test_log_normalizes_level(self, level: str, expected: str) -> None:
        assert log(level, "auth", "msg").level == expected

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_log_adds_service_and_correlation_ids(self) -> None:
        """Every entry carries its service and a fresh session/request id pair."""
        entry = log("info", "cart", "Cart add", user_id="user_001", product_id="prod_001")

        assert entry.attributes["service"] == "cart"
        assert entry.attributes["user_id"] == "user_001"
        assert entry.attributes["product_id"] == "prod_001"
        assert re.fullmatch(r"sess_[0-9a-f]{12}", str(entry.attributes["session_id"]))
        assert re.fullmatch(r"req_[0-9a-f]{12}", str(entry.attributes["request_id"]))

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_log_omits_missing_correlation_ids(self) -> None:
        entry = log("error", "database", "Database connection timeout")

        assert "user_id" not in entry.attributes
        assert "product_id" not in entry.attributes

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_ids_differ_between_entries(self) -> None:
        first = log("info", "auth", "a")
        second = log("info", "auth", "b")

        assert first.attributes["request_id"] != second.attributes["request_id"]

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_log_passes_extra_attributes(self) -> None:
        entry = log("info", "payment", "Payment processed", amount=999.99, quantity=1)

        assert entry.attributes["amount"] == 999.99
        assert entry.attributes["quantity"] == 1


class TestEventLogEmitter:
    """Tests for EventLogEmitter."""

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_emit_writes_to_storage(self) -> None:
        storage = RingBufferLogStorage()
        emitter = EventLogEmitter(storage)

        entry = emitter.info("auth", "New user registered: Alice Johnson")

        assert list(storage.read()) == [entry]

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_emit_logs_one_ndjson_line(self, caplog: pytest.LogCaptureFixture) -> None:
        """The events logger receives the entry as a single JSON line."""
        emitter = EventLogEmitter()

        with caplog.at_level(logging.INFO, logger=EVENTS_LOGGER_NAME):
            emitter.warn("inventory", "Low inventory alert", stock=15)

        (record,) = [r for r in caplog.records if r.name == EVENTS_LOGGER_NAME]
        assert record.levelno == logging.WARNING
        parsed = json.loads(record.getMessage())
        assert parsed["level"] == "WARN"
        assert parsed["message"] == "Low inventory alert"
        assert parsed["attributes"]["stock"] == 15

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_error_uses_error_level(self, caplog: pytest.LogCaptureFixture) -> None:
        emitter = EventLogEmitter()

        with caplog.at_level(logging.INFO, logger=EVENTS_LOGGER_NAME):
            entry = emitter.error("payment", "Payment declined")

        assert entry is not None
        assert entry.level == "ERROR"
        assert caplog.records[-1].levelno == logging.ERROR

    @pytest.mark.core
    @pytest.mark.tier(0)
    def test_storage_failure_does_not_raise(self) -> None:
        """A failing sink never propagates into the caller."""
        emitter = EventLogEmitter(FailingStorage())

        assert emitter.info("auth", "User logged in") is None
