"""Structured event log emission.

Each simulated domain event produces one ``LogEntry`` carrying the
originating service, optional user/product correlation ids and a fresh
session/request id pair. Entries are kept in the bounded log storage and
written as a single NDJSON line to the ``synthmetrics.events`` logger.
"""

import logging
import time
import uuid

from synthmetrics.core.encoding.ndjson import encode_log_line
from synthmetrics.core.models import LogEntry
from synthmetrics.core.ports import LogStoragePort

EVENTS_LOGGER_NAME = "synthmetrics.events"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _token(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def log(
    level: str,
    service: str,
    message: str,
    user_id: str | None = None,
    product_id: str | None = None,
    **attributes: str | int | float | bool,
) -> LogEntry:
    """Create an event log entry with timestamp and correlation ids.

    Args:
        level: Log level ("info", "warn", "error"; case-insensitive).
        service: Simulated service the event originates from.
        message: The log message.
        user_id: Optional user correlation id.
        product_id: Optional product correlation id.
        **attributes: Additional structured fields.

    Returns:
        LogEntry with current timestamp
    """
    fields: dict[str, str | int | float | bool] = {
        "service": service,
        "session_id": _token("sess"),
        "request_id": _token("req"),
    }
    if user_id is not None:
        fields["user_id"] = user_id
    if product_id is not None:
        fields["product_id"] = product_id
    fields.update(attributes)
    normalized = level.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    return LogEntry(
        timestamp=time.time(),
        level=normalized,
        message=message,
        attributes=fields,
    )


class EventLogEmitter:
    """Emits structured event records to log storage and the events logger.

    Emission never raises: a storage or serialization failure is routed
    through ``logging``'s own error handling and the caller carries on.
    """

    def __init__(
        self,
        storage: LogStoragePort | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._storage = storage
        self._logger = logger or logging.getLogger(EVENTS_LOGGER_NAME)

    def emit(
        self,
        level: str,
        service: str,
        message: str,
        user_id: str | None = None,
        product_id: str | None = None,
        **attributes: str | int | float | bool,
    ) -> LogEntry | None:
        """Build, store and log one event record.

        Returns:
            The emitted LogEntry, or None if emission failed.
        """
        try:
            entry = log(level, service, message, user_id, product_id, **attributes)
            if self._storage is not None:
                self._storage.write(entry)
            self._logger.log(_LEVELS.get(entry.level, logging.INFO), encode_log_line(entry))
        except Exception:
            logging.getLogger(__name__).debug("Event log emission failed", exc_info=True)
            return None
        return entry

    def info(self, service: str, message: str, **kwargs: str | int | float | bool | None) -> LogEntry | None:
        return self.emit("INFO", service, message, **kwargs)  # type: ignore[arg-type]

    def warn(self, service: str, message: str, **kwargs: str | int | float | bool | None) -> LogEntry | None:
        return self.emit("WARN", service, message, **kwargs)  # type: ignore[arg-type]

    def error(self, service: str, message: str, **kwargs: str | int | float | bool | None) -> LogEntry | None:
        return self.emit("ERROR", service, message, **kwargs)  # type: ignore[arg-type]
