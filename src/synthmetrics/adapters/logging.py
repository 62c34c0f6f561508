"""Python logging handler adapter for synthmetrics.

This adapter bridges Python's standard library logging module to the
LogStoragePort, so application diagnostics (startup, sampler failures,
traffic simulation transitions) show up next to simulated events on the
``/logs`` endpoint.
"""

import logging
import traceback

from synthmetrics.core.logs import EVENTS_LOGGER_NAME
from synthmetrics.core.models import LogEntry
from synthmetrics.core.ports import LogStoragePort

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

_LEVEL_NAMES = {"WARNING": "WARN", "CRITICAL": "ERROR"}


class _SkipEventsFilter(logging.Filter):
    """Drop records from the events logger; the emitter stores those itself."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not (
            record.name == EVENTS_LOGGER_NAME
            or record.name.startswith(EVENTS_LOGGER_NAME + ".")
        )


class TelemetryLogHandler(logging.Handler):
    """Logging handler that writes log records to a LogStoragePort.

    Example:
        ```python
        storage = RingBufferLogStorage(max_size=500)
        logging.getLogger("synthmetrics").addHandler(TelemetryLogHandler(storage))
        ```
    """

    def __init__(self, storage: LogStoragePort, level: int = logging.NOTSET) -> None:
        """Initialize the handler with a log storage backend.

        Args:
            storage: Storage adapter implementing LogStoragePort.
            level: Minimum level to forward.
        """
        super().__init__(level)
        self._storage = storage
        self.addFilter(_SkipEventsFilter())

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the storage backend.

        Args:
            record: The log record to emit.
        """
        try:
            attributes: dict[str, str | int | float | bool] = {
                "service": "simulator",
                "logger": record.name,
                "funcName": record.funcName or "",
                "lineno": record.lineno,
            }

            # Add any extra attributes passed via logging call
            for key, value in record.__dict__.items():
                if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                    value, (str, int, float, bool)
                ):
                    attributes[key] = value

            # Extract exception info if present
            if record.exc_info:
                exc_type, exc_value, exc_tb = record.exc_info
                if exc_type is not None:
                    attributes["exc_type"] = exc_type.__name__
                if exc_value is not None:
                    attributes["exc_message"] = str(exc_value)
                if exc_tb is not None:
                    attributes["exc_traceback"] = "".join(
                        traceback.format_exception(exc_type, exc_value, exc_tb)
                    )

            entry = LogEntry(
                timestamp=record.created,
                level=_LEVEL_NAMES.get(record.levelname, record.levelname),
                message=record.getMessage(),
                attributes=attributes,
            )
            self._storage.write(entry)
        except Exception:
            self.handleError(record)
