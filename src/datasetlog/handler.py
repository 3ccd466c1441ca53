"""
Standard logging handler for integration with Python's logging module.
"""

import json
import logging
from typing import Any, Dict, Optional

from .events import Severity
from .logger import DataSetLogger

# LogRecord attributes that are not user supplied extras
_RESERVED_ATTRS = frozenset(
    (
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "asctime", "taskName",
    )
)


def severity_for_level(levelno: int) -> Severity:
    """Map a logging level number to a DataSet severity."""
    if levelno >= logging.CRITICAL:
        return Severity.DANGER
    if levelno >= logging.ERROR:
        return Severity.ERROR
    if levelno >= logging.WARNING:
        return Severity.WARN
    return Severity.INFO


class DataSetHandler(logging.Handler):
    """
    Python logging handler that ships records to DataSet.

    Wraps a :class:`DataSetLogger`, either one passed in or one built from
    the keyword arguments.

    Example:
        import logging
        from datasetlog import DataSetHandler

        handler = DataSetHandler(
            api_key="...",
            session_info={"serverHost": "web-1"},
        )

        logger = logging.getLogger("my_app")
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)

        logger.info("Hello from standard logging!")

        # Don't forget to close on shutdown
        handler.close()
    """

    def __init__(
        self,
        dataset_logger: Optional[DataSetLogger] = None,
        level: int = logging.NOTSET,
        **logger_options: Any,
    ):
        """
        Initialize DataSetHandler.

        Args:
            dataset_logger: Existing logger to feed, closed with the handler
            level: Minimum log level to process
            **logger_options: DataSetLogger arguments when no logger is given
        """
        super().__init__(level)
        if dataset_logger is None:
            dataset_logger = DataSetLogger(**logger_options)
        elif logger_options:
            raise TypeError("logger options can't be combined with dataset_logger")
        self.dataset_logger = dataset_logger

    def _format_record(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Convert LogRecord to event attributes."""
        attrs: Dict[str, Any] = {
            "message": self.format(record),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Include exception info if present
        if record.exc_info:
            formatter = self.formatter or logging.Formatter()
            attrs["exception"] = formatter.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in attrs:
                continue
            try:
                json.dumps(value)  # Check if serializable
                attrs[key] = value
            except (TypeError, ValueError):
                attrs[key] = str(value)

        return attrs

    def emit(self, record: logging.LogRecord) -> None:
        """Process a log record."""
        # Our own diagnostics would feed back into the queue
        if record.name.split(".", 1)[0] == "datasetlog":
            return
        try:
            self.dataset_logger.log(
                {
                    "ts": int(record.created * 1_000_000_000),
                    "sev": severity_for_level(record.levelno),
                    "attrs": self._format_record(record),
                    "thread": record.threadName,
                }
            )
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        """Send queued records now."""
        self.dataset_logger.flush()

    def close(self) -> None:
        """Close the handler and the wrapped logger."""
        try:
            if not self.dataset_logger.closed:
                self.dataset_logger.close()
        finally:
            super().close()
