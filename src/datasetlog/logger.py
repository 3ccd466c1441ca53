"""
Main logger class for datasetlog.
"""

import logging
import threading
import uuid
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

import requests
from prometheus_client import CollectorRegistry

from .batch_queue import BatchQueue
from .constants import (
    DEFAULT_DATASET_URL,
    DEFAULT_FLUSH_INTERVAL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_METRICS_PREFIX,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
    ENDPOINT_ADD_EVENTS,
    MAX_EVENTS_PER_BATCH,
)
from .errors import ConfigurationError, LoggerClosedError
from .events import Event, EventInput, Severity, build_event
from .metrics import LoggerMetrics
from .scheduler import FlushScheduler
from .sender import LogSender
from .utils import create_url, dumps, flatten_nested_object

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[Exception], None]
SuccessHandler = Callable[[Optional[Dict[str, Any]]], None]


class FlushResult(Enum):
    """Outcome of a single flush."""

    SUCCESS = "success"
    FAILURE = "failure"
    EMPTY = "empty"

    def __bool__(self) -> bool:
        return self is FlushResult.SUCCESS


class DataSetLogger:
    """
    Logger that batches events in memory and uploads them to DataSet.

    Features:
    - Buffered sending (by count or timer)
    - Background sending threads
    - Automatic retry on transient failures
    - Optional Prometheus metrics

    Events only live in memory: anything still queued when the process
    dies is lost.

    Example:
        logger = DataSetLogger(
            api_key="...",
            session_info={"serverHost": "web-1"},
            on_error=lambda err: print("upload failed", err),
        )

        logger.log("Application started")
        logger.log({"attrs": {"user_id": 123}, "sev": Severity.WARN})

        # Don't forget to close on shutdown
        logger.close()
    """

    def __init__(
        self,
        api_key: str,
        server_url: Optional[str] = None,
        session_info: Optional[Mapping[str, Any]] = None,
        should_flatten_attributes: bool = False,
        enable_metrics: bool = False,
        metrics_prefix: str = DEFAULT_METRICS_PREFIX,
        metrics_registry: Optional[CollectorRegistry] = None,
        on_error: Optional[ErrorHandler] = None,
        on_success: Optional[SuccessHandler] = None,
        batch_size: int = MAX_EVENTS_PER_BATCH,
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize DataSetLogger.

        Args:
            api_key: DataSet API key with log write access
            server_url: DataSet server, defaults to https://api.scalyr.com
            session_info: Fields describing the uploading process, sent
                with every batch
            should_flatten_attributes: Flatten nested attributes (and
                session info) into dotted keys
            enable_metrics: Export queue length and request counters
            metrics_prefix: Prefix for metric names
            metrics_registry: Registry for the metrics, a private one is
                created when omitted
            on_error: Called with a RequestError when a batch fails
            on_success: Called with the response body when a batch is sent
            batch_size: Queue length that triggers an immediate flush
            flush_interval: Seconds between timed flushes
            max_retries: Retries per batch for transient failures
            retry_delay: Base delay between retries in seconds
            timeout: HTTP request timeout in seconds
            session: Custom requests.Session to use (not closed by the logger)
        """
        if not api_key:
            raise ConfigurationError("api_key is required")
        if batch_size <= 0:
            raise ConfigurationError("batch_size must be positive")
        if flush_interval <= 0:
            raise ConfigurationError("flush_interval must be positive")
        if max_retries < 0:
            raise ConfigurationError("max_retries must not be negative")

        self.server_url = server_url or DEFAULT_DATASET_URL
        url = create_url(self.server_url, ENDPOINT_ADD_EVENTS)
        if not url.ok:
            raise ConfigurationError(f"Could not build the URL. {url.error}")

        self._api_key = api_key
        self._url = url.url
        self.batch_size = batch_size
        self.should_flatten_attributes = should_flatten_attributes
        self.on_error = on_error
        self.on_success = on_success

        # Stable for the lifetime of this logger
        self._session_id = str(uuid.uuid4())
        if session_info is None:
            self.session_info: Optional[Dict[str, Any]] = None
        elif should_flatten_attributes:
            self.session_info = flatten_nested_object(session_info)
        else:
            self.session_info = dict(session_info)

        self._queue: BatchQueue[Event] = BatchQueue()
        self._closed = False
        self._state_lock = threading.Lock()

        # Flushes running on size-trigger or timer threads
        self._inflight: Set[threading.Thread] = set()
        self._inflight_lock = threading.Lock()

        self.metrics = LoggerMetrics(
            self._queue.size,
            enabled=enable_metrics,
            prefix=metrics_prefix,
            registry=metrics_registry,
        )

        # HTTP sender
        self._sender = LogSender(
            url=self._url,
            timeout=timeout,
            session=session,
            max_retries=max_retries,
            retry_delay=retry_delay,
        )

        # Flush timer
        self._scheduler = FlushScheduler(flush_interval, self._flush_on_timer)
        self._scheduler.reset()

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def url(self) -> str:
        return self._url

    @property
    def closed(self) -> bool:
        return self._closed

    def log(self, event: EventInput) -> None:
        """
        Queue an event for upload.

        Accepts a message string, an Event, or a mapping with ``attrs``
        and optional ``ts``, ``sev`` and ``thread`` keys. Events logged
        after :meth:`close` are dropped silently.
        """
        with self._state_lock:
            if self._closed:
                return
            queued = self._queue.append(
                build_event(event, self.should_flatten_attributes)
            )

        # Only the append that reaches the threshold starts a flush
        if queued == self.batch_size:
            self._flush_in_background()

    def _log_message(
        self,
        severity: Severity,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.log({"attrs": {"message": message, **(extra or {})}, "sev": severity})

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log an info message."""
        self._log_message(Severity.INFO, message, extra)

    def warning(
        self, message: str, extra: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log a warning message."""
        self._log_message(Severity.WARN, message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log an error message."""
        self._log_message(Severity.ERROR, message, extra)

    def danger(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log a danger message."""
        self._log_message(Severity.DANGER, message, extra)

    def pending_count(self) -> int:
        """Get the number of events waiting to be sent."""
        return self._queue.size()

    def _flush_in_background(self) -> None:
        """Start a flush without blocking the caller."""
        thread = threading.Thread(target=self._tracked_flush, daemon=True)
        with self._inflight_lock:
            self._inflight.add(thread)
        thread.start()

    def _flush_on_timer(self) -> None:
        with self._inflight_lock:
            self._inflight.add(threading.current_thread())
        self._tracked_flush()

    def _tracked_flush(self) -> None:
        """Flush from a worker thread registered in ``_inflight``."""
        try:
            self.flush()
        finally:
            with self._inflight_lock:
                self._inflight.discard(threading.current_thread())

    def flush(self) -> FlushResult:
        """
        Send everything currently queued as one batch.

        Failures are reported to ``on_error`` and never raised.

        Returns:
            FlushResult.EMPTY when nothing was queued, otherwise whether
            the batch was accepted
        """
        self._scheduler.reset()

        events = self._queue.drain_all()
        if not events:
            return FlushResult.EMPTY

        try:
            result = self._sender.send(dumps(self._build_payload(events)))
        except Exception as exc:
            logger.exception("Unexpected error while sending %d events", len(events))
            self.metrics.record_failure()
            self._call_handler(self.on_error, exc)
            return FlushResult.FAILURE

        if result.success:
            logger.debug(
                "Sent %d events in %d attempt(s)", len(events), result.attempts
            )
            self.metrics.record_success()
            self._call_handler(self.on_success, result.body)
            return FlushResult.SUCCESS

        logger.warning(
            "Failed to send %d events after %d attempt(s): %s",
            len(events),
            result.attempts,
            result.error,
        )
        self.metrics.record_failure()
        self._call_handler(self.on_error, result.error)
        return FlushResult.FAILURE

    def _build_payload(self, events: List[Event]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "events": [event.to_dict() for event in events],
            "session": self._session_id,
            "token": self._api_key,
        }
        if self.session_info is not None:
            payload["sessionInfo"] = self.session_info
        return payload

    def _call_handler(self, handler: Optional[Callable[[Any], None]], arg: Any) -> None:
        if handler is None:
            return
        try:
            handler(arg)
        except Exception:
            logger.exception("DataSetLogger handler %r raised", handler)

    def close(self, timeout: Optional[float] = None) -> FlushResult:
        """
        Close the logger and flush remaining events.

        Stops the flush timer, sends whatever is still queued and waits
        for background flushes that are already running.

        Args:
            timeout: Seconds to wait for each running background flush

        Returns:
            Outcome of the final flush

        Raises:
            LoggerClosedError: If the logger is already closed
        """
        with self._state_lock:
            if self._closed:
                raise LoggerClosedError("DataSetLogger is already closed")
            self._closed = True

        self._scheduler.stop()

        try:
            result = self.flush()

            with self._inflight_lock:
                pending = list(self._inflight)
            for thread in pending:
                if thread is not threading.current_thread():
                    thread.join(timeout)
        finally:
            # Close resources
            self._sender.close()
        return result

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False
