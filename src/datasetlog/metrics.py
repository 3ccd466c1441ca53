"""
Prometheus metrics for a DataSetLogger.
"""

from typing import Callable, Optional

from prometheus_client import CollectorRegistry, Counter, Gauge

from .constants import DEFAULT_METRICS_PREFIX


class LoggerMetrics:
    """
    Queue length gauge and request outcome counters.

    When disabled every method is a no-op. Metrics are registered on
    ``registry`` when given, otherwise on a registry owned by this
    instance so several loggers can coexist in one process.
    """

    def __init__(
        self,
        queue_length: Callable[[], float],
        enabled: bool = False,
        prefix: str = DEFAULT_METRICS_PREFIX,
        registry: Optional[CollectorRegistry] = None,
    ) -> None:
        self.enabled = bool(enabled)
        self.registry: Optional[CollectorRegistry] = None
        self._success: Optional[Counter] = None
        self._failed: Optional[Counter] = None
        self._queue_length: Optional[Gauge] = None

        if not self.enabled:
            return

        self.registry = registry if registry is not None else CollectorRegistry()
        self._queue_length = Gauge(
            f"{prefix}current_queue_length",
            "Number of events waiting to be sent",
            registry=self.registry,
        )
        self._queue_length.set_function(queue_length)
        self._success = Counter(
            f"{prefix}success_requests",
            "Number of successful addEvents requests",
            registry=self.registry,
        )
        self._failed = Counter(
            f"{prefix}failed_requests",
            "Number of failed addEvents requests",
            registry=self.registry,
        )

    def record_success(self) -> None:
        if self._success is not None:
            self._success.inc()

    def record_failure(self) -> None:
        if self._failed is not None:
            self._failed.inc()
