"""
Recurring flush timer.
"""

import threading
from typing import Callable, Optional


class FlushScheduler:
    """
    Single re-armable timer that calls ``callback`` after ``interval``.

    Every :meth:`reset` cancels the pending timer and starts a new one, so
    a flush triggered by any source pushes the next timed flush back by a
    full interval. Once stopped the scheduler never arms again.
    """

    def __init__(self, interval: float, callback: Callable[[], None]):
        """
        Initialize FlushScheduler.

        Args:
            interval: Seconds between timed flushes
            callback: Called from the timer thread when the timer fires
        """
        self.interval = interval
        self._callback = callback
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._stopped = False

    @property
    def active(self) -> bool:
        """Whether a timer is currently armed."""
        with self._lock:
            return self._timer is not None and self._timer.is_alive()

    @property
    def stopped(self) -> bool:
        return self._stopped

    def reset(self) -> None:
        """Cancel the pending timer and arm a new one."""
        with self._lock:
            self._cancel()
            if self._stopped:
                return
            self._timer = threading.Timer(self.interval, self._callback)
            self._timer.daemon = True
            self._timer.start()

    def stop(self) -> None:
        """Cancel the pending timer and prevent rearming."""
        with self._lock:
            self._stopped = True
            self._cancel()

    def _cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
