"""
Periodic reload timer.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ReloadTimer:
    """
    Calls ``callback`` every ``interval_ms`` milliseconds on a daemon thread.

    Stopping never interrupts a tick already running; it only prevents the
    next one.
    """

    def __init__(self, interval_ms: float, callback: Callable[[], None], name: str = "ConfigReload"):
        if interval_ms <= 0:
            raise ValueError(f"Reload interval must be positive, got {interval_ms}")
        self.interval_ms = interval_ms
        self._callback = callback
        self._name = name
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def start(self) -> bool:
        """Start ticking; returns False if the timer was already started."""
        if self._thread is not None:
            return False

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._worker,
            name=self._name,
            daemon=True
        )
        self._thread.start()
        logger.debug(f"Reload timer started with interval {self.interval_ms}ms")
        return True

    def stop(self, timeout: float = 5.0) -> bool:
        """Stop ticking; returns False if the timer was not running."""
        thread = self._thread
        if thread is None:
            return False

        self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout=timeout)
        self._thread = None
        logger.debug("Reload timer stopped")
        return True

    def _worker(self) -> None:
        interval_s = self.interval_ms / 1000.0
        while not self._stop_event.wait(interval_s):
            try:
                self._callback()
            except Exception as e:
                logger.error(f"Error in reload tick: {e}")
