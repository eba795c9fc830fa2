"""
Test helpers: log capture and polling for background reloads.
"""

import time
from typing import Callable, List, Optional, Tuple

from schemaconf.infrastructure.observability.logging import LogLevel


def wait_for(condition: Callable[[], bool], timeout: float = 3.0, interval: float = 0.01) -> bool:
    """Poll ``condition`` until it holds or ``timeout`` seconds pass."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if condition():
            return True
        time.sleep(interval)
    return condition()


class LogRecorder:
    """Callable logger capturing ``(message, level)`` pairs."""

    def __init__(self):
        self.records: List[Tuple[str, LogLevel]] = []

    def __call__(self, message: str, level: LogLevel) -> None:
        self.records.append((message, level))

    def messages(self, level: Optional[LogLevel] = None) -> List[str]:
        return [m for m, lvl in self.records if level is None or lvl == level]

    def has_message(self, fragment: str, level: Optional[LogLevel] = None) -> bool:
        return any(fragment in m for m in self.messages(level))
