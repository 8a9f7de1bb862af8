"""
Run log: the human-readable event trail returned with every run result.
"""

import threading
from typing import Protocol

from invoice_mailer.core.logging import get_logger

log = get_logger(__name__)


class LogSink(Protocol):
    """Anything that accepts run log lines."""

    def append(self, event: str) -> None: ...


class RunLog:
    """Append-only, thread-safe list of log lines.

    Every line is also forwarded to structlog so a run can be followed in
    container logs while it is still in progress.
    """

    def __init__(self, echo: bool = True):
        self._lines: list[str] = []
        self._lock = threading.Lock()
        self._echo = echo

    def append(self, event: str) -> None:
        with self._lock:
            self._lines.append(event)
        if self._echo:
            log.info("run_log", line=event)

    def lines(self) -> list[str]:
        """Snapshot of all lines appended so far."""
        with self._lock:
            return list(self._lines)

    def __len__(self) -> int:
        with self._lock:
            return len(self._lines)

    def __contains__(self, event: str) -> bool:
        with self._lock:
            return event in self._lines
