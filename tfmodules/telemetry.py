"""Counters and trace output for resolution passes.

The resolver receives a ``Telemetry`` object instead of reaching for global
state. Telemetry never influences control flow or results.
"""

import logging
import threading
from typing import Protocol

logger = logging.getLogger(__name__)


class Telemetry(Protocol):
    """Counter-increment and trace-log capabilities."""

    def increment(self, name: str, amount: int = 1) -> None: ...

    def trace(self, message: str) -> None: ...


class NullTelemetry:
    """Discards everything."""

    def increment(self, name: str, amount: int = 1) -> None:
        pass

    def trace(self, message: str) -> None:
        pass


class LoggingTelemetry:
    """Keeps counters in memory and writes trace lines to the debug log.

    Counters are guarded by a lock so independent scans running on different
    threads can share one instance.
    """

    def __init__(self, trace_logger: logging.Logger | None = None) -> None:
        self._counts: dict[str, int] = {}
        self._lock = threading.Lock()
        self._logger = trace_logger or logger

    def increment(self, name: str, amount: int = 1) -> None:
        with self._lock:
            self._counts[name] = self._counts.get(name, 0) + amount

    def trace(self, message: str) -> None:
        self._logger.debug(message)

    def count(self, name: str) -> int:
        with self._lock:
            return self._counts.get(name, 0)

    def snapshot(self) -> dict[str, int]:
        """Return a copy of all counters."""
        with self._lock:
            return dict(self._counts)
