"""Where: src/disconnect/platform/discogs/scheduling.py
What: Clock and cancellable-timer abstraction that drives the request governor.
Why: Let the governor run on real threads in production and on virtual time in tests.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Protocol


class TimerHandle(Protocol):
    """A scheduled callback that can still be cancelled."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Millisecond clock plus deferred execution."""

    def now_ms(self) -> float:
        """Return a monotonic timestamp in milliseconds."""
        ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay_ms`` milliseconds."""
        ...


class ThreadingScheduler:
    """Fire callbacks from daemon ``threading.Timer`` threads."""

    def __init__(self, *, thread_name_prefix: str = "discogs-governor") -> None:
        self._thread_name_prefix: str = thread_name_prefix

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(max(delay_ms, 0.0) / 1000.0, callback)
        timer.daemon = True
        timer.name = f"{self._thread_name_prefix}-{timer.name}"
        timer.start()
        return timer


__all__ = ["Scheduler", "ThreadingScheduler", "TimerHandle"]
