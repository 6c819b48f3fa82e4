"""Shared pytest fixtures: a virtual-time scheduler and a scripted HTTP transport."""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Callable

import pytest

from disconnect.platform.discogs.governor import GovernorConfig, RequestGovernor
from disconnect.platform.discogs.http_client import HTTPResult


@dataclass(slots=True)
class ManualTimer:
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when a test calls ``advance``."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now: float = start_ms
        self._queue: list[tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()

    def now_ms(self) -> float:
        return self.now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(callback)
        heapq.heappush(self._queue, (self.now + delay_ms, next(self._seq), timer))
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)

    def advance(self, ms: float) -> None:
        """Move the clock forward, firing due timers in due-time order."""

        target = self.now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            self.now = due
            if not timer.cancelled:
                timer.callback()
        self.now = target


@dataclass(slots=True)
class SentRequest:
    method: str
    url: str
    headers: dict[str, str]
    body: bytes | None


@dataclass(slots=True)
class StubHTTPClient:
    """Return scripted results and record every request sent."""

    results: list[HTTPResult] = field(default_factory=list)
    sent: list[SentRequest] = field(default_factory=list)

    def queue(self, status: int = 200, content: bytes = b"{}", **kwargs: object) -> None:
        self.results.append(HTTPResult(status=status, headers={}, content=content, **kwargs))  # pyright: ignore[reportArgumentType]

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None = None,
    ) -> HTTPResult:
        self.sent.append(SentRequest(method, url, dict(headers), body))
        if self.results:
            return self.results.pop(0)
        return HTTPResult(status=200, headers={}, content=b"{}")


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def make_governor(scheduler: ManualScheduler) -> Callable[..., RequestGovernor]:
    def _make(
        max_buffered_requests: int = 2,
        max_calls_per_interval: int = 5,
        interval_ms: int = 5000,
    ) -> RequestGovernor:
        return RequestGovernor(
            GovernorConfig(
                max_buffered_requests=max_buffered_requests,
                max_calls_per_interval=max_calls_per_interval,
                interval_ms=interval_ms,
            ),
            scheduler=scheduler,
            name="test",
        )

    return _make


@pytest.fixture
def http() -> StubHTTPClient:
    return StubHTTPClient()
