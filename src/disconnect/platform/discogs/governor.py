"""Where: src/disconnect/platform/discogs/governor.py
What: Thread-safe request governor that admits, defers, or rejects outbound calls.
Why: Discogs allows a fixed number of calls per minute; excess calls are buffered
     up to a bound and spread over later windows, anything beyond is refused locally.
"""

from __future__ import annotations

import threading
from collections import deque
from concurrent.futures import Future
from dataclasses import dataclass, fields, replace
from functools import partial
from typing import Callable, Final, cast

from disconnect.config import settings
from disconnect.errors import DiscogsError, QuotaExceededError
from disconnect.platform.logging import logger

from .scheduling import Scheduler, ThreadingScheduler, TimerHandle

AdmissionCallback = Callable[[DiscogsError | None, int, int], None]


@dataclass(frozen=True, slots=True)
class GovernorConfig:
    """Quota of one remote service. Replaced as a whole on reconfiguration."""

    max_buffered_requests: int = 20
    max_calls_per_interval: int = 60
    interval_ms: int = 60_000


@dataclass(frozen=True, slots=True)
class Admission:
    """Successful admission: the caller may issue its request now."""

    free_slots_remaining: int
    buffer_slots_remaining: int


@dataclass(frozen=True, slots=True)
class GovernorStatus:
    """Point-in-time snapshot returned by ``RequestGovernor.status``."""

    free_slots_remaining: int
    buffered_count: int
    buffer_slots_remaining: int


@dataclass(slots=True)
class _BufferedEntry:
    future: Future[Admission]
    fire_at: float
    timer: TimerHandle | None = None


_CONFIG_FIELDS: Final[frozenset[str]] = frozenset(f.name for f in fields(GovernorConfig))


def _deliver(callback: AdmissionCallback, future: Future[Admission]) -> None:
    """Translate a resolved admission future into the ``(error, free, buffer)`` callback."""

    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        callback(cast(DiscogsError, error), 0, 0)
        return
    admission = future.result()
    callback(None, admission.free_slots_remaining, admission.buffer_slots_remaining)


class RequestGovernor:
    """Keep the aggregate call rate against one remote service under its quota.

    Each ``admit`` is a single decision:

    1. With an empty buffer and a free slot in the current window the call is
       admitted immediately. A window older than ``interval_ms`` is reset first.
    2. Otherwise the call is buffered, unless the buffer is full, in which case
       it is rejected with ``QuotaExceededError``.

    Buffered calls are spread over the following windows,
    ``max_calls_per_interval`` per window, with strictly increasing fire times.
    Calls already released from the buffer count against the window they
    landed in, so a call buffered behind a partly drained buffer goes to the
    next window with room.
    Every timer firing releases the oldest buffered call, so release order is
    FIFO regardless of timer jitter.

    All state is guarded by one lock; futures are resolved outside of it.
    """

    def __init__(
        self,
        config: GovernorConfig | None = None,
        *,
        scheduler: Scheduler | None = None,
        name: str = "discogs",
    ) -> None:
        self._config: GovernorConfig = config or GovernorConfig()
        self._scheduler: Scheduler = scheduler or ThreadingScheduler()
        self._name: str = name
        self._lock: Final[threading.Lock] = threading.Lock()
        self._buffer: deque[_BufferedEntry] = deque()
        self._window_start: float = 0.0
        self._admitted_in_window: int = 0
        # Bumped by clear() so timers that already started cannot release newer entries.
        self._generation: int = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> GovernorConfig:
        with self._lock:
            return self._config

    def admit(self, callback: AdmissionCallback | None = None) -> Future[Admission]:
        """Request permission to issue one call.

        Args:
            callback: Optional ``(error, free_slots, buffer_slots)`` continuation,
                invoked exactly once when the returned future resolves.

        Returns:
            Future[Admission]: Resolved immediately on admission or rejection,
            later for buffered calls, and never for calls abandoned by ``clear``.
        """

        future: Future[Admission] = Future()
        if callback is not None:
            future.add_done_callback(partial(_deliver, callback))

        with self._lock:
            config = self._config
            now = self._scheduler.now_ms()
            admission = self._try_admit_now(config, now)
            buffered = False
            if admission is None:
                buffered = self._try_buffer(future, config, now)
            buffered_count = len(self._buffer)

        if admission is not None:
            logger.debug(
                "Admitted request immediately",
                extra={
                    "governor_event": "governor.admit",
                    "governor": self._name,
                    "free_slots": admission.free_slots_remaining,
                },
            )
            future.set_result(admission)
        elif not buffered:
            logger.warning(
                "Request buffer full (%d), rejecting request",
                config.max_buffered_requests,
                extra={
                    "governor_event": "governor.reject",
                    "governor": self._name,
                    "buffered": buffered_count,
                },
            )
            future.set_exception(QuotaExceededError())
        return future

    def _try_admit_now(self, config: GovernorConfig, now: float) -> Admission | None:
        if self._buffer:
            return None

        if self._admitted_in_window and now - self._window_start > config.interval_ms:
            self._admitted_in_window = 0

        if self._admitted_in_window >= config.max_calls_per_interval:
            return None

        self._admitted_in_window += 1
        if self._admitted_in_window == 1:
            self._window_start = now
        return Admission(
            free_slots_remaining=config.max_calls_per_interval - self._admitted_in_window,
            buffer_slots_remaining=config.max_buffered_requests,
        )

    def _try_buffer(self, future: Future[Admission], config: GovernorConfig, now: float) -> bool:
        queued = len(self._buffer)
        if queued >= config.max_buffered_requests:
            return False

        # Slot index counted from the end of the current window, including
        # buffered calls already released into later windows.
        position = max(self._admitted_in_window - config.max_calls_per_interval, 0) + queued

        per_window = max(config.max_calls_per_interval, 1)
        fire_at = (
            self._window_start
            + config.interval_ms * (position // per_window + 1)
            + position % per_window
            + 1
        )
        if self._buffer:
            fire_at = max(fire_at, self._buffer[-1].fire_at + 1)
        fire_at = max(fire_at, now + 1)

        entry = _BufferedEntry(future=future, fire_at=fire_at)
        delay_ms = fire_at - now
        entry.timer = self._scheduler.call_later(
            delay_ms, partial(self._release, self._generation)
        )
        self._buffer.append(entry)
        logger.debug(
            "Buffered request until a slot frees up",
            extra={
                "governor_event": "governor.buffer",
                "governor": self._name,
                "buffered": len(self._buffer),
                "buffer_slots": max(config.max_buffered_requests - len(self._buffer), 0),
                "delay_ms": delay_ms,
            },
        )
        return True

    def _release(self, generation: int) -> None:
        """Timer callback: hand a slot to the oldest buffered call."""

        with self._lock:
            if generation != self._generation or not self._buffer:
                return
            entry = self._buffer.popleft()
            buffer_slots = max(self._config.max_buffered_requests - len(self._buffer), 0)
            if not entry.future.set_running_or_notify_cancel():
                logger.debug("Dropping cancelled buffered request")
                return
            self._admitted_in_window += 1

        logger.debug(
            "Released buffered request",
            extra={
                "governor_event": "governor.release",
                "governor": self._name,
                "buffer_slots": buffer_slots,
            },
        )
        entry.future.set_result(
            Admission(free_slots_remaining=0, buffer_slots_remaining=buffer_slots)
        )

    def reconfigure(self, **changes: int) -> GovernorConfig:
        """Merge ``changes`` into the live configuration.

        Unknown keys and ``None`` values are ignored. The existing buffer is
        neither resized nor rescheduled; new values apply to later decisions.
        """

        accepted = {
            key: value
            for key, value in changes.items()
            if key in _CONFIG_FIELDS and value is not None
        }
        ignored = sorted(set(changes) - set(accepted))
        with self._lock:
            self._config = replace(self._config, **accepted)
            config = self._config

        if ignored:
            logger.debug("Ignoring governor options: %s", ", ".join(ignored))
        logger.debug(
            "Reconfigured request governor",
            extra={
                "governor_event": "governor.reconfigure",
                "governor": self._name,
                "max_calls": config.max_calls_per_interval,
            },
        )
        return config

    def status(self) -> GovernorStatus:
        """Return a consistent snapshot without touching any state."""

        with self._lock:
            config = self._config
            used = self._admitted_in_window
            if (
                used
                and not self._buffer
                and self._scheduler.now_ms() - self._window_start > config.interval_ms
            ):
                used = 0
            buffered = len(self._buffer)

        return GovernorStatus(
            free_slots_remaining=max(config.max_calls_per_interval - used, 0),
            buffered_count=buffered,
            buffer_slots_remaining=max(config.max_buffered_requests - buffered, 0),
        )

    def clear(self) -> int:
        """Abandon every buffered call; their futures never resolve.

        Returns:
            int: Number of buffered calls dropped.
        """

        with self._lock:
            entries = list(self._buffer)
            self._buffer.clear()
            self._generation += 1

        for entry in entries:
            if entry.timer is not None:
                entry.timer.cancel()

        logger.info(
            "Cleared %d buffered request(s)",
            len(entries),
            extra={
                "governor_event": "governor.clear",
                "governor": self._name,
                "dropped": len(entries),
            },
        )
        return len(entries)


_DEFAULT_GOVERNOR: RequestGovernor | None = None
_DEFAULT_GOVERNOR_LOCK: Final[threading.Lock] = threading.Lock()


def default_governor() -> RequestGovernor:
    """Return the process-wide governor for api.discogs.com, creating it on first use."""

    global _DEFAULT_GOVERNOR
    with _DEFAULT_GOVERNOR_LOCK:
        if _DEFAULT_GOVERNOR is None:
            _DEFAULT_GOVERNOR = RequestGovernor(
                GovernorConfig(
                    max_buffered_requests=settings.REQUEST_LIMIT_QUEUE_SIZE,
                    max_calls_per_interval=settings.REQUEST_LIMIT,
                    interval_ms=settings.REQUEST_LIMIT_INTERVAL,
                )
            )
        return _DEFAULT_GOVERNOR


__all__ = [
    "Admission",
    "AdmissionCallback",
    "GovernorConfig",
    "GovernorStatus",
    "RequestGovernor",
    "default_governor",
]
