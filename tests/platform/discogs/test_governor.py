"""
Summary: Behaviour tests for the request governor on virtual time.
Why: Admission, buffering, FIFO release, and clearing must hold without real sleeps.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future
from typing import TYPE_CHECKING, Callable

import pytest

from disconnect.errors import DiscogsError, QuotaExceededError
from disconnect.platform.discogs.governor import Admission, GovernorConfig, RequestGovernor
from disconnect.platform.discogs.scheduling import ThreadingScheduler

if TYPE_CHECKING:
    from conftest import ManualScheduler

MakeGovernor = Callable[..., RequestGovernor]


def _admit_many(governor: RequestGovernor, count: int) -> list[Future[Admission]]:
    return [governor.admit() for _ in range(count)]


def test_admits_up_to_quota_then_buffers_then_rejects(make_governor: MakeGovernor) -> None:
    governor = make_governor(max_buffered_requests=2, max_calls_per_interval=5, interval_ms=5000)

    immediate = _admit_many(governor, 5)
    assert all(f.done() for f in immediate)
    assert [f.result().free_slots_remaining for f in immediate] == [4, 3, 2, 1, 0]
    assert all(f.result().buffer_slots_remaining == 2 for f in immediate)

    sixth = governor.admit()
    assert not sixth.done()
    assert governor.status().buffer_slots_remaining == 1

    seventh = governor.admit()
    assert not seventh.done()
    assert governor.status().buffer_slots_remaining == 0

    eighth = governor.admit()
    assert eighth.done()
    error = eighth.exception()
    assert isinstance(error, QuotaExceededError)
    assert error.status_code == 429
    assert error.message == "Too many requests"
    assert governor.status().buffered_count == 2


def test_buffered_requests_release_in_fifo_order(
    make_governor: MakeGovernor, scheduler: ManualScheduler
) -> None:
    governor = make_governor(max_buffered_requests=3, max_calls_per_interval=1, interval_ms=1000)
    _ = governor.admit()

    order: list[int] = []
    futures = [governor.admit() for _ in range(3)]
    for index, future in enumerate(futures):
        future.add_done_callback(lambda _f, i=index: order.append(i))

    scheduler.advance(10_000)

    assert order == [0, 1, 2]
    assert all(f.result().free_slots_remaining == 0 for f in futures)


def test_buffered_requests_are_spread_over_windows(
    make_governor: MakeGovernor, scheduler: ManualScheduler
) -> None:
    governor = make_governor(max_buffered_requests=5, max_calls_per_interval=2, interval_ms=1000)
    _ = _admit_many(governor, 2)
    buffered = _admit_many(governor, 5)

    def released() -> int:
        return sum(1 for f in buffered if f.done())

    scheduler.advance(1000)
    assert released() == 0
    scheduler.advance(1)
    assert released() == 1
    scheduler.advance(1)
    assert released() == 2
    scheduler.advance(997)
    assert released() == 2
    scheduler.advance(2)
    assert released() == 3
    scheduler.advance(1)
    assert released() == 4
    scheduler.advance(1000)
    assert released() == 5


def test_release_reports_remaining_buffer_capacity(
    make_governor: MakeGovernor, scheduler: ManualScheduler
) -> None:
    governor = make_governor()
    _ = _admit_many(governor, 5)
    sixth, seventh = _admit_many(governor, 2)

    scheduler.advance(5001)
    assert sixth.result() == Admission(free_slots_remaining=0, buffer_slots_remaining=1)
    assert not seventh.done()

    scheduler.advance(1)
    assert seventh.result() == Admission(free_slots_remaining=0, buffer_slots_remaining=2)


def test_clear_abandons_buffered_requests(
    make_governor: MakeGovernor, scheduler: ManualScheduler
) -> None:
    governor = make_governor()
    _ = _admit_many(governor, 5)
    sixth, seventh = _admit_many(governor, 2)

    assert governor.clear() == 2

    status = governor.status()
    assert status.free_slots_remaining == 0
    assert status.buffered_count == 0
    assert status.buffer_slots_remaining == 2
    assert scheduler.pending == 0

    scheduler.advance(60_000)
    assert not sixth.done()
    assert not seventh.done()


def test_clear_with_empty_buffer_is_noop(make_governor: MakeGovernor) -> None:
    governor = make_governor()
    assert governor.clear() == 0
    assert governor.status().buffered_count == 0


def test_window_resets_after_interval(
    make_governor: MakeGovernor, scheduler: ManualScheduler
) -> None:
    governor = make_governor()
    _ = _admit_many(governor, 5)

    scheduler.advance(5001)
    assert governor.status().free_slots_remaining == 5

    future = governor.admit()
    assert future.done()
    assert future.result().free_slots_remaining == 4


def test_buffer_blocks_fast_path_until_drained(
    make_governor: MakeGovernor, scheduler: ManualScheduler
) -> None:
    governor = make_governor()
    _ = _admit_many(governor, 5)
    sixth = governor.admit()

    # Window is stale, but the buffered call must still go first.
    scheduler.now = 5000.5
    seventh = governor.admit()
    assert not seventh.done()

    scheduler.advance(100)
    assert sixth.done()
    assert seventh.done()


def test_reconfigure_raises_quota(make_governor: MakeGovernor) -> None:
    governor = make_governor(max_calls_per_interval=1)
    first = governor.admit()
    assert first.result().free_slots_remaining == 0

    config = governor.reconfigure(max_calls_per_interval=3)
    assert config == GovernorConfig(max_buffered_requests=2, max_calls_per_interval=3, interval_ms=5000)

    second = governor.admit()
    assert second.done()
    assert second.result().free_slots_remaining == 1


def test_reconfigure_ignores_unknown_keys_and_none(make_governor: MakeGovernor) -> None:
    governor = make_governor()
    before = governor.config

    after = governor.reconfigure(bogus=1, interval_ms=None)  # pyright: ignore[reportArgumentType]

    assert after == before


def test_callback_receives_admission(make_governor: MakeGovernor) -> None:
    governor = make_governor()
    calls: list[tuple[DiscogsError | None, int, int]] = []

    _ = governor.admit(lambda error, free, buffer: calls.append((error, free, buffer)))

    assert calls == [(None, 4, 2)]


def test_callback_receives_rejection(make_governor: MakeGovernor) -> None:
    governor = make_governor(max_buffered_requests=0, max_calls_per_interval=1)
    _ = governor.admit()
    calls: list[tuple[DiscogsError | None, int, int]] = []

    _ = governor.admit(lambda error, free, buffer: calls.append((error, free, buffer)))

    assert len(calls) == 1
    error, free, buffer = calls[0]
    assert isinstance(error, QuotaExceededError)
    assert (free, buffer) == (0, 0)


def test_callback_for_buffered_call_fires_on_release(
    make_governor: MakeGovernor, scheduler: ManualScheduler
) -> None:
    governor = make_governor()
    _ = _admit_many(governor, 5)
    calls: list[tuple[DiscogsError | None, int, int]] = []

    _ = governor.admit(lambda error, free, buffer: calls.append((error, free, buffer)))
    assert calls == []

    scheduler.advance(5001)
    assert calls == [(None, 0, 2)]


def test_cancelled_buffered_request_is_skipped(
    make_governor: MakeGovernor, scheduler: ManualScheduler
) -> None:
    governor = make_governor()
    _ = _admit_many(governor, 5)
    sixth, seventh = _admit_many(governor, 2)

    assert sixth.cancel()
    scheduler.advance(5001)
    assert sixth.cancelled()
    assert not seventh.done()

    scheduler.advance(1)
    assert seventh.result().buffer_slots_remaining == 2


def test_zero_buffer_rejects_as_soon_as_quota_is_used(make_governor: MakeGovernor) -> None:
    governor = make_governor(max_buffered_requests=0, max_calls_per_interval=2)
    _ = _admit_many(governor, 2)

    with pytest.raises(QuotaExceededError):
        _ = governor.admit().result(timeout=0)


def test_threading_scheduler_fires_callback() -> None:
    fired = threading.Event()

    _ = ThreadingScheduler().call_later(5, fired.set)

    assert fired.wait(timeout=2.0)


def test_threading_scheduler_cancel_prevents_callback() -> None:
    fired = threading.Event()

    handle = ThreadingScheduler().call_later(100, fired.set)
    handle.cancel()

    assert not fired.wait(timeout=0.3)


def test_governor_on_real_threads_releases_buffered_request() -> None:
    governor = RequestGovernor(
        GovernorConfig(max_buffered_requests=1, max_calls_per_interval=1, interval_ms=20)
    )
    _ = governor.admit()

    admission = governor.admit().result(timeout=2.0)

    assert admission.free_slots_remaining == 0


def test_call_buffered_after_partial_drain_goes_to_next_window(
    make_governor: MakeGovernor, scheduler: ManualScheduler
) -> None:
    governor = make_governor(max_buffered_requests=5, max_calls_per_interval=2, interval_ms=1000)
    admitted_at: list[float] = [0.0, 0.0]
    _ = _admit_many(governor, 2)

    def track(future: Future[Admission]) -> Future[Admission]:
        future.add_done_callback(lambda _f: admitted_at.append(scheduler.now))
        return future

    _ = track(governor.admit())
    _ = track(governor.admit())
    scheduler.advance(1001)
    assert admitted_at == [0.0, 0.0, 1001.0]

    scheduler.advance(0.5)
    _ = track(governor.admit())
    scheduler.advance(10_000)

    assert admitted_at == [0.0, 0.0, 1001.0, 1002.0, 2001.0]
    for start in admitted_at:
        in_window = [t for t in admitted_at if start <= t < start + 1000]
        assert len(in_window) <= 2, f"window starting at {start} admitted {in_window}"


def test_concurrent_admissions_respect_quota_and_buffer(make_governor: MakeGovernor) -> None:
    governor = make_governor(max_buffered_requests=10, max_calls_per_interval=5, interval_ms=60_000)
    callers = 50
    barrier = threading.Barrier(callers)
    futures: list[Future[Admission]] = []

    def call() -> None:
        _ = barrier.wait()
        futures.append(governor.admit())

    threads = [threading.Thread(target=call) for _ in range(callers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5.0)

    assert len(futures) == callers
    admitted = [f for f in futures if f.done() and f.exception() is None]
    rejected = [f for f in futures if f.done() and isinstance(f.exception(), QuotaExceededError)]
    pending = [f for f in futures if not f.done()]
    assert len(admitted) == 5
    assert sorted(f.result().free_slots_remaining for f in admitted) == [0, 1, 2, 3, 4]
    assert len(rejected) == 35
    assert len(pending) == 10

    status = governor.status()
    assert (status.free_slots_remaining, status.buffered_count, status.buffer_slots_remaining) == (0, 10, 0)
    assert governor.clear() == 10


def test_shrinking_buffer_never_reports_negative_capacity(
    make_governor: MakeGovernor, scheduler: ManualScheduler
) -> None:
    governor = make_governor(max_buffered_requests=3, max_calls_per_interval=1, interval_ms=1000)
    _ = governor.admit()
    first, _second, _third = _admit_many(governor, 3)

    _ = governor.reconfigure(max_buffered_requests=1)

    assert governor.status().buffer_slots_remaining == 0
    scheduler.advance(1001)
    assert first.result().buffer_slots_remaining == 0
    assert governor.status().buffer_slots_remaining == 0
    assert governor.admit().exception() is not None
