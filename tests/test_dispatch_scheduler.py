"""
Tests for the periodic dispatch task.
"""

from __future__ import annotations

import asyncio
import threading
import time

import pytest

from app.application.use_cases.auto_dispatch import AutoDispatchUseCase
from app.application.use_cases.booking_lifecycle import BookingLifecycleUseCase
from app.domain.entities.booking import BookingStatus
from app.infrastructure.directory.static_directory import StaticProviderDirectory
from app.infrastructure.scheduler.dispatch_scheduler import DispatchScheduler
from app.infrastructure.store.memory_store import MemoryBookingStore


def _build() -> tuple[BookingLifecycleUseCase, AutoDispatchUseCase]:
    directory = StaticProviderDirectory()
    lifecycle = BookingLifecycleUseCase(store=MemoryBookingStore(), directory=directory)
    return lifecycle, AutoDispatchUseCase(lifecycle, directory)


class ExplodingDispatch:
    def __init__(self) -> None:
        self.calls = 0

    def tick(self, now=None):
        self.calls += 1
        raise RuntimeError("boom")


def test_scheduler_runs_ticks_until_stopped():
    lifecycle, dispatch = _build()
    booking = lifecycle.create_booking("Alice", "Leaky faucet", "1 Main St")

    async def scenario() -> None:
        scheduler = DispatchScheduler(dispatch, interval_seconds=0.01)
        scheduler.start()
        scheduler.start()
        assert scheduler.is_running
        await asyncio.sleep(0.2)
        await scheduler.stop()
        assert not scheduler.is_running

    asyncio.run(scenario())

    updated = lifecycle.get_booking(booking.id)
    assert updated.status == BookingStatus.ASSIGNED
    assert updated.retry_count == 1


class SlowDispatch:
    def __init__(self) -> None:
        self.started = threading.Event()
        self.finished_at: float | None = None

    def tick(self, now=None):
        self.started.set()
        time.sleep(0.3)
        self.finished_at = time.monotonic()
        return []


def test_stop_waits_for_running_tick():
    dispatch = SlowDispatch()

    async def scenario() -> None:
        scheduler = DispatchScheduler(dispatch, interval_seconds=0.01)
        scheduler.start()
        while not dispatch.started.is_set():
            await asyncio.sleep(0.01)
        await scheduler.stop()
        assert dispatch.finished_at is not None
        assert not scheduler.is_running

    asyncio.run(scenario())


def test_scheduler_survives_failing_ticks():
    dispatch = ExplodingDispatch()

    async def scenario() -> None:
        scheduler = DispatchScheduler(dispatch, interval_seconds=0.01)
        scheduler.start()
        await asyncio.sleep(0.15)
        assert scheduler.is_running
        await scheduler.stop()

    asyncio.run(scenario())
    assert dispatch.calls >= 2


def test_stop_without_start_is_a_no_op():
    scheduler = DispatchScheduler(_build()[1], interval_seconds=1.0)
    asyncio.run(scheduler.stop())
    assert not scheduler.is_running


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        DispatchScheduler(_build()[1], interval_seconds=0)
