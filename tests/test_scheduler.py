"""Tests for the poll cadence on a real asyncio loop."""
import asyncio

from workers.clock import LoopClock
from workers.scheduler import Scheduler


class Counter:
    name = "counter"

    def __init__(self):
        self.calls = 0

    def poll(self):
        self.calls += 1


def test_run_polls_until_stopped():
    worker = Counter()

    async def main():
        scheduler = Scheduler(interval_ms=10, workers=[worker], clock=LoopClock())
        task = asyncio.create_task(scheduler.run())
        await asyncio.sleep(0.1)
        await scheduler.stop()
        await asyncio.wait_for(task, timeout=1.0)
        calls = worker.calls
        await asyncio.sleep(0.05)
        return scheduler, calls

    scheduler, calls = asyncio.run(main())
    assert calls >= 2
    assert worker.calls == calls
    assert not scheduler.running


def test_start_is_idempotent(clock):
    worker = Counter()
    scheduler = Scheduler(interval_ms=1000, workers=[worker], clock=clock)
    scheduler.start()
    scheduler.start()
    clock.advance(0.0)
    assert worker.calls == 1
    assert clock.pending == 1


def test_interval_has_lower_bound(clock):
    assert Scheduler(interval_ms=0, workers=[], clock=clock).interval_ms == 1
