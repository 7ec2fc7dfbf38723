"""Deterministic stand-ins for the clock, audio device and battery source."""
import heapq
import itertools
from typing import List, Optional, Tuple

from errors import TransientSampleError
from models import BatteryReading


class FakeHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeClock:
    """Manual clock: callbacks only run inside advance()."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue = []
        self._seq = itertools.count()

    def now(self):
        return self._now

    def wall(self):
        return 1_700_000_000.0 + self._now

    def call_later(self, delay, callback, *args):
        handle = FakeHandle()
        heapq.heappush(self._queue, (self._now + max(0.0, delay), next(self._seq), handle, callback, args))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for item in self._queue if not item[2].cancelled)

    def advance(self, seconds: float):
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle, callback, args = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = when
            callback(*args)
        self._now = target


class FakePlayback:
    def __init__(self, player, path):
        self.player = player
        self.path = path
        self.closed = False

    def play(self):
        self.player.plays.append((self.path, self.player.clock.now()))
        if self.player.fail_play:
            raise RuntimeError("audio device gone")

    def stop(self):
        self.player.stops += 1

    def close(self):
        self.closed = True


class FakePlayer:
    def __init__(self, clock):
        self.clock = clock
        self.opened: List[str] = []
        self.playbacks: List[FakePlayback] = []
        self.plays: List[Tuple[str, float]] = []
        self.stops = 0
        self.fail_play = False
        self.fail_open = False

    def open(self, path):
        if self.fail_open:
            raise OSError(f"cannot load {path}")
        self.opened.append(path)
        pb = FakePlayback(self, path)
        self.playbacks.append(pb)
        return pb


class FakeSource:
    """Returns queued readings; the last one repeats. None means 'no battery'."""

    def __init__(self, *readings, capacity: Optional[Tuple[int, int]] = None):
        self.readings = list(readings)
        self._capacity = capacity

    def set(self, percent, charging, seconds_left=None):
        self.readings = [BatteryReading(percent, charging, seconds_left)]

    def read(self):
        reading = self.readings.pop(0) if len(self.readings) > 1 else self.readings[0]
        if reading is None:
            raise TransientSampleError("No battery detected")
        return reading

    def capacity(self):
        return self._capacity


def fake_resolver(ref):
    return f"/sounds/{ref}" if ref else None
