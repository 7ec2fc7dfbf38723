# battery_monitor/workers/clock.py
from __future__ import annotations

import asyncio
import time
from typing import Any, Callable, Optional, Protocol


class Handle(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    """
    Единые часы для обоих каденсов (опрос и звук).
    now() — монотонные секунды, wall() — unix time для событий.
    """

    def now(self) -> float: ...

    def wall(self) -> float: ...

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Handle: ...


class LoopClock:
    """Часы поверх asyncio loop: все колбэки выполняются последовательно в одном loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self._loop.time()

    def wall(self) -> float:
        return time.time()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        return self._loop.call_later(max(0.0, delay), callback, *args)
