# battery_monitor/workers/scheduler.py
from __future__ import annotations

import asyncio
from typing import List, Optional

from utils.logging import get_logger
from workers.clock import Clock, Handle


class Scheduler:
    """
    Периодически опрашивает всех воркеров.
    Интервал задаётся в миллисекундах. Тик — колбэк на часах, после тика
    перевзводится сам (без блокирующего ожидания).
    """

    def __init__(self, interval_ms: int, workers: List, clock: Clock):
        self.interval_ms = max(1, int(interval_ms))
        self.workers = workers
        self.clock = clock
        self._handle: Optional[Handle] = None
        self._running = False
        self._stop_event: Optional[asyncio.Event] = None
        self._log = get_logger("scheduler")

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._log.info(
            "Scheduler started: interval=%d ms, workers=%d",
            self.interval_ms,
            len(self.workers),
        )
        # первый тик сразу
        self._handle = self.clock.call_later(0, self._tick)

    def cancel(self) -> None:
        """Снять следующий тик. После этого ни один колбэк не сработает."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._running:
            self._running = False
            self._log.info("Scheduler stopped")

    def _tick(self) -> None:
        self._handle = None
        if not self._running:
            return

        # не падаем из-за одного воркера
        for w in self.workers:
            try:
                w.poll()
            except Exception as e:
                self._log.error("Worker %s tick error: %s", getattr(w, "name", w), e)

        # воркер мог остановить планировщик прямо в тике
        if self._running:
            self._handle = self.clock.call_later(self.interval_ms / 1000.0, self._tick)

    async def run(self) -> None:
        """Запустить и ждать stop()."""
        self._stop_event = asyncio.Event()
        self.start()
        try:
            await self._stop_event.wait()
        finally:
            self.cancel()

    async def stop(self) -> None:
        """Остановить цикл run()."""
        self.cancel()
        if self._stop_event is not None:
            self._stop_event.set()
