# battery_monitor/workers/sound_scheduler.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from utils.logging import get_logger
from workers.clock import Clock, Handle

REPEAT_MS = 2000
TOTAL_MS = 30 * 1000


class Playback(Protocol):
    def play(self) -> None: ...

    def stop(self) -> None: ...

    def close(self) -> None: ...


class SoundPlayer(Protocol):
    def open(self, path: str) -> Playback: ...


@dataclass
class SchedulerSession:
    file: str
    started_at: float
    next_fire_interval: float
    playback: Playback


class AlertSoundScheduler:
    """
    Проигрывает один клип: сразу, затем каждые repeat_ms,
    но не дольше total_ms от старта сессии.
    Одна активная сессия; тот же файл — no-op, другой файл — замена.
    Ошибки аудиоустройства логируются и не прерывают каденс.
    """

    def __init__(
        self,
        player: SoundPlayer,
        clock: Clock,
        repeat_ms: int = REPEAT_MS,
        total_ms: int = TOTAL_MS,
    ):
        self.player = player
        self.clock = clock
        self.repeat_ms = max(1, int(repeat_ms))
        self.total_ms = max(0, int(total_ms))

        self._session: Optional[SchedulerSession] = None
        self._handle: Optional[Handle] = None
        self._closed = False
        self._log = get_logger("sound_scheduler")

    @property
    def active(self) -> bool:
        return self._session is not None

    @property
    def current_file(self) -> Optional[str]:
        return self._session.file if self._session else None

    # ------------- публичный API -------------

    def start(self, file: str) -> None:
        if self._closed:
            self._log.debug("start(%s) after close ignored", file)
            return
        if self._session is not None and self._session.file == file:
            return

        # замена сессии целиком в одном вызове
        self.stop()

        try:
            playback = self.player.open(file)
        except Exception as e:
            self._log.warning("Cannot open sound %s: %s", file, e)
            return

        self._session = SchedulerSession(
            file=file,
            started_at=self.clock.now(),
            next_fire_interval=self.repeat_ms / 1000.0,
            playback=playback,
        )
        self._log.info("Alert sound started: %s", file)
        self._on_cadence()

    def stop(self) -> None:
        """Идемпотентно: снимает таймер, освобождает плеер."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

        session = self._session
        self._session = None
        if session is None:
            return

        try:
            session.playback.stop()
            session.playback.close()
        except Exception as e:
            self._log.warning("Sound cleanup error for %s: %s", session.file, e)
        self._log.info("Alert sound stopped: %s", session.file)

    def close(self) -> None:
        """Остановить и больше не принимать start() (shutdown)."""
        self._closed = True
        self.stop()

    # ------------- каденс -------------

    def _on_cadence(self) -> None:
        self._handle = None
        session = self._session
        if session is None or self._closed:
            return

        elapsed_ms = (self.clock.now() - session.started_at) * 1000.0
        if elapsed_ms >= self.total_ms:
            self._log.debug("Alert sound duration %.0f ms reached", elapsed_ms)
            self.stop()
            return

        try:
            session.playback.stop()
            session.playback.play()
        except Exception as e:
            self._log.warning("Playback error for %s: %s", session.file, e)

        self._handle = self.clock.call_later(session.next_fire_interval, self._on_cadence)
