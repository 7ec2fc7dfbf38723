# battery_monitor/workers/engine.py
from __future__ import annotations

import math
from typing import Callable, List, Optional, Protocol, Tuple

from actions.formatter import format_health, format_percent, format_time_text
from errors import TransientSampleError
from models import AlertConfig, AlertKind, Band, BatteryReading, Event, Sample, Status
from rules.estimator import ChargeRateEstimator
from rules.state_machine import LOWER_ALERTING, UPPER_ALERTING, AlertStateMachine, Transition
from rules.thresholds import color_hint, evaluate
from utils.logging import get_logger
from workers.clock import Clock
from workers.sound_scheduler import AlertSoundScheduler, SoundPlayer

logger = get_logger("engine")

_KIND_FOR_STATE = {
    UPPER_ALERTING: AlertKind.UPPER,
    LOWER_ALERTING: AlertKind.LOWER,
}


class BatterySource(Protocol):
    def read(self) -> BatteryReading: ...

    def capacity(self) -> Optional[Tuple[int, int]]: ...


Resolver = Callable[[str], Optional[str]]
StatusListener = Callable[[Status], None]
EventListener = Callable[[Event], None]


class AlertEngine:
    """
    Драйвер: один тик = замер -> оценка -> FSM -> звук.
    Контракт, ожидаемый main/scheduler:
      - poll()        (тик планировщика, TransientSampleError гасится здесь)
      - tick()        (один тик, ошибки наружу)
      - set_muted(flag)
      - shutdown()
    """

    def __init__(
        self,
        config: AlertConfig,
        source: BatterySource,
        player: SoundPlayer,
        resolver: Resolver,
        clock: Clock,
        repeat_ms: int = 2000,
        total_ms: int = 30 * 1000,
        name: str = "battery",
    ):
        self.name = name
        self.cfg = config
        self.source = source
        self.resolver = resolver
        self.clock = clock

        self.fsm = AlertStateMachine(config)
        self.estimator = ChargeRateEstimator()
        self.sounds = AlertSoundScheduler(player, clock, repeat_ms=repeat_ms, total_ms=total_ms)

        self.last_status: Optional[Status] = None
        self._status_listeners: List[StatusListener] = []
        self._event_listeners: List[EventListener] = []
        self._stopped = False

    # -------- подписки (UI / каналы оповещений) --------

    def add_status_listener(self, listener: StatusListener) -> None:
        self._status_listeners.append(listener)

    def add_event_listener(self, listener: EventListener) -> None:
        self._event_listeners.append(listener)

    @property
    def muted(self) -> bool:
        return self.fsm.muted

    @property
    def state(self) -> str:
        return self.fsm.state

    # -------- основной цикл (вызывается планировщиком) --------

    def poll(self) -> Optional[Status]:
        if self._stopped:
            return None
        try:
            return self.tick()
        except TransientSampleError as e:
            logger.warning("[%s] sample skipped: %s", self.name, e)
            self._emit_event(Event(type="SAMPLE_ERROR", ts=self.clock.wall(), message=str(e)))
            return None

    def tick(self) -> Optional[Status]:
        if self._stopped:
            return None

        # 1) Замер. Ошибка здесь ничего не меняет.
        reading = self.source.read()
        sample = self._make_sample(reading)

        # 2) Решение. Любая ошибка -> откат к состоянию до тика.
        snap = (self.estimator.snapshot(), self.fsm.snapshot())
        try:
            estimate = self.estimator.update(sample)
            band, kind = evaluate(sample, self.cfg.thresholds)
            transition = self.fsm.step(kind, sample.timestamp)
            sound_path = self._resolve_start(transition)
            capacity = self._capacity()
        except Exception:
            self.estimator.restore(snap[0])
            self.fsm.restore(snap[1])
            raise

        # 3) Побочные эффекты
        if transition.stop:
            self.sounds.stop()
        if sound_path is not None:
            self.sounds.start(sound_path)

        if transition.event is not None:
            self._emit_event(self._make_event(transition, sample, band))

        status = Status(
            band=band,
            color=color_hint(band, sample.charging),
            percent=sample.percent,
            percent_text=format_percent(sample.percent),
            time_text=format_time_text(sample.charging, estimate, reading.seconds_left),
            health_text=format_health(capacity),
            charging=sample.charging,
            state=self.fsm.state,
            sound_active=self.sounds.active,
            upper_alert_count=self.fsm.upper_alert_count,
            lower_alert_count=self.fsm.lower_alert_count,
        )
        logger.debug(
            "[%s] %s band=%s state=%s sound=%s",
            self.name, status.percent_text, band.value, status.state, status.sound_active,
        )
        self.last_status = status
        self._emit_status(status)
        return status

    def set_muted(self, muted: bool) -> None:
        """
        Переключатель mute. Включение гасит текущий звук,
        выключение — сразу перепроверяет состояние, не дожидаясь тика.
        """
        if muted == self.fsm.muted:
            return
        self.fsm.set_muted(muted)
        logger.info("[%s] alerts %s", self.name, "muted" if muted else "unmuted")
        if muted:
            self.sounds.stop()
        else:
            self.poll()

    def shutdown(self) -> None:
        """Нужно main.py для graceful stop."""
        self._stopped = True
        self.sounds.close()
        self.fsm.close()

    # -------------------- helpers --------------------

    def _make_sample(self, reading: BatteryReading) -> Sample:
        try:
            percent = float(reading.percent)
        except (TypeError, ValueError):
            raise TransientSampleError(f"Invalid battery percent: {reading.percent!r}")
        if math.isnan(percent) or not (0.0 <= percent <= 100.0):
            raise TransientSampleError(f"Battery percent out of range: {reading.percent!r}")
        return Sample(timestamp=self.clock.now(), percent=percent, charging=bool(reading.charging))

    def _resolve_start(self, transition: Transition) -> Optional[str]:
        if transition.start_file is None:
            return None
        path = self.resolver(transition.start_file)
        if path is None:
            logger.warning("[%s] sound file not found: %s", self.name, transition.start_file)
        return path

    def _capacity(self) -> Optional[Tuple[int, int]]:
        capacity = getattr(self.source, "capacity", None)
        if capacity is None:
            return None
        return capacity()

    def _make_event(self, transition: Transition, sample: Sample, band: Band) -> Event:
        # для RECOVERY вид алерта берём из состояния, которое покинули
        state = transition.state if transition.event == "ALERT" else transition.previous
        session = self.fsm.session
        return Event(
            type=transition.event,
            ts=self.clock.wall(),
            kind=_KIND_FOR_STATE.get(state, AlertKind.NONE),
            band=band,
            percent=sample.percent,
            charging=sample.charging,
            sound_file=session.sound_file if session else None,
            muted=self.fsm.muted,
        )

    def _emit_status(self, status: Status) -> None:
        for listener in self._status_listeners:
            try:
                listener(status)
            except Exception as e:
                logger.exception("[%s] status listener failed: %s", self.name, e)

    def _emit_event(self, event: Event) -> None:
        for listener in self._event_listeners:
            try:
                listener(event)
            except Exception as e:
                logger.exception("[%s] event listener failed for %s: %s", self.name, event.type, e)
