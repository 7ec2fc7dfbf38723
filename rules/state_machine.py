# battery_monitor/rules/state_machine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from models import AlertConfig, AlertKind, AlertSession
from utils.logging import get_logger

logger = get_logger("state_machine")

IDLE = "IDLE"
UPPER_ALERTING = "UPPER_ALERTING"
LOWER_ALERTING = "LOWER_ALERTING"

_STATE_FOR_KIND = {
    AlertKind.UPPER: UPPER_ALERTING,
    AlertKind.LOWER: LOWER_ALERTING,
}


@dataclass(frozen=True)
class Transition:
    """Результат одного шага FSM: что сказать планировщику звука."""

    previous: str
    state: str
    start_file: Optional[str] = None
    stop: bool = False
    event: Optional[Literal["ALERT", "RECOVERY"]] = None


class AlertStateMachine:
    """
    FSM алертов батареи.
    Состояния: IDLE <-> UPPER_ALERTING / LOWER_ALERTING (терминальных нет).

    already_alerted: для текущего условия звук уже запрошен (или подавлен mute),
    повторно не стартуем, пока условие не сменится.
    """

    def __init__(self, config: AlertConfig):
        self.cfg = config
        self.muted: bool = config.mute_alerts

        self.state: str = IDLE
        self.upper_alert_count: int = 0
        self.lower_alert_count: int = 0
        self.already_alerted: bool = False
        self.session: Optional[AlertSession] = None

    def step(self, kind: AlertKind, now: float) -> Transition:
        """
        Обрабатывает желаемый вид алерта за один тик.
        """
        previous = self.state

        if kind is AlertKind.NONE:
            self.state = IDLE
            self.upper_alert_count = 0
            self.lower_alert_count = 0
            self.already_alerted = False
            self.session = None
            if previous != IDLE:
                logger.info("%s -> IDLE", previous)
            return Transition(
                previous=previous,
                state=IDLE,
                stop=True,
                event="RECOVERY" if previous != IDLE else None,
            )

        target = _STATE_FOR_KIND[kind]
        if previous != target:
            # условие сменилось — флаг сбрасываем
            self.already_alerted = False
            logger.info("%s -> %s", previous, target)
        self.state = target

        if kind is AlertKind.UPPER:
            self.upper_alert_count += 1
            self.lower_alert_count = 0
            sound = self.cfg.full_sound
        else:
            self.lower_alert_count += 1
            self.upper_alert_count = 0
            sound = self.cfg.low_sound

        start_file: Optional[str] = None
        if not self.already_alerted:
            if self.muted:
                logger.info("[%s] muted, sound start suppressed", target)
            else:
                start_file = sound
                self.session = AlertSession(kind=kind, sound_file=sound, started_at=now)
            self.already_alerted = True

        return Transition(
            previous=previous,
            state=target,
            start_file=start_file,
            event="ALERT" if previous != target else None,
        )

    def set_muted(self, muted: bool) -> None:
        """
        mute подавляет только будущие старты; уже играющий звук
        останавливает тот, кто переключает mute.
        Снятие mute сбрасывает счётчики, чтобы повторная оценка снова запустила звук.
        """
        self.muted = muted
        if muted:
            self.session = None
        else:
            self.upper_alert_count = 0
            self.lower_alert_count = 0
            self.already_alerted = False

    def close(self) -> None:
        self.session = None

    # ---------- откат тика ----------

    def snapshot(self) -> Tuple:
        return (
            self.state,
            self.upper_alert_count,
            self.lower_alert_count,
            self.already_alerted,
            self.session,
            self.muted,
        )

    def restore(self, snap: Tuple) -> None:
        (
            self.state,
            self.upper_alert_count,
            self.lower_alert_count,
            self.already_alerted,
            self.session,
            self.muted,
        ) = snap
