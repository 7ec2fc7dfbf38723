# battery_monitor/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional


# -----------------------------
# Перечисления
# -----------------------------

class Band(str, Enum):
    """Классификация процента заряда относительно порогов."""

    FULL = "FULL"
    HIGH = "HIGH"
    MID_HIGH = "MID_HIGH"
    MID_LOW = "MID_LOW"
    CRITICAL = "CRITICAL"


class AlertKind(str, Enum):
    NONE = "NONE"
    UPPER = "UPPER"
    LOWER = "LOWER"


# -----------------------------
# Замеры
# -----------------------------

@dataclass(frozen=True)
class BatteryReading:
    """Сырые данные платформы (psutil / fake)."""

    percent: float
    charging: bool
    seconds_left: Optional[int] = None   # оценка платформы, None = неизвестно


@dataclass(frozen=True)
class Sample:
    """Один замер на тик. timestamp — секунды по часам движка."""

    timestamp: float
    percent: float
    charging: bool


# -----------------------------
# Конфигурация ядра
# -----------------------------

@dataclass(frozen=True)
class Thresholds:
    upper: float
    lower: float

    @property
    def mid(self) -> float:
        return (self.upper + self.lower) / 2


@dataclass(frozen=True)
class AlertConfig:
    """Уже распарсенная конфигурация алертов (проверяется validator'ом)."""

    thresholds: Thresholds
    full_sound: str
    low_sound: str
    mute_alerts: bool = False


# -----------------------------
# Состояние алерта / оценки
# -----------------------------

@dataclass(frozen=True)
class AlertSession:
    kind: AlertKind
    sound_file: str
    started_at: float
    active: bool = True


@dataclass(frozen=True)
class ChargeEstimate:
    seconds_per_percent: float
    remaining_seconds: float


# -----------------------------
# Событие (ALERT/RECOVERY/SAMPLE_ERROR)
# -----------------------------

@dataclass
class Event:
    """
    Событие для каналов оповещения (notifier) и подписчиков движка.
    """

    type: Literal["ALERT", "RECOVERY", "SAMPLE_ERROR"]
    ts: float

    kind: AlertKind = AlertKind.NONE
    band: Optional[Band] = None
    percent: Optional[float] = None
    charging: Optional[bool] = None

    sound_file: Optional[str] = None
    muted: bool = False
    message: Optional[str] = None


# -----------------------------
# Снимок для UI
# -----------------------------

@dataclass(frozen=True)
class Status:
    """То, что потребляет слой отображения после каждого тика."""

    band: Band
    color: str
    percent: float
    percent_text: str
    time_text: str
    health_text: str
    charging: bool
    state: str
    sound_active: bool
    upper_alert_count: int = 0
    lower_alert_count: int = 0
