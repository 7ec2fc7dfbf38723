# battery_monitor/actions/formatter.py
from __future__ import annotations

import json
import math
from dataclasses import asdict
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from models import ChargeEstimate, Event, Status
from utils.logging import get_logger


logger = get_logger("formatter")

CALCULATING = "calculating..."


def format_time(seconds: float) -> str:
    """1h 5m, если час и больше; иначе 4m 40s."""
    total = int(max(0.0, seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours >= 1:
        return f"{hours}h {minutes}m"
    return f"{minutes}m {secs}s"


def format_percent(percent: float) -> str:
    return f"{percent:.0f}%"


def format_time_text(
    charging: bool,
    estimate: Optional[ChargeEstimate],
    seconds_left: Optional[int],
) -> str:
    """
    Зарядка: оценка по окну (или заглушка).
    Разрядка: собственная оценка платформы, если есть.
    """
    if charging:
        if estimate is None:
            return f"Time to Full: {CALCULATING}"
        return f"Time to Full: {format_time(estimate.remaining_seconds)}"
    if seconds_left is not None and seconds_left > 0:
        return f"Time Remaining: {format_time(seconds_left)}"
    return "Time Remaining: N/A"


def health_percent(capacity: Optional[Tuple[int, int]]) -> Optional[float]:
    """capacity = (design, full). Вернёт None, если платформа не сообщила."""
    if not capacity:
        return None
    design, full = capacity
    if design <= 0 or full <= 0:
        return None
    return full / design * 100.0


def format_health(capacity: Optional[Tuple[int, int]]) -> str:
    health = health_percent(capacity)
    if health is None:
        return "Battery Health: N/A"
    return f"Battery Health: {health:.1f}%"


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def format_event(event: Event) -> Dict[str, Any]:
    """
    Сформировать payload для отправки наружу.
    Возвращает dict, готовый к сериализации в JSON (None-ключи убраны).
    """
    data = {k: _plain(v) for k, v in asdict(event).items()}
    return {k: v for k, v in data.items() if v is not None}


def format_status(status: Status) -> Dict[str, Any]:
    return {k: _plain(v) for k, v in asdict(status).items()}


def status_line(status: Status) -> str:
    """Однострочное представление для консоли/трея."""
    line = f"{status.percent_text} | {'Charging' if status.charging else 'Discharging'} | {status.time_text}"
    if status.sound_active:
        line += " | ALERT"
    return line


def to_json(payload: Dict[str, Any]) -> str:
    """Преобразовать dict в JSON-строку (читаемый вывод)."""
    try:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        logger.error("JSON encode error: %s", e)
        return "{}"
