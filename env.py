# battery_monitor/env.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from models import AlertConfig, Thresholds


DEFAULT_BATTERY_PATHS = os.pathsep.join([
    "/sys/class/power_supply/BAT0",
    "/sys/class/power_supply/BAT1",
])


# --- Утилиты парсинга ---
def _parse_bool(val: Optional[str], default: bool) -> bool:
    if val is None:
        return default
    v = val.strip().lower()
    return v in ("1", "true", "yes", "on", "y")


def _parse_int(val: Optional[str], default: int) -> int:
    if val is None or val == "":
        return default
    try:
        return int(val)
    except ValueError:
        raise ValueError(f"Invalid int value: {val!r}")


def _parse_float(val: Optional[str], default: float) -> float:
    if val is None or val == "":
        return default
    try:
        return float(val)
    except ValueError:
        raise ValueError(f"Invalid float value: {val!r}")


def _parse_paths(val: Optional[str]) -> List[str]:
    """Список каталогов через os.pathsep (':' / ';')."""
    if not val:
        return []
    return [p.strip() for p in val.split(os.pathsep) if p.strip()]


def _read_env_file(path: Optional[str]) -> Dict[str, str]:
    """
    Простой парсер .env (без зависимостей). Возвращает словарь ключ->значение.
    Переменные окружения ОС имеют приоритет над .env.
    """
    if not path:
        return {}
    if not os.path.isfile(path):
        raise FileNotFoundError(f".env file not found: {path}")

    data: Dict[str, str] = {}
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#"):
                continue
            if "=" not in s:
                continue
            k, v = s.split("=", 1)
            k = k.strip()
            v = v.strip().strip('"').strip("'")
            data[k] = v
    return data


def _get(env: Dict[str, str], key: str, default: Optional[str] = None) -> Optional[str]:
    """Достаём переменную: сначала из ОС, затем из .env словаря, иначе default."""
    if key in os.environ:
        return os.environ[key]
    return env.get(key, default)


# --- Конфиги/датаклассы ---
@dataclass
class HTTPConfig:
    enabled: bool
    url: str
    method: str
    token: Optional[str]


@dataclass
class FileConfig:
    enabled: bool
    path: str


@dataclass
class NotifyConfig:
    http: HTTPConfig
    file: FileConfig
    send_recovery: bool


@dataclass
class Config:
    # ядро алертов (диапазоны проверяет rules.validator)
    alert: AlertConfig

    # каденсы
    poll_interval_ms: int
    alert_repeat_ms: int
    alert_total_ms: int

    # логирование
    log_level: str

    # оповещения
    notify: NotifyConfig

    # поиск файлов / платформа
    resource_dirs: List[str] = field(default_factory=list)
    battery_paths: List[str] = field(default_factory=list)


def load_config(env_path: Optional[str] = None) -> Config:
    env_map = _read_env_file(env_path)

    # --- Пороги и звуки ---
    thresholds = Thresholds(
        upper=_parse_float(_get(env_map, "UPPER_THRESHOLD", "90"), 90.0),
        lower=_parse_float(_get(env_map, "LOWER_THRESHOLD", "15"), 15.0),
    )
    alert = AlertConfig(
        thresholds=thresholds,
        full_sound=_get(env_map, "FULL_BATTERY_SOUND", "full.wav") or "",
        low_sound=_get(env_map, "LOW_BATTERY_SOUND", "low.wav") or "",
        mute_alerts=_parse_bool(_get(env_map, "MUTE_ALERTS", "false"), False),
    )

    # --- Каденсы ---
    poll_interval_ms = _parse_int(_get(env_map, "POLL_INTERVAL_MS", "5000"), 5000)
    alert_repeat_ms = _parse_int(_get(env_map, "ALERT_REPEAT_MS", "2000"), 2000)
    alert_total_ms = _parse_int(_get(env_map, "ALERT_TOTAL_MS", "30000"), 30000)

    # --- Логирование ---
    log_level = (_get(env_map, "LOG_LEVEL", "INFO") or "INFO").upper()

    # --- Каналы оповещений ---
    http = HTTPConfig(
        enabled=_parse_bool(_get(env_map, "ALERT_HTTP_ENABLED", "false"), False),
        url=_get(env_map, "ALERT_HTTP_URL", "http://127.0.0.1:9000/battery") or "",
        method=(_get(env_map, "ALERT_HTTP_METHOD", "POST") or "POST").upper(),
        token=_get(env_map, "ALERT_HTTP_TOKEN"),
    )
    filecfg = FileConfig(
        enabled=_parse_bool(_get(env_map, "ALERT_FILE_ENABLED", "false"), False),
        path=_get(env_map, "ALERT_FILE_PATH", "battery_alerts.jsonl") or "battery_alerts.jsonl",
    )
    notify = NotifyConfig(
        http=http,
        file=filecfg,
        send_recovery=_parse_bool(_get(env_map, "SEND_RECOVERY", "true"), True),
    )

    # --- Базовые валидации ---
    if poll_interval_ms <= 0:
        raise ValueError("POLL_INTERVAL_MS must be positive")
    if alert_repeat_ms <= 0:
        raise ValueError("ALERT_REPEAT_MS must be positive")
    if http.enabled and not http.url:
        raise ValueError("ALERT_HTTP_ENABLED=true, but ALERT_HTTP_URL is empty")

    return Config(
        alert=alert,
        poll_interval_ms=poll_interval_ms,
        alert_repeat_ms=alert_repeat_ms,
        alert_total_ms=alert_total_ms,
        log_level=log_level,
        notify=notify,
        resource_dirs=_parse_paths(_get(env_map, "RESOURCE_DIRS", "")),
        battery_paths=_parse_paths(_get(env_map, "BATTERY_PATHS", DEFAULT_BATTERY_PATHS)),
    )
