# battery_monitor/rules/validator.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from errors import ConfigurationError
from models import AlertConfig
from utils.logging import get_logger

logger = get_logger("validator")

Resolver = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class ResolvedSounds:
    full_sound: str
    low_sound: str


def validate_alert_config(cfg: AlertConfig, resolve: Resolver) -> ResolvedSounds:
    """
    Проверки в фиксированном порядке, первая же ошибка -> ConfigurationError.
    Частично валидный конфиг не принимается.
    """
    upper = cfg.thresholds.upper
    lower = cfg.thresholds.lower

    # `not (...)` ловит и NaN
    if not (0 < upper <= 100):
        raise ConfigurationError(f"UpperThreshold {upper} is out of valid range (1-100)")
    if not (0 <= lower < 100):
        raise ConfigurationError(f"LowerThreshold {lower} is out of valid range (0-99)")
    if not (lower < upper):
        raise ConfigurationError(
            f"lower must be less than upper (LowerThreshold {lower}, UpperThreshold {upper})"
        )

    if not cfg.full_sound or not cfg.full_sound.strip():
        raise ConfigurationError("FullBatterySound file name is missing")
    if not cfg.low_sound or not cfg.low_sound.strip():
        raise ConfigurationError("LowBatterySound file name is missing")

    full_path = resolve(cfg.full_sound)
    if full_path is None:
        raise ConfigurationError(f"FullBatterySound file not found: {cfg.full_sound}")
    low_path = resolve(cfg.low_sound)
    if low_path is None:
        raise ConfigurationError(f"LowBatterySound file not found: {cfg.low_sound}")

    logger.debug("config ok: upper=%s lower=%s full=%s low=%s", upper, lower, full_path, low_path)
    return ResolvedSounds(full_sound=full_path, low_sound=low_path)
