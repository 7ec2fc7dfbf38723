# battery_monitor/rules/thresholds.py
from __future__ import annotations

from typing import Tuple

from models import AlertKind, Band, Sample, Thresholds
from utils.logging import get_logger


logger = get_logger("thresholds")

# Палитра UI (как в оригинальном окне)
BAND_COLORS = {
    Band.FULL: "green",
    Band.HIGH: "green",
    Band.MID_HIGH: "yellowgreen",
    Band.MID_LOW: "orange",
    Band.CRITICAL: "red",
}
CHARGING_COLOR = "blue"


def classify(percent: float, thresholds: Thresholds) -> Band:
    """
    Полоса для процента заряда. Порядок проверок важен (первое совпадение):
    ровно upper -> HIGH, ровно lower -> CRITICAL.
    """
    if percent >= 100:
        return Band.FULL
    if percent >= thresholds.upper:
        return Band.HIGH
    if percent > thresholds.mid:
        return Band.MID_HIGH
    if percent > thresholds.lower:
        return Band.MID_LOW
    return Band.CRITICAL


def desired_alert(band: Band, charging: bool) -> AlertKind:
    if band in (Band.FULL, Band.HIGH) and charging:
        return AlertKind.UPPER
    if band is Band.CRITICAL and not charging:
        return AlertKind.LOWER
    return AlertKind.NONE


def evaluate(sample: Sample, thresholds: Thresholds) -> Tuple[Band, AlertKind]:
    """
    Проверяет Sample против порогов.
    Возвращает (полоса, какой алерт нужен).
    """
    band = classify(sample.percent, thresholds)
    kind = desired_alert(band, sample.charging)
    logger.debug(
        "percent=%.1f charging=%s -> band=%s alert=%s",
        sample.percent, sample.charging, band.value, kind.value,
    )
    return band, kind


def color_hint(band: Band, charging: bool) -> str:
    """Цвет для UI. При зарядке ниже верхнего порога — синий."""
    if charging and band not in (Band.FULL, Band.HIGH):
        return CHARGING_COLOR
    return BAND_COLORS[band]
