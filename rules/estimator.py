# battery_monitor/rules/estimator.py
from __future__ import annotations

import collections
from typing import Deque, Optional, Tuple

from models import ChargeEstimate, Sample
from utils.logging import get_logger

logger = get_logger("estimator")

WINDOW_CAPACITY = 5      # ≈25 с при опросе раз в 5 с
MIN_DELTA_PERCENT = 0.01


class ChargeRateEstimator:
    """
    Скользящее окно (timestamp, percent) только пока идёт зарядка.
    Время до полного заряда считается по первому и последнему замеру окна.
    """

    def __init__(self, capacity: int = WINDOW_CAPACITY):
        self.capacity = capacity
        self._window: Deque[Tuple[float, float]] = collections.deque(maxlen=capacity)

    @property
    def window(self) -> Tuple[Tuple[float, float], ...]:
        return tuple(self._window)

    def update(self, sample: Sample) -> Optional[ChargeEstimate]:
        if not sample.charging:
            if self._window:
                logger.debug("charging stopped, window cleared (%d samples)", len(self._window))
            self.clear()
            return None

        self._window.append((sample.timestamp, sample.percent))
        return self.estimate(sample.percent)

    def estimate(self, current_percent: float) -> Optional[ChargeEstimate]:
        if len(self._window) < 2:
            return None

        first_ts, first_pct = self._window[0]
        last_ts, last_pct = self._window[-1]
        delta = last_pct - first_pct
        if delta <= MIN_DELTA_PERCENT:
            return None

        seconds_per_percent = (last_ts - first_ts) / delta
        remaining = seconds_per_percent * max(0.0, 100.0 - current_percent)
        return ChargeEstimate(seconds_per_percent=seconds_per_percent, remaining_seconds=remaining)

    def clear(self) -> None:
        self._window.clear()

    def snapshot(self) -> Tuple[Tuple[float, float], ...]:
        return self.window

    def restore(self, snap: Tuple[Tuple[float, float], ...]) -> None:
        self._window = collections.deque(snap, maxlen=self.capacity)
