# battery_monitor/devices/battery_source.py
from __future__ import annotations

import os
from typing import List, Optional, Sequence, Tuple

import psutil

from errors import TransientSampleError
from models import BatteryReading
from utils.logging import get_logger

logger = get_logger("battery_source")

DEFAULT_BATTERY_PATHS = [
    "/sys/class/power_supply/BAT0",
    "/sys/class/power_supply/BAT1",
]

# пары (design, full): сначала energy_* (µWh), потом charge_* (µAh)
_CAPACITY_FILES = (
    ("energy_full_design", "energy_full"),
    ("charge_full_design", "charge_full"),
)


class PsutilBatterySource:
    """
    Источник замеров: psutil.sensors_battery() + ёмкость из sysfs (Linux).
    """

    def __init__(self, battery_paths: Optional[Sequence[str]] = None):
        paths: List[str] = list(battery_paths) if battery_paths else list(DEFAULT_BATTERY_PATHS)
        self.battery_path: Optional[str] = next((p for p in paths if os.path.isdir(p)), None)
        if self.battery_path is None:
            logger.debug("No sysfs battery dir among %s, health unavailable", paths)

    def read(self) -> BatteryReading:
        battery = psutil.sensors_battery()
        if battery is None:
            raise TransientSampleError("No battery detected")
        # power_plugged=None: psutil не знает, подключено ли питание
        if battery.power_plugged is None:
            raise TransientSampleError("Charging state unknown")

        secs = battery.secsleft
        # POWER_TIME_UNLIMITED / POWER_TIME_UNKNOWN — отрицательные
        if secs is None or secs < 0:
            seconds_left = None
        else:
            seconds_left = int(secs)

        return BatteryReading(
            percent=float(battery.percent),
            charging=bool(battery.power_plugged),
            seconds_left=seconds_left,
        )

    def capacity(self) -> Optional[Tuple[int, int]]:
        """(design, full) или None, если платформа не сообщает."""
        if self.battery_path is None:
            return None
        for design_name, full_name in _CAPACITY_FILES:
            design = self._read_int(design_name)
            full = self._read_int(full_name)
            if design and full:
                return design, full
        return None

    def _read_int(self, filename: str) -> Optional[int]:
        path = os.path.join(self.battery_path or "", filename)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return int(f.read().strip())
        except (OSError, ValueError):
            return None
