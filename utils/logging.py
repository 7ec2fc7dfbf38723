# battery_monitor/utils/logging.py
from __future__ import annotations

import logging
import sys
from typing import Dict, Optional

ROOT_NAME = "battery_monitor"

# сторонние логгеры, которые на DEBUG заглушают статус батареи
_NOISY = ("asyncio", "aiohttp.access", "aiohttp.client")

_loggers: Dict[str, logging.Logger] = {}


def _level_from(name: str) -> Optional[int]:
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else None


def setup_logging(config) -> int:
    """
    Один stdout-хендлер на корневом логгере, уровень из config.log_level.
    Неизвестный уровень -> INFO с предупреждением. Возвращает итоговый уровень.
    """
    level = _level_from(config.log_level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S")
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level if level is not None else logging.INFO)

    for name in _NOISY:
        logging.getLogger(name).setLevel(logging.WARNING)

    if level is None:
        get_logger().warning("Unknown LOG_LEVEL %r, using INFO", config.log_level)
    return root.level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """battery_monitor или battery_monitor.<name>."""
    full = f"{ROOT_NAME}.{name}" if name else ROOT_NAME
    if full not in _loggers:
        _loggers[full] = logging.getLogger(full)
    return _loggers[full]
