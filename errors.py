# battery_monitor/errors.py
from __future__ import annotations


class ConfigurationError(Exception):
    """
    Невалидная конфигурация (пороги вне диапазона, lower >= upper,
    звуковые файлы не найдены). Фатально: движок не стартует.
    """


class TransientSampleError(Exception):
    """
    Замер одного тика непригоден (нет батареи, мусорный процент).
    Не фатально: тик пропускается, опрос продолжается.
    """
