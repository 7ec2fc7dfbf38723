# battery_monitor/utils/files.py
from __future__ import annotations

import os
import sys
from typing import List, Optional, Sequence

from utils.logging import get_logger

logger = get_logger("files")

RESOURCES_DIR = "resources"


def _base_dir() -> str:
    """Каталог приложения (где лежит main.py)."""
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _exe_dir() -> str:
    """Каталог запуска: сам бинарник для frozen-сборок, иначе скрипт из argv."""
    if getattr(sys, "frozen", False):
        return os.path.dirname(os.path.abspath(sys.executable))
    if sys.argv and sys.argv[0]:
        return os.path.dirname(os.path.abspath(sys.argv[0]))
    return os.getcwd()


class FileResolver:
    """
    Поиск внешних файлов (звуки) по упорядоченному списку каталогов.
    Для каждого базового каталога: base/ref, base/name, base/resources/name.
    """

    def __init__(self, base_dirs: Optional[Sequence[str]] = None, extra_dirs: Sequence[str] = ()):
        dirs = list(base_dirs) if base_dirs is not None else [_base_dir(), _exe_dir()]
        dirs.extend(extra_dirs)
        # без дублей, порядок сохраняем
        self.base_dirs: List[str] = []
        for d in dirs:
            if d and d not in self.base_dirs:
                self.base_dirs.append(d)

    def candidates(self, ref: str) -> List[str]:
        name = os.path.basename(ref)
        result: List[str] = []
        for base in self.base_dirs:
            for c in (
                os.path.join(base, ref),
                os.path.join(base, name),
                os.path.join(base, RESOURCES_DIR, name),
            ):
                if c not in result:
                    result.append(c)
        return result

    def resolve(self, ref: str) -> Optional[str]:
        if not ref or not ref.strip():
            return None
        if os.path.isabs(ref) and os.path.isfile(ref):
            return ref
        for c in self.candidates(ref):
            try:
                if os.path.isfile(c):
                    return os.path.abspath(c)
            except ValueError:
                # например, NUL в пути
                continue
        logger.debug("not found: %s (checked %d paths)", ref, len(self.candidates(ref)))
        return None

    def __call__(self, ref: str) -> Optional[str]:
        return self.resolve(ref)
