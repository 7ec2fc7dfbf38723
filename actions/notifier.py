# battery_monitor/actions/notifier.py
from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import aiohttp

from actions.formatter import format_event, to_json
from env import Config
from models import Event
from utils.logging import get_logger

logger = get_logger("notifier")


class Notifier:
    """
    Каналы оповещений о событиях движка: file (JSONL) / http.
    Использование: notifier = Notifier.from_config(cfg); await notifier.send(event)
    Ошибки каналов логируются и наружу не пробрасываются.
    """

    def __init__(self, cfg: Config):
        self.cfg = cfg
        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_config(cls, cfg: Config) -> "Notifier":
        return cls(cfg)

    @property
    def enabled(self) -> bool:
        return self.cfg.notify.file.enabled or self.cfg.notify.http.enabled

    # ------------- публичный API -------------

    async def send(self, event: Event) -> None:
        if event.type == "RECOVERY" and not self.cfg.notify.send_recovery:
            return

        payload = format_event(event)

        # FILE
        if self.cfg.notify.file.enabled:
            try:
                await self._write_file_line(payload, self.cfg.notify.file.path)
            except Exception as e:
                logger.error("File notifier error: %s", e)

        # HTTP
        if self.cfg.notify.http.enabled:
            try:
                await self._send_http(payload)
            except Exception as e:
                logger.error("HTTP notifier error: %s", e)

    async def close(self) -> None:
        if self._session is not None:
            try:
                await self._session.close()
            except aiohttp.ClientError as e:
                logger.debug("HTTP session close error: %s", e)
            self._session = None

    # ------------- реализации каналов -------------

    async def _write_file_line(self, payload: Dict[str, Any], path: str) -> None:
        """
        Запись в файл по одной строке JSON (JSONL).
        """
        line = to_json(payload)

        # файловые операции блокирующие — унесём в threadpool
        def _write():
            with open(path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

        await asyncio.to_thread(_write)
        logger.debug("file notifier -> %s | %s", path, payload.get("type"))

    async def _send_http(self, payload: Dict[str, Any]) -> None:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=5))

        url = self.cfg.notify.http.url
        method = self.cfg.notify.http.method or "POST"
        headers = {"Content-Type": "application/json"}
        token = self.cfg.notify.http.token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        async with self._session.request(method, url, headers=headers, json=payload) as resp:
            text = await resp.text()
            if resp.status >= 400:
                raise RuntimeError(f"HTTP {resp.status}: {text[:200]}")
            logger.debug("http notifier -> %s %s | %s", method, url, payload.get("type"))
