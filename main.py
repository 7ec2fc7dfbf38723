# battery_monitor/main.py
from __future__ import annotations

import asyncio
import contextlib
import os
import signal
import sys
from typing import Optional, Set

from actions.formatter import format_status, status_line, to_json
from actions.notifier import Notifier
from devices.battery_source import PsutilBatterySource
from devices.sound_player import PygameSoundPlayer
from env import Config, load_config
from errors import ConfigurationError
from models import Event, Status
from rules.validator import validate_alert_config
from utils.files import FileResolver
from utils.logging import get_logger, setup_logging
from workers.clock import LoopClock
from workers.engine import AlertEngine
from workers.scheduler import Scheduler

EXIT_CONFIG_ERROR = 2


# -------------------- helpers --------------------

def _env_path_from_cli() -> Optional[str]:
    """
    Путь к .env через:
      - аргумент командной строки: python main.py /path/to/.env
      - переменную окружения: ENV_PATH=/path/to/.env
    """
    if len(sys.argv) > 1 and sys.argv[1].strip():
        return sys.argv[1].strip()
    return os.environ.get("ENV_PATH")


def _summarize_notify(cfg: Config) -> str:
    parts = []
    if cfg.notify.http.enabled:
        parts.append(f"http:{cfg.notify.http.method}@{cfg.notify.http.url}")
    if cfg.notify.file.enabled:
        parts.append(f"file:{cfg.notify.file.path}")
    return ", ".join(parts) if parts else "none"


class _StatusPrinter:
    """Вместо окна: пишем строку статуса в лог, только когда она меняется."""

    def __init__(self):
        self._last: Optional[str] = None
        self._log = get_logger("status")

    def __call__(self, status: Status) -> None:
        self._log.debug("status %s", to_json(format_status(status)))
        line = status_line(status)
        if line != self._last:
            self._log.info("%s | %s", line, status.health_text)
            self._last = line


def _toggle_mute(engine: AlertEngine) -> None:
    """SIGUSR1: снятие mute сразу опрашивает батарею, ошибки тика только в лог."""
    try:
        engine.set_muted(not engine.muted)
    except Exception as e:
        get_logger("main").error("Worker %s tick error: %s", engine.name, e)


# -------------------- bootstrap --------------------

async def _graceful_run(config: Config, resolver: FileResolver) -> None:
    """
    Сборка движка, запуск планировщика и мягкая остановка по сигналам.
    """
    logger = get_logger("main")
    loop = asyncio.get_running_loop()
    clock = LoopClock(loop)

    player = PygameSoundPlayer()
    engine = AlertEngine(
        config=config.alert,
        source=PsutilBatterySource(config.battery_paths),
        player=player,
        resolver=resolver,
        clock=clock,
        repeat_ms=config.alert_repeat_ms,
        total_ms=config.alert_total_ms,
    )
    engine.add_status_listener(_StatusPrinter())

    notifier = Notifier.from_config(config)
    pending: Set[asyncio.Task] = set()

    def _forward(event: Event) -> None:
        if event.type != "SAMPLE_ERROR":
            logger.info("%s %s at %.0f%%", event.type, event.kind.value, event.percent)
        if not notifier.enabled:
            return
        task = loop.create_task(notifier.send(event))
        pending.add(task)
        task.add_done_callback(pending.discard)

    engine.add_event_listener(_forward)

    scheduler = Scheduler(interval_ms=config.poll_interval_ms, workers=[engine], clock=clock)
    stop_event = asyncio.Event()

    def _signal_handler(signame: str):
        logger.info("Received signal %s -> stopping...", signame)
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler, sig.name)
        except NotImplementedError:
            # Windows — сигналы через loop не поддерживаются
            pass
    sigusr1 = getattr(signal, "SIGUSR1", None)
    if sigusr1 is not None:
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sigusr1, _toggle_mute, engine)

    run_task = asyncio.create_task(scheduler.run(), name="scheduler")

    # Ожидаем сигнал остановки
    await stop_event.wait()

    await scheduler.stop()
    engine.shutdown()

    try:
        await asyncio.wait_for(run_task, timeout=5.0)
    except asyncio.TimeoutError:
        logger.warning("Scheduler didn't stop in time, canceling task...")
        run_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await run_task

    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
    await notifier.close()
    player.close()
    logger.info("battery_monitor stopped.")


async def _async_main() -> int:
    # 1) Загружаем конфиг
    env_path = _env_path_from_cli()
    config = load_config(env_path)

    # 2) Логирование
    setup_logging(config)
    logger = get_logger("main")
    logger.debug("ENV path: %s", env_path or "<default>")

    # 3) Проверка конфигурации до старта движка
    resolver = FileResolver(extra_dirs=config.resource_dirs)
    try:
        sounds = validate_alert_config(config.alert, resolver)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG_ERROR

    t = config.alert.thresholds
    logger.info("Thresholds: upper=%s%% lower=%s%% | muted=%s", t.upper, t.lower, config.alert.mute_alerts)
    logger.info("Sounds: full=%s low=%s", sounds.full_sound, sounds.low_sound)
    logger.info("Poll interval: %d ms | Notify channels: %s", config.poll_interval_ms, _summarize_notify(config))

    # 4) Основной цикл с graceful shutdown
    await _graceful_run(config, resolver)
    return 0


def main() -> int:
    try:
        return asyncio.run(_async_main())
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        # На самый крайний случай — в stderr
        print(f"[battery_monitor] Fatal error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
