# battery_monitor/devices/sound_player.py
from __future__ import annotations

from typing import Optional

import pygame

from utils.logging import get_logger

logger = get_logger("sound_player")


class PygamePlayback:
    """Один загруженный клип. play() не блокирует."""

    def __init__(self, path: str):
        self.path = path
        self._sound: Optional[pygame.mixer.Sound] = pygame.mixer.Sound(path)

    def play(self) -> None:
        if self._sound is not None:
            self._sound.play()

    def stop(self) -> None:
        if self._sound is not None:
            self._sound.stop()

    def close(self) -> None:
        self.stop()
        self._sound = None


class PygameSoundPlayer:
    """
    Аудиовыход через pygame.mixer. Микшер поднимается лениво:
    без звуковой карты ошибка всплывёт в open() и будет залогирована планировщиком.
    """

    def __init__(self, frequency: int = 44100, channels: int = 2):
        self.frequency = frequency
        self.channels = channels

    def _ensure_mixer(self) -> None:
        if not pygame.mixer.get_init():
            pygame.mixer.init(frequency=self.frequency, size=-16, channels=self.channels)
            logger.debug("pygame mixer initialised: %s", pygame.mixer.get_init())

    def open(self, path: str) -> PygamePlayback:
        self._ensure_mixer()
        return PygamePlayback(path)

    def close(self) -> None:
        if pygame.mixer.get_init():
            pygame.mixer.quit()
