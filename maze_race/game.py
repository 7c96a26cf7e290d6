from __future__ import annotations

import random
from typing import Optional

import pygame

from maze_race.rendering.renderer import Renderer, surface_size
from maze_race.systems.race import GameMode, RaceSession
from maze_race.utils.directions import Dir

_KEY_TO_DIR = {
    pygame.K_UP: Dir.UP,
    pygame.K_w: Dir.UP,
    pygame.K_RIGHT: Dir.RIGHT,
    pygame.K_d: Dir.RIGHT,
    pygame.K_DOWN: Dir.DOWN,
    pygame.K_s: Dir.DOWN,
    pygame.K_LEFT: Dir.LEFT,
    pygame.K_a: Dir.LEFT,
}


class Game:
    """pygame-facing wrapper: keys in, AI ticks per frame, pixels out."""

    def __init__(self, difficulty: str, mode: GameMode = GameMode.VS_AI, seed: Optional[int] = None) -> None:
        self.session = RaceSession(difficulty, mode, rng=random.Random(seed))
        self.session.start()
        self.renderer = Renderer()
        self.show_ai_path = False

    @property
    def size(self) -> tuple:
        return surface_size(self.session.maze)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        if event.key == pygame.K_r:
            self.session.reset()
            return
        if event.key == pygame.K_p:
            self.show_ai_path = not self.show_ai_path
            return
        d = _KEY_TO_DIR.get(event.key)
        if d is not None:
            self.session.submit_direction(d)

    def update(self) -> None:
        # The main loop is single-threaded, so AI ticks run inline
        self.session.ai_tick()

    def draw(self, screen: pygame.Surface) -> None:
        self.renderer.draw(screen, self.session.snapshot(), self.show_ai_path)
