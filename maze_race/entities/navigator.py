from __future__ import annotations

import math
import random
import threading
import time
from typing import List, Optional

from maze_race.config import MOVE_CADENCE, TAUNT_CHANCE, TAUNT_COOLDOWN, TAUNTS
from maze_race.errors import InvalidDifficulty
from maze_race.log import get_logger
from maze_race.map.maze import Maze
from maze_race.systems.pathfinding import find_path
from maze_race.utils.directions import XY, Dir, direction_between

logger = get_logger(__name__)


def cadence_for(difficulty: str) -> float:
    try:
        return MOVE_CADENCE[difficulty]
    except (KeyError, TypeError):
        raise InvalidDifficulty(f"No move cadence for difficulty {difficulty!r}") from None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class Navigator:
    """
    Computer-controlled racer.

    Holds one planned path and walks it one cell per ``tick``, never faster
    than its cadence. All times are seconds on a monotonic clock supplied by
    the caller.
    """

    def __init__(self, difficulty: str, rng: Optional[random.Random] = None) -> None:
        self.difficulty = difficulty
        self.cadence = cadence_for(difficulty)
        self.rng = rng or random.Random()

        self.path: List[XY] = []
        self.cursor = 0
        self.stale = True
        self.last_move_time: Optional[float] = None
        self.last_taunt_time: Optional[float] = None
        self.last_error: Optional[str] = None

        self._planning = threading.Lock()

    def reset(self) -> None:
        """Forget the path and timers so the next tick plans on a fresh maze."""
        self.path = []
        self.cursor = 0
        self.stale = True
        self.last_move_time = None
        self.last_taunt_time = None
        self.last_error = None

    @property
    def position(self) -> Optional[XY]:
        if not self.path:
            return None
        return self.path[self.cursor]

    @property
    def finished(self) -> bool:
        return bool(self.path) and self.cursor >= len(self.path) - 1

    # ---------- Planning ----------

    def plan(self, maze: Maze, source: XY, target: XY) -> bool:
        """Plan a path; on failure the previous path and cursor stay as they were."""
        if not self._planning.acquire(blocking=False):
            logger.debug("Path calculation already in progress")
            return False
        try:
            t0 = time.perf_counter()
            path = find_path(maze, source, target)
            logger.debug("AI path calculation took %.2fms", (time.perf_counter() - t0) * 1000.0)

            if not path:
                self.last_error = f"no path from {tuple(source)} to {tuple(target)}"
                logger.warning("AI planning failed: %s", self.last_error)
                return False

            self.path = path
            self.cursor = 0
            self.stale = False
            self.last_error = None
            return True
        finally:
            self._planning.release()

    # ---------- Movement ----------

    def tick(self, now: float) -> Dir:
        if self.last_move_time is not None and now - self.last_move_time < self.cadence:
            return Dir.NONE
        if not self.path or self.cursor >= len(self.path) - 1:
            return Dir.NONE

        current = self.path[self.cursor]
        nxt = self.path[self.cursor + 1]
        d = direction_between(current, nxt)

        self.cursor += 1
        self.last_move_time = now
        return d

    def progress(self) -> int:
        if not self.path:
            return 0
        completion = self.cursor / max(1, len(self.path) - 1) * 100
        return _round_half_up(min(100.0, completion))

    # ---------- Flavor ----------

    def next_flavor_message(self, now: float) -> Optional[str]:
        if self.last_taunt_time is not None and now - self.last_taunt_time <= TAUNT_COOLDOWN:
            return None
        if self.rng.random() >= TAUNT_CHANCE:
            return None
        self.last_taunt_time = now
        return self.rng.choice(TAUNTS)
