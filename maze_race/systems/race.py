from __future__ import annotations

import random
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Union

from maze_race.config import TAUNT_DISPLAY_TIME
from maze_race.entities.navigator import Navigator
from maze_race.errors import OutOfBoundsMove, UnsupportedMode
from maze_race.log import get_logger
from maze_race.map.generator import difficulty_settings, generate_maze
from maze_race.map.maze import Maze
from maze_race.systems.events import (
    EventChannel,
    FlavorMessage,
    MazeReady,
    PositionChanged,
    RaceEvent,
    RaceWon,
    Side,
)
from maze_race.utils.directions import XY, Dir, step
from maze_race.utils.timefmt import format_clock

logger = get_logger(__name__)


class RaceState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    WON = "won"
    RESET = "reset"


class GameMode(Enum):
    SINGLE = "single"
    VS_AI = "vs_ai"
    MULTIPLAYER = "multiplayer"


def parse_mode(value: Union[str, GameMode]) -> GameMode:
    try:
        mode = value if isinstance(value, GameMode) else GameMode(str(value).strip().lower())
    except ValueError:
        raise UnsupportedMode(f"Unknown game mode: {value!r}") from None
    if mode == GameMode.MULTIPLAYER:
        raise UnsupportedMode("Multiplayer mode is not available")
    return mode


def player_progress(maze: Maze, pos: XY) -> float:
    remaining = abs(pos[0] - maze.end[0]) + abs(pos[1] - maze.end[1])
    return max(0.0, 100.0 - remaining / (maze.width + maze.height) * 50.0)


@dataclass(frozen=True)
class RaceSnapshot:
    epoch: int
    difficulty: str
    mode: GameMode
    state: RaceState
    winner: Optional[Side]
    maze: Optional[Maze]
    human_position: Optional[XY]
    ai_position: Optional[XY]
    elapsed: float
    steps: int
    ai_progress: int
    human_progress: float
    flavor_message: Optional[str]
    ai_path: List[XY] = field(default_factory=list)

    def to_dict(self, include_maze: bool = True) -> dict:
        def xy(pos):
            return None if pos is None else {"x": pos[0], "y": pos[1]}

        data = {
            "epoch": self.epoch,
            "difficulty": self.difficulty,
            "mode": self.mode.value,
            "state": self.state.value,
            "winner": self.winner.value if self.winner else None,
            "human_position": xy(self.human_position),
            "ai_position": xy(self.ai_position),
            "elapsed": round(self.elapsed, 3),
            "clock": format_clock(self.elapsed),
            "steps": self.steps,
            "ai_progress": self.ai_progress,
            "human_progress": round(self.human_progress, 1),
            "flavor_message": self.flavor_message,
            "ai_path": [xy(p) for p in self.ai_path],
        }
        if include_maze:
            data["maze"] = self.maze.to_dict() if self.maze else None
        return data


class RaceSession:
    """
    One race between the human and (optionally) the navigator.

    Human intents and AI ticks may arrive from different threads; every state
    change happens under ``self._lock`` and events are dispatched after the
    lock is released.
    """

    def __init__(
        self,
        difficulty: str,
        mode: Union[str, GameMode] = GameMode.SINGLE,
        *,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        maze_factory: Optional[Callable[[], Maze]] = None,
    ) -> None:
        difficulty_settings(difficulty)  # raises InvalidDifficulty
        self.difficulty = difficulty
        self.mode = parse_mode(mode)
        self.rng = rng or random.Random()
        self.clock = clock
        self._maze_factory = maze_factory or (lambda: generate_maze(self.difficulty, self.rng))

        self.events = EventChannel()
        self._lock = threading.Lock()

        self.epoch = 0
        self.closed = False
        self.state = RaceState.IDLE
        self.winner: Optional[Side] = None
        self.maze: Optional[Maze] = None
        self.human_pos: Optional[XY] = None
        self.ai_pos: Optional[XY] = None
        self.navigator: Optional[Navigator] = None
        self.steps = 0
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.flavor_message: Optional[str] = None
        self.flavor_until = 0.0

    # ---------- Lifecycle ----------

    def start(self) -> None:
        with self._lock:
            if self.closed:
                raise RuntimeError("Cannot start a closed race")
            if self.state != RaceState.IDLE:
                raise RuntimeError(f"Cannot start a race in state {self.state.value}")
            pending = self._start_locked()
        self._dispatch(pending)

    def reset(self) -> None:
        """Throw the current race away and start a fresh one."""
        with self._lock:
            if self.closed:
                raise RuntimeError("Cannot reset a closed race")
            self.epoch += 1
            self.state = RaceState.RESET
            self._clear_locked()
            self.state = RaceState.IDLE
            pending = self._start_locked()
        logger.info("Race reset (epoch %d)", self.epoch)
        self._dispatch(pending)

    def close(self) -> None:
        """End the race for good; later starts, resets and ticks are refused."""
        with self._lock:
            self.epoch += 1
            self.closed = True
            self._clear_locked()
            self.navigator = None
            self.state = RaceState.IDLE

    def _clear_locked(self) -> None:
        self.winner = None
        self.maze = None
        self.human_pos = None
        self.ai_pos = None
        self.steps = 0
        self.start_time = None
        self.end_time = None
        self.flavor_message = None
        self.flavor_until = 0.0

    def _start_locked(self) -> List[RaceEvent]:
        maze = self._maze_factory()
        self.maze = maze
        self.human_pos = maze.start
        self.steps = 0
        self.winner = None
        self.end_time = None

        if self.mode == GameMode.VS_AI:
            if self.navigator is None:
                self.navigator = Navigator(self.difficulty, rng=self.rng)
            else:
                self.navigator.reset()
            self.ai_pos = maze.start
        else:
            self.navigator = None
            self.ai_pos = None

        self.start_time = self.clock()
        self.state = RaceState.ACTIVE
        logger.info(
            "Race started: %s %s, %dx%d, start=%s end=%s",
            self.difficulty, self.mode.value, maze.width, maze.height, maze.start, maze.end,
        )

        pending: List[RaceEvent] = [
            MazeReady(self.epoch, maze),
            PositionChanged(self.epoch, Side.HUMAN, self.human_pos),
        ]
        if self.ai_pos is not None:
            pending.append(PositionChanged(self.epoch, Side.AI, self.ai_pos))
        return pending

    # ---------- Inputs ----------

    def submit_direction(self, direction: Dir) -> bool:
        """Move the human one cell. Blocked or out-of-turn intents are ignored."""
        with self._lock:
            if self.state != RaceState.ACTIVE or direction == Dir.NONE:
                return False
            if not self.maze.can_move(self.human_pos, direction):
                logger.debug("Human move %s from %s blocked", direction.token, self.human_pos)
                return False

            self.human_pos = step(self.human_pos, direction)
            self.steps += 1
            pending: List[RaceEvent] = [PositionChanged(self.epoch, Side.HUMAN, self.human_pos)]
            if self.maze.is_at_end(self.human_pos):
                pending.extend(self._claim_win_locked(Side.HUMAN))
        self._dispatch(pending)
        return True

    def ai_tick(self, now: Optional[float] = None, epoch: Optional[int] = None) -> Dir:
        pending: List[RaceEvent] = []
        with self._lock:
            move = self._ai_tick_locked(now, epoch, pending)
        self._dispatch(pending)
        return move

    def _ai_tick_locked(self, now: Optional[float], epoch: Optional[int], pending: List[RaceEvent]) -> Dir:
        if epoch is not None and epoch != self.epoch:
            return Dir.NONE
        if self.state != RaceState.ACTIVE or self.navigator is None:
            return Dir.NONE
        now = self.clock() if now is None else now

        if self.navigator.stale:
            anchor = self.ai_pos
            if not self._plan_locked():
                return Dir.NONE
            if self.ai_pos != anchor:
                pending.append(PositionChanged(self.epoch, Side.AI, self.ai_pos))

        move = self.navigator.tick(now)
        if move == Dir.NONE:
            return Dir.NONE

        new_pos = step(self.ai_pos, move)
        if not self.maze.in_bounds(*new_pos):
            raise OutOfBoundsMove(f"AI moved {move.token} from {self.ai_pos} off the grid")
        self.ai_pos = new_pos

        pending.append(PositionChanged(self.epoch, Side.AI, new_pos))
        if self.maze.is_at_end(new_pos):
            pending.extend(self._claim_win_locked(Side.AI, now))

        taunt = self.navigator.next_flavor_message(now)
        if taunt:
            self.flavor_message = taunt
            self.flavor_until = now + TAUNT_DISPLAY_TIME
            pending.append(FlavorMessage(self.epoch, taunt))
        return move

    def _plan_locked(self) -> bool:
        target = self.maze.end
        if self.navigator.plan(self.maze, self.ai_pos, target):
            return True
        if self.human_pos == self.ai_pos:
            return False
        logger.info("Retrying AI path calculation from human position %s", self.human_pos)
        if self.navigator.plan(self.maze, self.human_pos, target):
            self.ai_pos = self.navigator.position
            return True
        return False

    def _claim_win_locked(self, side: Side, now: Optional[float] = None) -> List[RaceEvent]:
        if self.state != RaceState.ACTIVE:
            return []
        self.end_time = self.clock() if now is None else now
        self.state = RaceState.WON
        self.winner = side
        elapsed = self.end_time - self.start_time
        logger.info("%s won in %.2fs", side.value, elapsed)
        return [RaceWon(self.epoch, side, elapsed)]

    def _dispatch(self, pending: List[RaceEvent]) -> None:
        for event in pending:
            self.events.publish(event)

    # ---------- Read side ----------

    def is_active(self, epoch: Optional[int] = None) -> bool:
        with self._lock:
            return self.state == RaceState.ACTIVE and (epoch is None or epoch == self.epoch)

    def _elapsed_locked(self, now: Optional[float]) -> float:
        if self.start_time is None:
            return 0.0
        if self.end_time is not None:
            return self.end_time - self.start_time
        now = self.clock() if now is None else now
        return max(0.0, now - self.start_time)

    def elapsed(self, now: Optional[float] = None) -> float:
        with self._lock:
            return self._elapsed_locked(now)

    def snapshot(self, now: Optional[float] = None) -> RaceSnapshot:
        with self._lock:
            now = self.clock() if now is None else now
            nav = self.navigator
            flavor = self.flavor_message if self.flavor_message and now < self.flavor_until else None
            return RaceSnapshot(
                epoch=self.epoch,
                difficulty=self.difficulty,
                mode=self.mode,
                state=self.state,
                winner=self.winner,
                maze=self.maze,
                human_position=self.human_pos,
                ai_position=self.ai_pos,
                elapsed=self._elapsed_locked(now),
                steps=self.steps,
                ai_progress=nav.progress() if nav else 0,
                human_progress=player_progress(self.maze, self.human_pos) if self.maze else 0.0,
                flavor_message=flavor,
                ai_path=list(nav.path) if nav else [],
            )
