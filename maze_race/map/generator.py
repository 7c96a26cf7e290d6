from __future__ import annotations

import math
import random
from typing import Iterator, List, Optional, Tuple

from maze_race.config import DIFFICULTY_SETTINGS, EXTRA_PASSAGE_FACTOR, MIN_MAZE_SIZE
from maze_race.errors import DegenerateSize, InvalidDifficulty
from maze_race.log import get_logger
from maze_race.map.maze import Maze, WallGrid, is_connected
from maze_race.utils.directions import MOVES, XY, Dir, step

logger = get_logger(__name__)


def difficulty_settings(difficulty: str) -> dict:
    try:
        return DIFFICULTY_SETTINGS[difficulty]
    except (KeyError, TypeError):
        raise InvalidDifficulty(
            f"Invalid difficulty level: {difficulty!r} (expected one of {', '.join(DIFFICULTY_SETTINGS)})"
        ) from None


def generate_maze(difficulty: str, rng: Optional[random.Random] = None) -> Maze:
    """Build a maze for one of the difficulty presets."""
    settings = difficulty_settings(difficulty)
    return carve_maze(settings["width"], settings["height"], settings["complexity"], rng)


def carve_maze(width: int, height: int, complexity: float, rng: Optional[random.Random] = None) -> Maze:
    """
    Build a connected maze of the given size.

    1. every wall closed
    2. start on a random edge
    3. randomized depth-first carving from start (explicit stack)
    4. extra loop passages, more of them for lower complexity
    5. end = visited cell farthest (Euclidean) from start, first in scan order
    6. BFS check, L-shaped fallback corridor if start and end are disconnected

    Given the same ``rng`` state the result is identical.
    """
    if width < MIN_MAZE_SIZE or height < MIN_MAZE_SIZE:
        raise DegenerateSize(f"Maze dimensions must be at least {MIN_MAZE_SIZE}x{MIN_MAZE_SIZE}, got {width}x{height}")
    if not 0.0 < complexity < 1.0:
        raise InvalidDifficulty(f"Complexity must lie in (0, 1), got {complexity}")

    rng = rng or random.Random()
    grid = WallGrid(width, height)

    start = pick_edge_start(width, height, rng)
    carve_passages(grid, start, rng)
    extra = add_extra_passages(grid, complexity, rng)
    end = farthest_visited(grid, start)

    if not is_connected(grid, start, end):
        logger.warning("Start %s and end %s disconnected, carving fallback corridor", start, end)
        carve_fallback_corridor(grid, start, end)

    logger.debug("Carved %dx%d maze start=%s end=%s extra_passages=%d", width, height, start, end, extra)
    return grid.freeze(start, end)


def pick_edge_start(width: int, height: int, rng: random.Random) -> XY:
    side = rng.randrange(4)
    if side == 0:  # top
        return (rng.randrange(width), 0)
    if side == 1:  # right
        return (width - 1, rng.randrange(height))
    if side == 2:  # bottom
        return (rng.randrange(width), height - 1)
    return (0, rng.randrange(height))  # left


def _shuffled_moves(rng: random.Random) -> Iterator[Dir]:
    moves = list(MOVES)
    rng.shuffle(moves)
    return iter(moves)


def carve_passages(grid: WallGrid, start: XY, rng: random.Random) -> None:
    # Each stack frame holds a cell and the rest of its shuffled directions,
    # which reproduces the recursive backtracker's visiting order.
    sx, sy = start
    grid.visited[sy, sx] = True
    stack: List[Tuple[XY, Iterator[Dir]]] = [(start, _shuffled_moves(rng))]

    while stack:
        current, directions = stack[-1]
        d = next(directions, None)
        if d is None:
            stack.pop()
            continue
        nx, ny = step(current, d)
        if grid.in_bounds(nx, ny) and not grid.visited[ny, nx]:
            grid.open_passage(current, (nx, ny))
            grid.visited[ny, nx] = True
            stack.append(((nx, ny), _shuffled_moves(rng)))


def extra_passage_count(width: int, height: int, complexity: float) -> int:
    return int(math.floor(width * height * (1 - complexity) * EXTRA_PASSAGE_FACTOR))


def add_extra_passages(grid: WallGrid, complexity: float, rng: random.Random) -> int:
    """Knock out random walls to create loops; returns how many attempts landed in range."""
    opened = 0
    for _ in range(extra_passage_count(grid.width, grid.height, complexity)):
        x = rng.randrange(grid.width)
        y = rng.randrange(grid.height)
        if rng.random() > 0.5:
            neighbor = (x, y + 1)
        else:
            neighbor = (x + 1, y)
        if not grid.in_bounds(*neighbor):
            continue
        grid.open_passage((x, y), neighbor)
        opened += 1
    return opened


def farthest_visited(grid: WallGrid, start: XY) -> XY:
    sx, sy = start
    end = start
    max_distance = 0.0
    for y in range(grid.height):
        for x in range(grid.width):
            if not grid.visited[y, x]:
                continue
            distance = math.hypot(x - sx, y - sy)
            if distance > max_distance:
                max_distance = distance
                end = (x, y)
    return end


def carve_fallback_corridor(grid: WallGrid, start: XY, end: XY) -> List[XY]:
    """Open an L-shaped corridor: along x first, then along y. Returns the cells on it."""
    x, y = start
    corridor = [start]
    while x != end[0]:
        x += 1 if x < end[0] else -1
        corridor.append((x, y))
    while y != end[1]:
        y += 1 if y < end[1] else -1
        corridor.append((x, y))

    for a, b in zip(corridor, corridor[1:]):
        grid.open_passage(a, b)
        grid.visited[b[1], b[0]] = True
    return corridor
