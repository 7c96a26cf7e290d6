from __future__ import annotations

import heapq
import itertools
from typing import Dict, List

from maze_race.config import PATH_ITERATION_FACTOR
from maze_race.errors import IterationBudgetExceeded, PathNotFound
from maze_race.log import get_logger
from maze_race.map.maze import Maze
from maze_race.utils.directions import XY

logger = get_logger(__name__)


def heuristic(a: XY, b: XY) -> int:
    # Manhattan distance
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _reconstruct(came_from: Dict[XY, XY], current: XY) -> List[XY]:
    path = [current]
    while current in came_from:
        current = came_from[current]
        path.append(current)
    path.reverse()
    return path


def search(maze: Maze, source: XY, target: XY) -> List[XY]:
    """
    A* over open passages with unit step cost.

    Raises PathNotFound when the target is unreachable or either end lies
    outside the grid, and IterationBudgetExceeded when more than
    ``PATH_ITERATION_FACTOR * width * height`` cells get expanded.
    """
    source = (int(source[0]), int(source[1]))
    target = (int(target[0]), int(target[1]))
    for name, pos in (("source", source), ("target", target)):
        if not maze.in_bounds(*pos):
            raise PathNotFound(f"{name} {pos} outside the {maze.width}x{maze.height} grid")
    if source == target:
        return [source]

    budget = PATH_ITERATION_FACTOR * maze.width * maze.height
    counter = itertools.count()  # ties on f resolve by discovery order

    g_score: Dict[XY, int] = {source: 0}
    came_from: Dict[XY, XY] = {}
    closed = set()
    open_heap = [(heuristic(source, target), next(counter), source)]
    expansions = 0

    while open_heap:
        _f, _order, current = heapq.heappop(open_heap)
        if current in closed:
            continue  # stale heap entry
        if expansions >= budget:
            raise IterationBudgetExceeded(f"A* gave up after {expansions} expansions ({source} -> {target})")
        expansions += 1

        if current == target:
            return _reconstruct(came_from, current)
        closed.add(current)

        tentative = g_score[current] + 1
        for neighbor in maze.open_neighbors(*current):
            if neighbor in closed:
                continue
            if tentative >= g_score.get(neighbor, tentative + 1):
                continue
            came_from[neighbor] = current
            g_score[neighbor] = tentative
            heapq.heappush(open_heap, (tentative + heuristic(neighbor, target), next(counter), neighbor))

    raise PathNotFound(f"No path from {source} to {target}")


def find_path(maze: Maze, source: XY, target: XY) -> List[XY]:
    """Shortest path from ``source`` to ``target``, or ``[]`` if there is none."""
    try:
        return search(maze, source, target)
    except IterationBudgetExceeded as e:
        logger.warning("Pathfinding reached iteration limit: %s", e)
    except PathNotFound as e:
        logger.debug("%s", e)
    return []
