from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

import numpy as np

from maze_race.utils.directions import MOVES, WALL_INDEX, WALL_SIDES, XY, Dir, direction_between, opposite, step


@dataclass(frozen=True)
class Cell:
    x: int
    y: int
    top: bool
    right: bool
    bottom: bool
    left: bool
    visited: bool = False

    @property
    def walls(self) -> Dict[str, bool]:
        return {side: getattr(self, side) for side in WALL_SIDES}


class _WallQueries:
    """Read-only wall queries shared by the builder and the frozen maze."""

    width: int
    height: int
    walls: np.ndarray
    visited: np.ndarray

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def has_wall(self, pos: XY, d: Dir) -> bool:
        x, y = pos
        return bool(self.walls[y, x, WALL_INDEX[d]])

    def can_move(self, pos: XY, d: Dir) -> bool:
        """True if ``d`` leads from ``pos`` to an in-range cell through an open wall."""
        if d == Dir.NONE or not self.in_bounds(*pos):
            return False
        nx, ny = step(pos, d)
        if not self.in_bounds(nx, ny):
            return False
        return not self.has_wall(pos, d)

    def open_neighbors(self, x: int, y: int) -> Iterator[XY]:
        # Passability is read from the current cell's walls only
        for d in MOVES:
            if self.can_move((x, y), d):
                yield step((x, y), d)

    def cell(self, x: int, y: int) -> Cell:
        top, right, bottom, left = (bool(v) for v in self.walls[y, x])
        return Cell(x, y, top, right, bottom, left, bool(self.visited[y, x]))


class WallGrid(_WallQueries):
    """Mutable wall layout used while a maze is being built."""

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.walls = np.ones((self.height, self.width, 4), dtype=bool)
        self.visited = np.zeros((self.height, self.width), dtype=bool)

    def open_passage(self, a: XY, b: XY) -> None:
        """Clear the wall pair between two orthogonally adjacent cells."""
        if not (self.in_bounds(*a) and self.in_bounds(*b)):
            raise ValueError(f"Passage {a} -> {b} leaves the {self.width}x{self.height} grid")
        d = direction_between(a, b)
        self.walls[a[1], a[0], WALL_INDEX[d]] = False
        self.walls[b[1], b[0], WALL_INDEX[opposite(d)]] = False

    def open_all(self) -> "WallGrid":
        """Clear every interior wall (outer border stays closed)."""
        for y in range(self.height):
            for x in range(self.width):
                if x + 1 < self.width:
                    self.open_passage((x, y), (x + 1, y))
                if y + 1 < self.height:
                    self.open_passage((x, y), (x, y + 1))
        return self

    def freeze(self, start: XY, end: XY) -> "Maze":
        return Maze(self.walls, start, end, visited=self.visited)


class Maze(_WallQueries):
    """
    Immutable maze: wall array of shape (height, width, 4) plus start and end.

    The arrays are copied and flagged read-only, so a Maze can be handed to
    both racers and to other threads without further locking.
    """

    def __init__(self, walls: np.ndarray, start: XY, end: XY, visited: Optional[np.ndarray] = None) -> None:
        walls = np.array(walls, dtype=bool, copy=True)
        if walls.ndim != 3 or walls.shape[2] != 4:
            raise ValueError(f"Wall array must have shape (height, width, 4), got {walls.shape}")
        self._height, self._width = walls.shape[0], walls.shape[1]
        if visited is None:
            visited = np.zeros((self._height, self._width), dtype=bool)
        visited = np.array(visited, dtype=bool, copy=True)

        walls.flags.writeable = False
        visited.flags.writeable = False
        self._walls = walls
        self._visited = visited

        self._start = (int(start[0]), int(start[1]))
        self._end = (int(end[0]), int(end[1]))
        for name, pos in (("start", self._start), ("end", self._end)):
            if not self.in_bounds(*pos):
                raise ValueError(f"{name} {pos} outside the {self._width}x{self._height} grid")

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def walls(self) -> np.ndarray:
        return self._walls

    @property
    def visited(self) -> np.ndarray:
        return self._visited

    @property
    def start(self) -> XY:
        return self._start

    @property
    def end(self) -> XY:
        return self._end

    def is_at_end(self, pos: Optional[XY]) -> bool:
        return pos is not None and tuple(pos) == self._end

    def layout_bytes(self) -> bytes:
        return self._walls.tobytes()

    def rows(self) -> List[List[Cell]]:
        return [[self.cell(x, y) for x in range(self._width)] for y in range(self._height)]

    def to_dict(self) -> dict:
        return {
            "width": self._width,
            "height": self._height,
            "start": {"x": self._start[0], "y": self._start[1]},
            "end": {"x": self._end[0], "y": self._end[1]},
            "grid": [[cell.walls for cell in row] for row in self.rows()],
        }

    def __repr__(self) -> str:
        return f"Maze({self._width}x{self._height}, start={self._start}, end={self._end})"


def bfs_distances(grid: _WallQueries, source: XY) -> np.ndarray:
    """Hop distance from ``source`` to every cell; -1 marks unreachable cells."""
    dist = np.full((grid.height, grid.width), -1, dtype=int)
    sx, sy = source
    dist[sy, sx] = 0
    queue = deque([source])
    while queue:
        x, y = queue.popleft()
        for nx, ny in grid.open_neighbors(x, y):
            if dist[ny, nx] < 0:
                dist[ny, nx] = dist[y, x] + 1
                queue.append((nx, ny))
    return dist


def shortest_distance(grid: _WallQueries, source: XY, target: XY) -> int:
    return int(bfs_distances(grid, source)[target[1], target[0]])


def is_connected(grid: _WallQueries, source: XY, target: XY) -> bool:
    return shortest_distance(grid, source, target) >= 0
