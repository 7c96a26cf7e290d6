from __future__ import annotations

from enum import Enum
from typing import Tuple, Union

from maze_race.errors import InvalidDirection, PathInvariantError


XY = Tuple[int, int]


class Dir(Enum):
    """Grid move; the value is the wire token."""

    NONE = "none"
    UP = "up"
    RIGHT = "right"
    DOWN = "down"
    LEFT = "left"

    @property
    def token(self) -> str:
        return self.value


MOVES = (Dir.UP, Dir.RIGHT, Dir.DOWN, Dir.LEFT)
_MOVE_TOKENS = frozenset(d.value for d in MOVES)

# Direction -> (dx, dy); y grows downwards
_DIR_TO_DXY = {
    Dir.NONE: (0, 0),
    Dir.UP: (0, -1),
    Dir.DOWN: (0, 1),
    Dir.LEFT: (-1, 0),
    Dir.RIGHT: (1, 0),
}

_DXY_TO_DIR = {v: k for k, v in _DIR_TO_DXY.items() if k != Dir.NONE}

# Index into a cell's wall vector: top, right, bottom, left
WALL_SIDES = ("top", "right", "bottom", "left")
WALL_INDEX = {
    Dir.UP: 0,
    Dir.RIGHT: 1,
    Dir.DOWN: 2,
    Dir.LEFT: 3,
}


def dir_to_delta(d: Dir) -> XY:
    return _DIR_TO_DXY[d]


def step(pos: XY, d: Dir) -> XY:
    dx, dy = _DIR_TO_DXY[d]
    return (pos[0] + dx, pos[1] + dy)


def opposite(d: Dir) -> Dir:
    dx, dy = _DIR_TO_DXY[d]
    return _DXY_TO_DIR.get((-dx, -dy), Dir.NONE)


def direction_between(a: XY, b: XY) -> Dir:
    """Direction of the single orthogonal step from ``a`` to ``b``."""
    delta = (b[0] - a[0], b[1] - a[1])
    try:
        return _DXY_TO_DIR[delta]
    except KeyError:
        raise PathInvariantError(f"{a} -> {b} is not a single orthogonal step") from None


def parse_direction(value: Union[str, Dir]) -> Dir:
    if isinstance(value, Dir):
        if value == Dir.NONE:
            raise InvalidDirection("Direction must be one of up, right, down, left")
        return value
    token = str(value).strip().lower()
    if token not in _MOVE_TOKENS:
        raise InvalidDirection(f"Unknown direction: {value!r}")
    return Dir(token)
