class MazeRaceError(Exception):
    """Base class for every error raised by maze_race."""


class InvalidDifficulty(MazeRaceError, ValueError):
    pass


class DegenerateSize(MazeRaceError, ValueError):
    pass


class PathNotFound(MazeRaceError):
    pass


class IterationBudgetExceeded(PathNotFound):
    pass


class OutOfBoundsMove(MazeRaceError, RuntimeError):
    """An AI move left the grid. Moves come from a validated path, so this is a bug."""


class PathInvariantError(MazeRaceError, RuntimeError):
    """Two consecutive path nodes are not one orthogonal step apart."""


class InvalidDirection(MazeRaceError, ValueError):
    pass


class UnsupportedMode(MazeRaceError, ValueError):
    pass


class RaceNotFound(MazeRaceError, KeyError):
    pass
