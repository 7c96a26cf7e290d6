"""
Shared fixtures for the maze_race test suite.
"""

import os
import random

# pygame must never open a real window under test
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from maze_race.map.maze import WallGrid


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: Slow tests (many generated mazes)")
    config.addinivalue_line("markers", "threaded: Tests that start background ticker threads")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
        return self.now


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def open_maze():
    """5x5 maze with every interior wall removed, start top-left, end bottom-right."""
    return WallGrid(5, 5).open_all().freeze((0, 0), (4, 4))


@pytest.fixture
def closed_maze():
    """5x5 maze with every wall standing: nothing is reachable."""
    return WallGrid(5, 5).freeze((0, 0), (4, 4))
