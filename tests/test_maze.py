import numpy as np
import pytest

from maze_race.map.maze import Maze, WallGrid, bfs_distances, is_connected, shortest_distance
from maze_race.utils.directions import Dir


def test_new_grid_is_fully_walled():
    grid = WallGrid(4, 3)
    assert grid.walls.shape == (3, 4, 4)
    assert grid.walls.all()
    assert not grid.visited.any()
    assert list(grid.open_neighbors(1, 1)) == []


def test_open_passage_clears_both_sides():
    grid = WallGrid(3, 3)
    grid.open_passage((1, 1), (2, 1))
    assert not grid.has_wall((1, 1), Dir.RIGHT)
    assert not grid.has_wall((2, 1), Dir.LEFT)
    assert grid.has_wall((1, 1), Dir.UP)

    grid.open_passage((1, 1), (1, 0))
    assert not grid.has_wall((1, 1), Dir.UP)
    assert not grid.has_wall((1, 0), Dir.DOWN)


def test_open_passage_outside_grid_raises():
    grid = WallGrid(3, 3)
    with pytest.raises(ValueError):
        grid.open_passage((2, 2), (3, 2))


def test_border_stays_closed(open_maze):
    for x in range(open_maze.width):
        assert open_maze.has_wall((x, 0), Dir.UP)
        assert open_maze.has_wall((x, open_maze.height - 1), Dir.DOWN)
    for y in range(open_maze.height):
        assert open_maze.has_wall((0, y), Dir.LEFT)
        assert open_maze.has_wall((open_maze.width - 1, y), Dir.RIGHT)


def test_can_move(open_maze, closed_maze):
    assert open_maze.can_move((0, 0), Dir.RIGHT)
    assert open_maze.can_move((0, 0), Dir.DOWN)
    assert not open_maze.can_move((0, 0), Dir.UP)
    assert not open_maze.can_move((0, 0), Dir.LEFT)
    assert not open_maze.can_move((0, 0), Dir.NONE)
    assert not open_maze.can_move((9, 9), Dir.LEFT)
    assert not closed_maze.can_move((2, 2), Dir.RIGHT)


def test_maze_is_read_only(open_maze):
    with pytest.raises(ValueError):
        open_maze.walls[0, 0, 0] = False
    with pytest.raises(AttributeError):
        open_maze.width = 7


def test_freeze_copies_the_builder_state():
    grid = WallGrid(3, 3)
    maze = grid.freeze((0, 0), (2, 2))
    grid.open_passage((0, 0), (1, 0))
    assert maze.has_wall((0, 0), Dir.RIGHT)


def test_maze_validates_shape_and_endpoints():
    with pytest.raises(ValueError):
        Maze(np.ones((3, 3), dtype=bool), (0, 0), (2, 2))
    with pytest.raises(ValueError):
        Maze(np.ones((3, 3, 4), dtype=bool), (0, 0), (3, 0))


def test_is_at_end(open_maze):
    assert open_maze.is_at_end((4, 4))
    assert open_maze.is_at_end([4, 4])
    assert not open_maze.is_at_end((0, 0))
    assert not open_maze.is_at_end(None)


def test_cell_and_to_dict(open_maze):
    cell = open_maze.cell(0, 0)
    assert (cell.x, cell.y) == (0, 0)
    assert cell.walls == {"top": True, "right": False, "bottom": False, "left": True}

    data = open_maze.to_dict()
    assert data["width"] == 5 and data["height"] == 5
    assert data["start"] == {"x": 0, "y": 0}
    assert data["end"] == {"x": 4, "y": 4}
    assert len(data["grid"]) == 5 and len(data["grid"][0]) == 5
    assert data["grid"][4][4] == {"top": False, "right": True, "bottom": True, "left": False}


def test_bfs_distances(open_maze, closed_maze):
    dist = bfs_distances(open_maze, (0, 0))
    assert dist[4, 4] == 8
    assert dist[0, 0] == 0
    assert shortest_distance(open_maze, (0, 0), (2, 1)) == 3
    assert is_connected(open_maze, (0, 0), (4, 4))

    dist = bfs_distances(closed_maze, (0, 0))
    assert (dist == -1).sum() == 24
    assert not is_connected(closed_maze, (0, 0), (4, 4))


def test_layout_bytes_reflects_walls(open_maze, closed_maze):
    assert open_maze.layout_bytes() != closed_maze.layout_bytes()
    same = WallGrid(5, 5).open_all().freeze((1, 1), (2, 2))
    assert same.layout_bytes() == open_maze.layout_bytes()
