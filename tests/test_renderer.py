import pygame
import pytest

from maze_race.config import COLOR_AI, COLOR_AI_PATH, COLOR_BG, COLOR_HUMAN, HUD_HEIGHT, MARGIN, TILE
from maze_race.game import Game
from maze_race.rendering.renderer import Renderer, surface_size
from maze_race.systems.race import GameMode, RaceSession, RaceState
from maze_race.utils.directions import Dir


@pytest.fixture(scope="module", autouse=True)
def pygame_headless():
    pygame.init()
    yield
    pygame.quit()


def keydown(key):
    return pygame.event.Event(pygame.KEYDOWN, key=key)


def rgb(surface, pos):
    return tuple(surface.get_at(pos))[:3]


def test_surface_size(open_maze):
    assert surface_size(open_maze) == (5 * TILE + 2 * MARGIN, 5 * TILE + 2 * MARGIN + HUD_HEIGHT)


def test_draws_both_racers(open_maze):
    session = RaceSession("easy", GameMode.VS_AI, maze_factory=lambda: open_maze)
    session.start()
    session.submit_direction(Dir.RIGHT)
    session.submit_direction(Dir.RIGHT)

    renderer = Renderer()
    screen = pygame.Surface(surface_size(open_maze))
    renderer.draw(screen, session.snapshot())

    assert rgb(screen, renderer.cell_center(2, 0)) == COLOR_HUMAN
    assert rgb(screen, renderer.cell_center(0, 0)) == COLOR_AI
    assert rgb(screen, renderer.cell_center(2, 2)) == COLOR_BG


def test_ai_path_overlay(open_maze):
    session = RaceSession("easy", GameMode.VS_AI, maze_factory=lambda: open_maze)
    session.start()
    session.ai_tick()
    snap = session.snapshot()
    # a path cell that neither racer stands on
    spare = next(p for p in snap.ai_path if p not in (snap.ai_position, snap.human_position))

    renderer = Renderer()
    screen = pygame.Surface(surface_size(open_maze))
    renderer.draw(screen, snap, show_ai_path=False)
    assert rgb(screen, renderer.cell_center(*spare)) == COLOR_BG
    renderer.draw(screen, snap, show_ai_path=True)
    assert rgb(screen, renderer.cell_center(*spare)) == COLOR_AI_PATH


def test_draws_idle_and_won_races(open_maze):
    session = RaceSession("easy", maze_factory=lambda: open_maze)
    renderer = Renderer()
    screen = pygame.Surface(surface_size(open_maze))
    renderer.draw(screen, session.snapshot())
    assert rgb(screen, (0, 0)) == COLOR_BG

    session.start()
    for d in (Dir.RIGHT,) * 4 + (Dir.DOWN,) * 4:
        session.submit_direction(d)
    assert session.state == RaceState.WON
    renderer.draw(screen, session.snapshot())


def test_game_keys():
    game = Game("easy", GameMode.VS_AI, seed=3)
    session = game.session
    epoch = session.epoch

    game.handle_event(keydown(pygame.K_p))
    assert game.show_ai_path
    game.handle_event(keydown(pygame.K_p))
    assert not game.show_ai_path

    # key-up and unmapped keys do nothing
    game.handle_event(pygame.event.Event(pygame.KEYUP, key=pygame.K_r))
    game.handle_event(keydown(pygame.K_q))
    assert session.epoch == epoch

    game.handle_event(keydown(pygame.K_r))
    assert session.epoch == epoch + 1


def test_game_moves_with_arrows_and_wasd():
    game = Game("easy", GameMode.SINGLE, seed=3)
    session = game.session
    pairs = {
        Dir.UP: (pygame.K_UP, pygame.K_w),
        Dir.RIGHT: (pygame.K_RIGHT, pygame.K_d),
        Dir.DOWN: (pygame.K_DOWN, pygame.K_s),
        Dir.LEFT: (pygame.K_LEFT, pygame.K_a),
    }
    d = next(d for d in pairs if session.maze.can_move(session.human_pos, d))
    arrow, letter = pairs[d]

    game.handle_event(keydown(arrow))
    assert session.steps == 1
    back = {Dir.UP: Dir.DOWN, Dir.DOWN: Dir.UP, Dir.LEFT: Dir.RIGHT, Dir.RIGHT: Dir.LEFT}[d]
    session.submit_direction(back)
    game.handle_event(keydown(letter))
    assert session.steps == 3


def test_game_update_and_draw():
    game = Game("medium", GameMode.VS_AI, seed=8)
    screen = pygame.Surface(game.size)
    game.update()
    game.draw(screen)
    assert game.session.ai_pos != game.session.maze.start
