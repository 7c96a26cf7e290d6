import argparse

import pygame

from maze_race.config import DEFAULT_DIFFICULTY, DIFFICULTY_SETTINGS, FPS, WINDOW_TITLE
from maze_race.errors import UnsupportedMode
from maze_race.game import Game
from maze_race.log import configure_logging
from maze_race.systems.race import parse_mode


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Race the AI through a random maze')
    parser.add_argument('--difficulty', choices=list(DIFFICULTY_SETTINGS), default=DEFAULT_DIFFICULTY)
    parser.add_argument('--mode', default='vs_ai', help='single or vs_ai')
    parser.add_argument('--seed', type=int, default=None, help='Seed for a reproducible maze')
    parser.add_argument('--log-level', default=None)
    args = parser.parse_args(argv)
    try:
        args.mode = parse_mode(args.mode)
    except UnsupportedMode as e:
        parser.error(str(e))
    return args


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_level)

    pygame.init()
    pygame.display.set_caption(WINDOW_TITLE)

    game = Game(args.difficulty, args.mode, args.seed)
    screen = pygame.display.set_mode(game.size)
    clock = pygame.time.Clock()

    running = True
    while running:
        clock.tick(FPS)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                continue
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False
                continue
            game.handle_event(event)

        # a reset can produce a maze of the same size only, but keep the window in sync anyway
        if screen.get_size() != game.size:
            screen = pygame.display.set_mode(game.size)

        game.update()
        game.draw(screen)
        pygame.display.flip()

    game.session.close()
    pygame.quit()


if __name__ == "__main__":
    main()
