from __future__ import annotations

from typing import Optional

import pygame

from maze_race.config import (
    AGENT_RADIUS,
    COLOR_AI,
    COLOR_AI_PATH,
    COLOR_BG,
    COLOR_END,
    COLOR_HUD_BG,
    COLOR_HUMAN,
    COLOR_START,
    COLOR_TEXT,
    COLOR_WALL,
    HUD_HEIGHT,
    MARGIN,
    PATH_DOT_RADIUS,
    TILE,
    WALL_WIDTH,
)
from maze_race.map.maze import Maze
from maze_race.systems.events import Side
from maze_race.systems.race import GameMode, RaceSnapshot, RaceState
from maze_race.utils.timefmt import format_clock


def surface_size(maze: Maze) -> tuple:
    return (maze.width * TILE + 2 * MARGIN, maze.height * TILE + 2 * MARGIN + HUD_HEIGHT)


class Renderer:
    def __init__(self) -> None:
        if not pygame.font.get_init():
            pygame.font.init()
        self.font = pygame.font.Font(None, 24)
        self.font_big = pygame.font.Font(None, 48)

        # Static wall layer, rebuilt only when the maze changes
        self._cache: Optional[pygame.Surface] = None
        self._cache_maze: Optional[Maze] = None

    def cell_center(self, x: int, y: int) -> tuple:
        return (MARGIN + x * TILE + TILE // 2, MARGIN + y * TILE + TILE // 2)

    def draw(self, screen: pygame.Surface, snap: RaceSnapshot, show_ai_path: bool = False) -> None:
        screen.fill(COLOR_BG)
        if snap.maze is None:
            return

        if self._cache_maze is not snap.maze:
            self._cache = self._render_walls(snap.maze)
            self._cache_maze = snap.maze
        screen.blit(self._cache, (0, 0))

        if show_ai_path and snap.ai_path:
            for (x, y) in snap.ai_path:
                pygame.draw.circle(screen, COLOR_AI_PATH, self.cell_center(x, y), PATH_DOT_RADIUS)

        if snap.ai_position is not None:
            pygame.draw.circle(screen, COLOR_AI, self.cell_center(*snap.ai_position), AGENT_RADIUS)
        if snap.human_position is not None:
            pygame.draw.circle(screen, COLOR_HUMAN, self.cell_center(*snap.human_position), AGENT_RADIUS)

        self._draw_hud(screen, snap)
        if snap.state == RaceState.WON:
            self._draw_result(screen, snap)

    def _render_walls(self, maze: Maze) -> pygame.Surface:
        surf = pygame.Surface(surface_size(maze))
        surf.fill(COLOR_BG)

        for (pos, color) in ((maze.start, COLOR_START), (maze.end, COLOR_END)):
            rect = pygame.Rect(MARGIN + pos[0] * TILE + 3, MARGIN + pos[1] * TILE + 3, TILE - 6, TILE - 6)
            pygame.draw.rect(surf, color, rect, border_radius=4)

        for y in range(maze.height):
            for x in range(maze.width):
                cell = maze.cell(x, y)
                x0, y0 = MARGIN + x * TILE, MARGIN + y * TILE
                x1, y1 = x0 + TILE, y0 + TILE
                if cell.top:
                    pygame.draw.line(surf, COLOR_WALL, (x0, y0), (x1, y0), WALL_WIDTH)
                if cell.right:
                    pygame.draw.line(surf, COLOR_WALL, (x1, y0), (x1, y1), WALL_WIDTH)
                if cell.bottom:
                    pygame.draw.line(surf, COLOR_WALL, (x0, y1), (x1, y1), WALL_WIDTH)
                if cell.left:
                    pygame.draw.line(surf, COLOR_WALL, (x0, y0), (x0, y1), WALL_WIDTH)
        return surf

    def _draw_hud(self, screen: pygame.Surface, snap: RaceSnapshot) -> None:
        hud_y = snap.maze.height * TILE + 2 * MARGIN
        pygame.draw.rect(screen, COLOR_HUD_BG, pygame.Rect(0, hud_y, screen.get_width(), HUD_HEIGHT))

        line = f"Time: {format_clock(snap.elapsed)}   Steps: {snap.steps}   {snap.difficulty.upper()}"
        if snap.mode == GameMode.VS_AI:
            line += f"   AI: {snap.ai_progress}%"
        screen.blit(self.font.render(line, True, COLOR_TEXT), (MARGIN, hud_y + 8))

        if snap.flavor_message:
            text = self.font.render(f"AI: {snap.flavor_message}", True, COLOR_AI)
            screen.blit(text, (MARGIN, hud_y + 34))

    def _draw_result(self, screen: pygame.Surface, snap: RaceSnapshot) -> None:
        if snap.winner == Side.HUMAN:
            msg, color = "You Won!", COLOR_HUMAN
        else:
            msg, color = "AI Won!", COLOR_AI
        text = self.font_big.render(msg, True, color)
        tip = self.font.render(f"{format_clock(snap.elapsed)} - press R to race again", True, COLOR_TEXT)

        cx = screen.get_width() // 2
        cy = (snap.maze.height * TILE + 2 * MARGIN) // 2
        screen.blit(text, text.get_rect(center=(cx, cy - 16)))
        screen.blit(tip, tip.get_rect(center=(cx, cy + 22)))
