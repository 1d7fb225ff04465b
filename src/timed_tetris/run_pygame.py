"""Simple pygame front-end for the timed Tetris engine.

This module glues a :class:`SessionRunner` to a pygame window: it draws the
board, the active piece, the next-piece preview, the score and the remaining
time, and feeds keyboard, swipe and on-screen button input into the runner.  All game rules
live in the engine; nothing here mutates the session directly.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional, Tuple

import pygame

from .board import Board
from .config import GameConfig
from .controls import SwipeTracker, command_for_key
from .game_state import Command, Phase
from .runner import SessionRunner
from .tetromino import SHAPE_COLORS, TetrominoType
from .utils import Cells, format_time, preview_grid, render_state, start_label

# Size of a single board cell in pixels
CELL_SIZE = 30
# Size of a single preview cell in pixels
PREVIEW_CELL = 20
# Width of the side panel holding score, timer and preview
PANEL_WIDTH = 170
# Frames per second to run the game loop at
FPS = 60

BACKGROUND = (0, 0, 0)
GRID_LINE = (50, 50, 50)
TEXT = (230, 230, 230)
GAME_OVER = (240, 40, 40)
BUTTON = (70, 70, 70)

# On-screen controls shown in the side panel while a game is running
CONTROL_LABELS: Dict[Command, str] = {
    Command.MOVE_LEFT: "<",
    Command.MOVE_RIGHT: ">",
    Command.SOFT_DROP: "v",
    Command.ROTATE: "Rot",
}

LOGGER = logging.getLogger(__name__)


def _rgb(color: str) -> Tuple[int, int, int]:
    value = color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


# RGB colours for each tetromino type
CELL_COLORS: Dict[TetrominoType, Tuple[int, int, int]] = {
    shape: _rgb(color) for shape, color in SHAPE_COLORS.items()
}


def draw_cells(screen: pygame.Surface, cells: Cells, origin: Tuple[int, int], size: int) -> None:
    """Render a grid of optional piece tags with its top-left at ``origin``."""

    ox, oy = origin
    for r, row in enumerate(cells):
        for c, value in enumerate(row):
            rect = pygame.Rect(ox + c * size, oy + r * size, size, size)
            if value is not None:
                pygame.draw.rect(screen, CELL_COLORS[value], rect)
            pygame.draw.rect(screen, GRID_LINE, rect, 1)


class GameWindow:
    """Run the pygame event loop next to the session timers."""

    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self.config = config or GameConfig()
        self.runner: Optional[SessionRunner] = None
        self.swipes = SwipeTracker(self.config.swipe_threshold, self.config.swipe_window_ms)
        self.board_px = Board.width * CELL_SIZE
        self.board_py = Board.height * CELL_SIZE
        self.start_button = pygame.Rect(0, 0, 140, 40)
        self.start_button.center = (self.board_px // 2, self.board_py // 2)
        self.control_buttons = {
            command: pygame.Rect(self.board_px + 15 + (i % 2) * 75, 230 + (i // 2) * 50, 65, 40)
            for i, command in enumerate(CONTROL_LABELS)
        }
        self._open = False

    def _start(self) -> None:
        if self.runner and self.runner.state.phase is not Phase.RUNNING:
            self.runner.start()

    def control_at(self, pos: Tuple[int, int]) -> Optional[Command]:
        """Return the command of the on-screen button under ``pos``, if shown."""

        if self.runner is None or self.runner.state.phase is not Phase.RUNNING:
            return None
        for command, rect in self.control_buttons.items():
            if rect.collidepoint(pos):
                return command
        return None

    def handle_event(self, event: pygame.event.Event) -> None:
        """Process a single pygame event."""

        if self.runner is None:
            return
        if event.type == pygame.QUIT:
            self._open = False
        elif event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_RETURN, pygame.K_SPACE):
                self._start()
                return
            command = command_for_key(pygame.key.name(event.key))
            if command is not None:
                self.runner.submit(command)
        elif event.type == pygame.FINGERDOWN:
            self.swipes.begin(event.x * self.board_px, event.y * self.board_py, pygame.time.get_ticks())
        elif event.type == pygame.FINGERUP:
            command = self.swipes.end(event.x * self.board_px, event.y * self.board_py, pygame.time.get_ticks())
            if command is not None:
                self.runner.submit(command)
        elif event.type == pygame.MOUSEBUTTONDOWN and not getattr(event, "touch", False):
            command = self.control_at(event.pos)
            if command is not None:
                self.runner.submit(command)
                return
            if self.runner.state.phase is not Phase.RUNNING and self.start_button.collidepoint(event.pos):
                self._start()
            else:
                self.swipes.begin(*event.pos, pygame.time.get_ticks())
        elif event.type == pygame.MOUSEBUTTONUP and not getattr(event, "touch", False):
            command = self.swipes.end(*event.pos, pygame.time.get_ticks())
            if command is not None:
                self.runner.submit(command)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        if self.runner is None:
            return
        state = self.runner.state
        screen.fill(BACKGROUND)
        draw_cells(screen, render_state(state), (0, 0), CELL_SIZE)

        x = self.board_px + 15
        screen.blit(font.render(f"Score: {state.score}", True, TEXT), (x, 15))
        screen.blit(font.render(f"Time: {format_time(state.time_remaining)}", True, TEXT), (x, 45))
        screen.blit(font.render("Next Piece", True, TEXT), (x, 90))
        draw_cells(screen, preview_grid(state.upcoming), (x, 120), PREVIEW_CELL)

        if state.phase is Phase.RUNNING:
            for command, rect in self.control_buttons.items():
                pygame.draw.rect(screen, BUTTON, rect)
                text = font.render(CONTROL_LABELS[command], True, TEXT)
                screen.blit(text, text.get_rect(center=rect.center))

        label = start_label(state.phase)
        if label is not None:
            pygame.draw.rect(screen, GRID_LINE, self.start_button)
            text = font.render(label, True, TEXT)
            screen.blit(text, text.get_rect(center=self.start_button.center))
        if state.phase is Phase.ENDED:
            text = font.render("Game Over!", True, GAME_OVER)
            screen.blit(text, text.get_rect(center=(self.board_px // 2, self.start_button.top - 30)))
        pygame.display.flip()

    async def run(self) -> None:
        pygame.init()
        screen = pygame.display.set_mode((self.board_px + PANEL_WIDTH, self.board_py))
        pygame.display.set_caption("Tetris")
        font = pygame.font.Font(None, 28)
        clock = pygame.time.Clock()

        self.runner = SessionRunner(config=self.config)
        self._open = True
        LOGGER.info("Window opened")
        try:
            while self._open:
                clock.tick(FPS)
                for event in pygame.event.get():
                    self.handle_event(event)
                self.draw(screen, font)
                # Yield so the session timers get to run
                await asyncio.sleep(0)
        finally:
            self.runner.stop()
            pygame.quit()
            LOGGER.info("Window closed")


def main(config: Optional[GameConfig] = None) -> None:
    asyncio.run(GameWindow(config).run())


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()
