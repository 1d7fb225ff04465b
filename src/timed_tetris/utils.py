"""Utility helpers for presenting a session."""

from __future__ import annotations

from typing import List, Optional

from .board import Board
from .game_state import GameState, Phase
from .tetromino import Piece, Position, TetrominoType


PREVIEW_SIZE = 4

Cells = List[List[Optional[TetrominoType]]]


def render_grid(
    board: Board,
    active: Optional[Piece] = None,
    position: Optional[Position] = None,
) -> Cells:
    """Return the board cells with the active piece overlaid.

    This is a convenience for renderers that want a single 2D array to draw
    without locking the piece into the board.  Sub-cells above the visible
    field are left out.
    """

    grid = board.rows()
    if active is not None and position is not None:
        for r, c in active.blocks(position):
            if 0 <= r < board.height and 0 <= c < board.width:
                grid[r][c] = active.type
    return grid


def render_state(state: GameState) -> Cells:
    """Return the cells to draw for ``state``; no overlay once it has ended."""

    if state.phase is Phase.ENDED:
        return render_grid(state.board)
    return render_grid(state.board, state.active, state.position)


def preview_grid(piece: Optional[Piece]) -> Cells:
    """Return ``piece`` padded onto a fixed 4x4 preview grid."""

    grid: Cells = [[None] * PREVIEW_SIZE for _ in range(PREVIEW_SIZE)]
    if piece is not None:
        for sx, sy in piece.cells():
            grid[sy][sx] = piece.type
    return grid


def format_time(seconds: int) -> str:
    """Format ``seconds`` as ``M:SS``."""

    minutes, rest = divmod(max(seconds, 0), 60)
    return f"{minutes}:{rest:02d}"


def start_label(phase: Phase) -> Optional[str]:
    """Return the start button caption, or ``None`` while a game is running."""

    if phase is Phase.RUNNING:
        return None
    return "Play Again" if phase is Phase.ENDED else "Start Game"
