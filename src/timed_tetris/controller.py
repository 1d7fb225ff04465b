"""Collision-checked movement for the active piece.

Both helpers are pure: they only compute a proposal against the board and
leave it to the caller to adopt the result.
"""

from __future__ import annotations

from typing import Optional

from .board import Board
from .tetromino import Piece, Position, rotate


def try_move(board: Board, piece: Piece, position: Position, dx: int, dy: int) -> Optional[Position]:
    """Return ``position`` shifted by ``(dx, dy)`` or ``None`` if it collides."""

    candidate = position.shifted(dx, dy)
    if board.collides(piece, candidate):
        return None
    return candidate


def try_rotate(board: Board, piece: Piece, position: Position) -> Optional[Piece]:
    """Return ``piece`` rotated clockwise or ``None`` if it collides.

    The rotation is only tested at the unchanged ``position``; no wall kicks
    or offsets are attempted.
    """

    rotated = rotate(piece)
    if board.collides(rotated, position):
        return None
    return rotated
