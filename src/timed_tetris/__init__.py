"""Timed Tetris engine: a three minute falling-block game on a 10x20 board."""

from .board import Board, LockResult
from .config import GameConfig
from .controller import try_move, try_rotate
from .controls import SwipeTracker, classify_swipe, command_for_key
from .game_state import Command, EndReason, Event, GameState, Phase, Session, step
from .runner import PeriodicTimer, SessionRunner
from .spawn import PieceQueue
from .tetromino import SHAPE_COLORS, SHAPES, Piece, Position, TetrominoType, rotate, rotate_shape
from .utils import format_time, preview_grid, render_grid, render_state, start_label

__all__ = [
    "Board",
    "LockResult",
    "GameConfig",
    "try_move",
    "try_rotate",
    "SwipeTracker",
    "classify_swipe",
    "command_for_key",
    "Command",
    "EndReason",
    "Event",
    "GameState",
    "Phase",
    "Session",
    "step",
    "PeriodicTimer",
    "SessionRunner",
    "PieceQueue",
    "SHAPE_COLORS",
    "SHAPES",
    "Piece",
    "Position",
    "TetrominoType",
    "rotate",
    "rotate_shape",
    "format_time",
    "preview_grid",
    "render_grid",
    "render_state",
    "start_label",
]
