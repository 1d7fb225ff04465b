"""Tunable gameplay constants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GameConfig:
    """Settings for a timed session.

    The defaults reproduce the classic three minute game: one gravity step
    and one countdown step per second, pieces entering at column 3 two rows
    above the visible field, and 100 points per cleared row.
    """

    game_duration: int = 180
    fall_interval_ms: int = 1000
    countdown_interval_ms: int = 1000
    spawn_x: int = 3
    spawn_y: int = -2
    points_per_row: int = 100
    swipe_threshold: float = 30.0
    swipe_window_ms: float = 500.0
    seed: Optional[int] = None
