"""Translate raw keyboard and touch input into engine commands.

The helpers here know nothing about a particular toolkit.  Keys are matched by
name (pygame's ``pygame.key.name`` spelling as well as the DOM ``KeyboardEvent``
spelling) and gestures by plain coordinates and millisecond timestamps.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .game_state import Command


KEY_COMMANDS: Dict[str, Command] = {
    "left": Command.MOVE_LEFT,
    "right": Command.MOVE_RIGHT,
    "down": Command.SOFT_DROP,
    "up": Command.ROTATE,
    "arrowleft": Command.MOVE_LEFT,
    "arrowright": Command.MOVE_RIGHT,
    "arrowdown": Command.SOFT_DROP,
    "arrowup": Command.ROTATE,
}

SWIPE_THRESHOLD = 30.0
SWIPE_WINDOW_MS = 500.0


def command_for_key(key: str) -> Optional[Command]:
    """Return the command bound to ``key`` or ``None`` for unbound keys."""

    return KEY_COMMANDS.get(key.lower())


def classify_swipe(
    dx: float,
    dy: float,
    elapsed_ms: float,
    *,
    threshold: float = SWIPE_THRESHOLD,
    window_ms: float = SWIPE_WINDOW_MS,
) -> Optional[Command]:
    """Classify a swipe displacement into a command.

    Swipes slower than ``window_ms`` are ignored.  A mostly horizontal swipe
    longer than ``threshold`` moves the piece sideways; otherwise a downward
    swipe soft-drops and an upward swipe rotates.  Ties between the axes are
    treated as vertical.
    """

    if elapsed_ms >= window_ms:
        return None
    if abs(dx) > abs(dy):
        if abs(dx) > threshold:
            return Command.MOVE_RIGHT if dx > 0 else Command.MOVE_LEFT
        return None
    if dy > threshold:
        return Command.SOFT_DROP
    if dy < -threshold:
        return Command.ROTATE
    return None


@dataclass
class _Touch:
    x: float
    y: float
    time_ms: float


class SwipeTracker:
    """Pair touch-start and touch-end samples into swipe commands."""

    def __init__(self, threshold: float = SWIPE_THRESHOLD, window_ms: float = SWIPE_WINDOW_MS) -> None:
        self.threshold = threshold
        self.window_ms = window_ms
        self._start: Optional[_Touch] = None

    @property
    def tracking(self) -> bool:
        return self._start is not None

    def begin(self, x: float, y: float, time_ms: float) -> None:
        self._start = _Touch(x, y, time_ms)

    def cancel(self) -> None:
        self._start = None

    def end(self, x: float, y: float, time_ms: float) -> Optional[Command]:
        """Finish the current gesture and return its command, if any."""

        start, self._start = self._start, None
        if start is None:
            return None
        return classify_swipe(
            x - start.x,
            y - start.y,
            time_ms - start.time_ms,
            threshold=self.threshold,
            window_ms=self.window_ms,
        )
