"""High level game state and its transition function.

A :class:`GameState` is an immutable snapshot of one timed session.  The only
way to move from one snapshot to the next is :func:`step`, which takes the
current snapshot plus one event (a player :class:`Command` or an engine
:class:`Event`) and returns the successor.  :class:`Session` owns the current
snapshot and is the single place where it is replaced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, List, Optional, Union

from .board import Board
from .config import GameConfig
from .controller import try_move, try_rotate
from .spawn import PieceQueue
from .tetromino import Piece, Position


LOGGER = logging.getLogger(__name__)


class Phase(str, Enum):
    """Session lifecycle."""

    IDLE = "idle"
    RUNNING = "running"
    ENDED = "ended"


class Command(str, Enum):
    """Player commands emitted by the input adapters."""

    MOVE_LEFT = "MoveLeft"
    MOVE_RIGHT = "MoveRight"
    SOFT_DROP = "SoftDrop"
    ROTATE = "Rotate"


class Event(str, Enum):
    """Lifecycle and clock events raised by the controls and the scheduler."""

    START = "start"
    RESET = "reset"
    FALL_TICK = "fall_tick"
    COUNTDOWN_TICK = "countdown_tick"


class EndReason(str, Enum):
    TIMEOUT = "timeout"
    TOP_OUT = "top-out"
    SPAWN_COLLISION = "spawn-collision"


Input = Union[Command, Event]

_COMMAND_OFFSETS = {
    Command.MOVE_LEFT: (-1, 0),
    Command.MOVE_RIGHT: (1, 0),
    Command.SOFT_DROP: (0, 1),
}


@dataclass(frozen=True)
class GameState:
    """Snapshot of a timed Tetris session."""

    board: Board = field(default_factory=Board)
    active: Optional[Piece] = None
    upcoming: Optional[Piece] = None
    position: Position = Position(3, -2)
    score: int = 0
    time_remaining: int = 180
    phase: Phase = Phase.IDLE
    end_reason: Optional[EndReason] = None

    @classmethod
    def initial(cls, config: GameConfig) -> "GameState":
        """Return the idle state for ``config``."""

        return cls(
            position=Position(config.spawn_x, config.spawn_y),
            time_remaining=config.game_duration,
        )

    @property
    def running(self) -> bool:
        return self.phase is Phase.RUNNING


def _end(state: GameState, reason: EndReason, **changes) -> GameState:
    ended = replace(state, phase=Phase.ENDED, end_reason=reason, **changes)
    LOGGER.info("Game over (%s). Score: %d", reason.value, ended.score)
    return ended


def _spawn(state: GameState, queue: PieceQueue, config: GameConfig) -> GameState:
    """Promote the upcoming piece to active at the spawn position.

    If the new piece collides straight away the session ends and neither the
    board nor the lookahead are touched.
    """

    piece = state.upcoming or queue.generate()
    position = Position(config.spawn_x, config.spawn_y)
    if state.board.collides(piece, position):
        return _end(state, EndReason.SPAWN_COLLISION, active=None)
    return replace(state, active=piece, position=position, upcoming=queue.generate())


def _settle(state: GameState, queue: PieceQueue, config: GameConfig) -> GameState:
    if state.running and state.active is None:
        return _spawn(state, queue, config)
    return state


def _start(state: GameState, queue: PieceQueue, config: GameConfig) -> GameState:
    if state.running:
        LOGGER.debug("Start ignored: game already running")
        return state
    if config.seed is not None:
        queue.reset(config.seed)
    fresh = replace(
        GameState.initial(config),
        phase=Phase.RUNNING,
        upcoming=queue.generate(),
    )
    LOGGER.info("Game started (%d seconds)", fresh.time_remaining)
    return _settle(fresh, queue, config)


def _apply_command(state: GameState, command: Command) -> GameState:
    if state.active is None:
        return state
    if command is Command.ROTATE:
        rotated = try_rotate(state.board, state.active, state.position)
        return state if rotated is None else replace(state, active=rotated)
    dx, dy = _COMMAND_OFFSETS[command]
    moved = try_move(state.board, state.active, state.position, dx, dy)
    return state if moved is None else replace(state, position=moved)


def _fall(state: GameState, queue: PieceQueue, config: GameConfig) -> GameState:
    """Apply gravity, locking and clearing when the piece cannot fall."""

    if state.active is None:
        return _settle(state, queue, config)
    moved = try_move(state.board, state.active, state.position, 0, 1)
    if moved is not None:
        return replace(state, position=moved)

    locked, topped_out = state.board.lock(state.active, state.position)
    if topped_out:
        return _end(state, EndReason.TOP_OUT, board=locked, active=None)

    board, cleared = locked.clear_full_rows()
    score = state.score + cleared * config.points_per_row
    if cleared:
        LOGGER.info("Cleared %d row(s). Score: %d", cleared, score)
    return _settle(replace(state, board=board, score=score, active=None), queue, config)


def _countdown(state: GameState) -> GameState:
    if state.time_remaining <= 1:
        return _end(state, EndReason.TIMEOUT, time_remaining=0)
    return replace(state, time_remaining=state.time_remaining - 1)


def step(state: GameState, event: Input, queue: PieceQueue, config: GameConfig) -> GameState:
    """Return the state that follows ``state`` after ``event``.

    Commands and clock ticks outside :attr:`Phase.RUNNING` are no-ops.

    Raises:
        ValueError: If ``event`` is neither a :class:`Command` nor an
            :class:`Event`.
    """

    if not isinstance(event, (Command, Event)):
        raise ValueError(f"Unknown event: {event!r}")
    if event is Event.START:
        return _start(state, queue, config)
    if event is Event.RESET:
        LOGGER.debug("Session reset")
        return GameState.initial(config)
    if not state.running:
        LOGGER.debug("Ignoring %s while %s", event.value, state.phase.value)
        return state
    if isinstance(event, Command):
        return _apply_command(state, event)
    if event is Event.FALL_TICK:
        return _fall(state, queue, config)
    return _countdown(state)


Listener = Callable[[GameState, GameState], None]


class Session:
    """Owner of the current :class:`GameState`.

    Every handler goes through :meth:`dispatch`; listeners are notified with
    ``(previous, current)`` whenever a dispatch produced a new snapshot.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        queue: Optional[PieceQueue] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.queue = queue or PieceQueue(self.config.seed)
        self._state = GameState.initial(self.config)
        self._listeners: List[Listener] = []

    @property
    def state(self) -> GameState:
        return self._state

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def dispatch(self, event: Input) -> GameState:
        previous = self._state
        self._state = step(previous, event, self.queue, self.config)
        if self._state is not previous:
            for listener in list(self._listeners):
                listener(previous, self._state)
        return self._state

    def start(self) -> GameState:
        return self.dispatch(Event.START)

    def reset(self) -> GameState:
        return self.dispatch(Event.RESET)
