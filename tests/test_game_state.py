from __future__ import annotations

import logging
import random
from dataclasses import replace

import pytest

from timed_tetris.board import WIDTH, Board
from timed_tetris.config import GameConfig
from timed_tetris.game_state import Command, EndReason, Event, GameState, Phase, Session, step
from timed_tetris.spawn import PieceQueue
from timed_tetris.tetromino import Piece, Position, TetrominoType, rotate


def _running(config: GameConfig, **changes) -> GameState:
    return replace(GameState.initial(config), phase=Phase.RUNNING, **changes)


def test_new_session_is_idle_and_ignores_commands() -> None:
    session = Session()
    idle = session.state
    assert idle.phase is Phase.IDLE
    assert idle.time_remaining == 180
    for event in [*Command, Event.FALL_TICK, Event.COUNTDOWN_TICK]:
        assert session.dispatch(event) is idle


def test_start_spawns_lookahead_piece_at_spawn_position(scripted_queue) -> None:
    session = Session(queue=scripted_queue(TetrominoType.T, TetrominoType.S))
    state = session.start()
    assert state.phase is Phase.RUNNING
    assert state.active == Piece.of(TetrominoType.T)
    assert state.upcoming == Piece.of(TetrominoType.S)
    assert state.position == Position(3, -2)
    assert state.score == 0
    assert state.board == Board()


def test_start_while_running_is_ignored(scripted_queue) -> None:
    session = Session(queue=scripted_queue())
    running = session.start()
    assert session.start() is running


def test_o_piece_falls_to_floor_and_locks(scripted_queue) -> None:
    session = Session(queue=scripted_queue(TetrominoType.O, TetrominoType.O, TetrominoType.L))
    session.start()
    for expected_y in range(-1, 19):
        state = session.dispatch(Event.FALL_TICK)
        assert state.position == Position(3, expected_y)
        assert state.board == Board()

    state = session.dispatch(Event.FALL_TICK)
    assert state.phase is Phase.RUNNING
    filled = {
        (r, c) for r in range(Board.height) for c in range(Board.width)
        if state.board.get_cell(r, c) is not None
    }
    assert filled == {(18, 3), (18, 4), (19, 3), (19, 4)}
    assert state.board.get_cell(19, 3) is TetrominoType.O
    # The lookahead O became active, a new lookahead was drawn.
    assert state.active == Piece.of(TetrominoType.O)
    assert state.upcoming == Piece.of(TetrominoType.L)
    assert state.position == Position(3, -2)
    assert state.score == 0


def test_lock_clears_row_and_scores(caplog) -> None:
    config = GameConfig()
    board = Board().with_cells([(19, c) for c in range(WIDTH) if c != 5], TetrominoType.J)
    board = board.with_cells([(18, 0)], TetrominoType.Z)
    state = _running(
        config,
        board=board,
        active=rotate(Piece.of(TetrominoType.I)),
        position=Position(3, 16),
        upcoming=Piece.of(TetrominoType.T),
        score=300,
    )
    with caplog.at_level(logging.INFO, logger="timed_tetris.game_state"):
        after = step(state, Event.FALL_TICK, PieceQueue(seed=1), config)

    assert after.phase is Phase.RUNNING
    assert after.score == 400
    assert all(cell is None for cell in after.board.rows()[0])
    assert after.board.get_cell(19, 0) is TetrominoType.Z
    assert [after.board.get_cell(r, 5) for r in (17, 18, 19)] == [TetrominoType.I] * 3
    assert after.active == Piece.of(TetrominoType.T)
    assert "Cleared 1 row(s). Score: 400" in caplog.messages


def test_top_out_lock_ends_session() -> None:
    config = GameConfig()
    board = Board().with_cells([(2, 3), (2, 4)], TetrominoType.S)
    state = _running(config, board=board, active=Piece.of(TetrominoType.O), position=Position(3, 0), score=100)
    after = step(state, Event.FALL_TICK, PieceQueue(seed=1), config)

    assert after.phase is Phase.ENDED
    assert after.end_reason is EndReason.TOP_OUT
    assert after.score == 100
    assert after.board.get_cell(0, 3) is TetrominoType.O
    assert after.board.get_cell(1, 4) is TetrominoType.O
    assert after.board.get_cell(2, 3) is TetrominoType.S


def test_spawn_collision_ends_without_touching_board(scripted_queue) -> None:
    config = GameConfig(spawn_y=0)
    board = Board().with_cells([(1, 4)], TetrominoType.L)
    state = _running(config, board=board, upcoming=Piece.of(TetrominoType.T))
    after = step(state, Event.FALL_TICK, scripted_queue(), config)

    assert after.phase is Phase.ENDED
    assert after.end_reason is EndReason.SPAWN_COLLISION
    assert after.board is board
    assert after.active is None


def test_countdown_expiry_ends_without_extra_lock(scripted_queue, caplog) -> None:
    session = Session(GameConfig(game_duration=3), queue=scripted_queue(TetrominoType.I))
    session.start()
    session.dispatch(Event.FALL_TICK)
    assert session.dispatch(Event.COUNTDOWN_TICK).time_remaining == 2
    before = session.dispatch(Event.COUNTDOWN_TICK)
    assert before.time_remaining == 1

    with caplog.at_level(logging.INFO, logger="timed_tetris.game_state"):
        ended = session.dispatch(Event.COUNTDOWN_TICK)
    assert ended.phase is Phase.ENDED
    assert ended.end_reason is EndReason.TIMEOUT
    assert ended.time_remaining == 0
    assert ended.board is before.board
    assert ended.active is before.active
    assert "Game over (timeout). Score: 0" in caplog.messages

    # Stale ticks and commands after the end are inert.
    assert session.dispatch(Event.FALL_TICK) is ended
    assert session.dispatch(Command.MOVE_LEFT) is ended


def test_restart_after_end_resets_everything(scripted_queue) -> None:
    session = Session(GameConfig(game_duration=1), queue=scripted_queue())
    session.start()
    session.dispatch(Event.COUNTDOWN_TICK)
    assert session.state.phase is Phase.ENDED

    restarted = session.start()
    assert restarted.phase is Phase.RUNNING
    assert restarted.time_remaining == 1
    assert restarted.end_reason is None
    assert restarted.board == Board()


def test_reset_returns_to_idle(scripted_queue) -> None:
    session = Session(queue=scripted_queue())
    session.start()
    session.dispatch(Event.FALL_TICK)
    idle = session.reset()
    assert idle == GameState.initial(session.config)
    assert idle.active is None
    assert idle.upcoming is None


def test_commands_move_and_rotate_active_piece(scripted_queue) -> None:
    session = Session(queue=scripted_queue(TetrominoType.T))
    session.start()
    assert session.dispatch(Command.MOVE_LEFT).position == Position(2, -2)
    assert session.dispatch(Command.MOVE_RIGHT).position == Position(3, -2)
    assert session.dispatch(Command.SOFT_DROP).position == Position(3, -1)
    rotated = session.dispatch(Command.ROTATE)
    assert rotated.active == rotate(Piece.of(TetrominoType.T))
    assert rotated.position == Position(3, -1)


def test_blocked_moves_are_silent_no_ops(scripted_queue) -> None:
    session = Session(queue=scripted_queue(TetrominoType.O))
    session.start()
    for _ in range(3):
        session.dispatch(Command.MOVE_LEFT)
    at_wall = session.dispatch(Command.MOVE_LEFT)
    assert at_wall.position == Position(0, -2)
    assert session.dispatch(Command.MOVE_LEFT) is at_wall


def test_soft_drop_on_floor_does_not_lock(scripted_queue) -> None:
    session = Session(queue=scripted_queue(TetrominoType.O))
    session.start()
    for _ in range(20):
        session.dispatch(Command.SOFT_DROP)
    resting = session.dispatch(Command.SOFT_DROP)
    assert resting.position == Position(3, 18)
    assert resting.board == Board()


def test_listeners_see_every_new_snapshot(scripted_queue) -> None:
    session = Session(queue=scripted_queue())
    seen = []
    session.subscribe(lambda previous, current: seen.append((previous.phase, current.phase)))
    session.start()
    session.start()
    session.dispatch(Command.SOFT_DROP)
    assert seen == [(Phase.IDLE, Phase.RUNNING), (Phase.RUNNING, Phase.RUNNING)]


def test_unknown_event_raises() -> None:
    with pytest.raises(ValueError):
        step(GameState(), "jump", PieceQueue(), GameConfig())  # type: ignore[arg-type]


def test_random_play_never_overlaps_and_score_never_drops() -> None:
    rng = random.Random(2024)
    session = Session(GameConfig(game_duration=60, seed=99))
    events = [*Command, Event.FALL_TICK, Event.FALL_TICK, Event.COUNTDOWN_TICK]
    session.start()
    last_score = 0
    for _ in range(5000):
        state = session.dispatch(rng.choice(events))
        if state.phase is Phase.ENDED:
            state = session.start()
            last_score = 0
        assert state.score >= last_score
        assert state.score % 100 == 0
        last_score = state.score
        if state.active is not None:
            assert not state.board.collides(state.active, state.position)


def test_seeded_sessions_replay_the_same_pieces() -> None:
    session = Session(GameConfig(game_duration=1, seed=42))
    first = session.start()
    for _ in range(5):
        session.dispatch(Event.FALL_TICK)
    session.dispatch(Event.COUNTDOWN_TICK)
    assert session.state.phase is Phase.ENDED

    second = session.start()
    assert second.active == first.active
    assert second.upcoming == first.upcoming


def test_upcoming_piece_becomes_active_on_spawn(scripted_queue) -> None:
    session = Session(queue=scripted_queue(TetrominoType.J, TetrominoType.Z, TetrominoType.S))
    state = session.start()
    assert (state.active.type, state.upcoming.type) == (TetrominoType.J, TetrominoType.Z)
    while state.active.type is TetrominoType.J:
        state = session.dispatch(Event.FALL_TICK)
    assert (state.active.type, state.upcoming.type) == (TetrominoType.Z, TetrominoType.S)
