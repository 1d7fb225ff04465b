from __future__ import annotations

from typing import List

import pytest

from timed_tetris.spawn import PieceQueue
from timed_tetris.tetromino import Piece, TetrominoType


class ScriptedQueue(PieceQueue):
    """Piece source that hands out a fixed sequence, then ``fallback``."""

    def __init__(self, *types: TetrominoType, fallback: TetrominoType = TetrominoType.O) -> None:
        super().__init__(seed=0)
        self.types: List[TetrominoType] = list(types)
        self.fallback = fallback

    def generate(self) -> Piece:
        if self.types:
            return Piece.of(self.types.pop(0))
        return Piece.of(self.fallback)


@pytest.fixture
def scripted_queue():
    return ScriptedQueue
