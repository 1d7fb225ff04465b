"""Random piece generation."""

from __future__ import annotations

import random
from typing import Optional

from .tetromino import Piece, TetrominoType


class PieceQueue:
    """Produce pieces by independent uniform choice over the seven types.

    There is no bag or history: every call to :meth:`generate` is a fresh
    draw, so droughts and repeats are possible.  The one-piece lookahead
    itself lives in :attr:`GameState.upcoming`; this class is only its
    source.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def reset(self, seed: Optional[int] = None) -> None:
        """Reseed the generator."""

        self._rng.seed(seed)

    def generate(self) -> Piece:
        """Return a new piece of a uniformly chosen type."""

        return Piece.of(self._rng.choice(list(TetrominoType)))
