"""Tetromino definitions and basic behaviour.

Each of the seven piece types is described by a square occupancy matrix in
its spawn orientation: 4x4 for ``I``, 2x2 for ``O`` and 3x3 for the rest.
Shapes are plain tuples of tuples so they can never be mutated in place;
rotating a piece always produces a new :class:`Piece`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

Shape = Tuple[Tuple[bool, ...], ...]


class TetrominoType(str, Enum):
    """Enumeration of the seven standard tetromino shapes."""

    I = "I"
    J = "J"
    L = "L"
    O = "O"
    S = "S"
    T = "T"
    Z = "Z"


def _shape(*rows: str) -> Shape:
    return tuple(tuple(ch == "#" for ch in row) for row in rows)


# Spawn orientation for every tetromino.
SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _shape("....", "####", "....", "...."),
    TetrominoType.J: _shape("#..", "###", "..."),
    TetrominoType.L: _shape("..#", "###", "..."),
    TetrominoType.O: _shape("##", "##"),
    TetrominoType.S: _shape(".##", "##.", "..."),
    TetrominoType.T: _shape(".#.", "###", "..."),
    TetrominoType.Z: _shape("##.", ".##", "..."),
}

# Display colour for each tetromino type
SHAPE_COLORS: Dict[TetrominoType, str] = {
    TetrominoType.I: "#00f0f0",
    TetrominoType.J: "#0000f0",
    TetrominoType.L: "#f0a000",
    TetrominoType.O: "#f0f000",
    TetrominoType.S: "#00f000",
    TetrominoType.T: "#a000f0",
    TetrominoType.Z: "#f00000",
}


def rotate_shape(shape: Shape) -> Shape:
    """Return ``shape`` rotated 90 degrees clockwise.

    For an ``n x n`` matrix the new cell ``(i, j)`` is the old cell
    ``(n - 1 - j, i)``.  The matrix keeps its size, so the rotated cells stay
    inside the same bounding square rather than being normalised to the
    top-left corner.
    """

    return tuple(tuple(column) for column in zip(*shape[::-1]))


@dataclass(frozen=True)
class Position:
    """Top-left anchor of a piece's shape in board coordinates.

    ``y`` may be negative while a freshly spawned piece is still partially
    above the visible field.
    """

    x: int
    y: int

    def shifted(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class Piece:
    """A tetromino type together with its current shape."""

    shape: Shape
    type: TetrominoType

    @classmethod
    def of(cls, t_type: TetrominoType) -> "Piece":
        """Return a fresh piece of ``t_type`` in its spawn orientation."""

        return cls(SHAPES[t_type], t_type)

    def cells(self) -> List[Tuple[int, int]]:
        """Return the ``(sx, sy)`` offsets of the occupied sub-cells."""

        return [
            (sx, sy)
            for sy, row in enumerate(self.shape)
            for sx, filled in enumerate(row)
            if filled
        ]

    def blocks(self, position: Position) -> List[Tuple[int, int]]:
        """Return the absolute ``(row, col)`` coordinates at ``position``."""

        return [(position.y + sy, position.x + sx) for sx, sy in self.cells()]


def rotate(piece: Piece) -> Piece:
    """Return a new piece with ``piece``'s shape rotated clockwise."""

    return Piece(rotate_shape(piece.shape), piece.type)
