"""Board representation for the Tetris playfield."""

from __future__ import annotations

from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .tetromino import Piece, Position, TetrominoType


# Dimensions of the standard Tetris board.
WIDTH = 10
HEIGHT = 20

# Any cell written at or above this row index tops out the stack.
TOP_OUT_ROW = 1

Grid = NDArray[np.uint8]

# Mapping from ``TetrominoType`` to the integer stored in the grid.  The
# specific numeric values are not important as long as ``0`` represents an empty
# cell.
PIECE_VALUES = {t: i + 1 for i, t in enumerate(TetrominoType)}
VALUE_PIECES = {v: t for t, v in PIECE_VALUES.items()}


def create_empty_grid() -> Grid:
    """Return a new empty board grid filled with zeros."""

    return np.zeros((HEIGHT, WIDTH), dtype=np.uint8)


def _frozen(grid: Grid) -> Grid:
    grid.setflags(write=False)
    return grid


class LockResult(NamedTuple):
    board: "Board"
    topped_out: bool


class Board:
    """Immutable 10x20 occupancy grid.

    Every operation that changes cell contents returns a new :class:`Board`;
    the wrapped array is marked read-only so callers cannot mutate a board
    they were handed.
    """

    width: int = WIDTH
    height: int = HEIGHT

    def __init__(self, grid: Optional[Grid] = None) -> None:
        if grid is None:
            grid = create_empty_grid()
        elif grid.shape != (HEIGHT, WIDTH):
            raise ValueError(f"Board grid must be {HEIGHT}x{WIDTH}, got {grid.shape}")
        self.grid: Grid = _frozen(np.array(grid, dtype=np.uint8))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[TetrominoType]]]) -> "Board":
        """Build a board from rows of optional piece tags."""

        grid = np.array(
            [[PIECE_VALUES[cell] if cell else 0 for cell in row] for row in rows],
            dtype=np.uint8,
        )
        return cls(grid)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.grid, other.grid))

    def __repr__(self) -> str:
        return f"Board(filled={int(np.count_nonzero(self.grid))})"

    def get_cell(self, row: int, col: int) -> Optional[TetrominoType]:
        """Return the piece tag stored at ``(row, col)`` or ``None``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if 0 <= row < self.height and 0 <= col < self.width:
            return VALUE_PIECES.get(int(self.grid[row, col]))
        raise IndexError("Cell out of bounds")

    def with_cells(self, cells: Iterable[Tuple[int, int]], t_type: TetrominoType) -> "Board":
        """Return a copy of the board with ``cells`` set to ``t_type``.

        Raises:
            IndexError: If any of the coordinates is outside the board.
        """
        grid = self.grid.copy()
        for row, col in cells:
            if not (0 <= row < self.height and 0 <= col < self.width):
                raise IndexError("Cell out of bounds")
            grid[row, col] = PIECE_VALUES[t_type]
        return Board(grid)

    def rows(self) -> List[List[Optional[TetrominoType]]]:
        """Return the board as rows of optional piece tags."""

        return [[VALUE_PIECES.get(int(v)) for v in row] for row in self.grid]

    def collides(self, piece: Piece, position: Position) -> bool:
        """Return ``True`` if ``piece`` at ``position`` overlaps or leaves the board.

        Sub-cells above the visible field (negative rows) only have their
        column checked, which lets pieces spawn partially off-board.
        """

        for row, col in piece.blocks(position):
            if col < 0 or col >= self.width or row >= self.height:
                return True
            if row >= 0 and self.grid[row, col] != 0:
                return True
        return False

    def lock(self, piece: Piece, position: Position) -> LockResult:
        """Write ``piece`` into a copy of the board.

        Sub-cells above the visible field are dropped.  ``topped_out`` is set
        when any written cell lands in the top two rows.
        """

        blocks = [(row, col) for row, col in piece.blocks(position) if row >= 0]
        topped_out = any(row <= TOP_OUT_ROW for row, _ in blocks)
        return LockResult(self.with_cells(blocks, piece.type), topped_out)

    def clear_full_rows(self) -> Tuple["Board", int]:
        """Remove completed rows and return the new board with the count.

        Fresh empty rows are stacked on top of every kept row so the board
        keeps its height and the kept rows their relative order.
        """

        full_rows = np.all(self.grid != 0, axis=1)
        cleared = int(np.count_nonzero(full_rows))
        if not cleared:
            return self, 0
        remaining = self.grid[~full_rows]
        new_rows = np.zeros((cleared, self.width), dtype=self.grid.dtype)
        return Board(np.vstack((new_rows, remaining))), cleared
