"""
Quadrille: a mutable square-tiling grid of cells.

John Horton Conway called the square tiling a quadrille. A Quadrille holds a
rectangular array of cells (empty, coloured or glyph) and supports reflection,
rotation and composition of one quadrille onto another with collision
counting.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from grid_types import (
    EMPTY,
    Cell,
    Color,
    Empty,
    Glyph,
    InvalidArgumentError,
    OutOfBoundsError,
    ShapeError,
)

logger = logging.getLogger(__name__)

Coord = tuple[int, int]


def to_cell(value: Any) -> Cell:
    """
    Coerce a raw value into a Cell.

    - Cell instances pass through unchanged
    - 0, None and "" are Empty
    - any other string is a Glyph
    - an (r, g, b) tuple of ints is a Color
    """
    if isinstance(value, (Empty, Color, Glyph)):
        return value
    if value is None or value == 0 or value == "":
        return EMPTY
    if isinstance(value, str):
        return Glyph(value)
    if isinstance(value, tuple) and len(value) == 3 and all(isinstance(v, int) for v in value):
        try:
            return Color(*value)
        except ValueError as e:
            raise ShapeError(str(e)) from e
    raise ShapeError(f"Unsupported cell value: {value!r}")


def _check_rectangular(rows: list[list[Cell]]) -> None:
    if not rows:
        return
    cols = len(rows[0])
    mismatched = [(i, len(row)) for i, row in enumerate(rows) if len(row) != cols]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths\n"
            f"  Expected: {cols} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} columns\n"
        error_msg += "  All rows must have the same number of cells"
        raise ShapeError(error_msg)


class Quadrille:
    """A rectangular 2D grid of cells, indexed by (row, col)."""

    def __init__(self, height: int, width: int) -> None:
        for name, value in (("height", height), ("width", width)):
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise InvalidArgumentError(f"Quadrille {name} must be a non-negative integer, got {value!r}")
        self._cells: list[list[Cell]] = [[EMPTY] * width for _ in range(height)]

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Any]]) -> Quadrille:
        """Build a quadrille from a rectangular 2D array of cells or raw values."""
        quadrille = cls(0, 0)
        quadrille.cells = rows
        return quadrille

    @property
    def cells(self) -> list[list[Cell]]:
        return self._cells

    @cells.setter
    def cells(self, rows: Iterable[Iterable[Any]]) -> None:
        coerced = [[to_cell(value) for value in row] for row in rows]
        _check_rectangular(coerced)
        self._cells = coerced

    @property
    def width(self) -> int:
        return len(self._cells[0]) if self._cells else 0

    @property
    def height(self) -> int:
        return len(self._cells)

    def __getitem__(self, coords: Coord) -> Cell:
        row, col = coords
        self._check_coords(row, col)
        return self._cells[row][col]

    def __iter__(self) -> Iterator[list[Cell]]:
        return iter(self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quadrille):
            return NotImplemented
        return self._cells == other._cells

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Quadrille({self.height}x{self.width}, occupied={self.count_occupied()})"

    def _check_coords(self, row: int, col: int) -> None:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise IndexError(f"Cell ({row}, {col}) outside {self.height}x{self.width} quadrille")

    # -------------------------------------------------------------------------
    # In-place mutators
    # -------------------------------------------------------------------------

    def clear(self) -> None:
        """Set every cell to Empty."""
        self._cells = [[EMPTY] * len(row) for row in self._cells]

    def reflect(self) -> None:
        """Reverse the row order (vertical flip)."""
        self._cells.reverse()

    def rotate(self) -> None:
        """
        Rotate 90° clockwise.

        An N×M quadrille becomes M×N; new cell (i, j) is old cell (N - 1 - j, i).
        """
        if not self._cells:
            return
        self._cells = [
            [row[col] for row in reversed(self._cells)]
            for col in range(self.width)
        ]

    def set_cell(self, coords: Coord | Sequence[Coord], value: Any) -> None:
        """
        Write value to one (row, col) pair or to every pair of a sequence.

        All coordinates are checked before anything is written.
        """
        cell = to_cell(value)
        if len(coords) == 2 and all(isinstance(c, int) for c in coords):
            targets = [tuple(coords)]
        else:
            targets = [tuple(c) for c in coords]
        for row, col in targets:
            self._check_coords(row, col)
        for row, col in targets:
            self._cells[row][col] = cell

    # -------------------------------------------------------------------------
    # Queries and composition
    # -------------------------------------------------------------------------

    def clone(self) -> Quadrille:
        """Deep copy; rows are not shared with this quadrille."""
        result = Quadrille(0, 0)
        result._cells = [list(row) for row in self._cells]
        return result

    def occupied(self) -> Iterator[Coord]:
        for r, row in enumerate(self._cells):
            for c, cell in enumerate(row):
                if not isinstance(cell, Empty):
                    yield (r, c)

    def count_occupied(self) -> int:
        return sum(1 for _ in self.occupied())

    def add(self, quadrille: Quadrille, row: int, col: int) -> tuple[Quadrille, int]:
        """
        Add the given quadrille onto this one with its top-left cell at (row, col).

        This quadrille is not altered. Non-empty cells of the added quadrille
        overwrite the destination; each overwrite of a non-empty destination cell
        is a memory hit.

        Args:
            quadrille: The quadrille to lay over this one
            row: Destination row of the added quadrille's first row
            col: Destination column of the added quadrille's first column

        Returns:
            Tuple of (resulting quadrille, memory hit count)

        Raises:
            OutOfBoundsError: "too far down" / "too far right" when the added
                quadrille extends past the bottom / right edge ("too far up" /
                "too far left" for negative offsets)
        """
        memory_hits = 0
        result = self.clone()
        for i, source_row in enumerate(quadrille.cells):
            dest_row = row + i
            if dest_row < 0:
                raise OutOfBoundsError("too far up", dest_row, col)
            if dest_row >= result.height:
                raise OutOfBoundsError("too far down", dest_row, col)
            target = result._cells[dest_row]
            for j, cell in enumerate(source_row):
                dest_col = col + j
                if dest_col < 0:
                    raise OutOfBoundsError("too far left", dest_row, dest_col)
                if dest_col >= result.width:
                    raise OutOfBoundsError("too far right", dest_row, dest_col)
                if isinstance(cell, Empty):
                    continue
                if not isinstance(target[dest_col], Empty):
                    memory_hits += 1
                target[dest_col] = cell
        return result, memory_hits


# =============================================================================
# Module-level interface
# =============================================================================


@dataclass(frozen=True)
class OverlayResult:
    """A successful overlay: the composed grid and its memory hit count."""

    grid: Quadrille
    collisions: int


@dataclass(frozen=True)
class OverlayFailure:
    """An overlay that did not fit inside the board."""

    reason: str
    row: int
    col: int


def create_board(rows: int, cols: int) -> Quadrille:
    """Create an empty rows×cols quadrille."""
    return Quadrille(rows, cols)


def create_grid_from(rows: Iterable[Iterable[Any]]) -> Quadrille:
    """Create a quadrille from a rectangular 2D array."""
    return Quadrille.from_rows(rows)


def overlay(board: Quadrille, shape: Quadrille, row: int, col: int) -> OverlayResult | OverlayFailure:
    """
    Compose shape onto board at (row, col) without modifying board.

    A shape that does not fit is reported as an OverlayFailure rather than
    raised; the caller decides what to do with the collision count.
    """
    try:
        grid, collisions = board.add(shape, row, col)
    except OutOfBoundsError as e:
        return OverlayFailure(e.reason, e.row, e.col)
    return OverlayResult(grid, collisions)


def glue(board: Quadrille, shape: Quadrille, row: int, col: int, validate: bool = True) -> Quadrille:
    """
    Commit shape onto board, returning the new board.

    With validate, the board is returned unchanged unless the shape fits and
    overwrites nothing. Without validate, collisions are accepted and bounds
    errors propagate.
    """
    if not validate:
        return board.add(shape, row, col)[0]

    result = overlay(board, shape, row, col)
    if isinstance(result, OverlayFailure):
        logger.info("glue rejected at (%d, %d): %s", row, col, result.reason)
        return board
    if result.collisions:
        logger.info("glue rejected at (%d, %d): %d memory hits", row, col, result.collisions)
        return board
    return result.grid
