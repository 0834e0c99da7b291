"""
Grid parsing utilities for quadrilles.

Provides two parsing formats:
1. Standard format with spaces between cell tokens
2. Concise format with single-character cells
"""

from __future__ import annotations

from collections.abc import Mapping

from grid_types import EMPTY, Cell, Color, Glyph
from quadrille import Quadrille

__all__ = ["parse_grid", "parse_grids", "parse_grid_concise"]


def _parse_token(token: str, row_idx: int, col_idx: int, row_str: str) -> Cell:
    if not token or token in ("_", "0"):
        return EMPTY
    if token.startswith("#"):
        try:
            return Color.from_hex(token)
        except ValueError:
            raise ValueError(
                f"Invalid colour token: '{token}'\n"
                f"  Row {row_idx}: \"{row_str}\"\n"
                f"  Position: column {col_idx}\n"
                f"  Colours are written as '#rrggbb', e.g. '#770811'"
            ) from None
    return Glyph(token)


def parse_grid(definition: str) -> Quadrille:
    """
    Parse a quadrille from a compact string format.

    Format:
    - Rows separated by |
    - Cells separated by spaces
    - Cell tokens:
      * Underscore (_) or zero (0): Empty cell
      * Empty string (from multiple adjacent spaces): Empty cell
      * '#rrggbb': Color cell, e.g. "#00ffff" -> Color(0, 255, 255)
      * Anything else: Glyph cell holding the whole token, e.g. "👽", "g", "abc"

    Example:
        "#00ffff 👽 _|_ 🤔 🙈|g o l"
        Creates a 3x3 quadrille with a cyan cell, five glyphs and two empty cells.

    Raises:
        ValueError: On malformed colours or rows of unequal length
    """
    row_strings = definition.split("|")
    rows: list[list[Cell]] = []

    for row_idx, row_str in enumerate(row_strings):
        cells = [
            _parse_token(token, row_idx, col_idx, row_str)
            for col_idx, token in enumerate(row_str.split(" "))
        ]
        rows.append(cells)

    cols = len(rows[0])
    mismatched = [(i, len(row)) for i, row in enumerate(rows) if len(row) != cols]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths in grid \"{definition}\"\n"
            f"  Expected: {cols} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} columns - \"{row_strings[row_idx]}\"\n"
        error_msg += "  All rows must have the same number of cells"
        raise ValueError(error_msg)

    return Quadrille.from_rows(rows)


def parse_grids(definitions: Mapping[str, str]) -> dict[str, Quadrille]:
    """Parse several named grids in the standard format."""
    return {name: parse_grid(definition) for name, definition in definitions.items()}


def parse_grid_concise(definition: str, palette: Mapping[str, Cell] | None = None) -> Quadrille:
    """
    Parse a quadrille from a concise format.

    Format:
    - Rows separated by |
    - One character per cell (no spaces between cells)
    - Cell types:
      * Underscore (_) or dot (.): Empty cell
      * Character found in palette: the palette's cell
      * Any other character: Glyph holding that character
    - Short rows are padded with Empty cells to the longest row

    Example:
        parse_grid_concise("XX|X_", {"X": Color(0, 255, 255)})
        Creates a 2x2 quadrille with an L-tromino of cyan cells.

    Args:
        definition: Grid definition, one character per cell
        palette: Optional mapping from characters to cells

    Returns:
        The parsed quadrille
    """
    palette = palette or {}
    rows: list[list[Cell]] = []

    for row_str in definition.strip().split("|"):
        cells: list[Cell] = []
        for char in row_str.strip():
            if char in palette:
                cells.append(palette[char])
            elif char in ("_", "."):
                cells.append(EMPTY)
            elif char.isspace():
                raise ValueError(
                    f"Whitespace inside concise row \"{row_str}\"\n"
                    f"  Use '_' or '.' for empty cells"
                )
            else:
                cells.append(Glyph(char))
        rows.append(cells)

    # Pad rows to maximum length with Empty cells
    max_cols = max(len(row) for row in rows)
    for row in rows:
        row.extend([EMPTY] * (max_cols - len(row)))

    return Quadrille.from_rows(rows)
