"""
Rendering collaborators for quadrilles.

Provides two rendering approaches:
1. Drawing primitives - one record per cell, for hosts that draw themselves
2. Terminal rendering - quadrilles as boxed character grids with ANSI colours
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass

import simple_chalk as chalk  # type: ignore[import-untyped]
from rich.cells import cell_len

from grid_types import Cell, CellKind, Color, Empty, Glyph, cell_kind
from quadrille import Quadrille

logger = logging.getLogger(__name__)


# =============================================================================
# Drawing Primitives
# =============================================================================


@dataclass(frozen=True)
class CellPrimitive:
    """Everything a host needs to draw one cell."""

    kind: CellKind
    row: int
    col: int
    x: int  # pixel origin
    y: int
    length: int  # cell edge length
    value: Cell


def cell_primitives(
    grid: Quadrille,
    length: int = 10,
    row: int = 0,
    col: int = 0,
    fill_empty: bool = True,
) -> Iterator[CellPrimitive]:
    """
    Iterate a quadrille row-major as drawing primitives.

    Args:
        grid: The quadrille to draw
        length: Cell edge length in host units (e.g. pixels)
        row: Row at which the quadrille is placed
        col: Column at which the quadrille is placed
        fill_empty: Also yield empty cells (hosts that paint a board background)
    """
    for i, cells in enumerate(grid.cells):
        for j, cell in enumerate(cells):
            kind = cell_kind(cell)
            if kind is CellKind.EMPTY and not fill_empty:
                continue
            yield CellPrimitive(
                kind=kind,
                row=i,
                col=j,
                x=(col + j) * length,
                y=(row + i) * length,
                length=length,
                value=cell,
            )


# =============================================================================
# Terminal Rendering
# =============================================================================

# Terminal palette: nearest entry wins for Color cells
_PALETTE: list[tuple[tuple[int, int, int], Callable[[str], str]]] = [
    ((0, 0, 0), chalk.bgBlack),
    ((255, 0, 0), chalk.bgRed),
    ((0, 255, 0), chalk.bgGreen),
    ((255, 255, 0), chalk.bgYellow),
    ((0, 0, 255), chalk.bgBlue),
    ((255, 0, 255), chalk.bgMagenta),
    ((0, 255, 255), chalk.bgCyan),
    ((255, 255, 255), chalk.bgWhite),
]


def nearest_background(color: Color) -> Callable[[str], str]:
    """Pick the palette background closest to color (squared RGB distance)."""

    def distance(entry: tuple[tuple[int, int, int], Callable[[str], str]]) -> int:
        (r, g, b), _ = entry
        return (color.r - r) ** 2 + (color.g - g) ** 2 + (color.b - b) ** 2

    return min(_PALETTE, key=distance)[1]


def _center(text: str, width: int) -> str:
    # Pad by terminal columns; wide emoji take two
    margin = width - cell_len(text)
    if margin <= 0:
        return text
    left = margin // 2
    return " " * left + text + " " * (margin - left)


def _box(rows: list[str], inner_width: int, title: str | None = None) -> str:
    top = "─" * inner_width
    if title and len(title) + 2 <= inner_width:
        top = f" {title} ".center(inner_width, "─")
    lines = [f"┌{top}┐"]
    lines.extend(f"│{row}│" for row in rows)
    lines.append(f"└{'─' * inner_width}┘")
    return "\n".join(lines)


def render_cell(cell: Cell, cell_width: int = 2, color: bool = True, empty_char: str = "·") -> str:
    """Render one cell as cell_width terminal columns (glyphs wider than that are kept whole)."""
    match cell:
        case Empty():
            return _center(empty_char, cell_width)
        case Color():
            if color:
                return nearest_background(cell)(" " * cell_width)
            return "#" * cell_width
        case Glyph(text=text):
            return _center(text, cell_width)
    raise ValueError(f"Unknown cell type: {cell!r}")


def render(
    grid: Quadrille,
    cell_width: int = 2,
    color: bool = True,
    title: str | None = None,
) -> str:
    """
    Render a quadrille as a boxed character grid.

    Args:
        grid: The quadrille to render
        cell_width: Characters per cell (default 2)
        color: Paint Color cells with ANSI backgrounds; plain '#' otherwise
        title: Optional title embedded in the top border

    Returns:
        Rendered string, one line per row plus borders
    """
    rows = ["".join(render_cell(cell, cell_width, color) for cell in row) for row in grid.cells]
    return _box(rows, grid.width * cell_width, title)


def render_composite(
    board: Quadrille,
    shape: Quadrille,
    row: int,
    col: int,
    cell_width: int = 2,
    color: bool = True,
) -> str:
    """
    Render board with shape previewed on top at (row, col).

    Shape cells over empty board cells are highlighted, shape cells over
    occupied board cells are marked as collisions ('!' when uncoloured).
    Parts of the shape outside the board are clipped.
    """
    preview: dict[tuple[int, int], Cell] = {}
    for i, j in shape.occupied():
        r, c = row + i, col + j
        if 0 <= r < board.height and 0 <= c < board.width:
            preview[(r, c)] = shape.cells[i][j]

    clipped = shape.count_occupied() - len(preview)
    if clipped:
        logger.debug("render_composite: %d shape cells outside the board", clipped)

    rows: list[str] = []
    for r, cells in enumerate(board.cells):
        parts: list[str] = []
        for c, cell in enumerate(cells):
            if (r, c) not in preview:
                parts.append(render_cell(cell, cell_width, color))
                continue
            piece = render_cell(preview[(r, c)], cell_width, color=False)
            collides = not isinstance(cell, Empty)
            if color:
                parts.append(chalk.bgRed.white(piece) if collides else chalk.bgWhite.black(piece))
            else:
                parts.append("!" * cell_width if collides else piece)
        rows.append("".join(parts))
    return _box(rows, board.width * cell_width)
