"""Tests for the rendering collaborators."""

import simple_chalk as chalk  # type: ignore[import-untyped]
from rich.cells import cell_len

from ascii_render import (
    CellPrimitive,
    cell_primitives,
    nearest_background,
    render,
    render_cell,
    render_composite,
)
from grid_parser import parse_grid, parse_grid_concise
from grid_types import CellKind, Color, Glyph
from quadrille import create_board


class TestCellPrimitives:
    """Tests for per-cell drawing primitives."""

    def test_row_major_order(self) -> None:
        """Primitives come row by row with pixel origins."""
        grid = parse_grid("#00ffff a|_ b")
        primitives = list(cell_primitives(grid, length=20))

        assert [(p.row, p.col) for p in primitives] == [(0, 0), (0, 1), (1, 0), (1, 1)]
        assert primitives[0] == CellPrimitive(
            kind=CellKind.COLOR, row=0, col=0, x=0, y=0, length=20, value=Color(0, 255, 255)
        )
        assert primitives[1].kind is CellKind.TEXT
        assert (primitives[1].x, primitives[1].y) == (20, 0)
        assert primitives[2].kind is CellKind.EMPTY
        assert (primitives[3].x, primitives[3].y) == (20, 20)

    def test_placement_offset(self) -> None:
        """A placed quadrille is offset by its row and column."""
        grid = parse_grid_concise("x")
        (primitive,) = cell_primitives(grid, length=10, row=3, col=2)
        assert (primitive.x, primitive.y) == (20, 30)
        assert (primitive.row, primitive.col) == (0, 0)

    def test_skip_empty(self) -> None:
        """Empty cells can be left out."""
        grid = parse_grid_concise("x_|_y")
        primitives = list(cell_primitives(grid, fill_empty=False))
        assert [p.value for p in primitives] == [Glyph("x"), Glyph("y")]


class TestRender:
    """Tests for terminal rendering."""

    def test_plain_render(self) -> None:
        """Render without colours."""
        grid = parse_grid("#00ffff a|_ b")
        assert render(grid, cell_width=2, color=False) == "\n".join([
            "┌────┐",
            "│##a │",
            "│· b │",
            "└────┘",
        ])

    def test_title(self) -> None:
        """Embed a title in the top border when it fits."""
        text = render(create_board(2, 6), cell_width=2, color=False, title="hi")
        assert text.splitlines()[0] == "┌──── hi ────┐"

    def test_render_cell_glyph_width(self) -> None:
        """Glyphs are centred, longer text is kept whole."""
        assert render_cell(Glyph("g"), cell_width=3) == " g "
        assert render_cell(Glyph("long"), cell_width=2) == "long"

    def test_coloured_cell_uses_palette(self) -> None:
        """Colour cells get the nearest palette background."""
        assert render_cell(Color(10, 250, 240), cell_width=2) == chalk.bgCyan("  ")
        assert nearest_background(Color(200, 10, 20))("x") == chalk.bgRed("x")

    def test_composite_marks_collisions(self) -> None:
        """Preview shape cells, flagging those over occupied board cells."""
        board = parse_grid_concise("x__|___")
        shape = parse_grid_concise("ab")
        text = render_composite(board, shape, 0, 0, cell_width=1, color=False)
        assert text.splitlines()[1] == "│!b·│"

    def test_composite_clips(self) -> None:
        """Shape cells outside the board are not drawn."""
        board = create_board(1, 2)
        shape = parse_grid_concise("abc")
        text = render_composite(board, shape, 0, 1, cell_width=1, color=False)
        assert text.splitlines()[1] == "│·a│"

    def test_wide_glyphs_keep_borders_aligned(self) -> None:
        """Double-width emoji fill a 2-column cell without padding."""
        assert render_cell(Glyph("🙈"), cell_width=2) == "🙈"
        assert render_cell(Glyph("👾"), cell_width=3) == "👾 "

        lines = render(parse_grid("🙈 a|_ 👾"), cell_width=2, color=False).splitlines()
        assert {cell_len(line) for line in lines} == {6}

    def test_composite_shares_border_with_render(self) -> None:
        """The preview is boxed exactly like a plain render."""
        board = parse_grid_concise("x_|__")
        composite = render_composite(board, parse_grid_concise("y"), 1, 1, color=False).splitlines()
        plain = render(board, color=False).splitlines()
        assert composite[0] == plain[0]
        assert composite[-1] == plain[-1]
        assert composite[1] == plain[1]
        assert composite[2] == "│· y │"
