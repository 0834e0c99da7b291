"""Tests for the demo scripts."""

import pytest

from demo import composition_demo
from grid_parser import parse_grid
from interactive_demo import InteractiveDemo
from quadrille import create_board


class TestCompositionDemo:
    """Tests for the scripted composition demo."""

    def test_reports_out_of_bounds(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The reflected piece at the bottom edge is reported, not asserted."""
        composition_demo()
        out = capsys.readouterr().out
        assert "Reflected piece at [5, 0]: ✗ too far down" in out


class TestInteractiveDemo:
    """Tests for the interactive demo's actions (no keyboard loop)."""

    def test_new_piece_without_size_keeps_piece(self) -> None:
        """A literal piece cannot be replaced by a random polyomino."""
        piece = parse_grid("a b")
        demo = InteractiveDemo(create_board(4, 4), piece)
        demo.new_piece()
        assert demo.piece is piece
        assert demo.status_message == "This piece is not a polyomino"

    def test_new_piece_with_size(self) -> None:
        """A polyomino demo draws a fresh piece of its size."""
        demo = InteractiveDemo(create_board(4, 4), parse_grid("x"), polyomino_size=3)
        demo.new_piece()
        assert demo.piece.count_occupied() == 3

    def test_validated_glue_refuses_collisions(self) -> None:
        """Validated glue leaves the board alone when cells would be overwritten."""
        demo = InteractiveDemo(create_board(4, 4), parse_grid("x"))
        demo.attempt_glue(validate=True)
        board = demo.board
        demo.attempt_glue(validate=True)
        assert demo.board is board
        assert demo.status_message == "✗ Glue refused: 1 memory hits"
