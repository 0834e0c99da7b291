"""
Interactive demo for quadrille composition.
Move a piece over a board, turn it, and glue it down with keyboard commands.
"""

import logging
import random
import sys

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_composite
from grid_parser import parse_grid
from grid_types import Glyph
from polyomino import generate_polyomino
from quadrille import OverlayFailure, Quadrille, create_board, overlay

ROWS = 20
COLS = 10

FILLERS = ["🙈", "👾", "👽", "🤔"]

PIECES = dict(
    memory="#00ffff 👽 _|_ 🤔 🙈|_ #770811 _|g o l",
)


class InteractiveDemo:
    """Interactive demo for glue operations."""

    def __init__(self, board: Quadrille, piece: Quadrille, polyomino_size: int | None = None) -> None:
        self.board = board
        self.original_board = board.clone()
        self.piece = piece
        self.polyomino_size = polyomino_size
        self.row = 2
        self.col = 2
        self.console = Console()
        self.status_message = "Ready"

    def generate_display(self) -> Panel:
        """Generate the current display with board, piece and status."""
        status = Text()
        status.append("Piece Position: ", style="bold")
        status.append(f"[{self.row}, {self.col}]  ")
        status.append("Board: ", style="bold")
        status.append(f"{self.board.count_occupied()} cells filled\n\n")

        grid_text = render_composite(self.board, self.piece, self.row, self.col)
        status.append(Text.from_ansi(grid_text))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  W/A/S/D - Move piece\n")
        status.append("  R - Rotate piece    F - Reflect piece\n")
        status.append("  V - Glue if it fits without collisions\n")
        status.append("  G - Glue regardless of collisions\n")
        if self.polyomino_size:
            status.append(f"  N - New random {self.polyomino_size}-omino\n")
        status.append("  C - Clear board     Q - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Quadrille Interactive Demo", border_style="green", width=60)

    def attempt_glue(self, validate: bool) -> None:
        """Glue the piece onto the board at its current position."""
        result = overlay(self.board, self.piece, self.row, self.col)

        if isinstance(result, OverlayFailure):
            self.status_message = f"✗ Glue failed: {result.reason} at [{result.row}, {result.col}]"
        elif validate and result.collisions:
            self.status_message = f"✗ Glue refused: {result.collisions} memory hits"
        else:
            self.board = result.grid
            self.status_message = f"✓ Glued with {result.collisions} memory hits"

    def new_piece(self) -> None:
        if not self.polyomino_size:
            self.status_message = "This piece is not a polyomino"
            return
        filler = Glyph(random.choice(FILLERS))
        self.piece = generate_polyomino(self.polyomino_size, filler)
        self.status_message = f"New {self.polyomino_size}-omino ({self.piece.height}x{self.piece.width})"

    def move(self, d_row: int, d_col: int) -> None:
        self.row += d_row
        self.col += d_col
        self.status_message = f"Moved to [{self.row}, {self.col}]"

    def run(self) -> None:
        """Run the interactive demo."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())
                    key = readchar.readkey().lower()

                    if key == 'q':
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key == 'w':
                        self.move(-1, 0)
                    elif key == 's':
                        self.move(1, 0)
                    elif key == 'a':
                        self.move(0, -1)
                    elif key == 'd':
                        self.move(0, 1)
                    elif key == 'r':
                        self.piece.rotate()
                        self.status_message = "Rotated 90° clockwise"
                    elif key == 'f':
                        self.piece.reflect()
                        self.status_message = "Reflected"
                    elif key == 'v':
                        self.attempt_glue(validate=True)
                    elif key == 'g':
                        self.attempt_glue(validate=False)
                    elif key == 'n' and self.polyomino_size:
                        self.new_piece()
                    elif key == 'c':
                        self.board = self.original_board.clone()
                        self.status_message = "Board cleared"
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


def main(piece_name: str) -> None:
    """Run the demo with a literal piece, or a random polyomino when given a size."""
    board = create_board(ROWS, COLS)
    if piece_name.isdigit():
        size = int(piece_name)
        piece = generate_polyomino(size, Glyph(random.choice(FILLERS)))
        InteractiveDemo(board, piece, polyomino_size=size).run()
    else:
        InteractiveDemo(board, parse_grid(PIECES[piece_name])).run()


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format='%(levelname)s: %(message)s')
    main(sys.argv[1] if len(sys.argv) > 1 else '6')
