"""
Demonstration scripts for the quadrille system.
"""

import logging
import random
import sys

from ascii_render import render, render_composite
from grid_parser import parse_grid
from grid_types import Color, Glyph
from polyomino import Convergence, EnumerationSettings, Enumerator, generate_polyomino, materialize
from quadrille import OverlayFailure, create_board, glue, overlay


def composition_demo() -> None:
    """Demonstrate glueing, reflecting and rotating a literal quadrille."""
    board = create_board(6, 6)
    piece = parse_grid("#00ffff 👽 _|_ 🤔 🙈|_ #770811 _|g o l")

    print("PIECE:")
    print(render(piece))
    print()

    board = glue(board, piece, 1, 1)
    print("Glued at [1, 1]:")
    print(render(board))
    print()

    piece.rotate()
    print("Rotated piece previewed at [2, 2] (collisions shown in red):")
    print(render_composite(board, piece, 2, 2))
    result = overlay(board, piece, 2, 2)
    if isinstance(result, OverlayFailure):
        print(f"✗ Overlay failed: {result.reason}")
    else:
        print(f"Overlay would cause {result.collisions} memory hits; validated glue keeps the board")
    print()

    piece.reflect()
    result = overlay(board, piece, 5, 0)
    if isinstance(result, OverlayFailure):
        print(f"Reflected piece at [5, 0]: ✗ {result.reason}")
    else:
        print(f"Reflected piece at [5, 0]: {result.collisions} memory hits")
    print()


def enumeration_demo(max_size: int = 6) -> None:
    """Show every free polyomino up to max_size."""
    for size in range(1, max_size + 1):
        enumerator = Enumerator(size)
        shapes = enumerator.run()
        print(f"{size}-ominoes: {len(shapes)} shapes, {enumerator.steps} steps")
        if size <= 4:
            for net in shapes:
                print(render(materialize(net, Color(0, 255, 255))))
        print()


def generation_demo(size: int = 6) -> None:
    """Drop two random polyominoes onto a 20x10 board."""
    rng = random.Random(616)
    settings = EnumerationSettings(convergence=Convergence.STALL)
    pepe = generate_polyomino(size, Glyph("🙈"), rng=rng, settings=settings)
    pepa = generate_polyomino(size, Glyph("👾"), rng=rng, settings=settings)

    board = create_board(20, 10)
    board = glue(board, pepa, 2, 2)
    board = glue(board, pepe, 7, 2)
    print(render(board, title=f"{size}-ominoes"))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
    composition_demo()
    enumeration_demo(int(sys.argv[1]) if len(sys.argv) > 1 else 6)
    generation_demo()
