"""
Shared type definitions for the quadrille system.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CellKind(Enum):
    """Logical kind of a cell, as seen by a renderer."""

    EMPTY = "empty"
    COLOR = "color"
    TEXT = "text"


# =============================================================================
# Cell Values
# =============================================================================


@dataclass(frozen=True)
class Empty:
    """An empty cell."""

    pass


@dataclass(frozen=True)
class Color:
    """A cell filled with an RGB colour."""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b):
            if not isinstance(channel, int) or isinstance(channel, bool) or not 0 <= channel <= 255:
                raise ValueError(f"Colour channels must be integers in 0..255, got {(self.r, self.g, self.b)}")

    @classmethod
    def from_hex(cls, code: str) -> Color:
        """Build a colour from '#rrggbb' (the leading # is optional)."""
        digits = code[1:] if code.startswith("#") else code
        if len(digits) != 6:
            raise ValueError(f"Invalid hex colour: '{code}'")
        return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


@dataclass(frozen=True)
class Glyph:
    """A cell holding a character, emoji or short text."""

    text: str

    def __post_init__(self) -> None:
        if not self.text:
            raise ValueError("Glyph text must be a non-empty string")


Cell = Empty | Color | Glyph

EMPTY = Empty()
DEFAULT_FILLER = Color(0, 255, 255)  # cyan


def cell_kind(cell: Cell) -> CellKind:
    match cell:
        case Empty():
            return CellKind.EMPTY
        case Color():
            return CellKind.COLOR
        case Glyph():
            return CellKind.TEXT
    raise ValueError(f"Unknown cell type: {cell!r}")


# =============================================================================
# Errors
# =============================================================================


class QuadrilleError(Exception):
    """Base class for quadrille errors."""


class InvalidArgumentError(QuadrilleError, ValueError):
    """Malformed request, e.g. a polyomino size that is not a positive integer."""


class ShapeError(QuadrilleError, ValueError):
    """Rows of unequal length, or a raw cell value that cannot be coerced."""


class OutOfBoundsError(QuadrilleError, IndexError):
    """An overlay does not fit inside the target grid."""

    def __init__(self, reason: str, row: int, col: int) -> None:
        super().__init__(reason)
        self.reason = reason
        self.row = row
        self.col = col


class EnumerationCancelled(QuadrilleError):
    """An enumeration run was cancelled before it converged."""
