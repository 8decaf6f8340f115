"""Foundational types for Knoll.

This module defines the grid geometry shared by the engine and its callers:
- Direction: the four sides of a cell, with offsets and opposites
- Position: (col, row) grid coordinates
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class Direction(Enum):
    """Sides of a cell, used both for adjacency rules and neighbor lookup.

    Iteration order (TOP, RIGHT, BOTTOM, LEFT) is the order neighbors are
    visited during propagation.
    """

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"

    @property
    def offset(self) -> tuple[int, int]:
        """Get the (dcol, drow) offset for this direction.

        Coordinate system: col increases to the right, row increases downward,
        so row 0 is the top edge of the map.
        """
        return _DIRECTION_OFFSETS[self]

    @property
    def opposite(self) -> Direction:
        """Get the opposite direction."""
        return _DIRECTION_OPPOSITES[self]

    @classmethod
    def parse(cls, name: str) -> Direction:
        """Look up a direction by its (case-insensitive) name."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown direction: {name!r}") from None


# Lookup tables for Direction properties
_DIRECTION_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.TOP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.BOTTOM: (0, 1),
    Direction.LEFT: (-1, 0),
}

_DIRECTION_OPPOSITES: dict[Direction, Direction] = {
    Direction.TOP: Direction.BOTTOM,
    Direction.BOTTOM: Direction.TOP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Position(NamedTuple):
    """A cell position in the grid.

    (0, 0) is the top-left corner of the map.
    """

    col: int
    row: int

    def __add__(self, other: object) -> Position:
        """The neighboring position on the given side."""
        if isinstance(other, Direction):
            dcol, drow = other.offset
            return Position(self.col + dcol, self.row + drow)
        return NotImplemented

    def in_bounds(self, width: int, height: int) -> bool:
        """Check if position is within grid bounds (0 to width-1, 0 to height-1)."""
        return 0 <= self.col < width and 0 <= self.row < height

    def to_index(self, width: int) -> int:
        """Flat row-major index of this position."""
        return self.row * width + self.col

    @classmethod
    def from_index(cls, index: int, width: int) -> Position:
        """Position of a flat row-major index."""
        return cls(index % width, index // width)
