"""Exception types for Knoll."""

from __future__ import annotations

from .types import Position


class KnollError(Exception):
    """Base class for all Knoll errors."""


class Contradiction(KnollError):
    """A cell ran out of candidate symbols.

    Fatal to the current run: the engine never backtracks. Callers may report
    it, or start a fresh run with another seed.
    """

    def __init__(
        self,
        index: int | None = None,
        position: Position | None = None,
        message: str | None = None,
    ):
        self.index = index
        self.position = position
        self.custom_message = message
        if message is None:
            if position is not None:
                message = f"Cell {index} at ({position.col}, {position.row}) ran out of options"
            elif index is not None:
                message = f"Cell {index} ran out of options"
            else:
                message = "Cell ran out of options"
        super().__init__(message)

    def at(self, position: Position) -> Contradiction:
        """Copy of this contradiction annotated with the cell's grid position."""
        return Contradiction(self.index, position, self.custom_message)


class RuleTableError(KnollError, ValueError):
    """A rule table (or rule-set file) is malformed."""


class GenerationError(KnollError):
    """Terrain generation failed on every attempt."""
