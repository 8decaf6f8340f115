"""
Cell domains for Wave Function Collapse.

A domain is the set of symbols one grid cell could still become. Domains only
ever shrink during a run, and an operation that would leave one empty raises
Contradiction instead, leaving the domain as it was.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from knoll.core.errors import Contradiction
from knoll.core.types import Direction

from .rules import RuleTable


class CellDomain:
    """
    The candidate symbols of a single grid cell.

    Before collapse: holds several possible symbols
    After collapse: holds exactly one

    Symbols are stored as a tuple in rule-table alphabet order, so iterating a
    domain is deterministic regardless of string hashing.
    """

    __slots__ = ("index", "_symbols")

    def __init__(self, symbols: Iterable[str], index: int | None = None):
        self.index = index
        self._symbols: tuple[str, ...] = tuple(dict.fromkeys(symbols))

    def __repr__(self) -> str:
        return f"CellDomain(index={self.index}, symbols={''.join(self._symbols)!r})"

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._symbols

    @property
    def symbols(self) -> tuple[str, ...]:
        return self._symbols

    @property
    def size(self) -> int:
        """How uncertain this cell is. Lower = more constrained."""
        return len(self._symbols)

    def is_solved(self) -> bool:
        """A cell is solved when exactly one candidate remains."""
        return len(self._symbols) == 1

    @property
    def value(self) -> str | None:
        """The chosen symbol, or None if not yet solved."""
        if self.is_solved():
            return self._symbols[0]
        return None

    def _replace(self, remaining: tuple[str, ...]) -> bool:
        if not remaining:
            raise Contradiction(self.index)
        changed = len(remaining) != len(self._symbols)
        self._symbols = remaining
        return changed

    def prune(self, allowed: Iterable[str]) -> bool:
        """
        Keep only the candidates that are also in `allowed`.

        Returns True if the domain lost candidates.
        Raises Contradiction if no candidate survives.
        """
        allowed = frozenset(allowed)
        return self._replace(tuple(s for s in self._symbols if s in allowed))

    def prune_against(self, other: CellDomain, direction: Direction, rules: RuleTable) -> bool:
        """
        Constrain this cell by a neighbor.

        `other` is the neighbor and `direction` points from it to this cell.
        Every symbol `other` could still be contributes the symbols it allows on
        that side; this domain keeps only candidates in the union.

        Returns True if the domain lost candidates.
        Raises Contradiction if no candidate survives.
        """
        allowed: set[str] = set()
        for symbol in other:
            allowed |= rules.compatible_neighbors(symbol, direction)
        return self._replace(tuple(s for s in self._symbols if s in allowed))

    def assign(self, symbol: str) -> None:
        """Force this cell to a single symbol."""
        self.prune((symbol,))
