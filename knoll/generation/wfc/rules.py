"""
Adjacency rule table for Wave Function Collapse.

The rule table is the static knowledge that drives constraint propagation:
for every symbol and every side of a cell, which symbols may sit next to it.
It also carries a selection weight per symbol and the symbol sets allowed on
each border of the map.

A table is built once, validated, and then shared read-only by every cell
and grid of a run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Protocol

from knoll.core.errors import RuleTableError
from knoll.core.types import Direction


class RandomSource(Protocol):
    """Anything that can draw a uniform integer in [0, stop)."""

    def randrange(self, stop: int) -> int: ...


@dataclass(frozen=True)
class RuleTable:
    """
    Immutable symbol adjacency rules.

    Attributes:
        alphabet: Every symbol, in canonical order. Cell domains keep this
                  order, which makes weighted picks reproducible.
        adjacency: For each symbol and direction, the symbols allowed in the
                   neighboring cell on that side.
        weights: Positive selection weight per symbol. Only used when picking
                 a value for a cell, never for constraint logic.
        edges: For each border side, the symbols allowed in cells touching
               that border. Sides that are not given allow the whole alphabet.
    """
    alphabet: tuple[str, ...]
    adjacency: Mapping[str, Mapping[Direction, frozenset[str]]]
    weights: Mapping[str, int]
    edges: Mapping[Direction, frozenset[str]] = field(default_factory=dict)
    _symbol_set: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        alphabet = tuple(self.alphabet)
        if not alphabet:
            raise RuleTableError("Rule table needs at least one symbol")
        for symbol in alphabet:
            if not isinstance(symbol, str) or len(symbol) != 1:
                raise RuleTableError(f"Symbols must be single characters, got {symbol!r}")
        if len(set(alphabet)) != len(alphabet):
            raise RuleTableError(f"Duplicate symbols in alphabet {''.join(alphabet)!r}")
        known = frozenset(alphabet)

        weights: dict[str, int] = {}
        for symbol in alphabet:
            weight = self.weights.get(symbol)
            if weight is None:
                raise RuleTableError(f"Symbol {symbol!r} has no weight")
            if isinstance(weight, bool) or not isinstance(weight, int) or weight <= 0:
                raise RuleTableError(f"Symbol {symbol!r} needs a positive integer weight, got {weight!r}")
            weights[symbol] = weight
        self._check_known(known, self.weights.keys(), "weights")

        adjacency: dict[str, dict[Direction, frozenset[str]]] = {}
        self._check_known(known, self.adjacency.keys(), "rules")
        for symbol in alphabet:
            rules = self.adjacency.get(symbol)
            if rules is None:
                raise RuleTableError(f"Symbol {symbol!r} has no adjacency rules")
            adjacency[symbol] = {}
            for direction in Direction:
                if direction not in rules:
                    raise RuleTableError(f"Symbol {symbol!r} has no rule for {direction.value}")
                allowed = frozenset(rules[direction])
                self._check_known(known, allowed, f"rule {symbol!r}/{direction.value}")
                adjacency[symbol][direction] = allowed

        edges: dict[Direction, frozenset[str]] = {}
        for side in Direction:
            allowed = frozenset(self.edges.get(side, known))
            self._check_known(known, allowed, f"{side.value} edge")
            edges[side] = allowed

        object.__setattr__(self, "alphabet", alphabet)
        object.__setattr__(self, "adjacency", adjacency)
        object.__setattr__(self, "weights", weights)
        object.__setattr__(self, "edges", edges)
        object.__setattr__(self, "_symbol_set", known)

    def __hash__(self) -> int:
        # Equal tables share alphabet and weights
        return hash((self.alphabet, tuple(self.weights[s] for s in self.alphabet)))

    @staticmethod
    def _check_known(known: frozenset[str], symbols: Iterable[str], where: str) -> None:
        unknown = [s for s in symbols if s not in known]
        if unknown:
            raise RuleTableError(f"Unknown symbols in {where}: {''.join(sorted(unknown))!r}")

    @classmethod
    def from_strings(
        cls,
        alphabet: str,
        rules: Mapping[str, Mapping[Direction, str]],
        weights: Mapping[str, int],
        edges: Mapping[Direction, str] | None = None,
    ) -> RuleTable:
        """
        Build a table from rules written as symbol strings.

        e.g. rules={"#": {Direction.TOP: "/\\_#", ...}} allows any hill piece
        on top of a rock.
        """
        return cls(
            alphabet=tuple(alphabet),
            adjacency={
                symbol: {direction: frozenset(allowed) for direction, allowed in sides.items()}
                for symbol, sides in rules.items()
            },
            weights=dict(weights),
            edges={side: frozenset(allowed) for side, allowed in (edges or {}).items()},
        )

    @property
    def symbols(self) -> frozenset[str]:
        """All known symbols as a set."""
        return self._symbol_set

    def weight(self, symbol: str) -> int:
        """Selection weight of a symbol."""
        return self.weights[symbol]

    def compatible_neighbors(self, symbol: str, direction: Direction) -> frozenset[str]:
        """
        Symbols allowed next to `symbol` on its `direction` side.

        Unknown symbols yield the empty set: they contribute nothing.
        """
        return self.adjacency.get(symbol, {}).get(direction, frozenset())

    def edge_constraint(self, side: Direction) -> frozenset[str]:
        """Symbols allowed in cells touching the given border."""
        return self.edges[side]

    def weighted_pick(self, domain: Iterable[str], sampler: RandomSource) -> str:
        """
        Pick a symbol from `domain` with probability proportional to its weight.

        Consumes exactly one draw from the sampler. The domain is walked in its
        own order, so an ordered domain gives a reproducible pick.
        """
        symbols = tuple(domain)
        if not symbols:
            raise RuntimeError("weighted_pick called on an empty domain")

        total = sum(self.weights[s] for s in symbols)
        draw = sampler.randrange(total)
        for symbol in symbols:
            weight = self.weights[symbol]
            if draw < weight:
                return symbol
            draw -= weight
        raise RuntimeError(f"Weighted draw out of range (total={total})")

    def dead_ends(self) -> list[tuple[str, Direction]]:
        """Symbol/direction pairs that allow no neighbor at all."""
        return [
            (symbol, direction)
            for symbol in self.alphabet
            for direction in Direction
            if not self.adjacency[symbol][direction]
        ]

    def asymmetries(self) -> list[tuple[str, Direction, str]]:
        """
        Rules that are not mirrored.

        (a, d, b) means a allows b on its d side but b does not allow a on its
        opposite side. Propagation only reads rules outward from the cell that
        changed, so an asymmetric table can still be valid.
        """
        return [
            (symbol, direction, neighbor)
            for symbol in self.alphabet
            for direction in Direction
            for neighbor in sorted(self.adjacency[symbol][direction])
            if symbol not in self.adjacency[neighbor][direction.opposite]
        ]


class RuleTableBuilder:
    """
    Incremental construction of a RuleTable.

    Usage:
        builder = RuleTableBuilder("ab")
        builder.allow_both("a", "b").allow_both("a", "a")
        table = builder.weight("a", 3).build()
    """

    def __init__(self, alphabet: Iterable[str]):
        self._alphabet = tuple(alphabet)
        self._adjacency: dict[str, dict[Direction, set[str]]] = {
            symbol: {direction: set() for direction in Direction}
            for symbol in self._alphabet
        }
        self._weights: dict[str, int] = {symbol: 1 for symbol in self._alphabet}
        self._edges: dict[Direction, frozenset[str]] = {}

    def _rules_for(self, symbol: str) -> dict[Direction, set[str]]:
        try:
            return self._adjacency[symbol]
        except KeyError:
            raise RuleTableError(f"Unknown symbol {symbol!r}") from None

    def allow(self, symbol: str, direction: Direction, *neighbors: str) -> RuleTableBuilder:
        """Allow `neighbors` on the `direction` side of `symbol`."""
        self._rules_for(symbol)[direction].update(neighbors)
        return self

    def allow_both(
        self,
        symbol_a: str,
        symbol_b: str,
        directions: Iterable[Direction] | None = None,
    ) -> RuleTableBuilder:
        """
        Create a mirrored rule: if A allows B to its TOP, B allows A to its BOTTOM.

        Defaults to all four directions.
        """
        for direction in directions or Direction:
            self.allow(symbol_a, direction, symbol_b)
            self.allow(symbol_b, direction.opposite, symbol_a)
        return self

    def allow_all(self) -> RuleTableBuilder:
        """Allow every symbol next to every symbol."""
        for symbol in self._alphabet:
            for direction in Direction:
                self.allow(symbol, direction, *self._alphabet)
        return self

    def weight(self, symbol: str, weight: int) -> RuleTableBuilder:
        self._rules_for(symbol)
        self._weights[symbol] = weight
        return self

    def edge(self, side: Direction, symbols: Iterable[str]) -> RuleTableBuilder:
        self._edges[side] = frozenset(symbols)
        return self

    def build(self) -> RuleTable:
        return RuleTable(
            alphabet=self._alphabet,
            adjacency={
                symbol: {direction: frozenset(allowed) for direction, allowed in sides.items()}
                for symbol, sides in self._adjacency.items()
            },
            weights=dict(self._weights),
            edges=dict(self._edges),
        )
