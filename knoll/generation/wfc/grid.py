"""
Grid and collapse engine for Wave Function Collapse.

The Grid is the "wave function": a flat, row-major list of cell domains that
each start in superposition (every symbol possible) and collapse one at a
time until every cell holds a single symbol.

The algorithm:
1. Take the unresolved cell with the fewest candidates (lowest index on ties)
2. Assign it one symbol (weighted random choice)
3. Propagate: shrink neighbor domains breadth-first using the adjacency rules
4. Repeat until complete or a domain runs dry (Contradiction)

There is no backtracking. A contradiction ends the run; retrying with another
seed is up to the caller.
"""

from collections import deque
from enum import Enum, auto
from typing import Callable, Iterator

from knoll.core.errors import Contradiction
from knoll.core.types import Direction, Position
from knoll.logging_config import get_logger, log_contradiction, log_propagation, log_step

from .domain import CellDomain
from .rules import RuleTable
from .sampler import Sampler

logger = get_logger(__name__)

CellState = str | int


class SolverState(Enum):
    """The current state of a collapse run."""
    RUNNING = auto()        # Unresolved cells remain
    COMPLETE = auto()       # Every cell holds exactly one symbol
    CONTRADICTION = auto()  # Some cell ran out of candidates


class Grid:
    """
    A fixed-size map of cell domains plus the collapse/propagate engine.

    Usage:
        grid = Grid(10, 10, rules)
        grid.collapse(seed=42)        # raises Contradiction on failure
        print(grid.rows())

    Or one step at a time:
        sampler = Sampler(42)
        while grid.step(sampler) is SolverState.RUNNING:
            ...
    """

    def __init__(self, width: int, height: int, rules: RuleTable):
        """
        Create a grid in maximum superposition, narrowed at the borders.

        Args:
            width: Number of cells horizontally
            height: Number of cells vertically
            rules: Adjacency rules, weights and edge constraints

        Raises:
            ValueError: If width or height is below 1
            Contradiction: If two edge constraints leave a corner with no symbol
        """
        if width < 1 or height < 1:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")

        self.width = width
        self.height = height
        self.rules = rules

        self.cells: list[CellDomain] = [
            CellDomain(rules.alphabet, index=i) for i in range(width * height)
        ]

        # Entropy pointer: the next collapse target, None once everything is solved
        self.entropy_index: int | None = None
        self.solved_count = 0
        self.steps = 0
        self.seed: int | None = None
        self.state = SolverState.RUNNING
        self.contradiction: Contradiction | None = None

        try:
            self._apply_edge_constraints()
            self._find_min()
        except Contradiction as exc:
            raise self._fail(exc) from None

        if self.entropy_index is None:
            self.state = SolverState.COMPLETE

        logger.info(
            f"Grid {width}x{height} created | symbols={''.join(rules.alphabet)!r} "
            f"| solved={self.solved_count} | first={self.entropy_index}"
        )

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    @property
    def size(self) -> int:
        return self.width * self.height

    def position(self, index: int) -> Position:
        return Position.from_index(index, self.width)

    def index_of(self, col: int, row: int) -> int:
        return Position(col, row).to_index(self.width)

    def get_cell(self, col: int, row: int) -> CellDomain | None:
        """Get the domain at a position, or None if out of bounds."""
        if Position(col, row).in_bounds(self.width, self.height):
            return self.cells[self.index_of(col, row)]
        return None

    def neighbors(self, index: int) -> list[tuple[int, Direction]]:
        """
        Neighbors of a cell with their directions, clipped at the borders.

        Direction is FROM the input cell TO the neighbor, in the order
        TOP, RIGHT, BOTTOM, LEFT.
        """
        here = self.position(index)
        result = []
        for direction in Direction:
            there = here + direction
            if there.in_bounds(self.width, self.height):
                result.append((there.to_index(self.width), direction))
        return result

    def border_sides(self, index: int) -> list[Direction]:
        """Sides of a cell that face the edge of the map."""
        inner = {direction for _, direction in self.neighbors(index)}
        return [direction for direction in Direction if direction not in inner]

    # -------------------------------------------------------------------------
    # Per-cell state
    # -------------------------------------------------------------------------

    def cell_state(self, index: int) -> CellState:
        """The solved symbol of a cell, or its remaining candidate count."""
        cell = self.cells[index]
        if cell.is_solved():
            return cell.value
        return cell.size

    def cell_states(self) -> list[CellState]:
        return [self.cell_state(i) for i in range(self.size)]

    def rows(self) -> list[list[CellState]]:
        """Per-cell states as a list of rows, indexed rows[row][col]."""
        states = self.cell_states()
        return [states[row * self.width:(row + 1) * self.width] for row in range(self.height)]

    def all_cells(self) -> Iterator[CellDomain]:
        yield from self.cells

    def is_complete(self) -> bool:
        """Check if all cells have collapsed."""
        return all(cell.is_solved() for cell in self.cells)

    # -------------------------------------------------------------------------
    # Engine
    # -------------------------------------------------------------------------

    def _apply_edge_constraints(self) -> None:
        for index, cell in enumerate(self.cells):
            for side in self.border_sides(index):
                cell.prune(self.rules.edge_constraint(side))

    def _find_min(self) -> None:
        """Rescan every cell for the next collapse target."""
        best: int | None = None
        best_size = 0
        solved = 0
        for index, cell in enumerate(self.cells):
            size = cell.size
            if size == 0:
                raise Contradiction(index)
            if size == 1:
                solved += 1
            elif best is None or size < best_size:
                best = index
                best_size = size
        self.entropy_index = best
        self.solved_count = solved

    def _propagate(self, origin: int) -> int:
        queue: deque[int] = deque([origin])
        visited: set[int] = set()
        pruned = 0

        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)
            domain = self.cells[current]

            for neighbor_index, direction in self.neighbors(current):
                neighbor = self.cells[neighbor_index]
                # Solved cells are sources, never targets
                if neighbor.is_solved() or neighbor_index in visited:
                    continue
                if neighbor.prune_against(domain, direction, self.rules):
                    pruned += 1
                    queue.append(neighbor_index)

        log_propagation(logger, self.steps, origin, len(visited), pruned)
        return pruned

    def _fail(self, exc: Contradiction) -> Contradiction:
        if exc.position is None and exc.index is not None:
            exc = exc.at(self.position(exc.index))
        self.state = SolverState.CONTRADICTION
        self.contradiction = exc
        log_contradiction(logger, self.steps, exc.index, str(exc))
        return exc

    def propagate(self, origin: int) -> int:
        """
        Propagate constraints outward from one cell, breadth-first.

        Each cell is expanded at most once per call. A neighbor whose domain
        shrinks is queued so its own change ripples further.

        Returns the number of domains that shrank.
        Raises Contradiction if a domain runs dry.
        """
        try:
            return self._propagate(origin)
        except Contradiction as exc:
            raise self._fail(exc) from None

    def step(self, sampler: Sampler) -> SolverState:
        """
        Collapse the current target cell and propagate from it.

        Returns the state after this step (RUNNING or COMPLETE).
        Raises Contradiction if the step emptied a domain.
        """
        if self.state is SolverState.CONTRADICTION:
            raise RuntimeError("Cannot step a grid that has already hit a contradiction")

        target = self.entropy_index
        if target is None:
            self.state = SolverState.COMPLETE
            return self.state

        try:
            domain = self.cells[target]
            candidates = "".join(domain)
            symbol = self.rules.weighted_pick(domain, sampler)
            domain.assign(symbol)
            self.steps += 1
            log_step(logger, self.steps, target, symbol, f"from {candidates!r}")
            self._propagate(target)
            self._find_min()
        except Contradiction as exc:
            raise self._fail(exc) from None

        if self.entropy_index is None:
            self.state = SolverState.COMPLETE
        return self.state

    def collapse(
        self,
        seed: int,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> SolverState:
        """
        Run the collapse loop to completion.

        All randomness of the run comes from one Sampler seeded here, so the
        same seed, size and rules always give the same map.

        Args:
            seed: Seed for the run's random stream
            progress_callback: Optional callback(solved_cells, total_cells)

        Returns:
            SolverState.COMPLETE

        Raises:
            Contradiction: If some cell ran out of candidates
        """
        self.seed = seed
        sampler = Sampler(seed)
        logger.info(f"Collapse started | seed={seed} | {self.width}x{self.height}")

        while self.step(sampler) is SolverState.RUNNING:
            if progress_callback is not None:
                progress_callback(self.solved_count, self.size)

        if progress_callback is not None:
            progress_callback(self.solved_count, self.size)

        logger.info(f"Collapse complete | seed={seed} | steps={self.steps} | draws={sampler.draws}")
        return self.state
