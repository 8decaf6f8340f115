"""
Terrain generation using Wave Function Collapse.

This module is the main entry point for generating hill maps. The engine
itself never retries; this layer may rerun a contradicted map with a fresh
seed when asked to.
"""

from typing import Callable

from knoll.core.constants import DEFAULT_HEIGHT, DEFAULT_MAX_RETRIES, DEFAULT_WIDTH
from knoll.core.errors import Contradiction, GenerationError
from knoll.logging_config import get_logger, log_generation
from .tileset import create_hill_rule_table
from .wfc import Grid, RuleTable, Sampler, new_seed

logger = get_logger(__name__)


def attempt_seeds(seed: int, attempts: int) -> list[int]:
    """
    Seeds used for each attempt of a generation.

    The first attempt uses `seed` itself, so a one-shot generation matches
    Grid.collapse(seed). Later seeds are derived deterministically from it.
    """
    seeds = [seed]
    derive = Sampler(seed)
    while len(seeds) < attempts:
        seeds.append(derive.fork())
    return seeds


def generate_terrain(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    seed: int | None = None,
    rules: RuleTable | None = None,
    max_retries: int = DEFAULT_MAX_RETRIES,
    progress_callback: Callable[[int, int], None] | None = None,
) -> Grid:
    """
    Generate a solved terrain grid.

    Args:
        width: Map width in cells
        height: Map height in cells
        seed: Random seed for reproducibility (None = fresh seed from the OS)
        rules: Rule table to use (None = the hill tileset)
        max_retries: Attempts before giving up; each attempt is a fresh run
        progress_callback: Optional callback(solved_cells, total_cells)

    Returns:
        The completed Grid (every cell solved)

    Raises:
        GenerationError: If every attempt hit a contradiction
        ValueError: If the dimensions or max_retries are not positive
    """
    if max_retries < 1:
        raise ValueError(f"max_retries must be at least 1, got {max_retries}")
    if seed is None:
        seed = new_seed()
    if rules is None:
        rules = create_hill_rule_table()

    last_error: Contradiction | None = None

    for attempt, attempt_seed in enumerate(attempt_seeds(seed, max_retries)):
        try:
            grid = Grid(width, height, rules)
            grid.collapse(attempt_seed, progress_callback=progress_callback)
        except Contradiction as exc:
            last_error = exc
            log_generation(logger, attempt, attempt_seed, "CONTRADICTION", str(exc))
            continue

        log_generation(logger, attempt, attempt_seed, "OK", f"steps={grid.steps}")
        return grid

    raise GenerationError(
        f"Terrain generation failed after {max_retries} attempt(s) (seed={seed}). "
        "Try another seed or adjust the rule set."
    ) from last_error


def generate_terrain_grid(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    seed: int | None = None,
    **kwargs,
) -> list[list[str]]:
    """
    Generate terrain as a 2D list of symbols, indexed grid[row][col].

    Args:
        width: Map width in cells
        height: Map height in cells
        seed: Random seed for reproducibility
        **kwargs: Additional arguments passed to generate_terrain()
    """
    grid = generate_terrain(width, height, seed, **kwargs)
    return [[str(state) for state in row] for row in grid.rows()]
