"""Wave Function Collapse engine for terrain generation."""

from .rules import RuleTable, RuleTableBuilder
from .domain import CellDomain
from .grid import Grid, SolverState
from .sampler import Sampler, new_seed

__all__ = [
    "RuleTable",
    "RuleTableBuilder",
    "CellDomain",
    "Grid",
    "SolverState",
    "Sampler",
    "new_seed",
]
