"""Map generation for Knoll."""

from .terrain import generate_terrain, generate_terrain_grid
from .tileset import create_hill_rule_table
from .ruleset import load_rule_table

__all__ = [
    "generate_terrain",
    "generate_terrain_grid",
    "create_hill_rule_table",
    "load_rule_table",
]
