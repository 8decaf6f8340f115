"""Core types for Knoll.

Usage:
    from knoll.core import Direction, Position, Contradiction
"""

from .types import Direction, Position
from .errors import KnollError, Contradiction, RuleTableError, GenerationError

__all__ = [
    "Direction",
    "Position",
    "KnollError",
    "Contradiction",
    "RuleTableError",
    "GenerationError",
]
