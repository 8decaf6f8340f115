"""Rule sets loaded from YAML.

A rule set file describes a complete RuleTable:

    name: hills
    alphabet: ' /\\_#'
    weights: {' ': 1000, '/': 10, ...}
    edges: {top: ' _', ...}
    rules:
      '#': {top: '/\\_#', right: '#\\', bottom: ' _#', left: '/#'}

Symbols are written as strings of single-character pieces. Single-quoted YAML
keeps backslashes literal.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError

from knoll.core.constants import DEFAULT_RULES_PATH
from knoll.core.errors import RuleTableError
from knoll.core.types import Direction
from knoll.logging_config import get_logger
from .wfc import RuleTable

logger = get_logger(__name__)

DirectionName = Literal["top", "right", "bottom", "left"]


# -----------------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------------


class RuleSetConfig(BaseModel):
    """A rule set as written in a YAML file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = ""
    description: str = ""
    alphabet: str = Field(min_length=1)
    weights: dict[str, PositiveInt]
    edges: dict[DirectionName, str] = Field(default_factory=dict)
    rules: dict[str, dict[DirectionName, str]]

    @classmethod
    def from_dict(cls, data: dict) -> RuleSetConfig:
        """Validate raw (YAML) data, reporting problems as RuleTableError."""
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise RuleTableError(f"Invalid rule set: {exc}") from exc

    def to_rule_table(self) -> RuleTable:
        """Build the immutable RuleTable this config describes."""
        return RuleTable.from_strings(
            self.alphabet,
            {
                symbol: {Direction.parse(side): allowed for side, allowed in sides.items()}
                for symbol, sides in self.rules.items()
            },
            self.weights,
            {Direction.parse(side): allowed for side, allowed in self.edges.items()},
        )


# -----------------------------------------------------------------------------
# Loading
# -----------------------------------------------------------------------------


def load_rule_set(path: Path | str | None = None) -> RuleSetConfig:
    """
    Read a rule set file.

    Args:
        path: YAML file to read. If None, uses the packaged hills rule set.

    Raises:
        RuleTableError: If the file is not valid YAML or not a valid rule set
        OSError: If the file cannot be read
    """
    if path is None:
        path = DEFAULT_RULES_PATH
    path = Path(path)

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise RuleTableError(f"Could not parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise RuleTableError(f"Rule set {path} must be a mapping")

    config = RuleSetConfig.from_dict(data)
    logger.info(f"Loaded rule set {config.name or path.stem!r} from {path} | symbols={config.alphabet!r}")
    return config


def load_rule_table(path: Path | str | None = None) -> RuleTable:
    """Read a rule set file and build its RuleTable."""
    table = load_rule_set(path).to_rule_table()
    for symbol, direction in table.dead_ends():
        logger.warning(f"Symbol {symbol!r} allows no neighbor on its {direction.value} side")
    return table
