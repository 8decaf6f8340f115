"""Shared test fixtures for Knoll."""

import tempfile
from pathlib import Path

import pytest

from knoll.core.types import Direction
from knoll.generation.tileset import create_hill_rule_table
from knoll.generation.wfc import RuleTable, RuleTableBuilder


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped by default, run with --run-slow)")


def pytest_addoption(parser):
    """Add --run-slow option to pytest."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (skipped by default)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is passed."""
    if config.getoption("--run-slow"):
        return

    skip_slow = pytest.mark.skip(reason="Slow test (use --run-slow to run)")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def temp_data_dir() -> Path:
    """Create a temporary data directory for tests."""
    with tempfile.TemporaryDirectory(prefix="knoll_test_") as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# Rule tables
# =============================================================================


@pytest.fixture
def hill_rules() -> RuleTable:
    """The hill tileset with its edge constraints."""
    return create_hill_rule_table()


@pytest.fixture
def open_hill_rules() -> RuleTable:
    """The hill tileset without edge constraints."""
    return create_hill_rule_table(with_edges=False)


@pytest.fixture
def meadow_rules() -> RuleTable:
    """
    A consistent table that can never contradict.

    ' ' may sit next to anything in every direction, so every unsolved cell
    keeps ' ' as a candidate. 'a' and 'b' form patches that never touch.
    """
    builder = RuleTableBuilder(" ab")
    for symbol in " ab":
        builder.allow_both(" ", symbol)
    builder.allow_both("a", "a").allow_both("b", "b")
    return builder.weight(" ", 1).weight("a", 5).weight("b", 5).build()


@pytest.fixture
def dead_end_rules() -> RuleTable:
    """A table where nothing may sit to the right of anything."""
    sides = {
        Direction.TOP: "ab",
        Direction.RIGHT: "",
        Direction.BOTTOM: "ab",
        Direction.LEFT: "ab",
    }
    return RuleTable.from_strings("ab", {"a": sides, "b": sides}, {"a": 1, "b": 1})
