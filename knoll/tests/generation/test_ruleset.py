"""Tests for YAML rule sets."""

import pytest

from knoll.core.errors import RuleTableError
from knoll.core.types import Direction
from knoll.generation.ruleset import RuleSetConfig, load_rule_set, load_rule_table
from knoll.generation.tileset import create_hill_rule_table


PONDS_YAML = """
name: ponds
alphabet: '.~'
weights:
  '.': 3
  '~': 1
edges:
  top: '.'
rules:
  '.':
    top: '.~'
    right: '.~'
    bottom: '.~'
    left: '.~'
  '~':
    top: '.~'
    right: '~'
    bottom: '.~'
    left: '.~'
"""


def write_rules(directory, text, name="rules.yaml"):
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


class TestPackagedRuleSet:
    """The packaged hills file."""

    def test_matches_hill_tileset(self):
        assert load_rule_table() == create_hill_rule_table()

    def test_has_a_name(self):
        config = load_rule_set()
        assert config.name == "hills"
        assert config.alphabet == " /\\_#"


class TestLoadRuleTable:
    """Loading custom rule sets."""

    def test_loads_custom_rules(self, temp_data_dir):
        table = load_rule_table(write_rules(temp_data_dir, PONDS_YAML))
        assert table.alphabet == (".", "~")
        assert table.weight(".") == 3
        assert table.compatible_neighbors("~", Direction.RIGHT) == frozenset("~")
        assert table.edge_constraint(Direction.TOP) == frozenset(".")
        assert table.edge_constraint(Direction.BOTTOM) == frozenset(".~")

    def test_accepts_string_path(self, temp_data_dir):
        path = write_rules(temp_data_dir, PONDS_YAML)
        assert load_rule_table(str(path)).alphabet == (".", "~")

    def test_zero_weight_is_rejected(self, temp_data_dir):
        text = PONDS_YAML.replace("'~': 1", "'~': 0")
        with pytest.raises(RuleTableError, match="Invalid rule set"):
            load_rule_table(write_rules(temp_data_dir, text))

    def test_unknown_direction_is_rejected(self, temp_data_dir):
        text = PONDS_YAML.replace("  top: '.'", "  up: '.'")
        with pytest.raises(RuleTableError):
            load_rule_table(write_rules(temp_data_dir, text))

    def test_unknown_key_is_rejected(self, temp_data_dir):
        text = PONDS_YAML + "colour: blue\n"
        with pytest.raises(RuleTableError):
            load_rule_table(write_rules(temp_data_dir, text))

    def test_missing_direction_is_rejected(self, temp_data_dir):
        text = PONDS_YAML.replace("    right: '~'\n", "")
        with pytest.raises(RuleTableError, match="no rule for right"):
            load_rule_table(write_rules(temp_data_dir, text))

    def test_unknown_symbol_is_rejected(self, temp_data_dir):
        text = PONDS_YAML.replace("    right: '~'\n", "    right: '~#'\n")
        with pytest.raises(RuleTableError, match="Unknown symbols"):
            load_rule_table(write_rules(temp_data_dir, text))

    def test_malformed_yaml(self, temp_data_dir):
        with pytest.raises(RuleTableError, match="Could not parse"):
            load_rule_table(write_rules(temp_data_dir, "alphabet: [unclosed\n"))

    def test_not_a_mapping(self, temp_data_dir):
        with pytest.raises(RuleTableError, match="must be a mapping"):
            load_rule_table(write_rules(temp_data_dir, "- a\n- b\n"))

    def test_missing_file(self, temp_data_dir):
        with pytest.raises(OSError):
            load_rule_table(temp_data_dir / "nope.yaml")


class TestRuleSetConfig:
    """The pydantic model behind rule set files."""

    def test_from_dict(self):
        config = RuleSetConfig.from_dict({
            "alphabet": "ab",
            "weights": {"a": 1, "b": 2},
            "rules": {
                "a": {"top": "ab", "right": "ab", "bottom": "ab", "left": "ab"},
                "b": {"top": "b", "right": "b", "bottom": "b", "left": "b"},
            },
        })
        table = config.to_rule_table()
        assert table.compatible_neighbors("b", Direction.LEFT) == frozenset("b")
        assert table.weight("b") == 2

    def test_is_frozen(self):
        config = RuleSetConfig.from_dict({"alphabet": "a", "weights": {"a": 1}, "rules": {}})
        with pytest.raises(Exception):
            config.alphabet = "b"
