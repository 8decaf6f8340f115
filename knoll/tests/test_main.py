"""Tests for the knoll command line."""

import sys

import pytest
from rich.console import Console

from knoll.main import main


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["knoll", *args])
    return main()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the caller's KNOLL_* settings out of CLI tests."""
    for name in ("KNOLL_SEED", "KNOLL_RULES", "KNOLL_DATA_DIR"):
        monkeypatch.delenv(name, raising=False)


RULES_YAML = """
alphabet: ' ab'
weights: {' ': 1, 'a': 5, 'b': 5}
rules:
  ' ': {top: ' ab', right: ' ab', bottom: ' ab', left: ' ab'}
  'a': {top: ' a', right: ' a', bottom: ' a', left: ' a'}
  'b': {top: ' b', right: ' b', bottom: ' b', left: ' b'}
"""

DEAD_END_YAML = """
alphabet: 'ab'
weights: {a: 1, b: 1}
rules:
  a: {top: 'ab', right: '', bottom: 'ab', left: 'ab'}
  b: {top: 'ab', right: '', bottom: 'ab', left: 'ab'}
"""


class TestMain:
    """End-to-end CLI runs."""

    def test_generates_a_flat_hill_map(self, monkeypatch, capsys, temp_data_dir):
        code = run_cli(
            monkeypatch,
            "--width", "6", "--height", "1", "--seed", "3",
            "--plain", "--no-progress", "--data", str(temp_data_dir),
        )
        out = capsys.readouterr().out
        assert code == 0
        assert "Seed: 3" in out
        assert "Solved 6x1" in out
        assert (temp_data_dir / "knoll.log").exists()

    def test_custom_rules(self, monkeypatch, capsys, temp_data_dir):
        rules_path = temp_data_dir / "meadow.yaml"
        rules_path.write_text(RULES_YAML, encoding="utf-8")
        code = run_cli(
            monkeypatch,
            "--width", "8", "--height", "4", "--seed", "42",
            "--rules", str(rules_path),
            "--plain", "--no-progress", "--data", str(temp_data_dir),
        )
        assert code == 0
        assert "Solved 8x4" in capsys.readouterr().out

    def test_seed_from_environment(self, monkeypatch, capsys, temp_data_dir):
        monkeypatch.setenv("KNOLL_SEED", "99")
        code = run_cli(
            monkeypatch,
            "--width", "3", "--height", "1",
            "--plain", "--no-progress", "--data", str(temp_data_dir),
        )
        assert code == 0
        assert "Seed: 99" in capsys.readouterr().out

    def test_invalid_rules_file(self, monkeypatch, capsys, temp_data_dir):
        rules_path = temp_data_dir / "broken.yaml"
        rules_path.write_text("alphabet: [unclosed\n", encoding="utf-8")
        code = run_cli(
            monkeypatch,
            "--rules", str(rules_path), "--no-progress", "--data", str(temp_data_dir),
        )
        assert code == 2
        assert "could not load rule set" in capsys.readouterr().out

    def test_contradiction_exit_code(self, monkeypatch, capsys, temp_data_dir):
        rules_path = temp_data_dir / "dead_end.yaml"
        rules_path.write_text(DEAD_END_YAML, encoding="utf-8")
        code = run_cli(
            monkeypatch,
            "--width", "2", "--height", "1", "--seed", "1", "--retries", "2",
            "--rules", str(rules_path), "--no-progress", "--data", str(temp_data_dir),
        )
        out = capsys.readouterr().out
        assert code == 1
        assert "Last contradiction" in out

    def test_rejects_bad_dimensions(self, monkeypatch, temp_data_dir):
        with pytest.raises(SystemExit):
            run_cli(monkeypatch, "--width", "0", "--data", str(temp_data_dir))


class TestStepMode:
    """Interactive --step runs, one collapse per Enter."""

    @pytest.fixture
    def presses(self, monkeypatch):
        """Feed Console.input from a list; EOFError once it runs out."""
        keys = []

        def fake_input(self, *args, **kwargs):
            if not keys:
                raise EOFError
            return keys.pop(0)

        monkeypatch.setattr(Console, "input", fake_input)
        return keys

    def test_steps_to_a_solved_map(self, monkeypatch, capsys, temp_data_dir, presses):
        """Enough Enter presses solve the map and exit cleanly."""
        presses.extend([""] * 50)
        code = run_cli(
            monkeypatch,
            "--step", "--plain", "--width", "5", "--height", "4", "--seed", "2",
            "--data", str(temp_data_dir),
        )
        out = capsys.readouterr().out
        assert code == 0
        assert "Solved 5x4" in out
        assert "Stopped." not in out

    def test_end_of_input_stops_the_run(self, monkeypatch, capsys, temp_data_dir, presses):
        """Closing stdin mid-run stops with a failure exit code."""
        presses.append("")
        code = run_cli(
            monkeypatch,
            "--step", "--plain", "--width", "5", "--height", "4", "--seed", "2",
            "--data", str(temp_data_dir),
        )
        out = capsys.readouterr().out
        assert code == 1
        assert "Stopped." in out
        assert "Solved" not in out

    def test_contradiction_ends_the_run(self, monkeypatch, capsys, temp_data_dir, presses):
        """A step that empties a cell reports the contradiction."""
        rules_path = temp_data_dir / "dead_end.yaml"
        rules_path.write_text(DEAD_END_YAML, encoding="utf-8")
        presses.extend([""] * 5)
        code = run_cli(
            monkeypatch,
            "--step", "--plain", "--width", "2", "--height", "1", "--seed", "1",
            "--rules", str(rules_path), "--data", str(temp_data_dir),
        )
        out = capsys.readouterr().out
        assert code == 1
        assert "Contradiction: Cell 1 at (1, 0)" in out

    def test_already_solved_map_needs_no_input(self, monkeypatch, capsys, temp_data_dir, presses):
        """A one-row hill map is flat from the start, so no key is read."""
        code = run_cli(
            monkeypatch,
            "--step", "--plain", "--width", "4", "--height", "1", "--seed", "5",
            "--data", str(temp_data_dir),
        )
        assert code == 0
        assert "Solved 4x1 in 0 steps" in capsys.readouterr().out
