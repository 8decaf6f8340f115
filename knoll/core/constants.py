"""Shared constants for Knoll.

Centralizes defaults used by the CLI and the generation layer.
"""

from pathlib import Path

# Map size used when none is given
DEFAULT_WIDTH = 10
DEFAULT_HEIGHT = 10

# Attempts made by generate_terrain before giving up (1 = no retry)
DEFAULT_MAX_RETRIES = 1

# Packaged rule sets
CONFIG_DIR = Path(__file__).parent.parent / "config"
DEFAULT_RULES_PATH = CONFIG_DIR / "hills.yaml"

# Environment variables read by the CLI (a .env file is honoured)
ENV_DATA_DIR = "KNOLL_DATA_DIR"
ENV_RULES = "KNOLL_RULES"
ENV_SEED = "KNOLL_SEED"
