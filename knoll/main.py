"""Knoll - ASCII hill terrain from local adjacency rules."""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from tqdm import tqdm

from knoll import __version__
from knoll.core.constants import (
    DEFAULT_HEIGHT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_WIDTH,
    ENV_DATA_DIR,
    ENV_RULES,
    ENV_SEED,
)
from knoll.core.errors import Contradiction, GenerationError, RuleTableError
from knoll.generation import generate_terrain, load_rule_table
from knoll.generation.wfc import Grid, RuleTable, Sampler, SolverState, new_seed
from knoll.logging_config import get_logger, setup_logging
from knoll.observe import render_ascii, render_rich

logger = get_logger(__name__)


def show_grid(console: Console, grid: Grid, plain: bool) -> None:
    """Print a grid, colored unless plain output was requested."""
    if plain:
        console.print(render_ascii(grid), markup=False, highlight=False)
    else:
        console.print(render_rich(grid))


def run_generate(args: argparse.Namespace, rules: RuleTable, console: Console) -> int:
    """Generate a map in one go, with a progress bar.

    Returns:
        Exit code
    """
    total = args.width * args.height
    pbar = tqdm(
        total=total,
        desc="  Collapsing",
        unit="cells",
        disable=args.no_progress,
        leave=False,
    )
    last_progress = [0]

    def update_progress(current: int, total: int) -> None:
        # A retry starts a fresh grid
        if current < last_progress[0]:
            pbar.reset(total=total)
            last_progress[0] = 0
        delta = current - last_progress[0]
        if delta > 0:
            pbar.update(delta)
            last_progress[0] = current

    try:
        grid = generate_terrain(
            width=args.width,
            height=args.height,
            seed=args.seed,
            rules=rules,
            max_retries=args.retries,
            progress_callback=update_progress,
        )
    except GenerationError as exc:
        pbar.close()
        cause = exc.__cause__
        print(f"Error: {exc}")
        if cause is not None:
            print(f"  Last contradiction: {cause}")
        return 1
    pbar.close()

    show_grid(console, grid, args.plain)
    print()
    print(f"Solved {grid.width}x{grid.height} in {grid.steps} steps (seed={grid.seed})")
    return 0


def run_stepwise(args: argparse.Namespace, rules: RuleTable, console: Console) -> int:
    """Collapse one cell at a time, showing the grid and waiting for Enter.

    Returns:
        Exit code
    """
    try:
        grid = Grid(args.width, args.height, rules)
    except Contradiction as exc:
        print(f"Error: {exc}")
        return 1

    sampler = Sampler(args.seed)
    grid.seed = args.seed
    show_grid(console, grid, args.plain)

    while grid.state is SolverState.RUNNING:
        try:
            console.input("[dim]-- Enter for next step --[/dim]")
        except (EOFError, KeyboardInterrupt):
            logger.info(f"Stepwise run stopped after {grid.steps} steps")
            print()
            print("Stopped.")
            return 1
        try:
            grid.step(sampler)
        except Contradiction as exc:
            show_grid(console, grid, args.plain)
            print(f"Contradiction: {exc}")
            return 1
        show_grid(console, grid, args.plain)

    print(f"Solved {grid.width}x{grid.height} in {grid.steps} steps (seed={args.seed})")
    return 0


def main() -> int:
    """Main entry point for Knoll."""
    # Load environment variables first
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Knoll - ASCII hill terrain from local adjacency rules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  knoll                         # 10x10 map with a fresh seed
  knoll --width 60 --height 12  # Wider landscape
  knoll --seed 42               # Reproducible map
  knoll --step                  # Watch the collapse one cell at a time
  knoll --rules my_rules.yaml   # Custom rule set

Environment:
  {ENV_SEED}, {ENV_RULES}, {ENV_DATA_DIR} provide defaults (a .env file is read).
        """,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_WIDTH,
        help=f"Map width in cells (default: {DEFAULT_WIDTH})",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=DEFAULT_HEIGHT,
        help=f"Map height in cells (default: {DEFAULT_HEIGHT})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=os.environ.get(ENV_SEED),
        help="Random seed (default: fresh seed from the OS)",
    )
    parser.add_argument(
        "--rules",
        type=Path,
        default=os.environ.get(ENV_RULES),
        help="YAML rule set (default: packaged hills rule set)",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=DEFAULT_MAX_RETRIES,
        metavar="N",
        help="Attempts with derived seeds before giving up (default: 1)",
    )
    parser.add_argument(
        "--data",
        type=Path,
        default=Path(os.environ.get(ENV_DATA_DIR, "data")),
        help="Directory for the log file (default: data/)",
    )
    parser.add_argument(
        "--step",
        action="store_true",
        help="Collapse one cell per Enter key press",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Print uncolored ASCII",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Hide the progress bar",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )

    args = parser.parse_args()

    if args.width < 1 or args.height < 1:
        parser.error("--width and --height must be positive")
    if args.retries < 1:
        parser.error("--retries must be at least 1")

    log_path = setup_logging(args.data, debug=args.debug)

    if args.seed is None:
        args.seed = new_seed()

    print(f"Knoll v{__version__}")
    print(f"Log file: {log_path}")
    print(f"Seed: {args.seed}")
    print()
    logger.info(f"Run started | {args.width}x{args.height} | seed={args.seed} | step={args.step}")

    try:
        rules = load_rule_table(args.rules)
    except (RuleTableError, OSError) as exc:
        logger.error(f"Rule set failed to load | {exc}")
        print(f"Error: could not load rule set: {exc}")
        return 2

    console = Console(highlight=False)
    if args.step:
        return run_stepwise(args, rules, console)
    return run_generate(args, rules, console)


if __name__ == "__main__":
    sys.exit(main())
