"""
Logging setup for Knoll.

Every knoll.* logger writes DEBUG to <data_root>/knoll.log (rotated) and
WARNING+ to stderr, or DEBUG to stderr as well with --debug.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


LOG_FILE_NAME = "knoll.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

FILE_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-28s | %(message)s"
CONSOLE_FORMAT = "%(levelname)-8s | %(name)-28s | %(message)s"


def _file_handler(log_path: Path) -> logging.Handler:
    handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _console_handler(debug: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def setup_logging(data_root: Path | str, debug: bool = False) -> Path:
    """
    Route the knoll logger to a rotating file and the console.

    Safe to call again (tests do): old handlers are closed and replaced.

    Args:
        data_root: Directory for the log file, created if missing
        debug: Also echo DEBUG records to the console

    Returns:
        Path to the log file
    """
    data_path = Path(data_root)
    data_path.mkdir(parents=True, exist_ok=True)
    log_path = data_path / LOG_FILE_NAME

    root_logger = logging.getLogger("knoll")
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()

    root_logger.addHandler(_file_handler(log_path))
    root_logger.addHandler(_console_handler(debug))

    root_logger.info(f"Logging to {log_path.absolute()} | debug={debug}")
    return log_path


def get_logger(name: str) -> logging.Logger:
    """Logger under the knoll namespace (pass __name__)."""
    if name == "knoll" or name.startswith("knoll."):
        return logging.getLogger(name)
    return logging.getLogger(f"knoll.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_step(
    logger: logging.Logger,
    step: int,
    index: int,
    symbol: str,
    details: str | None = None,
) -> None:
    """Log a single collapse step."""
    details_str = f" | {details}" if details else ""
    logger.debug(f"STEP {step:05d} | COLLAPSE | cell={index} | symbol={symbol!r}{details_str}")


def log_propagation(
    logger: logging.Logger,
    step: int,
    origin: int,
    visited: int,
    pruned: int,
) -> None:
    """Log the outcome of one propagation pass."""
    logger.debug(f"STEP {step:05d} | PROPAGATE | origin={origin} | visited={visited} | pruned={pruned}")


def log_contradiction(
    logger: logging.Logger,
    step: int,
    index: int | None,
    details: str | None = None,
) -> None:
    """Log a contradiction that ended a run."""
    details_str = f" | {details}" if details else ""
    logger.warning(f"STEP {step:05d} | CONTRADICTION | cell={index}{details_str}")


def log_generation(
    logger: logging.Logger,
    attempt: int,
    seed: int,
    status: str,
    details: str | None = None,
) -> None:
    """Log a generation attempt."""
    details_str = f" | {details}" if details else ""
    logger.info(f"ATTEMPT {attempt:03d} | seed={seed} | {status}{details_str}")
