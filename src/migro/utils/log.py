import logging
import os
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "MIGRO_LOG_LEVEL"
FILE_FORMAT = "[%(asctime)s] %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

console = Console(highlight=False)


def _setup_logger(name: str) -> logging.Logger:
    _logger = logging.getLogger(name)
    _logger.setLevel(logging.DEBUG)
    _logger.propagate = False
    handler = RichHandler(
        console=console,
        show_path=False,
        show_time=False,
        show_level=False,
        markup=False,
    )
    handler.setLevel(getattr(logging, os.getenv(LOG_LEVEL_ENV, "INFO").upper(), logging.INFO))
    handler.setFormatter(logging.Formatter("%(message)s"))
    _logger.addHandler(handler)
    return _logger


def add_file_handler(path: Path | str, level: int = logging.DEBUG, *, name: str = "migro") -> logging.FileHandler:
    """Mirror the package logger into a file.

    The console handler only shows INFO and above, so anything logged at DEBUG
    ends up in the file alone.
    """
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATEFMT))
    logging.getLogger(name).addHandler(handler)
    return handler


def remove_file_handler(handler: logging.Handler, *, name: str = "migro") -> None:
    logging.getLogger(name).removeHandler(handler)
    handler.close()


logger = _setup_logger("migro")


def start_run_log(log_dir: Path | str, prefix: str = "migro") -> tuple[logging.FileHandler | None, Path | None]:
    """Open `<log_dir>/<prefix>_<timestamp>.log` for the current run.

    Falls back to the working directory when `log_dir` cannot be created, and to
    console-only logging when the file itself cannot be opened.
    """
    log_dir = Path(log_dir)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"Warning: Could not create log directory: {e}")
        log_dir = Path(".")
    path = log_dir / f"{prefix}_{datetime.now():%Y%m%d_%H%M%S}.log"
    try:
        handler = add_file_handler(path)
    except OSError as e:
        logger.warning(f"Warning: Could not create log file: {e}")
        return None, None
    logger.debug(f"Log file created: {path}")
    return handler, path
