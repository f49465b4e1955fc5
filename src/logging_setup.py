"""Logging configuration for the terminal front end."""
from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import Union

LOG_FILE_NAME = "todo.log"


def setup_logging(
    *,
    log_dir: Union[str, Path] = ".local/todo",
    console_level: Union[int, str] = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure the root logger with:
    - a stderr handler, quiet by default so it does not disturb the board
    - a file handler with everything, for debugging

    Call once, before the app is created. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
    return log_file
