"""
Logging setup for the order splitter CLI.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(log_level: str = "WARNING", debug_log_file: Path | None = None) -> logging.Logger:
    """
    Configure root logging.

    Args:
        log_level: console level (DEBUG, INFO, WARNING, ERROR)
        debug_log_file: optional file that receives the full DEBUG trace
            (page texts, token matches, bundle boundaries, routing decisions)

    Console output goes to stderr; stdout is reserved for the run summary.
    """

    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    handlers: list[logging.Handler] = [console]

    if debug_log_file is not None:
        debug_log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(debug_log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if debug_log_file is not None else level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    return logging.getLogger("split_pdf")
