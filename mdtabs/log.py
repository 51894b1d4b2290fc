"""Package logger for mdtabs."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger("mdtabs")
logger.addHandler(logging.NullHandler())


def configure_file_logging(path: Path, level: int = logging.INFO) -> None:
    """Send package log records to *path*.

    The TUI owns the terminal, so log output only ever goes to a file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.setLevel(level)
