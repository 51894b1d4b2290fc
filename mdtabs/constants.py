"""Module-level constants for mdtabs."""

from __future__ import annotations

import os
from pathlib import Path


def mdtabs_home() -> Path:
    """Directory holding preferences, session state and logs."""
    override = os.environ.get("MDTABS_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".mdtabs"


# Tab capacity
MAX_TABS = 50
TAB_WARNING_THRESHOLD = 45  # warn (but still allow) from this many open tabs

# New documents
DEFAULT_UNTITLED_NAME = "untitled.md"
DEFAULT_NEW_CONTENT = "# New Document\n\nStart writing your markdown here..."

# Durable storage
PERSISTENCE_KEY = "mdtabs.tabs"
STATE_FILE_NAME = "state.json"
FILE_HISTORY_FILE_NAME = "file-history.json"
MAX_FILE_HISTORY = 3

# Layout modes, in cycle order
MODES: tuple[str, ...] = ("code", "preview", "split")
