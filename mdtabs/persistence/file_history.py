"""Recently opened/saved files."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from ..constants import MAX_FILE_HISTORY
from ..core.tab import file_name_from_path
from ..log import logger
from ._base import JsonStore


class FileHistoryStore(JsonStore):
    """Recent files (``[{path, name, date}]``, most recent first)."""

    def __init__(self, path: Path, limit: int = MAX_FILE_HISTORY) -> None:
        super().__init__(path)
        self.limit = limit

    def _default(self) -> list:  # type: ignore[override]
        return []

    def load(self) -> list[dict]:
        return [
            entry
            for entry in self.load_raw()
            if isinstance(entry, dict) and isinstance(entry.get("path"), str)
        ]

    def add(self, file_path: str) -> list[dict]:
        """Move *file_path* to the front of the history and return it."""
        if not file_path:
            return self.load()
        history = [e for e in self.load() if e["path"] != file_path]
        history.insert(
            0,
            {
                "path": file_path,
                "name": file_name_from_path(file_path),
                "date": datetime.now().isoformat(timespec="seconds"),
            },
        )
        history = history[: self.limit]
        try:
            self.save_raw(history)
        except OSError:
            logger.debug("failed to save file history", exc_info=True)
        return history

    def clear(self) -> None:
        try:
            self.save_raw([])
        except OSError:
            logger.debug("failed to clear file history", exc_info=True)
