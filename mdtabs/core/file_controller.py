"""File operations: new, open, save, close and reload of tab documents."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..constants import TAB_WARNING_THRESHOLD
from ..log import logger
from .component import Component, ComponentHost
from .errors import TabLimitError
from .file_io import FileIO, FileIOPort, normalize_path
from .tab import Tab
from .tab_manager import TabManager

if TYPE_CHECKING:
    from ..persistence.file_history import FileHistoryStore

_IO_ERRORS = (OSError, UnicodeDecodeError)


class FileController(ComponentHost):
    """Connects file I/O to the tab manager.

    I/O failures never escape: they are reported as ``file-error`` events
    with the operation left undone.

    Events: ``file-opened``, ``file-saved``, ``file-reloaded``,
    ``file-error{action, path, error}``, ``file-path-required{tab}``,
    ``file-history-updated{history}``, ``tab-limit-warning{count, max}``,
    ``tab-limit-reached{count, max}``.
    """

    def __init__(
        self,
        tab_manager: TabManager,
        io: FileIOPort | None = None,
        history: FileHistoryStore | None = None,
        *,
        warn_at: int = TAB_WARNING_THRESHOLD,
    ) -> None:
        self.component = Component("FileController", self)
        self.tab_manager = tab_manager
        self.io: FileIOPort = io or FileIO()
        self.history = history
        self.warn_at = warn_at

    # -- capacity -------------------------------------------------------------

    def _has_room(self) -> bool:
        """Apply the warn/block tab-count policy before adding a tab."""
        count = self.tab_manager.get_tabs_count()
        limit = self.tab_manager.max_tabs
        if count >= limit:
            self.emit("tab-limit-reached", {"count": count, "max": limit})
            return False
        if count >= self.warn_at:
            logger.info("approaching tab limit: %d/%d tabs open", count, limit)
            self.emit("tab-limit-warning", {"count": count, "max": limit})
        return True

    # -- operations -----------------------------------------------------------

    def new_file(self) -> Tab | None:
        if not self._has_room():
            return None
        try:
            return self.tab_manager.create_new_tab()
        except TabLimitError as exc:
            self.emit("tab-limit-reached", {"count": exc.max_tabs, "max": exc.max_tabs})
            return None

    def duplicate_file(self, tab_id: str | None = None) -> Tab | None:
        """Copy a tab (the active one by default) into a new untitled tab."""
        tab = self._resolve(tab_id)
        if tab is None or not self._has_room():
            return None
        try:
            return self.tab_manager.duplicate_tab(tab.id)
        except TabLimitError as exc:
            self.emit("tab-limit-reached", {"count": exc.max_tabs, "max": exc.max_tabs})
            return None

    async def open_file(self, path: str) -> Tab | None:
        file_path = normalize_path(path)
        existing = self.tab_manager.find_tab_by_path(file_path)
        if existing is not None:
            self.tab_manager.switch_to_tab(existing.id)
            return existing
        if not self._has_room():
            return None
        try:
            content = await self.io.read(file_path)
        except _IO_ERRORS as exc:
            self._report("open", file_path, exc)
            return None
        try:
            tab = self.tab_manager.open_file_in_tab(file_path, content)
        except TabLimitError as exc:
            self.emit("tab-limit-reached", {"count": exc.max_tabs, "max": exc.max_tabs})
            return None
        self._record_history(file_path)
        self.emit("file-opened", {"tab": tab})
        return tab

    async def open_files(self, paths: list[str]) -> list[Tab]:
        opened = []
        for path in paths:
            tab = await self.open_file(path)
            if tab is not None:
                opened.append(tab)
        return opened

    async def save_file(self, tab_id: str | None = None, path: str | None = None) -> bool:
        """Save a tab (the active one by default).

        With *path* this is "save as".  A tab without a path and no *path*
        emits ``file-path-required`` so the UI can ask for one.
        """
        tab = self._resolve(tab_id)
        if tab is None:
            return False
        target = normalize_path(path) if path else tab.file_path
        if not target:
            self.emit("file-path-required", {"tab": tab})
            return False
        other = self.tab_manager.find_tab_by_path(target)
        if other is not None and other.id != tab.id:
            self._report(
                "save", target, FileExistsError(f"{target} is open in another tab")
            )
            return False
        try:
            await self.io.write(target, tab.content)
        except _IO_ERRORS as exc:
            self._report("save", target, exc)
            return False
        self.tab_manager.mark_tab_saved(tab.id, target)
        self._record_history(target)
        self.emit("file-saved", {"tab": tab, "path": target})
        return True

    async def close_file(self, tab_id: str | None = None) -> bool:
        tab = self._resolve(tab_id)
        if tab is None:
            return False
        return await self.tab_manager.close_tab(tab.id)

    async def close_all(self) -> bool:
        return await self.tab_manager.close_all_tabs()

    async def close_others(self, tab_id: str | None = None) -> int:
        tab = self._resolve(tab_id)
        if tab is None:
            return 0
        return await self.tab_manager.close_other_tabs(tab.id)

    async def reload_file(self, tab_id: str | None = None) -> bool:
        """Re-read a tab's file from disk.  Returns True if content changed."""
        tab = self._resolve(tab_id)
        if tab is None or not tab.file_path:
            return False
        try:
            content = await self.io.read(tab.file_path)
        except _IO_ERRORS as exc:
            self._report("reload", tab.file_path, exc)
            return False
        if content == tab.content:
            return False
        self.tab_manager.replace_tab_content(tab.id, content)
        self.emit("file-reloaded", {"tab": tab})
        return True

    # -- history --------------------------------------------------------------

    def recent_files(self) -> list[dict]:
        return self.history.load() if self.history is not None else []

    def clear_history(self) -> None:
        if self.history is not None:
            self.history.clear()
            self.emit("file-history-updated", {"history": []})

    def _record_history(self, file_path: str) -> None:
        if self.history is None:
            return
        self.emit("file-history-updated", {"history": self.history.add(file_path)})

    # -- helpers --------------------------------------------------------------

    def _resolve(self, tab_id: str | None) -> Tab | None:
        if tab_id is None:
            return self.tab_manager.get_active_tab()
        return self.tab_manager.get_tab(tab_id)

    def _report(self, action: str, path: str, error: Exception) -> None:
        logger.warning("%s failed for %s: %s", action, path, error)
        self.emit("file-error", {"action": action, "path": path, "error": error})
