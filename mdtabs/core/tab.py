"""Per-document tab state."""

from __future__ import annotations

import math
import re
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from ..constants import DEFAULT_UNTITLED_NAME
from .errors import SnapshotError

_PATH_SEPARATORS = re.compile(r"[/\\]")


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def file_name_from_path(path: str | None) -> str:
    """Return the last segment of *path* (``/`` or ``\\`` separated)."""
    if not path:
        return DEFAULT_UNTITLED_NAME
    return _PATH_SEPARATORS.split(path)[-1] or DEFAULT_UNTITLED_NAME


def _offset(value: Any) -> float:
    """A finite, non-negative scroll offset; raises ValueError otherwise."""
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"scroll offset must be a number, got {value!r}")
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"scroll offset out of range: {value!r}")
    return value


@dataclass
class CursorPosition:
    """1-based cursor location."""

    line: int = 1
    col: int = 1


@dataclass
class ScrollPosition:
    """Scroll offsets of the editor and preview panes."""

    editor: float = 0
    preview: float = 0


@dataclass
class Tab:
    """One open document.

    Tabs are created by :class:`~mdtabs.core.tab_collection.TabCollection`
    and should only be mutated through their setters.  ``is_active`` mirrors
    the collection's active pointer and is never set independently.
    """

    id: str
    file_name: str = DEFAULT_UNTITLED_NAME
    file_path: str | None = None
    content: str = ""
    is_dirty: bool = False
    is_active: bool = False
    cursor_position: CursorPosition = field(default_factory=CursorPosition)
    scroll_position: ScrollPosition = field(default_factory=ScrollPosition)
    editor_view_state: Any = None
    created_at: int = field(default_factory=now_ms)
    last_modified: int = field(default_factory=now_ms)
    _loading: int = field(default=0, init=False, repr=False, compare=False)

    # -- content --------------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self._loading > 0

    @contextmanager
    def loading(self) -> Iterator[Tab]:
        """Replace content programmatically without marking the tab dirty."""
        self._loading += 1
        try:
            yield self
        finally:
            self._loading -= 1

    def set_content(self, content: str) -> bool:
        """Replace the buffer.  Returns False when *content* is unchanged."""
        if content == self.content:
            return False
        self.content = content
        if not self.is_loading:
            self.is_dirty = True
        self.last_modified = now_ms()
        return True

    def mark_saved(self, file_path: str | None = None) -> None:
        self.is_dirty = False
        if file_path:
            self.file_path = file_path
            self.file_name = file_name_from_path(file_path)
        self.last_modified = now_ms()

    # -- positions & view state ----------------------------------------------

    def set_cursor_position(self, line: int, col: int) -> None:
        self.cursor_position = CursorPosition(line, col)

    def set_scroll_position(
        self, editor: float | None = None, preview: float | None = None
    ) -> None:
        if editor is not None:
            self.scroll_position.editor = editor
        if preview is not None:
            self.scroll_position.preview = preview

    def set_editor_view_state(self, view_state: Any) -> None:
        self.editor_view_state = view_state

    def set_active(self, active: bool) -> None:
        self.is_active = active

    # -- display --------------------------------------------------------------

    @property
    def title(self) -> str:
        return f"{self.file_name} *" if self.is_dirty else self.file_name

    # -- persistence ----------------------------------------------------------

    def to_snapshot(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fileName": self.file_name,
            "filePath": self.file_path,
            "content": self.content,
            "isDirty": self.is_dirty,
            "cursorPosition": {
                "line": self.cursor_position.line,
                "col": self.cursor_position.col,
            },
            "scrollPosition": {
                "editor": self.scroll_position.editor,
                "preview": self.scroll_position.preview,
            },
            "editorViewState": self.editor_view_state,
            "createdAt": self.created_at,
            "lastModified": self.last_modified,
        }

    @classmethod
    def from_snapshot(cls, data: Any) -> Tab:
        """Rebuild a tab from :meth:`to_snapshot` output.

        Raises :class:`SnapshotError` if *data* is not a usable tab record.
        """
        if not isinstance(data, dict):
            raise SnapshotError(f"tab entry must be an object, got {type(data).__name__}")
        tab_id = data.get("id")
        if not isinstance(tab_id, str) or not tab_id:
            raise SnapshotError("tab entry has no id")
        content = data.get("content", "")
        if not isinstance(content, str):
            raise SnapshotError(f"tab {tab_id} content is not a string")
        file_path = data.get("filePath")
        if file_path is not None and not isinstance(file_path, str):
            raise SnapshotError(f"tab {tab_id} filePath is not a string")

        cursor = data.get("cursorPosition") or {}
        scroll = data.get("scrollPosition") or {}
        if not isinstance(cursor, dict) or not isinstance(scroll, dict):
            raise SnapshotError(f"tab {tab_id} has malformed positions")
        try:
            cursor_position = CursorPosition(
                int(cursor.get("line", 1)), int(cursor.get("col", 1))
            )
            scroll_position = ScrollPosition(
                _offset(scroll.get("editor")), _offset(scroll.get("preview"))
            )
            created_at = int(data.get("createdAt") or now_ms())
            last_modified = int(data.get("lastModified") or created_at)
        except (TypeError, ValueError, OverflowError) as exc:
            raise SnapshotError(f"tab {tab_id} has malformed fields: {exc}") from exc

        return cls(
            id=tab_id,
            file_name=str(data.get("fileName") or file_name_from_path(file_path)),
            file_path=file_path,
            content=content,
            is_dirty=bool(data.get("isDirty", False)),
            cursor_position=cursor_position,
            scroll_position=scroll_position,
            editor_view_state=data.get("editorViewState"),
            created_at=created_at,
            last_modified=last_modified,
        )
