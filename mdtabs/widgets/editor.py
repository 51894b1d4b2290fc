"""Editing surfaces: the full markdown editor and its plain-text fallback."""

from __future__ import annotations

from typing import Any

from textual.widgets import TextArea
from textual.widgets.text_area import Selection

from ..core.markdown_actions import apply_action
from ..core.tab import Tab


def _location(value: Any) -> tuple[int, int] | None:
    if (
        isinstance(value, (list, tuple))
        and len(value) == 2
        and all(isinstance(v, int) and v >= 0 for v in value)
    ):
        return (value[0], value[1])
    return None


class ViewStateMixin:
    """View-state capture/replay shared by both editing surfaces.

    The view state is a JSON-able dict (selection + scroll offset) that the
    tab stores without interpreting it.
    """

    def save_view_state(self: TextArea) -> dict[str, Any]:  # type: ignore[misc]
        selection = self.selection
        return {
            "selection": [list(selection.start), list(selection.end)],
            "scroll": [self.scroll_offset.x, self.scroll_offset.y],
        }

    def restore_view_state(self: TextArea, view_state: Any) -> None:  # type: ignore[misc]
        if not isinstance(view_state, dict):
            return
        raw = view_state.get("selection")
        if isinstance(raw, (list, tuple)) and len(raw) == 2:
            start, end = _location(raw[0]), _location(raw[1])
            if start is not None and end is not None:
                self.selection = Selection(start, end)
        scroll = view_state.get("scroll")
        if isinstance(scroll, (list, tuple)) and len(scroll) == 2:
            x, y = scroll
            self.call_after_refresh(self.scroll_to, x, y, animate=False)

    def load_document(self: TextArea, tab: Tab | None) -> None:  # type: ignore[misc]
        """Show *tab*'s content with its cursor; clears the surface for None."""
        if tab is None:
            self.load_text("")
            self.read_only = True
            return
        self.read_only = False
        if self.text != tab.content:
            self.load_text(tab.content)
        line = max(tab.cursor_position.line - 1, 0)
        col = max(tab.cursor_position.col - 1, 0)
        self.cursor_location = (line, col)

    def apply_format(self: TextArea, action: str) -> bool:  # type: ignore[misc]
        """Apply a markdown formatting action to the current selection."""
        if self.read_only:
            return False
        selection = self.selection
        edit = apply_action(action, self.text, selection.start, selection.end)
        self.replace(edit.text, edit.start, edit.end)
        self.selection = Selection.cursor(edit.cursor)
        return True


class MarkdownEditor(ViewStateMixin, TextArea):
    """Full editor surface: markdown highlighting and line numbers."""


class PlainEditor(ViewStateMixin, TextArea):
    """Degraded plain-text surface used when the full editor can't be built."""
