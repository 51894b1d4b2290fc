"""Rendered markdown preview pane."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Markdown


class PreviewPane(VerticalScroll):
    """Scrollable rendered view of the active document."""

    def compose(self) -> ComposeResult:
        yield Markdown("", id="preview-markdown")

    async def show_document(self, text: str) -> None:
        await self.query_one("#preview-markdown", Markdown).update(text)

    def get_scroll_offset(self) -> float:
        return float(self.scroll_y)

    def set_scroll_offset(self, offset: float) -> None:
        self.call_after_refresh(self.scroll_to, y=offset, animate=False)
