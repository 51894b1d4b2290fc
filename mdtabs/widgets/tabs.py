"""Tab bar widgets for mdtabs."""

from __future__ import annotations

from rich.markup import escape
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Static

from ..core.tab import Tab


class TabButton(Static):
    """A clickable tab label in the tab bar."""

    def __init__(self, label: str, tab_id: str, **kwargs) -> None:
        super().__init__(label, **kwargs)
        self.tab_id = tab_id

    def on_click(self) -> None:
        self.post_message(TabBar.TabSelected(self.tab_id))


class TabBar(Horizontal):
    """Horizontal tab strip, in recency order (most recent on the right)."""

    class TabSelected(Message):
        """A tab button was clicked."""

        def __init__(self, tab_id: str) -> None:
            super().__init__()
            self.tab_id = tab_id

    def update_tabs(self, tabs: list[Tab], active_id: str | None) -> None:
        """Rebuild the tab bar buttons."""
        self.remove_children()
        for i, tab in enumerate(tabs):
            number = f"{i + 1}:" if i < 9 else ""
            label = escape(f" {number}{tab.title} ")
            cls = "tab-btn tab-active" if tab.id == active_id else "tab-btn tab-inactive"
            if tab.is_dirty:
                cls += " tab-dirty"
            self.mount(TabButton(label, tab_id=tab.id, classes=cls))
        if not tabs:
            self.mount(Static(" No open documents ", classes="tab-empty"))
