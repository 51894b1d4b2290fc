"""Ordered, capacity-bounded collection of tabs with one active tab."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any

from ..constants import MAX_TABS
from .component import Component, ComponentHost
from .errors import SnapshotError, TabLimitError
from .tab import Tab

_TAB_ID_NUMBER = re.compile(r"^tab-(\d+)$")


class TabCollection(ComponentHost):
    """The tabs of one session.

    Order is recency order: activating a tab moves it to the end, so the
    active tab is always last.

    Events: ``tab-created{tab}``, ``tab-removed{tab, index}``,
    ``tab-activated{tab}``, ``tab-moved{tab, from_index, to_index}``,
    ``all-tabs-closed{closed_tabs}``.
    """

    def __init__(self, max_tabs: int = MAX_TABS) -> None:
        self.component = Component("TabCollection", self)
        self.tabs: list[Tab] = []
        self.active_tab_id: str | None = None
        self.next_id_counter = 1
        self.max_tabs = max_tabs

    def __len__(self) -> int:
        return len(self.tabs)

    def __iter__(self) -> Iterator[Tab]:
        return iter(list(self.tabs))

    # -- mutations ------------------------------------------------------------

    def create_tab(self, **options: Any) -> Tab:
        """Create, append and activate a new tab.

        *options* are :class:`Tab` fields (``file_name``, ``file_path``,
        ``content``, ...).  Raises :class:`TabLimitError` at capacity.
        """
        if len(self.tabs) >= self.max_tabs:
            raise TabLimitError(self.max_tabs)
        tab_id = f"tab-{self.next_id_counter}"
        self.next_id_counter += 1
        tab = Tab(id=tab_id, **options)
        self.tabs.append(tab)
        self.set_active_tab(tab_id)
        self.emit("tab-created", {"tab": tab})
        return tab

    def remove_tab(self, tab_id: str) -> bool:
        index = self._index_of(tab_id)
        if index is None:
            return False
        tab = self.tabs.pop(index)
        if self.active_tab_id == tab_id:
            tab.set_active(False)
            self.active_tab_id = None
            if self.tabs:
                # The tab that slid into the removed slot, or the new last tab.
                replacement = self.tabs[min(index, len(self.tabs) - 1)]
                self.set_active_tab(replacement.id)

        self.emit("tab-removed", {"tab": tab, "index": index})
        return True

    def set_active_tab(self, tab_id: str) -> bool:
        tab = self.get_tab(tab_id)
        if tab is None:
            return False
        if self.active_tab_id is not None:
            current = self.get_tab(self.active_tab_id)
            if current is not None:
                current.set_active(False)
        self.move_tab_to_end(tab_id)
        tab.set_active(True)
        self.active_tab_id = tab_id
        self.emit("tab-activated", {"tab": tab})
        return True

    def move_tab_to_end(self, tab_id: str) -> bool:
        index = self._index_of(tab_id)
        if index is None or index == len(self.tabs) - 1:
            return False
        self.tabs.append(self.tabs.pop(index))
        return True

    def move_tab_to_position(self, tab_id: str, position: int) -> bool:
        """Reorder an inactive tab to the 0-based *position*.

        The active tab keeps the last slot, so it cannot be moved and
        *position* is clamped to the slots in front of it.
        """
        index = self._index_of(tab_id)
        if index is None or tab_id == self.active_tab_id:
            return False
        last = len(self.tabs) - (1 if self.active_tab_id is None else 2)
        position = max(0, min(position, last))
        if position == index:
            return False
        tab = self.tabs.pop(index)
        self.tabs.insert(position, tab)
        self.emit(
            "tab-moved", {"tab": tab, "from_index": index, "to_index": position}
        )
        return True

    def close_all_tabs(self) -> list[Tab]:
        closed_tabs = list(self.tabs)
        for tab in closed_tabs:
            tab.set_active(False)
        self.tabs = []
        self.active_tab_id = None
        self.emit("all-tabs-closed", {"closed_tabs": closed_tabs})
        return closed_tabs

    # -- queries --------------------------------------------------------------

    def _index_of(self, tab_id: str) -> int | None:
        for i, tab in enumerate(self.tabs):
            if tab.id == tab_id:
                return i
        return None

    def get_tab(self, tab_id: str | None) -> Tab | None:
        if tab_id is None:
            return None
        for tab in self.tabs:
            if tab.id == tab_id:
                return tab
        return None

    def get_active_tab(self) -> Tab | None:
        return self.get_tab(self.active_tab_id)

    def get_all_tabs(self) -> list[Tab]:
        return list(self.tabs)

    def get_dirty_tabs(self) -> list[Tab]:
        return [tab for tab in self.tabs if tab.is_dirty]

    def get_tabs_count(self) -> int:
        return len(self.tabs)

    def has_tabs(self) -> bool:
        return bool(self.tabs)

    def find_tab_by_path(self, file_path: str) -> Tab | None:
        for tab in self.tabs:
            if tab.file_path is not None and tab.file_path == file_path:
                return tab
        return None

    # -- persistence ----------------------------------------------------------

    def to_snapshot(self) -> dict[str, Any]:
        return {
            "tabs": [tab.to_snapshot() for tab in self.tabs],
            "activeTabId": self.active_tab_id,
            "nextIdCounter": self.next_id_counter,
        }

    def from_snapshot(self, data: Any) -> None:
        """Replace the collection contents with a snapshot.

        The collection is left untouched if *data* is malformed
        (:class:`SnapshotError`).  An ``activeTabId`` that does not resolve
        to a restored tab is treated as no active tab.
        """
        if not isinstance(data, dict):
            raise SnapshotError("snapshot must be an object")
        raw_tabs = data.get("tabs")
        if not isinstance(raw_tabs, list):
            raise SnapshotError("snapshot has no tab list")
        tabs = [Tab.from_snapshot(entry) for entry in raw_tabs]
        ids = [tab.id for tab in tabs]
        if len(set(ids)) != len(ids):
            raise SnapshotError("snapshot contains duplicate tab ids")
        if len(tabs) > self.max_tabs:
            raise SnapshotError(
                f"snapshot holds {len(tabs)} tabs, more than {self.max_tabs}"
            )

        highest = max(
            (int(m.group(1)) for m in map(_TAB_ID_NUMBER.match, ids) if m),
            default=0,
        )
        counter = data.get("nextIdCounter")
        if not isinstance(counter, int) or isinstance(counter, bool):
            counter = highest + 1
        # Never hand out an id that a restored tab already uses.
        counter = max(counter, highest + 1)

        active_id = data.get("activeTabId")
        if active_id not in ids:
            active_id = None

        self.tabs = tabs
        self.next_id_counter = counter
        self.active_tab_id = active_id
        for tab in self.tabs:
            tab.set_active(tab.id == active_id)

    # -- invariants -----------------------------------------------------------

    def check_invariants(self) -> None:
        """Assert the structural invariants (programming-error guard)."""
        ids = [tab.id for tab in self.tabs]
        assert len(set(ids)) == len(ids), f"duplicate tab ids: {ids}"
        assert len(self.tabs) <= self.max_tabs, "collection over capacity"
        active = [tab.id for tab in self.tabs if tab.is_active]
        if self.active_tab_id is None:
            assert not active, f"tabs marked active without a pointer: {active}"
        else:
            assert active == [self.active_tab_id], (
                f"active pointer {self.active_tab_id!r} vs flags {active}"
            )
