"""Tab manager: document-level operations over a :class:`TabCollection`.

The manager is the only writer of the collection.  It re-broadcasts every
collection event, asks for confirmation before discarding unsaved work and
persists a snapshot of the whole collection after every mutation.
Persistence is a write-through cache: the in-memory collection stays
authoritative for the session.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from ..constants import DEFAULT_NEW_CONTENT, DEFAULT_UNTITLED_NAME, PERSISTENCE_KEY
from ..log import logger
from .component import Component, ComponentHost
from .errors import SnapshotError
from .tab import Tab, file_name_from_path
from .tab_collection import TabCollection

if TYPE_CHECKING:
    from ..persistence.key_value import StoragePort

ConfirmFn = Callable[[str], Awaitable[bool]]

COLLECTION_EVENTS: tuple[str, ...] = (
    "tab-created",
    "tab-removed",
    "tab-activated",
    "tab-moved",
    "all-tabs-closed",
)


async def _decline(message: str) -> bool:
    logger.debug("no confirmation capability; declining %r", message)
    return False


class TabManager(ComponentHost):
    """Orchestrates open documents.

    *store* is the durable key/value port and *confirm* the async
    user-confirmation capability supplied by the application.
    """

    def __init__(
        self,
        store: StoragePort,
        confirm: ConfirmFn | None = None,
        *,
        collection: TabCollection | None = None,
        persistence_key: str = PERSISTENCE_KEY,
    ) -> None:
        self.component = Component("TabManager", self)
        self.store = store
        self.confirm: ConfirmFn = confirm or _decline
        self.persistence_key = persistence_key
        if collection is None:
            collection = TabCollection()
        self.tab_collection = collection
        self.component.add_child(self.tab_collection)
        self._setup_event_handlers()

    async def on_init(self) -> None:
        self.load()

    def on_destroy(self) -> None:
        self.persist()

    def _setup_event_handlers(self) -> None:
        for event in COLLECTION_EVENTS:
            self.tab_collection.on(event, self._make_forwarder(event))

    def _make_forwarder(self, event: str) -> Callable[[Any], None]:
        def forward(payload: Any) -> None:
            self.emit(event, payload)
            self.persist()

        return forward

    # -- document operations --------------------------------------------------

    def create_new_tab(self, content: str = DEFAULT_NEW_CONTENT) -> Tab:
        """Open a new untitled document.  Raises ``TabLimitError`` at capacity."""
        return self.tab_collection.create_tab(
            content=content, file_name=DEFAULT_UNTITLED_NAME
        )

    def open_file_in_tab(self, file_path: str, content: str) -> Tab:
        """Show *file_path* in a tab, reusing an existing tab for that path."""
        existing = self.tab_collection.find_tab_by_path(file_path)
        if existing is not None:
            self.tab_collection.set_active_tab(existing.id)
            return existing
        return self.tab_collection.create_tab(
            file_name=file_name_from_path(file_path),
            file_path=file_path,
            content=content,
            is_dirty=False,
        )

    async def close_tab(self, tab_id: str) -> bool:
        """Close a tab, asking first if it has unsaved changes.

        Returns False if the tab does not exist or the user declined.
        """
        tab = self.tab_collection.get_tab(tab_id)
        if tab is None:
            return False
        if tab.is_dirty:
            confirmed = await self.confirm(
                f'Close "{tab.file_name}" without saving changes?'
            )
            if not confirmed:
                return False
        return self.tab_collection.remove_tab(tab_id)

    async def close_all_tabs(self) -> bool:
        dirty_tabs = self.get_dirty_tabs()
        if dirty_tabs:
            names = ", ".join(tab.file_name for tab in dirty_tabs)
            confirmed = await self.confirm(
                f"Close {len(dirty_tabs)} unsaved file(s) ({names}) without saving?"
            )
            if not confirmed:
                return False
        self.tab_collection.close_all_tabs()
        return True

    async def close_other_tabs(self, tab_id: str) -> int:
        """Close every tab except *tab_id*, which becomes the active tab.

        Each dirty tab is confirmed on its own; declined tabs stay open.
        Returns the number of tabs closed.
        """
        if not self.tab_collection.set_active_tab(tab_id):
            return 0
        closed = 0
        for tab in self.get_all_tabs():
            if tab.id != tab_id and await self.close_tab(tab.id):
                closed += 1
        return closed

    def duplicate_tab(self, tab_id: str) -> Tab | None:
        """Open a new untitled tab holding a copy of *tab_id*'s content."""
        tab = self.tab_collection.get_tab(tab_id)
        if tab is None:
            return None
        return self.create_new_tab(tab.content)

    def move_tab_to_position(self, tab_id: str, position: int) -> bool:
        return self.tab_collection.move_tab_to_position(tab_id, position)

    def switch_to_tab(self, tab_id: str) -> bool:
        return self.tab_collection.set_active_tab(tab_id)

    def update_tab_content(self, tab_id: str, content: str) -> bool:
        tab = self.tab_collection.get_tab(tab_id)
        if tab is None:
            return False
        if tab.set_content(content):
            self._changed("tab-content-updated", tab)
        return True

    def replace_tab_content(self, tab_id: str, content: str) -> bool:
        """Load *content* from disk into a tab; the tab ends up clean."""
        tab = self.tab_collection.get_tab(tab_id)
        if tab is None:
            return False
        with tab.loading():
            tab.set_content(content)
        tab.mark_saved()
        self._changed("tab-content-updated", tab)
        return True

    def mark_tab_saved(self, tab_id: str, file_path: str | None = None) -> bool:
        tab = self.tab_collection.get_tab(tab_id)
        if tab is None:
            return False
        tab.mark_saved(file_path)
        self._changed("tab-saved", tab)
        return True

    def update_tab_cursor(self, tab_id: str, line: int, col: int) -> bool:
        tab = self.tab_collection.get_tab(tab_id)
        if tab is None or line < 1 or col < 1:
            return False
        tab.set_cursor_position(line, col)
        self._changed("tab-cursor-updated", tab)
        return True

    def save_tab_editor_state(self, tab_id: str, view_state: Any) -> bool:
        tab = self.tab_collection.get_tab(tab_id)
        if tab is None:
            return False
        tab.set_editor_view_state(view_state)
        self._changed("tab-view-state-saved", tab)
        return True

    def update_tab_scroll(
        self, tab_id: str, editor: float | None = None, preview: float | None = None
    ) -> bool:
        tab = self.tab_collection.get_tab(tab_id)
        if tab is None:
            return False
        tab.set_scroll_position(editor, preview)
        self._changed("tab-scroll-updated", tab)
        return True

    def _changed(self, event: str, tab: Tab) -> None:
        self.persist()
        self.emit(event, {"tab": tab})

    # -- queries --------------------------------------------------------------

    def get_tab(self, tab_id: str) -> Tab | None:
        return self.tab_collection.get_tab(tab_id)

    def get_active_tab(self) -> Tab | None:
        return self.tab_collection.get_active_tab()

    def get_all_tabs(self) -> list[Tab]:
        return self.tab_collection.get_all_tabs()

    def get_dirty_tabs(self) -> list[Tab]:
        return self.tab_collection.get_dirty_tabs()

    def get_tabs_count(self) -> int:
        return self.tab_collection.get_tabs_count()

    def has_tabs(self) -> bool:
        return self.tab_collection.has_tabs()

    def find_tab_by_path(self, file_path: str) -> Tab | None:
        return self.tab_collection.find_tab_by_path(file_path)

    @property
    def max_tabs(self) -> int:
        return self.tab_collection.max_tabs

    # -- persistence ----------------------------------------------------------

    def persist(self) -> None:
        """Write the collection snapshot.  Failures are logged, not raised."""
        try:
            payload = json.dumps(self.tab_collection.to_snapshot(), ensure_ascii=False)
            self.store.set(self.persistence_key, payload)
        except (OSError, TypeError, ValueError):
            logger.warning("failed to persist tabs", exc_info=True)

    def load(self) -> None:
        """Restore the collection from storage.

        A corrupt entry is deleted and the session starts with no tabs.
        """
        try:
            raw = self.store.get(self.persistence_key)
        except OSError:
            logger.warning("failed to read persisted tabs", exc_info=True)
            return
        if raw is None or raw == "":
            return
        try:
            if not isinstance(raw, str):
                raise SnapshotError(f"stored snapshot is a {type(raw).__name__}")
            self.tab_collection.from_snapshot(json.loads(raw))
        except (json.JSONDecodeError, RecursionError, SnapshotError):
            logger.warning("discarding corrupt tab snapshot", exc_info=True)
            self._reset_after_corruption()
            return

        for tab in self.tab_collection.get_all_tabs():
            self.emit("tab-restored", {"tab": tab})
        active = self.tab_collection.get_active_tab()
        if active is not None:
            self.emit("tab-activated", {"tab": active})

    def _reset_after_corruption(self) -> None:
        self.tab_collection.tabs = []
        self.tab_collection.active_tab_id = None
        self.clear_persisted()

    def clear_persisted(self) -> None:
        try:
            self.store.delete(self.persistence_key)
        except OSError:
            logger.warning("failed to clear persisted tabs", exc_info=True)
