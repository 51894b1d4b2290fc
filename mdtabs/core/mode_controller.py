"""Layout mode state machine (code / preview / split)."""

from __future__ import annotations

import enum
import time
from typing import Any, Awaitable, Callable, Protocol

from ..log import logger
from .component import Component, ComponentHost
from .tab import Tab
from .tab_manager import TabManager


class Mode(str, enum.Enum):
    CODE = "code"
    PREVIEW = "preview"
    SPLIT = "split"

    @property
    def shows_editor(self) -> bool:
        return self in (Mode.CODE, Mode.SPLIT)

    @property
    def shows_preview(self) -> bool:
        return self in (Mode.PREVIEW, Mode.SPLIT)


MODE_CYCLE: tuple[Mode, ...] = (Mode.CODE, Mode.PREVIEW, Mode.SPLIT)


class EditorSurface(Protocol):
    """The rich text-editing surface (or its plain fallback)."""

    def save_view_state(self) -> Any: ...

    def restore_view_state(self, view_state: Any) -> None: ...


class PreviewSurface(Protocol):
    def get_scroll_offset(self) -> float: ...

    def set_scroll_offset(self, offset: float) -> None: ...


class LayoutHost(Protocol):
    def apply_layout(self, mode: Mode) -> None: ...


EditorFactory = Callable[[], Awaitable[EditorSurface]]
FallbackFactory = Callable[[], EditorSurface]


class ModeController(ComponentHost):
    """Switches layouts and keeps each tab's view state across switches.

    The editor surface is expensive, so it is only built the first time a
    mode that shows it is entered.  If building it fails, *fallback_factory*
    supplies a plain-text surface and the switch goes ahead.

    Events: ``mode-changed{mode, previous}``, ``editor-provisioned{surface}``,
    ``editor-fallback{error}``.
    """

    def __init__(
        self,
        tab_manager: TabManager,
        layout: LayoutHost,
        *,
        editor_factory: EditorFactory,
        fallback_factory: FallbackFactory,
        preview: PreviewSurface | None = None,
        initial_mode: Mode | str = Mode.PREVIEW,
    ) -> None:
        self.component = Component("ModeController", self)
        self.tab_manager = tab_manager
        self.layout = layout
        self.preview = preview
        self.editor: EditorSurface | None = None
        self.editor_is_fallback = False
        self._editor_factory = editor_factory
        self._fallback_factory = fallback_factory
        self.current_mode = Mode(initial_mode)
        self.last_switch_time = 0.0

    @property
    def editor_provisioned(self) -> bool:
        return self.editor is not None

    @property
    def editor_visible(self) -> bool:
        return self.editor is not None and self.current_mode.shows_editor

    @property
    def preview_visible(self) -> bool:
        return self.preview is not None and self.current_mode.shows_preview

    # -- transitions ----------------------------------------------------------

    async def set_mode(self, target: Mode | str) -> bool:
        """Switch to *target*.  Returns False when nothing changed."""
        target = Mode(target)
        if target == self.current_mode:
            return False
        if target.shows_editor and not self.tab_manager.has_tabs():
            logger.debug("refusing %s mode with no open tabs", target.value)
            return False

        started = time.perf_counter()
        self.save_active_view_state()

        if target.shows_editor and self.editor is None:
            await self.provision_editor()

        previous = self.current_mode
        self.current_mode = target
        self.layout.apply_layout(target)
        self.restore_active_view_state()

        self.last_switch_time = time.perf_counter() - started
        self.emit("mode-changed", {"mode": target, "previous": previous})
        return True

    async def provision_editor(self) -> EditorSurface:
        """Build the editor surface once, falling back to plain text on failure."""
        if self.editor is not None:
            return self.editor
        try:
            self.editor = await self._editor_factory()
            self.editor_is_fallback = False
            self.emit("editor-provisioned", {"surface": self.editor})
        except Exception as exc:
            logger.warning("editor surface unavailable, using plain text", exc_info=True)
            self.editor = self._fallback_factory()
            self.editor_is_fallback = True
            self.emit("editor-fallback", {"error": exc})
        return self.editor

    async def cycle_mode(self, direction: int = 1) -> bool:
        index = MODE_CYCLE.index(self.current_mode)
        step = 1 if direction > 0 else -1
        # Skip editor modes that would be refused so cycling never gets stuck.
        for offset in range(1, len(MODE_CYCLE) + 1):
            candidate = MODE_CYCLE[(index + step * offset) % len(MODE_CYCLE)]
            if candidate == self.current_mode:
                return False
            if candidate.shows_editor and not self.tab_manager.has_tabs():
                continue
            return await self.set_mode(candidate)
        return False

    async def switch_to_code(self) -> bool:
        return await self.set_mode(Mode.CODE)

    async def switch_to_preview(self) -> bool:
        return await self.set_mode(Mode.PREVIEW)

    async def switch_to_split(self) -> bool:
        return await self.set_mode(Mode.SPLIT)

    # -- view state -----------------------------------------------------------

    def save_active_view_state(self) -> None:
        tab = self.tab_manager.get_active_tab()
        if tab is not None:
            self.save_view_state(tab)

    def restore_active_view_state(self) -> None:
        tab = self.tab_manager.get_active_tab()
        if tab is not None:
            self.restore_view_state(tab)

    def save_view_state(self, tab: Tab) -> None:
        """Record the visible panes' state onto *tab*."""
        if self.editor_visible:
            self.tab_manager.save_tab_editor_state(
                tab.id, self.editor.save_view_state()  # type: ignore[union-attr]
            )
        if self.preview_visible:
            self.tab_manager.update_tab_scroll(
                tab.id, preview=self.preview.get_scroll_offset()  # type: ignore[union-attr]
            )

    def restore_view_state(self, tab: Tab) -> None:
        if self.editor_visible and tab.editor_view_state is not None:
            self.editor.restore_view_state(tab.editor_view_state)  # type: ignore[union-attr]
        if self.preview_visible and tab.scroll_position.preview:
            self.preview.set_scroll_offset(tab.scroll_position.preview)  # type: ignore[union-attr]
