"""Main mdtabs application."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Static, TextArea

from .constants import FILE_HISTORY_FILE_NAME, STATE_FILE_NAME, mdtabs_home
from .core.errors import EditorUnavailableError
from .core.export_controller import ExportController, default_export_path
from .core.file_controller import FileController
from .core.file_io import FileIO
from .core.mode_controller import Mode, ModeController
from .core.tab import Tab
from .core.tab_collection import TabCollection
from .core.tab_manager import TabManager
from .log import logger
from .persistence import FileHistoryStore, KeyValueStore, MemoryStore, StoragePort
from .preferences import (
    THEME_NAMES,
    Preferences,
    load_preferences,
    save_default_mode,
    save_theme_name,
)
from .theme import TEXTUAL_THEMES, textual_theme_for
from .widgets import (
    ConfirmScreen,
    MarkdownEditor,
    PathPromptScreen,
    PlainEditor,
    PreviewPane,
    ShortcutOverlay,
    TabBar,
    TabSwitcherScreen,
)


@dataclass
class AppContext:
    """Explicit wiring of the application's collaborators."""

    preferences: Preferences = field(default_factory=Preferences)
    store: StoragePort | None = None
    history: FileHistoryStore | None = None
    io: FileIO = field(default_factory=FileIO)
    # Where theme and layout choices are saved; None keeps them in memory.
    preferences_path: Path | None = None

    @classmethod
    def from_home(cls, home: Path | None = None) -> AppContext:
        home = home or mdtabs_home()
        preferences_path = home / "preferences.yaml"
        return cls(
            preferences=load_preferences(preferences_path),
            store=KeyValueStore(home / STATE_FILE_NAME),
            history=FileHistoryStore(home / FILE_HISTORY_FILE_NAME),
            preferences_path=preferences_path,
        )


# ── Main Application ────────────────────────────────────────────────


class MdTabsApp(App):
    """mdtabs - tabbed markdown editor."""

    CSS_PATH = "styles.tcss"
    TITLE = "mdtabs"

    BINDINGS = [
        Binding("ctrl+n", "new_file", "New", show=True),
        Binding("ctrl+o", "open_file", "Open", show=True),
        Binding("ctrl+s", "save_file", "Save", show=True),
        Binding("f12", "save_file_as", "Save as", show=False),
        Binding("f5", "reload_file", "Reload", show=False),
        Binding("f6", "export_html", "Export", show=False, priority=True),
        Binding("ctrl+w", "close_tab", "Close", show=True, priority=True),
        Binding(
            "ctrl+shift+w", "close_all_tabs", "Close all", show=False, priority=True
        ),
        Binding("ctrl+pagedown", "next_tab", "Next tab", show=False),
        Binding("ctrl+pageup", "previous_tab", "Prev tab", show=False),
        Binding("f8", "switch_tab", "Go to tab", show=False),
        Binding("alt+w", "close_other_tabs", "Close others", show=False),
        Binding("alt+d", "duplicate_tab", "Duplicate", show=False),
        Binding("alt+m", "move_tab", "Move tab", show=False),
        Binding("f2", "set_mode('code')", "Code", show=True),
        Binding("f3", "set_mode('preview')", "Preview", show=True),
        Binding("f4", "set_mode('split')", "Split", show=True),
        Binding("ctrl+e", "cycle_mode", "Cycle layout", show=False, priority=True),
        Binding("f9", "save_layout", "Keep layout", show=False),
        Binding("ctrl+t", "cycle_theme", "Theme", show=False),
        Binding("ctrl+b", "format('bold')", show=False, priority=True),
        Binding("alt+i", "format('italic')", show=False, priority=True),
        Binding("alt+s", "format('strikethrough')", show=False, priority=True),
        Binding("alt+c", "format('code')", show=False, priority=True),
        Binding("alt+h", "format('heading')", show=False, priority=True),
        Binding("alt+l", "format('ul')", show=False, priority=True),
        Binding("alt+o", "format('ol')", show=False, priority=True),
        Binding("alt+t", "format('task')", show=False, priority=True),
        Binding("alt+q", "format('quote')", show=False, priority=True),
        Binding("f1", "show_help", "Help", show=True),
        Binding("ctrl+q", "quit", "Quit", show=True),
        *(
            Binding(f"alt+{n}", f"jump_to_tab({n})", show=False)
            for n in range(1, 10)
        ),
    ]

    def __init__(
        self,
        context: AppContext | None = None,
        files: list[str] | None = None,
        initial_mode: str | None = None,
    ) -> None:
        super().__init__()
        self.context = context or AppContext.from_home()
        if self.context.store is None:
            self.context.store = MemoryStore()
        self._initial_files = list(files or [])
        prefs = self.context.preferences

        self.tab_manager = TabManager(
            self.context.store,
            self._confirm,
            collection=TabCollection(max_tabs=prefs.tabs.max_tabs),
        )
        self.file_controller = FileController(
            self.tab_manager,
            self.context.io,
            self.context.history,
            warn_at=prefs.tabs.warn_at,
        )
        self.export_controller = ExportController(self.tab_manager, self.context.io)
        self.mode_controller = ModeController(
            self.tab_manager,
            self,
            editor_factory=self._provision_editor,
            fallback_factory=self._build_fallback_editor,
            initial_mode=initial_mode or prefs.editor.default_mode,
        )
        self._editor: MarkdownEditor | PlainEditor | None = None
        self._surfaces_ready = False
        self._wire_events()

    # ── Layout ──────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        with Vertical(id="main-container"):
            yield TabBar(id="tab-bar")
            with Horizontal(id="workspace"):
                yield Vertical(id="editor-pane")
                yield PreviewPane(id="preview-pane")
            with Horizontal(id="status-bar"):
                yield Static("No document", id="status-file")
                yield Static("", id="status-cursor")
                yield Static("", id="status-tabs")
                yield Static("", id="status-mode")

    async def on_mount(self) -> None:
        for theme in TEXTUAL_THEMES.values():
            self.register_theme(theme)
        self.theme = textual_theme_for(self.context.preferences.display.theme).name

        self.mode_controller.preview = self.query_one("#preview-pane", PreviewPane)
        self._surfaces_ready = True
        await self.tab_manager.init()
        if self._initial_files:
            await self.file_controller.open_files(self._initial_files)

        mode = self.mode_controller.current_mode
        if mode.shows_editor:
            if self.tab_manager.has_tabs():
                await self.mode_controller.provision_editor()
            else:
                # Editing layouts need a document; start in preview instead.
                self.mode_controller.current_mode = Mode.PREVIEW
        self.apply_layout(self.mode_controller.current_mode)
        await self._show_active_tab()

    def _wire_events(self) -> None:
        manager = self.tab_manager
        manager.on("tab-activated", self._on_tab_activated)
        for event in (
            "tab-created",
            "tab-removed",
            "tab-restored",
            "tab-saved",
            "tab-moved",
            "all-tabs-closed",
        ):
            manager.on(event, self._on_tabs_changed)
        manager.on("tab-content-updated", self._on_content_updated)
        manager.on("tab-cursor-updated", lambda _payload: self._refresh_status())

        files = self.file_controller
        files.on("file-error", self._on_file_error)
        files.on("tab-limit-warning", self._on_tab_limit_warning)
        files.on("tab-limit-reached", self._on_tab_limit_reached)
        files.on("file-saved", lambda p: self.notify(f"Saved {p['path']}"))
        files.on("file-reloaded", lambda p: self._load_into_surfaces(p["tab"]))

        self.export_controller.on(
            "export-completed", lambda p: self.notify(f"Exported to {p['path']}")
        )
        self.export_controller.on(
            "export-error",
            lambda p: self.notify(f"Export failed: {p['error']}", severity="error"),
        )
        self.mode_controller.on("mode-changed", lambda _payload: self._refresh_status())
        self.mode_controller.on(
            "editor-fallback",
            lambda _payload: self.notify(
                "Markdown editor unavailable; using plain text editing.",
                severity="warning",
            ),
        )

    # ── Editing surfaces ────────────────────────────────────────

    async def _provision_editor(self) -> MarkdownEditor:
        """Build and mount the full editor (first editing layout only)."""
        prefs = self.context.preferences.editor
        editor = MarkdownEditor(
            "",
            language="markdown",
            soft_wrap=prefs.soft_wrap,
            show_line_numbers=prefs.show_line_numbers,
            tab_behavior="indent",
            id="editor",
        )
        if "markdown" not in editor.available_languages:
            raise EditorUnavailableError("markdown highlighting is not installed")
        await self.query_one("#editor-pane", Vertical).mount(editor)
        self._editor = editor
        editor.load_document(self.tab_manager.get_active_tab())
        return editor

    def _build_fallback_editor(self) -> PlainEditor:
        for stale in self.query("#editor"):
            stale.remove()
        editor = PlainEditor("", soft_wrap=True, id="plain-editor")
        self.query_one("#editor-pane", Vertical).mount(editor)
        self._editor = editor
        editor.load_document(self.tab_manager.get_active_tab())
        return editor

    def apply_layout(self, mode: Mode) -> None:
        """Show the panes for *mode* (layout host for the mode controller)."""
        workspace = self.query_one("#workspace")
        for other in Mode:
            workspace.remove_class(f"mode-{other.value}")
        workspace.add_class(f"mode-{mode.value}")
        self.query_one("#editor-pane").display = mode.shows_editor
        self.query_one("#preview-pane").display = mode.shows_preview
        if mode.shows_preview:
            self._refresh_preview()
        if mode.shows_editor and self._editor is not None:
            self._editor.focus()
        self._refresh_status()

    def _load_into_surfaces(self, tab: Tab | None) -> None:
        if self._editor is not None:
            self._editor.load_document(tab)
        self._refresh_preview()
        if tab is not None:
            self.mode_controller.restore_view_state(tab)

    async def _show_active_tab(self) -> None:
        tab = self.tab_manager.get_active_tab()
        self._load_into_surfaces(tab)
        self._refresh_tab_bar()
        self._refresh_status()

    @work(exclusive=True, group="preview")
    async def _update_preview(self, text: str) -> None:
        await self.query_one("#preview-pane", PreviewPane).show_document(text)

    def _refresh_preview(self) -> None:
        if not (
            self._surfaces_ready and self.mode_controller.current_mode.shows_preview
        ):
            return
        tab = self.tab_manager.get_active_tab()
        self._update_preview(tab.content if tab is not None else "")

    # ── Manager events ──────────────────────────────────────────

    def _on_tab_activated(self, payload: dict[str, Any]) -> None:
        if not self._surfaces_ready:
            return
        self._load_into_surfaces(payload["tab"])
        self._refresh_tab_bar()
        self._refresh_status()

    def _on_tabs_changed(self, _payload: dict[str, Any]) -> None:
        if not self._surfaces_ready:
            return
        if not self.tab_manager.has_tabs():
            self._load_into_surfaces(None)
        self._refresh_tab_bar()
        self._refresh_status()

    def _on_content_updated(self, payload: dict[str, Any]) -> None:
        tab = payload["tab"]
        if tab.is_active:
            self._refresh_preview()
        self._refresh_tab_bar()
        self._refresh_status()

    def _on_file_error(self, payload: dict[str, Any]) -> None:
        self.notify(
            f"Could not {payload['action']} {payload['path']}: {payload['error']}",
            severity="error",
        )

    def _on_tab_limit_warning(self, payload: dict[str, Any]) -> None:
        self.notify(
            f"{payload['count']} tabs open. Consider closing some tabs.",
            severity="warning",
        )

    def _on_tab_limit_reached(self, payload: dict[str, Any]) -> None:
        self.notify(
            f"Maximum tab limit reached ({payload['max']}). "
            "Close some tabs before opening more.",
            severity="error",
            timeout=10,
        )

    # ── Editor events ───────────────────────────────────────────

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area is not self._editor:
            return
        tab = self.tab_manager.get_active_tab()
        if tab is not None and not event.text_area.read_only:
            self.tab_manager.update_tab_content(tab.id, event.text_area.text)

    def on_text_area_selection_changed(self, event: TextArea.SelectionChanged) -> None:
        if event.text_area is not self._editor:
            return
        tab = self.tab_manager.get_active_tab()
        if tab is not None:
            row, col = event.selection.end
            self.tab_manager.update_tab_cursor(tab.id, row + 1, col + 1)

    def on_tab_bar_tab_selected(self, event: TabBar.TabSelected) -> None:
        self._switch_to(event.tab_id)

    # ── Display ─────────────────────────────────────────────────

    def _refresh_tab_bar(self) -> None:
        if not self._surfaces_ready:
            return
        active = self.tab_manager.get_active_tab()
        self.query_one("#tab-bar", TabBar).update_tabs(
            self.tab_manager.get_all_tabs(), active.id if active else None
        )

    def _refresh_status(self) -> None:
        if not self._surfaces_ready:
            return
        tab = self.tab_manager.get_active_tab()
        if tab is None:
            file_text, cursor_text = "No document", ""
        else:
            file_text = tab.file_path or tab.title
            if tab.is_dirty and tab.file_path:
                file_text += " *"
            cursor = tab.cursor_position
            cursor_text = f"Ln {cursor.line}, Col {cursor.col}"
        self.query_one("#status-file", Static).update(file_text)
        self.query_one("#status-cursor", Static).update(cursor_text)
        self.query_one("#status-tabs", Static).update(
            f"{self.tab_manager.get_tabs_count()}/{self.tab_manager.max_tabs} tabs"
        )
        mode_text = self.mode_controller.current_mode.value
        if self.mode_controller.editor_is_fallback:
            mode_text += " (plain)"
        self.query_one("#status-mode", Static).update(mode_text)

    # ── Confirmation capability ─────────────────────────────────

    async def _confirm(self, message: str) -> bool:
        """Ask the user; must be awaited from a worker."""
        if not self.context.preferences.confirm_on_close:
            return True
        return bool(await self.push_screen_wait(ConfirmScreen(message)))

    # ── Actions ─────────────────────────────────────────────────

    def _switch_to(self, tab_id: str) -> None:
        active = self.tab_manager.get_active_tab()
        if active is not None and active.id == tab_id:
            return
        self.mode_controller.save_active_view_state()
        self.tab_manager.switch_to_tab(tab_id)

    def action_new_file(self) -> None:
        self.mode_controller.save_active_view_state()
        self.file_controller.new_file()

    @work(exclusive=True, group="file-dialog")
    async def action_open_file(self) -> None:
        path = await self.push_screen_wait(
            PathPromptScreen("Open file", recent=self.file_controller.recent_files())
        )
        if path:
            self.mode_controller.save_active_view_state()
            await self.file_controller.open_file(path)

    def action_save_file(self) -> None:
        self._save_worker(save_as=False)

    def action_save_file_as(self) -> None:
        self._save_worker(save_as=True)

    @work(exclusive=True, group="file-dialog")
    async def _save_worker(self, save_as: bool) -> None:
        tab = self.tab_manager.get_active_tab()
        if tab is None:
            return
        path = None
        if save_as or not tab.file_path:
            path = await self.push_screen_wait(
                PathPromptScreen("Save as", default=tab.file_path or tab.file_name)
            )
            if not path:
                return
        await self.file_controller.save_file(tab.id, path)

    @work(exclusive=True, group="file-dialog")
    async def action_reload_file(self) -> None:
        await self.file_controller.reload_file()

    @work(exclusive=True, group="file-dialog")
    async def action_export_html(self) -> None:
        tab = self.tab_manager.get_active_tab()
        if tab is None:
            return
        path = await self.push_screen_wait(
            PathPromptScreen(
                "Export HTML", default=default_export_path(tab.file_path, tab.file_name)
            )
        )
        if path:
            await self.export_controller.export_html(tab.id, path)

    @work(exclusive=True, group="close")
    async def action_close_tab(self) -> None:
        await self.file_controller.close_file()

    @work(exclusive=True, group="close")
    async def action_close_all_tabs(self) -> None:
        await self.file_controller.close_all()

    @work(exclusive=True, group="close")
    async def action_close_other_tabs(self) -> None:
        closed = await self.file_controller.close_others()
        if closed:
            self.notify(f"Closed {closed} other tab(s)")

    def action_duplicate_tab(self) -> None:
        self.mode_controller.save_active_view_state()
        self.file_controller.duplicate_file()

    @work(exclusive=True, group="file-dialog")
    async def action_switch_tab(self) -> None:
        tabs = self.tab_manager.get_all_tabs()
        if not tabs:
            return
        tab_id = await self.push_screen_wait(TabSwitcherScreen(tabs))
        if tab_id:
            self._switch_to(tab_id)

    @work(exclusive=True, group="file-dialog")
    async def action_move_tab(self) -> None:
        """Pick an inactive tab and give it a new tab-strip position."""
        tabs = self.tab_manager.get_all_tabs()
        movable = [tab for tab in tabs if not tab.is_active]
        if len(movable) < 2:
            self.notify("No other tabs to reorder.", severity="warning")
            return
        positions = {tab.id: number for number, tab in enumerate(tabs, start=1)}
        tab_id = await self.push_screen_wait(
            TabSwitcherScreen(movable, title="Move which tab?", positions=positions)
        )
        if not tab_id:
            return
        answer = await self.push_screen_wait(
            PathPromptScreen(
                f"Move to position (1-{len(movable)})", placeholder="position"
            )
        )
        if not answer:
            return
        try:
            position = int(answer)
        except ValueError:
            self.notify(f"Not a tab position: {answer}", severity="error")
            return
        self.tab_manager.move_tab_to_position(tab_id, position - 1)

    def action_next_tab(self) -> None:
        """Activate the least recently used tab, rotating through all tabs."""
        tabs = self.tab_manager.get_all_tabs()
        if len(tabs) > 1:
            self._switch_to(tabs[0].id)

    def action_previous_tab(self) -> None:
        """Go back to the previously active tab."""
        tabs = self.tab_manager.get_all_tabs()
        if len(tabs) > 1:
            self._switch_to(tabs[-2].id)

    def action_jump_to_tab(self, number: int) -> None:
        tabs = self.tab_manager.get_all_tabs()
        if 1 <= number <= len(tabs):
            self._switch_to(tabs[number - 1].id)

    async def action_set_mode(self, mode: str) -> None:
        if not await self.mode_controller.set_mode(mode):
            if Mode(mode).shows_editor and not self.tab_manager.has_tabs():
                self.notify("Open or create a document first.", severity="warning")

    async def action_cycle_mode(self) -> None:
        await self.mode_controller.cycle_mode()

    def action_save_layout(self) -> None:
        """Make the current layout the one mdtabs starts in."""
        mode = self.mode_controller.current_mode.value
        self.context.preferences.editor.default_mode = mode
        if self.context.preferences_path is not None:
            save_default_mode(mode, self.context.preferences_path)
        self.notify(f"mdtabs will start in the {mode} layout.")

    def action_cycle_theme(self) -> None:
        display = self.context.preferences.display
        names = list(THEME_NAMES)
        index = names.index(display.theme) if display.theme in names else -1
        display.theme = names[(index + 1) % len(names)]
        self.theme = textual_theme_for(display.theme).name
        if self.context.preferences_path is not None:
            save_theme_name(display.theme, self.context.preferences_path)
        self.notify(f"Theme: {display.theme}")

    def action_format(self, action: str) -> None:
        """Apply a markdown formatting action in the editor."""
        if isinstance(self.screen, ModalScreen):
            return
        editor = self._editor
        if editor is None or not self.mode_controller.current_mode.shows_editor:
            self.notify(
                "Formatting needs the code or split layout.", severity="warning"
            )
            return
        editor.apply_format(action)

    def action_show_help(self) -> None:
        self.push_screen(ShortcutOverlay())

    async def action_quit(self) -> None:
        """Persist the session (including unsaved buffers) and exit."""
        self.mode_controller.save_active_view_state()
        self.mode_controller.destroy()
        self.file_controller.destroy()
        self.export_controller.destroy()
        self.tab_manager.destroy()
        logger.info("session saved, exiting")
        self.exit()


def run_app(
    files: list[str] | None = None,
    mode: str | None = None,
    home: Path | None = None,
) -> None:
    """Launch the TUI."""
    app = MdTabsApp(AppContext.from_home(home), files=files, initial_mode=mode)
    app.run()
