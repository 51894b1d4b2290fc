"""Modal screen widgets for mdtabs."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, ScrollableContainer, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, OptionList, Static
from textual.widgets.option_list import Option

from ..core.tab import Tab

SHORTCUTS_TEXT = """\
                   Keyboard Shortcuts
──────────────────────────────────────────────

 FILES ──────────────────────────────────────
  Ctrl+N           New document
  Ctrl+O           Open file
  Ctrl+S           Save
  F12              Save as
  F5               Reload from disk
  F6               Export to HTML

 TABS ───────────────────────────────────────
  Ctrl+W           Close tab
  Ctrl+Shift+W     Close all tabs
  Ctrl+PgDn        Oldest tab (cycle through all)
  Ctrl+PgUp        Previous tab (toggle last two)
  Alt+1-9          Jump to tab 1-9
  F8               Go to tab (type to filter)
  Alt+W            Close other tabs
  Alt+D            Duplicate tab
  Alt+M            Move a tab to another position

 LAYOUT ─────────────────────────────────────
  F2               Code
  F3               Preview
  F4               Split
  Ctrl+E           Cycle layouts
  F9               Use current layout at startup
  Ctrl+T           Switch theme

 FORMATTING ─────────────────────────────────
  Ctrl+B           Bold
  Alt+I            Italic
  Alt+S            Strikethrough
  Alt+C            Inline code
  Alt+H            Heading (cycles 1, 2, 3, off)
  Alt+L            Bullet list
  Alt+O            Numbered list
  Alt+T            Task
  Alt+Q            Quote

  F1               This help
  Ctrl+Q           Quit (open tabs are restored next time)

           Press F1 or Esc to close\
"""


class ShortcutOverlay(ModalScreen):
    """Modal overlay showing all keyboard shortcuts."""

    BINDINGS = [
        Binding("escape", "dismiss_overlay", show=False),
        Binding("f1", "dismiss_overlay", show=False),
    ]

    def compose(self) -> ComposeResult:
        with ScrollableContainer(id="shortcut-modal"):
            yield Static(SHORTCUTS_TEXT, id="shortcut-content")

    def action_dismiss_overlay(self) -> None:
        self.app.pop_screen()


class ConfirmScreen(ModalScreen[bool]):
    """Yes/No question; dismisses with the answer."""

    BINDINGS = [
        Binding("y", "answer(True)", show=False),
        Binding("n", "answer(False)", show=False),
        Binding("escape", "answer(False)", show=False),
    ]

    def __init__(self, message: str, title: str = "Unsaved Changes") -> None:
        super().__init__()
        self._message = message
        self._title = title

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-modal"):
            yield Static(self._title, id="confirm-title")
            yield Static(self._message, id="confirm-message", markup=False)
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes", variant="error", id="confirm-yes")
                yield Button("No", variant="primary", id="confirm-no")

    def on_mount(self) -> None:
        self.query_one("#confirm-no", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")

    def action_answer(self, answer: bool) -> None:
        self.dismiss(answer)


class PathPromptScreen(ModalScreen[str]):
    """Ask for a file path, offering recently used files."""

    BINDINGS = [
        Binding("escape", "cancel", show=False),
    ]

    def __init__(
        self,
        title: str,
        default: str = "",
        recent: list[dict] | None = None,
        placeholder: str = "path/to/file.md",
    ) -> None:
        super().__init__()
        self._title = title
        self._default = default
        self._recent = recent or []
        self._placeholder = placeholder

    def compose(self) -> ComposeResult:
        with Vertical(id="path-modal"):
            yield Static(
                f"{self._title}  [dim](Enter accepts, Esc cancels)[/]",
                id="path-title",
            )
            yield Input(
                value=self._default, placeholder=self._placeholder, id="path-input"
            )
            if self._recent:
                yield Static("Recent files", id="path-recent-title")
                yield OptionList(
                    *(Option(entry["path"], id=entry["path"]) for entry in self._recent),
                    id="path-recent",
                )

    def on_mount(self) -> None:
        self.query_one("#path-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value.strip())

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        # Option id stores the full path
        if event.option.id is not None:
            self.dismiss(event.option.id)

    def action_cancel(self) -> None:
        self.dismiss("")


def filter_tabs(tabs: list[Tab], term: str) -> list[Tab]:
    """Tabs whose name or path contains *term* (case-insensitive)."""
    term = term.strip().lower()
    if not term:
        return list(tabs)
    return [
        tab
        for tab in tabs
        if term in tab.file_name.lower() or term in (tab.file_path or "").lower()
    ]


class TabSwitcherScreen(ModalScreen[str]):
    """Filterable list of open tabs; dismisses with the chosen tab id."""

    BINDINGS = [
        Binding("escape", "cancel", show=False),
        Binding("down", "cursor_down", show=False),
        Binding("up", "cursor_up", show=False),
    ]

    def __init__(
        self,
        tabs: list[Tab],
        title: str = "Go to tab",
        positions: dict[str, int] | None = None,
    ) -> None:
        super().__init__()
        self._tabs = list(tabs)
        self._title = title
        # 1-based tab-strip positions shown next to each name
        self._positions = positions or {
            tab.id: number for number, tab in enumerate(self._tabs, start=1)
        }

    def compose(self) -> ComposeResult:
        with Vertical(id="switcher-modal"):
            yield Static(
                f"{self._title}  [dim](type to filter, Enter opens, Esc cancels)[/]",
                id="switcher-title",
            )
            yield Input(placeholder="Filter by name or path", id="switcher-filter")
            yield OptionList(id="switcher-list")
            yield Static("No tabs match your search", id="switcher-empty")

    def on_mount(self) -> None:
        self._populate("")
        self.query_one("#switcher-filter", Input).focus()

    def _label(self, tab: Tab) -> Text:
        label = Text.assemble(
            (f"{self._positions.get(tab.id, 0):>2}  ", "dim"),
            (tab.title, "bold" if tab.is_active else ""),
        )
        if tab.file_path:
            label.append(f"  {tab.file_path}", style="dim")
        return label

    def _populate(self, term: str) -> None:
        matches = filter_tabs(self._tabs, term)
        option_list = self.query_one("#switcher-list", OptionList)
        option_list.clear_options()
        option_list.add_options(Option(self._label(tab), id=tab.id) for tab in matches)
        if matches:
            option_list.highlighted = 0
        self.query_one("#switcher-empty").display = bool(term.strip()) and not matches

    def on_input_changed(self, event: Input.Changed) -> None:
        self._populate(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        option_list = self.query_one("#switcher-list", OptionList)
        if option_list.highlighted is None:
            return
        option = option_list.get_option_at_index(option_list.highlighted)
        if option.id is not None:
            self.dismiss(option.id)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id is not None:
            self.dismiss(event.option.id)

    def action_cursor_down(self) -> None:
        self.query_one("#switcher-list", OptionList).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#switcher-list", OptionList).action_cursor_up()

    def action_cancel(self) -> None:
        self.dismiss("")
