"""Widget behavioral tests.

The editor and tab bar are mounted in a minimal host app so their view-state
and rendering logic run against real Textual widgets.
"""

from __future__ import annotations

import pytest
from textual.app import App, ComposeResult
from textual.widgets.text_area import Selection

from mdtabs.core.tab import Tab
from mdtabs.theme import DEFAULT_THEME, TEXTUAL_THEMES, textual_theme_for
from mdtabs.widgets import PlainEditor, PreviewPane, TabBar, TabButton, filter_tabs


class EditorHost(App):
    def compose(self) -> ComposeResult:
        yield TabBar(id="tab-bar")
        yield PlainEditor("", id="editor")
        yield PreviewPane(id="preview")


# =====================================================================
# Themes
# =====================================================================


class TestThemes:
    def test_every_theme_has_a_textual_theme(self):
        assert set(TEXTUAL_THEMES) == {"dark", "light", "solarized"}

    def test_unknown_theme_falls_back(self):
        assert textual_theme_for("neon") is DEFAULT_THEME
        assert textual_theme_for("light").name == "mdtabs-light"


# =====================================================================
# Tab bar
# =====================================================================


class TestTabBar:
    @pytest.mark.asyncio
    async def test_buttons_reflect_tabs(self):
        app = EditorHost()
        async with app.run_test() as pilot:
            clean = Tab(id="tab-1", file_name="a.md")
            dirty = Tab(id="tab-2", file_name="b [1].md", is_dirty=True)
            app.query_one(TabBar).update_tabs([clean, dirty], "tab-2")
            await pilot.pause()
            buttons = list(app.query(TabButton))
            assert [b.tab_id for b in buttons] == ["tab-1", "tab-2"]
            assert buttons[1].has_class("tab-active")
            assert buttons[1].has_class("tab-dirty")
            assert buttons[0].has_class("tab-inactive")

    @pytest.mark.asyncio
    async def test_empty_placeholder(self):
        app = EditorHost()
        async with app.run_test() as pilot:
            app.query_one(TabBar).update_tabs([], None)
            await pilot.pause()
            assert len(app.query(TabButton)) == 0
            assert len(app.query(".tab-empty")) == 1


# =====================================================================
# Editor surface
# =====================================================================


class TestEditorViewState:
    @pytest.mark.asyncio
    async def test_load_document_places_cursor(self):
        app = EditorHost()
        async with app.run_test():
            editor = app.query_one(PlainEditor)
            tab = Tab(id="tab-1", content="one\ntwo\nthree")
            tab.set_cursor_position(2, 3)
            editor.load_document(tab)
            assert editor.text == "one\ntwo\nthree"
            assert editor.cursor_location == (1, 2)
            assert editor.read_only is False

    @pytest.mark.asyncio
    async def test_no_document_is_read_only(self):
        app = EditorHost()
        async with app.run_test():
            editor = app.query_one(PlainEditor)
            editor.load_document(None)
            assert editor.text == ""
            assert editor.read_only is True

    @pytest.mark.asyncio
    async def test_view_state_round_trip(self):
        app = EditorHost()
        async with app.run_test():
            editor = app.query_one(PlainEditor)
            editor.load_document(Tab(id="tab-1", content="alpha\nbeta\ngamma"))
            editor.cursor_location = (2, 1)
            state = editor.save_view_state()
            editor.cursor_location = (0, 0)
            editor.restore_view_state(state)
            assert editor.cursor_location == (2, 1)
            assert state["selection"] == [[2, 1], [2, 1]]

    @pytest.mark.asyncio
    async def test_garbage_view_state_ignored(self):
        app = EditorHost()
        async with app.run_test():
            editor = app.query_one(PlainEditor)
            editor.load_document(Tab(id="tab-1", content="text"))
            editor.cursor_location = (0, 2)
            editor.restore_view_state({"selection": "nope", "scroll": None})
            editor.restore_view_state(["not", "a", "dict"])
            assert editor.cursor_location == (0, 2)


class TestEditorFormatting:
    @pytest.mark.asyncio
    async def test_apply_format_edits_selection(self):
        app = EditorHost()
        async with app.run_test():
            editor = app.query_one(PlainEditor)
            editor.load_document(Tab(id="tab-1", content="a note"))
            editor.selection = Selection((0, 2), (0, 6))
            assert editor.apply_format("italic")
            assert editor.text == "a *note*"
            assert editor.cursor_location == (0, 8)

    @pytest.mark.asyncio
    async def test_read_only_surface_is_not_formatted(self):
        app = EditorHost()
        async with app.run_test():
            editor = app.query_one(PlainEditor)
            editor.load_document(None)
            assert editor.apply_format("bold") is False
            assert editor.text == ""


class TestTabFilter:
    def test_matches_name_or_path(self):
        tabs = [
            Tab(id="tab-1", file_name="Alpha.md", file_path="/notes/Alpha.md"),
            Tab(id="tab-2", file_name="beta.md", file_path="/work/beta.md"),
            Tab(id="tab-3", file_name="Untitled.md"),
        ]
        assert filter_tabs(tabs, "  ALP ") == [tabs[0]]
        assert filter_tabs(tabs, "work") == [tabs[1]]
        assert filter_tabs(tabs, "") == tabs
        assert filter_tabs(tabs, "zzz") == []


class TestPreviewPane:
    @pytest.mark.asyncio
    async def test_show_document_and_scroll(self):
        app = EditorHost()
        async with app.run_test() as pilot:
            preview = app.query_one(PreviewPane)
            await preview.show_document("# Title\n\nBody")
            await pilot.pause()
            assert preview.get_scroll_offset() == 0.0
