"""Tests for the layout mode state machine."""

from __future__ import annotations

import pytest

from mdtabs.core.mode_controller import Mode, ModeController


class FakeEditor:
    def __init__(self, label: str = "rich") -> None:
        self.label = label
        self.saved = 0
        self.restored: list[object] = []

    def save_view_state(self):
        self.saved += 1
        return {"label": self.label, "n": self.saved}

    def restore_view_state(self, view_state) -> None:
        self.restored.append(view_state)


class FakePreview:
    def __init__(self) -> None:
        self.offset = 0.0
        self.restored: list[float] = []

    def get_scroll_offset(self) -> float:
        return self.offset

    def set_scroll_offset(self, offset: float) -> None:
        self.restored.append(offset)


class FakeLayout:
    def __init__(self) -> None:
        self.applied: list[Mode] = []

    def apply_layout(self, mode: Mode) -> None:
        self.applied.append(mode)


class Factories:
    """Counts editor provisioning; optionally fails the rich editor."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.built = 0
        self.fallbacks = 0

    async def editor(self):
        self.built += 1
        if self.fail:
            raise RuntimeError("no syntax highlighting")
        return FakeEditor()

    def fallback(self):
        self.fallbacks += 1
        return FakeEditor("plain")


@pytest.fixture
def layout():
    return FakeLayout()


@pytest.fixture
def preview():
    return FakePreview()


@pytest.fixture
def factories():
    return Factories()


@pytest.fixture
def controller(manager, layout, preview, factories):
    return ModeController(
        manager,
        layout,
        editor_factory=factories.editor,
        fallback_factory=factories.fallback,
        preview=preview,
    )


class TestTransitions:
    @pytest.mark.asyncio
    async def test_initial_mode_is_preview(self, controller):
        assert controller.current_mode is Mode.PREVIEW
        assert not controller.editor_provisioned

    @pytest.mark.asyncio
    async def test_same_mode_is_noop(self, controller, layout):
        assert await controller.set_mode("preview") is False
        assert layout.applied == []

    @pytest.mark.asyncio
    async def test_editor_modes_refused_without_tabs(self, controller, factories):
        assert await controller.set_mode(Mode.CODE) is False
        assert await controller.switch_to_split() is False
        assert controller.current_mode is Mode.PREVIEW
        assert factories.built == 0

    @pytest.mark.asyncio
    async def test_switch_applies_layout_and_emits(
        self, controller, manager, layout, record_events
    ):
        manager.create_new_tab()
        seen = record_events(controller, "mode-changed")
        assert await controller.switch_to_code()
        assert layout.applied == [Mode.CODE]
        assert seen == [("mode-changed", {"mode": Mode.CODE, "previous": Mode.PREVIEW})]
        assert controller.editor_visible
        assert not controller.preview_visible

    @pytest.mark.asyncio
    async def test_preview_mode_allowed_without_tabs(self, controller, manager):
        manager.create_new_tab()
        await controller.switch_to_code()
        await manager.close_all_tabs()
        assert await controller.switch_to_preview()


class TestProvisioning:
    @pytest.mark.asyncio
    async def test_editor_built_once(self, controller, manager, factories):
        manager.create_new_tab()
        await controller.switch_to_code()
        await controller.switch_to_preview()
        await controller.switch_to_split()
        assert factories.built == 1
        assert not controller.editor_is_fallback

    @pytest.mark.asyncio
    async def test_fallback_on_failure(
        self, manager, layout, preview, record_events
    ):
        factories = Factories(fail=True)
        controller = ModeController(
            manager,
            layout,
            editor_factory=factories.editor,
            fallback_factory=factories.fallback,
            preview=preview,
        )
        manager.create_new_tab()
        seen = record_events(controller, "editor-fallback")

        assert await controller.switch_to_code()

        assert controller.current_mode is Mode.CODE
        assert controller.editor_is_fallback
        assert controller.editor.label == "plain"
        assert factories.fallbacks == 1
        assert isinstance(seen[0][1]["error"], RuntimeError)


class TestViewState:
    @pytest.mark.asyncio
    async def test_preview_scroll_saved_before_switch(self, controller, manager, preview):
        tab = manager.create_new_tab()
        preview.offset = 42.0
        await controller.switch_to_code()
        assert tab.scroll_position.preview == 42.0

    @pytest.mark.asyncio
    async def test_editor_state_saved_and_restored(self, controller, manager):
        tab = manager.create_new_tab()
        await controller.switch_to_code()
        editor = controller.editor
        await controller.switch_to_preview()
        assert tab.editor_view_state == {"label": "rich", "n": 1}
        await controller.switch_to_code()
        assert editor.restored[-1] == {"label": "rich", "n": 1}

    @pytest.mark.asyncio
    async def test_preview_scroll_restored_when_visible(
        self, controller, manager, preview
    ):
        manager.create_new_tab()
        preview.offset = 9.0
        await controller.switch_to_code()
        await controller.switch_to_split()
        assert preview.restored[-1] == 9.0

    @pytest.mark.asyncio
    async def test_hidden_editor_state_not_saved(self, controller, manager):
        tab = manager.create_new_tab()
        controller.save_view_state(tab)
        assert tab.editor_view_state is None


class TestCycle:
    @pytest.mark.asyncio
    async def test_cycle_order(self, controller, manager):
        manager.create_new_tab()
        await controller.cycle_mode()
        assert controller.current_mode is Mode.SPLIT
        await controller.cycle_mode()
        assert controller.current_mode is Mode.CODE
        await controller.cycle_mode(-1)
        assert controller.current_mode is Mode.SPLIT

    @pytest.mark.asyncio
    async def test_cycle_skips_refused_modes(self, controller):
        assert await controller.cycle_mode() is False
        assert controller.current_mode is Mode.PREVIEW
