"""Textual widgets for mdtabs."""

from .editor import MarkdownEditor, PlainEditor
from .preview import PreviewPane
from .screens import (
    ConfirmScreen,
    PathPromptScreen,
    ShortcutOverlay,
    TabSwitcherScreen,
    filter_tabs,
)
from .tabs import TabBar, TabButton

__all__ = [
    "ConfirmScreen",
    "MarkdownEditor",
    "PathPromptScreen",
    "PlainEditor",
    "PreviewPane",
    "ShortcutOverlay",
    "TabBar",
    "TabButton",
    "TabSwitcherScreen",
    "filter_tabs",
]
