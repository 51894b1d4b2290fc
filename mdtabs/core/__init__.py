"""Tab-management core: components, tabs, manager and controllers."""

from .component import Component, ComponentHost
from .errors import EditorUnavailableError, MdTabsError, SnapshotError, TabLimitError
from .export_controller import ExportController
from .file_controller import FileController
from .file_io import FileIO
from .mode_controller import Mode, ModeController
from .tab import CursorPosition, ScrollPosition, Tab
from .tab_collection import TabCollection
from .tab_manager import TabManager

__all__ = [
    "Component",
    "ComponentHost",
    "CursorPosition",
    "EditorUnavailableError",
    "ExportController",
    "FileController",
    "FileIO",
    "MdTabsError",
    "Mode",
    "ModeController",
    "ScrollPosition",
    "SnapshotError",
    "Tab",
    "TabCollection",
    "TabLimitError",
    "TabManager",
]
