"""Exceptions raised by the tab-management core."""

from __future__ import annotations


class MdTabsError(Exception):
    """Base class for mdtabs errors."""


class TabLimitError(MdTabsError):
    """Raised when a tab would be created beyond the collection capacity."""

    def __init__(self, max_tabs: int) -> None:
        super().__init__(f"Maximum {max_tabs} tabs allowed")
        self.max_tabs = max_tabs


class SnapshotError(MdTabsError, ValueError):
    """Persisted tab data has the wrong shape."""


class EditorUnavailableError(MdTabsError):
    """The full editor surface could not be provisioned."""
