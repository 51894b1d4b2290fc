"""Shared test fixtures for the mdtabs test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from mdtabs.core.tab_collection import TabCollection
from mdtabs.core.tab_manager import TabManager
from mdtabs.persistence import MemoryStore


class FakeConfirm:
    """Confirmation capability that records prompts and replays an answer."""

    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.messages: list[str] = []

    async def __call__(self, message: str) -> bool:
        self.messages.append(message)
        return self.answer


class FakeFileIO:
    """In-memory file system standing in for :class:`mdtabs.core.file_io.FileIO`."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self.files: dict[str, str] = dict(files or {})
        self.fail_writes = False

    async def read(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    async def write(self, path: str, content: str) -> None:
        if self.fail_writes:
            raise PermissionError(path)
        self.files[path] = content


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for file-based tests."""
    return tmp_path


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def collection() -> TabCollection:
    return TabCollection()


@pytest.fixture
def confirm() -> FakeConfirm:
    return FakeConfirm(answer=True)


@pytest.fixture
def manager(store, confirm) -> TabManager:
    return TabManager(store, confirm)


@pytest.fixture
def record_events():
    """Subscribe to events on a component and collect ``(event, payload)``."""

    def _record(host, *events: str) -> list[tuple[str, dict]]:
        seen: list[tuple[str, dict]] = []
        for event in events:
            host.on(event, lambda payload, _e=event: seen.append((_e, payload)))
        return seen

    return _record


@pytest.fixture
def fake_io() -> FakeFileIO:
    return FakeFileIO()
