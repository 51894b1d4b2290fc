"""Async file read/write capability."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol


class FileIOPort(Protocol):
    async def read(self, path: str) -> str: ...

    async def write(self, path: str, content: str) -> None: ...


class FileIO:
    """Reads and writes UTF-8 text files off the event loop.

    Errors (``OSError``, ``UnicodeDecodeError``) propagate to the caller.
    """

    async def read(self, path: str) -> str:
        return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")

    async def write(self, path: str, content: str) -> None:
        await asyncio.to_thread(self._write, Path(path), content)

    @staticmethod
    def _write(path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def normalize_path(path: str) -> str:
    """Absolute, user-expanded form of *path* used as a tab's identity."""
    return str(Path(path).expanduser().resolve())
