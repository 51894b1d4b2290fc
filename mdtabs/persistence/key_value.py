"""Durable key/value store backing the tab session snapshot."""

from __future__ import annotations

from typing import Any, Protocol

from ._base import JsonStore


class StoragePort(Protocol):
    """What the tab manager needs from durable storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class KeyValueStore(JsonStore):
    """String values keyed by name (``{key: raw_string}``) in one JSON file.

    Values are kept verbatim: callers serialize their own payloads, so a
    corrupted value is returned as-is for the caller to detect and discard.
    """

    def get(self, key: str) -> Any:
        # Hand-edited files can hold any JSON value here.
        return self.load_raw().get(key)  # type: ignore[union-attr]

    def set(self, key: str, value: str) -> None:
        data = self.load_raw()
        data[key] = value  # type: ignore[index]
        self.save_raw(data, sort_keys=True)

    def delete(self, key: str) -> None:
        data = self.load_raw()
        if key in data:
            del data[key]  # type: ignore[arg-type]
            self.save_raw(data, sort_keys=True)

    def keys(self) -> list[str]:
        return sorted(self.load_raw())


class MemoryStore:
    """In-process :class:`StoragePort`, used when no state file is wanted."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)
