"""Persistence layer – each store owns its file path, data format, and I/O."""

from ._base import JsonStore
from .file_history import FileHistoryStore
from .key_value import KeyValueStore, MemoryStore, StoragePort

__all__ = [
    "FileHistoryStore",
    "JsonStore",
    "KeyValueStore",
    "MemoryStore",
    "StoragePort",
]
