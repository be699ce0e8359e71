"""Persistence for history, pinned suggestions and cache snapshots."""

from .custom import CustomSuggestionStore
from .history import SearchHistoryStore
from .kv import DuckDBKeyValueStore, KeyValueStore, MemoryKeyValueStore

__all__ = [
    "CustomSuggestionStore",
    "DuckDBKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SearchHistoryStore",
]
