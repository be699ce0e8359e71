"""Persisted search history, most recent first."""
from __future__ import annotations

import time
from typing import Callable, List, Optional

from ..models import HistoryEntry
from .kv import KeyValueStore
from .persisted import ErrorHook, JsonListStore

HISTORY_KEY = "typeahead_search_history"
MAX_HISTORY_ITEMS = 20


class SearchHistoryStore(JsonListStore):
    """Ordered, case-insensitively unique list of accepted searches."""

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = HISTORY_KEY,
        max_items: int = MAX_HISTORY_ITEMS,
        clock: Callable[[], float] = time.time,
        on_error: Optional[ErrorHook] = None,
    ) -> None:
        super().__init__(kv, key, on_error=on_error)
        self._max_items = max_items
        self._clock = clock

    def entries(self) -> List[HistoryEntry]:
        entries: List[HistoryEntry] = []
        for item in self._read():
            try:
                entries.append(HistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError):
                continue
        return entries

    def save(self, query: Optional[str], type: str = "general") -> bool:
        """Move *query* to the front of the history, trimming to the cap."""

        if not query or not isinstance(query, str) or not query.strip():
            return False
        cleaned = query.strip()
        key = cleaned.lower()
        with self._lock:
            history = [entry for entry in self.entries() if entry.query.lower() != key]
            history.insert(0, HistoryEntry(query=cleaned, type=type or "general", timestamp=self._clock()))
            del history[self._max_items :]
            return self._write([entry.to_dict() for entry in history])

    def clear(self) -> bool:
        with self._lock:
            return self._delete()

    def recent(self, limit: int = 5) -> List[HistoryEntry]:
        return self.entries()[: max(limit, 0)]
