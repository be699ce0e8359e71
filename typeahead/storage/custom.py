"""Persisted user-pinned suggestions."""
from __future__ import annotations

import time
from typing import Any, Callable, List, Mapping, Optional, Union

from ..models import CustomEntry
from .kv import KeyValueStore
from .persisted import ErrorHook, JsonListStore

CUSTOM_SUGGESTIONS_KEY = "typeahead_custom_suggestions"


class CustomSuggestionStore(JsonListStore):
    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = CUSTOM_SUGGESTIONS_KEY,
        clock: Callable[[], float] = time.time,
        on_error: Optional[ErrorHook] = None,
    ) -> None:
        super().__init__(kv, key, on_error=on_error)
        self._clock = clock

    def entries(self) -> List[CustomEntry]:
        entries: List[CustomEntry] = []
        for item in self._read():
            try:
                entries.append(CustomEntry.from_dict(item))
            except (KeyError, TypeError, ValueError):
                continue
        return entries

    def add(self, suggestion: Union[str, Mapping[str, Any], None]) -> bool:
        """Pin a suggestion; False on invalid input, duplicates or write failure."""

        entry = self._build_entry(suggestion)
        if entry is None:
            return False
        key = entry.query.lower()
        with self._lock:
            customs = self.entries()
            if any(existing.query.lower() == key for existing in customs):
                return False
            customs.append(entry)
            return self._write([item.to_dict() for item in customs])

    def remove(self, query: Optional[str]) -> bool:
        if not query or not isinstance(query, str):
            return False
        key = query.strip().lower()
        with self._lock:
            customs = self.entries()
            remaining = [item for item in customs if item.query.lower() != key]
            if len(remaining) == len(customs):
                return False
            return self._write([item.to_dict() for item in remaining])

    def _build_entry(self, suggestion: Union[str, Mapping[str, Any], None]) -> Optional[CustomEntry]:
        if isinstance(suggestion, str):
            query, type_, category = suggestion, None, None
        elif isinstance(suggestion, Mapping):
            query = suggestion.get("query")
            type_ = suggestion.get("type")
            category = suggestion.get("category")
        else:
            return None
        if not isinstance(query, str) or not query.strip():
            return None
        return CustomEntry(
            query=query.strip(),
            type=str(type_ or "custom"),
            category=str(category or "spots"),
            added_at=self._clock(),
        )
