"""Suggestions from the static city and country reference lists."""
from __future__ import annotations

import threading
from typing import Iterable, List, Optional, Tuple

from ..matching import FuzzyMatcher
from ..models import GazetteerEntry, Suggestion
from .base import is_blank

_KINDS = {
    "city": ("city", "cities"),
    "country": ("country", "countries"),
}


class GazetteerProvider:
    """Match a query against canonical place names, then their aliases.

    The canonical name wins when it matches; otherwise the first matching
    alias is recorded in ``matched_alias`` and scored instead.
    """

    def __init__(self, entries: Iterable[GazetteerEntry], matcher: FuzzyMatcher, *, kind: str) -> None:
        if kind not in _KINDS:
            raise ValueError(f"Unknown gazetteer kind '{kind}'")
        self._entries: List[GazetteerEntry] = list(entries)
        self._matcher = matcher
        self._kind = kind
        self.type, self.source = _KINDS[kind]
        self._lock = threading.Lock()

    @property
    def entries(self) -> Tuple[GazetteerEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def add(self, entry: GazetteerEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def search(self, query: str, limit: int = 5) -> List[Suggestion]:
        if is_blank(query) or limit <= 0:
            return []
        results: List[Suggestion] = []
        for entry in self.entries:
            suggestion = self._match(query, entry)
            if suggestion is not None:
                results.append(suggestion)
        results.sort(key=lambda item: -item.score)
        return results[:limit]

    def _match(self, query: str, entry: GazetteerEntry) -> Optional[Suggestion]:
        if self._matcher.matches(query, entry.name):
            return self._suggestion(entry, self._matcher.score(query, entry.name))
        for alias in entry.aliases:
            if self._matcher.matches(query, alias):
                return self._suggestion(entry, self._matcher.score(query, alias), alias)
        return None

    def _suggestion(self, entry: GazetteerEntry, score: float, alias: Optional[str] = None) -> Suggestion:
        suggestion = Suggestion(
            query=entry.name,
            type=self.type,
            source=self.source,
            score=score,
            matched_alias=alias,
        )
        if self._kind == "city":
            suggestion.country = entry.code
        else:
            suggestion.code = entry.code
        return suggestion
