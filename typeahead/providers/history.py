"""Suggestions drawn from the user's own search history."""
from __future__ import annotations

from typing import List

from ..matching import FuzzyMatcher
from ..models import Suggestion
from ..storage import SearchHistoryStore
from .base import is_blank


class HistoryProvider:
    source = "history"

    def __init__(self, store: SearchHistoryStore, matcher: FuzzyMatcher) -> None:
        self._store = store
        self._matcher = matcher

    def search(self, query: str, limit: int = 3) -> List[Suggestion]:
        """Return matching history entries in recency order."""

        if is_blank(query) or limit <= 0:
            return []
        results: List[Suggestion] = []
        for entry in self._store.entries():
            if not self._matcher.matches(query, entry.query):
                continue
            results.append(
                Suggestion(
                    query=entry.query,
                    type=entry.type,
                    source=self.source,
                    score=self._matcher.score(query, entry.query),
                )
            )
            if len(results) >= limit:
                break
        return results

    def recent(self, limit: int = 3) -> List[Suggestion]:
        return [
            Suggestion(query=entry.query, type=entry.type, source=self.source)
            for entry in self._store.recent(limit)
        ]
