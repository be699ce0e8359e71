"""Suggestions pinned by the user."""
from __future__ import annotations

from typing import List

from ..matching import FuzzyMatcher
from ..models import Suggestion
from ..storage import CustomSuggestionStore
from .base import is_blank


class CustomProvider:
    source = "custom"

    def __init__(self, store: CustomSuggestionStore, matcher: FuzzyMatcher) -> None:
        self._store = store
        self._matcher = matcher

    def search(self, query: str, limit: int = 2) -> List[Suggestion]:
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
                    category=entry.category,
                    score=self._matcher.score(query, entry.query),
                )
            )
            if len(results) >= limit:
                break
        return results
