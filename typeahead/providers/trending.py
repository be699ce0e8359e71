"""Suggestions from the mutable trending-searches dataset."""
from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, List, Mapping, Union

from ..matching import FuzzyMatcher
from ..models import Suggestion, TrendingEntry
from .base import is_blank

logger = logging.getLogger(__name__)

PROACTIVE_TRENDS = frozenset({"up", "stable"})


class TrendingProvider:
    """Hold the trending list and serve it with or without a query.

    Without a query only rising or stable entries are offered, in the
    configured popularity order. A typed query may still match entries
    whose trend is going down.
    """

    source = "trending"

    def __init__(self, entries: Iterable[TrendingEntry], matcher: FuzzyMatcher) -> None:
        self._entries: List[TrendingEntry] = list(entries)
        self._matcher = matcher
        self._lock = threading.Lock()

    @property
    def entries(self) -> List[TrendingEntry]:
        with self._lock:
            return list(self._entries)

    def replace(self, entries: Any) -> bool:
        """Swap in a new dataset; rejected input leaves the current one intact."""

        if not isinstance(entries, (list, tuple)):
            return False
        try:
            parsed = [_coerce(item) for item in entries]
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("rejected trending dataset: %s", exc)
            return False
        with self._lock:
            self._entries = parsed
        return True

    def top(self, limit: int = 5) -> List[Suggestion]:
        if limit <= 0:
            return []
        proactive = [entry for entry in self.entries if entry.trend in PROACTIVE_TRENDS]
        return [self._suggestion(entry) for entry in proactive[:limit]]

    def search(self, query: str, limit: int = 2) -> List[Suggestion]:
        if is_blank(query) or limit <= 0:
            return []
        results: List[Suggestion] = []
        for entry in self.entries:
            if not self._matcher.matches(query, entry.query):
                continue
            results.append(self._suggestion(entry, self._matcher.score(query, entry.query)))
            if len(results) >= limit:
                break
        return results

    def _suggestion(self, entry: TrendingEntry, score: float = 0.0) -> Suggestion:
        return Suggestion(
            query=entry.query,
            type="trending",
            source=self.source,
            score=score,
            count=entry.count,
            trend=entry.trend,
        )


def _coerce(item: Union[TrendingEntry, Mapping[str, Any]]) -> TrendingEntry:
    if isinstance(item, TrendingEntry):
        return item
    if isinstance(item, Mapping):
        return TrendingEntry.from_dict(item)
    raise TypeError(f"Unsupported trending entry: {item!r}")
