"""Suggestions from searchable spot records."""
from __future__ import annotations

from typing import List, Optional

from ..matching import FuzzyMatcher
from ..models import ContentRecord, Suggestion
from .base import ContentSource, is_blank


class ContentProvider:
    """Match spots on origin, destination and description.

    Location fields use the matcher's threshold; the free-text description
    uses a looser one. A spot scores the best similarity among the fields
    that matched, and equal scores fall back to rating.
    """

    source = "spots"

    def __init__(
        self,
        records: ContentSource,
        matcher: FuzzyMatcher,
        *,
        description_threshold: float = 0.5,
    ) -> None:
        self._records = records
        self._matcher = matcher
        self._description_threshold = description_threshold

    def search(self, query: str, limit: int = 5) -> List[Suggestion]:
        if is_blank(query) or limit <= 0:
            return []
        results: List[Suggestion] = []
        for record in self._records():
            suggestion = self._match(query, record)
            if suggestion is not None:
                results.append(suggestion)
        results.sort(key=lambda item: (-item.score, -(item.rating or 0.0)))
        return results[:limit]

    def _match(self, query: str, record: ContentRecord) -> Optional[Suggestion]:
        scores: List[float] = []
        for value in (record.origin, record.destination):
            if self._matcher.matches(query, value):
                scores.append(self._matcher.score(query, value))
        if self._matcher.matches(query, record.description, self._description_threshold):
            scores.append(self._matcher.score(query, record.description))
        if not scores:
            return None
        return Suggestion(
            query=f"{record.origin} - {record.destination}",
            type="spot",
            source=self.source,
            score=max(scores),
            spot_id=record.id,
            country=record.country,
            rating=record.rating,
        )
