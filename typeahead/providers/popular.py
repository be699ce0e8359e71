"""Most checked-in origins, offered before the user types anything."""
from __future__ import annotations

from typing import List

from ..models import Suggestion
from .base import ContentSource


class PopularProvider:
    source = "popular"

    def __init__(self, records: ContentSource) -> None:
        self._records = records

    def top(self, limit: int = 5) -> List[Suggestion]:
        if limit <= 0:
            return []
        ranked = sorted(self._records(), key=lambda record: -(record.checkins or 0))[:limit]
        results: List[Suggestion] = []
        seen = set()
        for record in ranked:
            key = record.origin.strip().lower()
            if key in seen:
                continue
            seen.add(key)
            results.append(
                Suggestion(
                    query=record.origin,
                    type="city",
                    source=self.source,
                    checkins=record.checkins or 0,
                    country=record.country,
                )
            )
        return results
