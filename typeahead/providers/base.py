"""Shared provider types."""
from __future__ import annotations

from typing import Callable, List, Protocol, Sequence

from ..models import ContentRecord, Suggestion

ContentSource = Callable[[], Sequence[ContentRecord]]


class SuggestionProvider(Protocol):
    """A single data source returning scored candidate suggestions."""

    source: str

    def search(self, query: str, limit: int) -> List[Suggestion]:
        ...


def is_blank(query: object) -> bool:
    return not isinstance(query, str) or not query.strip()
