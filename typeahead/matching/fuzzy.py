"""Typo-tolerant string matching built on Levenshtein edit distance."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_THRESHOLD = 0.6


def _normalise(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def levenshtein_distance(a: Optional[str], b: Optional[str]) -> int:
    """Return the case-insensitive edit distance between *a* and *b*.

    ``None`` is treated as the empty string, so the distance to a missing
    value is the length of the other string.
    """

    a = (a or "").lower()
    b = (b or "").lower()
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            insert_cost = current[j - 1] + 1
            delete_cost = previous[j] + 1
            replace_cost = previous[j - 1] + (ca != cb)
            current.append(min(insert_cost, delete_cost, replace_cost))
        previous = current
    return previous[-1]


def similarity(a: Optional[str], b: Optional[str]) -> float:
    """Return a similarity score in ``[0, 1]``; 1 means identical ignoring case."""

    if a is None or b is None:
        return 0.0
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    a, b = a.lower(), b.lower()
    longest = max(len(a), len(b))
    return 1.0 - levenshtein_distance(a, b) / longest


def fuzzy_match(query: Optional[str], target: Optional[str], threshold: float = DEFAULT_THRESHOLD) -> bool:
    """Return True when *query* matches *target* under any tolerance strategy.

    Strategies run in order and short-circuit: exact equality, containment
    gated by similarity, whole-string similarity, then word-level matching
    where a target word containing the query word is enough.
    """

    query_norm = _normalise(query)
    target_norm = _normalise(target)
    if not query_norm or not target_norm:
        return False

    if query_norm == target_norm:
        return True

    if query_norm in target_norm or target_norm in query_norm:
        if similarity(query_norm, target_norm) >= threshold:
            return True

    if similarity(query_norm, target_norm) >= threshold:
        return True

    target_words = target_norm.split()
    for query_word in query_norm.split():
        for target_word in target_words:
            if query_word in target_word:
                return True
            if similarity(query_word, target_word) >= threshold:
                return True
    return False


@dataclass
class FuzzyMatcher:
    """Match helper shared by every suggestion provider.

    Providers never call the module functions directly so that a single
    matcher instance can be swapped or instrumented per engine.
    """

    threshold: float = DEFAULT_THRESHOLD

    def matches(self, query: str, target: Optional[str], threshold: Optional[float] = None) -> bool:
        limit = self.threshold if threshold is None else threshold
        return fuzzy_match(query, target, limit)

    def score(self, query: str, target: Optional[str]) -> float:
        return similarity(_normalise(query), _normalise(target))
