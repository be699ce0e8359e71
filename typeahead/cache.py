"""Time-bounded memoisation of aggregated suggestion lists."""
from __future__ import annotations

import json
import logging
import threading
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import ErrorType
from .models import Suggestion
from .storage.kv import KeyValueStore
from .storage.persisted import PERSISTENCE_ERRORS, ErrorHook

logger = logging.getLogger(__name__)

CACHE_KEY = "typeahead_suggestion_cache"
DEFAULT_TTL_SECONDS = 5 * 60

CacheKey = Tuple[str, str, int]


def make_key(query: Optional[str], category: str, limit: int) -> CacheKey:
    return ((query or "").strip().lower(), category, int(limit))


@dataclass(frozen=True)
class CacheEntry:
    key: CacheKey
    results: Tuple[Suggestion, ...]
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        query, category, limit = self.key
        return {
            "query": query,
            "category": category,
            "limit": limit,
            "timestamp": self.timestamp,
            "results": [item.to_dict() for item in self.results],
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CacheEntry":
        key = make_key(str(payload["query"]), str(payload["category"]), int(payload["limit"]))
        results = tuple(Suggestion.from_dict(item) for item in payload["results"])
        return cls(key=key, results=results, timestamp=float(payload["timestamp"]))


class SuggestionCache:
    """TTL-keyed result cache.

    Expired entries are never returned but stay in the map until
    :meth:`clear`. With a key-value store the live entries are mirrored
    under one key and restored on construction.
    """

    def __init__(
        self,
        *,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        store: Optional[KeyValueStore] = None,
        store_key: str = CACHE_KEY,
        on_error: Optional[ErrorHook] = None,
    ) -> None:
        self._ttl = float(ttl)
        self._clock = clock
        self._store = store
        self._store_key = store_key
        self._on_error = on_error
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._lock = threading.RLock()
        if store is not None:
            self._restore()

    @property
    def ttl(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: CacheKey) -> Optional[List[Suggestion]]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or not self._fresh(entry):
            return None
        return [replace(item) for item in entry.results]

    def set(self, key: CacheKey, results: List[Suggestion]) -> None:
        snapshot = tuple(replace(item) for item in results)
        entry = CacheEntry(key=key, results=snapshot, timestamp=self._clock())
        with self._lock:
            self._entries[key] = entry
        if self._store is not None:
            self._persist()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        if self._store is None:
            return
        try:
            self._store.remove(self._store_key)
        except PERSISTENCE_ERRORS as exc:
            self._report(ErrorType.STORAGE_WRITE, exc)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _fresh(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.timestamp < self._ttl

    def _persist(self) -> None:
        with self._lock:
            live = [entry.to_dict() for entry in self._entries.values() if self._fresh(entry)]
        try:
            self._store.set(self._store_key, json.dumps(live, ensure_ascii=False))
        except PERSISTENCE_ERRORS as exc:
            self._report(ErrorType.STORAGE_WRITE, exc)

    def _restore(self) -> None:
        try:
            raw = self._store.get(self._store_key)
            payload = json.loads(raw) if raw else []
        except PERSISTENCE_ERRORS as exc:
            self._report(ErrorType.CACHE_CORRUPT, exc)
            return
        if not isinstance(payload, list):
            self._report(ErrorType.CACHE_CORRUPT, ValueError("cache snapshot is not a list"))
            return
        for item in payload:
            try:
                entry = CacheEntry.from_dict(item)
            except (KeyError, TypeError, ValueError):
                continue
            if self._fresh(entry):
                self._entries[entry.key] = entry

    def _report(self, err_type: ErrorType, exc: Exception) -> None:
        logger.warning("suggestion cache %s: %s", err_type.value, exc)
        if self._on_error is not None:
            self._on_error(err_type, {"key": self._store_key, "message": str(exc)})
