"""Suggestion aggregation across history, places, spots, trending and pins."""
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .cache import SuggestionCache, make_key
from .config import EngineSettings
from .debounce import DelayedTaskScheduler
from .errors import ErrorType
from .matching import FuzzyMatcher
from .models import (
    CategorisedSuggestions,
    ContentRecord,
    CustomEntry,
    GazetteerEntry,
    HistoryEntry,
    Suggestion,
    SuggestionOptions,
    TrendingEntry,
)
from .places import Gazetteer, default_trending, load_gazetteer
from .providers import (
    ContentProvider,
    ContentSource,
    CustomProvider,
    GazetteerProvider,
    HistoryProvider,
    PopularProvider,
    SuggestionProvider,
    TrendingProvider,
)
from .providers.base import is_blank
from .storage import CustomSuggestionStore, KeyValueStore, MemoryKeyValueStore, SearchHistoryStore
from .storage.persisted import ErrorHook
from .telemetry import events

logger = logging.getLogger(__name__)

# Providers run in this order; on equal scores the earlier source wins.
SOURCE_PRIORITY = ("history", "cities", "countries", "spots", "trending", "custom")
DEBOUNCE_KEY = "suggestions"

SelectListener = Callable[[Suggestion], None]
OptionsLike = Union[SuggestionOptions, Mapping[str, Any], str, None]


def _dedupe(items: Iterable[Suggestion]) -> List[Suggestion]:
    seen = set()
    unique: List[Suggestion] = []
    for item in items:
        if item.key in seen:
            continue
        seen.add(item.key)
        unique.append(item)
    return unique


def _telemetry_error(err_type: ErrorType, details: Dict[str, object]) -> None:
    try:
        events.log_error(err_type, details)
    except OSError as exc:
        logger.warning("unable to record telemetry error: %s", exc)


class SuggestionEngine:
    """Own every piece of mutable suggestion state for one user session.

    The cache, the trending dataset, the debounce slot and the selection
    listeners all live on the instance, so independent engines never share
    results.
    """

    def __init__(
        self,
        *,
        settings: Optional[EngineSettings] = None,
        store: Optional[KeyValueStore] = None,
        content: Union[ContentSource, Sequence[ContentRecord], None] = None,
        gazetteer: Optional[Gazetteer] = None,
        trending: Optional[Iterable[TrendingEntry]] = None,
        matcher: Optional[FuzzyMatcher] = None,
        clock: Callable[[], float] = time.time,
        scheduler: Optional[DelayedTaskScheduler] = None,
        on_error: Optional[ErrorHook] = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.matcher = matcher or FuzzyMatcher(threshold=self.settings.fuzzy_threshold)
        self._store = store if store is not None else MemoryKeyValueStore()
        if on_error is None and self.settings.telemetry_enabled:
            on_error = _telemetry_error
        self._on_error = on_error
        records = self._content_source(content)
        places = gazetteer or load_gazetteer()

        self.history_store = SearchHistoryStore(
            self._store, max_items=self.settings.max_history, clock=clock, on_error=on_error
        )
        self.custom_store = CustomSuggestionStore(self._store, clock=clock, on_error=on_error)
        self._cache = SuggestionCache(
            ttl=self.settings.cache_ttl_seconds,
            clock=clock,
            store=self._store if self.settings.persist_cache else None,
            on_error=on_error,
        )
        self._scheduler = scheduler or DelayedTaskScheduler()

        self._history = HistoryProvider(self.history_store, self.matcher)
        self._cities = GazetteerProvider(places.cities, self.matcher, kind="city")
        self._countries = GazetteerProvider(places.countries, self.matcher, kind="country")
        self._spots = ContentProvider(
            records, self.matcher, description_threshold=self.settings.description_threshold
        )
        self._trending = TrendingProvider(
            default_trending() if trending is None else trending, self.matcher
        )
        self._custom = CustomProvider(self.custom_store, self.matcher)
        self._popular = PopularProvider(records)

        self._listeners: List[SelectListener] = []
        self._listeners_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------
    def resolve_options(self, options: OptionsLike = None) -> SuggestionOptions:
        return SuggestionOptions.resolve(
            options,
            default_limit=self.settings.default_limit,
            legacy_limit=self.settings.legacy_limit,
        )

    def get_suggestions(self, query: Optional[str], options: OptionsLike = None) -> List[Suggestion]:
        """Return ranked, de-duplicated suggestions for *query*.

        ``options`` is either ``{"category": ..., "limit": ...}`` or a bare
        legacy category string. Results are cached per normalised query,
        category and limit until the TTL elapses.
        """

        opts = self.resolve_options(options)
        key = make_key(query, opts.category, opts.limit)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        if is_blank(query):
            results = self._idle_suggestions(opts)
        else:
            results = self._matching_suggestions(query.strip(), opts)
        self._cache.set(key, results)
        return list(results)

    def get_suggestions_debounced(self, query: Optional[str], options: OptionsLike = None) -> "Future[List[Suggestion]]":
        """Schedule :meth:`get_suggestions` after the debounce delay.

        A newer call cancels the pending one; the superseded future raises
        ``CancelledError`` when waited on.
        """

        return self._scheduler.schedule(
            DEBOUNCE_KEY, self.settings.debounce_delay_seconds, self.get_suggestions, query, options
        )

    def _idle_suggestions(self, opts: SuggestionOptions) -> List[Suggestion]:
        quota = self.settings.no_query_quota
        batches: List[Suggestion] = []
        if opts.category in ("all", "history"):
            batches.extend(self._history.recent(quota))
        if opts.category == "all":
            batches.extend(self._popular.top(quota))
            batches.extend(self._trending.top(quota))
        return _dedupe(batches)[: opts.limit]

    def _matching_suggestions(self, query: str, opts: SuggestionOptions) -> List[Suggestion]:
        merged: List[Suggestion] = []
        for source, provider in self._providers():
            if opts.category not in ("all", source):
                continue
            merged.extend(provider.search(query, self.settings.quota(source)))
        ranked = _dedupe(merged)
        # sort is stable, so equal scores keep source priority
        ranked.sort(key=lambda item: -item.score)
        return ranked[: opts.limit]

    def _providers(self) -> Tuple[Tuple[str, SuggestionProvider], ...]:
        lookup: Dict[str, SuggestionProvider] = {
            "history": self._history,
            "cities": self._cities,
            "countries": self._countries,
            "spots": self._spots,
            "trending": self._trending,
            "custom": self._custom,
        }
        return tuple((source, lookup[source]) for source in SOURCE_PRIORITY)

    # ------------------------------------------------------------------
    # Individual sources
    # ------------------------------------------------------------------
    def search_cities(self, query: str, limit: int = 5) -> List[Suggestion]:
        return self._cities.search(query, limit)

    def search_countries(self, query: str, limit: int = 5) -> List[Suggestion]:
        return self._countries.search(query, limit)

    def search_spots(self, query: str, limit: int = 5) -> List[Suggestion]:
        return self._spots.search(query, limit)

    def get_popular_searches(self, limit: int = 5) -> List[Suggestion]:
        return self._popular.top(limit)

    def get_popular_suggestions(self, limit: Optional[int] = None) -> List[Suggestion]:
        limit = limit if limit and limit > 0 else self.settings.default_limit
        combined = self._popular.top(min(limit, 5)) + self._trending.top(min(limit, 5))
        return _dedupe(combined)[:limit]

    def get_trending_searches(self, limit: int = 5) -> List[Suggestion]:
        return self._trending.top(limit)

    def set_trending_searches(self, entries: Any) -> bool:
        accepted = self._trending.replace(entries)
        if not accepted and self._on_error is not None:
            self._on_error(ErrorType.INVALID_SUGGESTION, {"key": "trending", "message": "trending dataset rejected"})
        return accepted

    def get_suggestions_by_category(self, query: Optional[str] = None) -> CategorisedSuggestions:
        typed = not is_blank(query)
        history = [
            Suggestion(query=entry.query, type=entry.type, source="history")
            for entry in self.history_store.entries()
            if not typed or self.matcher.matches(query, entry.query)
        ][:3]
        trending = [
            item for item in self._trending.top(3) if not typed or self.matcher.matches(query, item.query)
        ]
        return CategorisedSuggestions(
            history=history,
            cities=self.search_cities(query or "", 5),
            spots=self.search_spots(query or "", 5),
            countries=self.search_countries(query or "", 5),
            trending=trending,
        )

    def known_cities(self) -> List[GazetteerEntry]:
        return list(self._cities.entries)

    def known_countries(self) -> List[GazetteerEntry]:
        return list(self._countries.entries)

    def add_known_city(self, name: Optional[str], country: Optional[str], aliases: Sequence[str] = ()) -> bool:
        if not name or not country:
            return False
        self._cities.add(GazetteerEntry(name=name.strip(), code=country.strip(), aliases=tuple(aliases)))
        self._cache.clear()
        return True

    # ------------------------------------------------------------------
    # History and pinned suggestions
    # ------------------------------------------------------------------
    def save_search_history(self, query: Optional[str], type: str = "general") -> bool:
        return self.history_store.save(query, type)

    def get_search_history(self) -> List[HistoryEntry]:
        return self.history_store.entries()

    def clear_search_history(self) -> bool:
        return self.history_store.clear()

    def get_recent_searches(self, limit: int = 5) -> List[HistoryEntry]:
        return self.history_store.recent(limit)

    def get_custom_suggestions(self) -> List[CustomEntry]:
        return self.custom_store.entries()

    def add_custom_suggestion(self, suggestion: Union[str, Mapping[str, Any], None]) -> bool:
        added = self.custom_store.add(suggestion)
        if added:
            self._cache.clear()
        return added

    def remove_custom_suggestion(self, query: Optional[str]) -> bool:
        removed = self.custom_store.remove(query)
        if removed:
            self._cache.clear()
        return removed

    # ------------------------------------------------------------------
    # Selection events
    # ------------------------------------------------------------------
    def on_select(self, listener: SelectListener) -> Callable[[], None]:
        """Register *listener* for selections; returns an unsubscribe callable."""

        with self._listeners_lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def select(self, suggestion: Union[Suggestion, str]) -> bool:
        """Record a chosen suggestion and notify listeners."""

        if isinstance(suggestion, str):
            suggestion = Suggestion(query=suggestion, type="general", source="history")
        if is_blank(suggestion.query):
            return False
        saved = self.save_search_history(suggestion.query, suggestion.type)
        if self.settings.telemetry_enabled:
            try:
                events.log_selection(suggestion.query, suggestion.source, suggestion.type)
            except OSError as exc:
                logger.warning("unable to record selection telemetry: %s", exc)
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(suggestion)
            except Exception:
                logger.exception("selection listener failed for %s", suggestion.query)
        return saved

    # ------------------------------------------------------------------
    # Cache and timing
    # ------------------------------------------------------------------
    def clear_suggestion_cache(self) -> None:
        self._cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    @property
    def cache_ttl(self) -> float:
        return self._cache.ttl

    @property
    def debounce_delay(self) -> float:
        return self.settings.debounce_delay_seconds

    def close(self) -> None:
        self._scheduler.shutdown()

    @staticmethod
    def _content_source(content: Union[ContentSource, Sequence[ContentRecord], None]) -> ContentSource:
        if callable(content):
            return content
        records = list(content or [])
        return lambda: records

