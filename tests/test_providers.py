from __future__ import annotations

import pytest

from typeahead.matching import FuzzyMatcher
from typeahead.models import TrendingEntry
from typeahead.places import default_trending, load_gazetteer
from typeahead.providers import (
    ContentProvider,
    CustomProvider,
    GazetteerProvider,
    HistoryProvider,
    PopularProvider,
    TrendingProvider,
)
from typeahead.storage import CustomSuggestionStore, MemoryKeyValueStore, SearchHistoryStore


@pytest.fixture
def matcher() -> FuzzyMatcher:
    return FuzzyMatcher()


@pytest.fixture
def cities(matcher) -> GazetteerProvider:
    return GazetteerProvider(load_gazetteer().cities, matcher, kind="city")


@pytest.fixture
def countries(matcher) -> GazetteerProvider:
    return GazetteerProvider(load_gazetteer().countries, matcher, kind="country")


def test_city_alias_sets_matched_alias(cities):
    results = cities.search("munchen", 5)

    assert results[0].query == "Munich"
    assert results[0].matched_alias == "munchen"
    assert results[0].country == "DE"
    assert results[0].score == 1.0
    assert results[0].type == "city"
    assert results[0].source == "cities"


def test_city_name_match_wins_over_alias(cities):
    results = cities.search("Paris", 5)

    assert results[0].query == "Paris"
    assert results[0].matched_alias is None
    assert results[0].score == 1.0


def test_city_prefix_is_scored_by_similarity(cities):
    paris = next(item for item in cities.search("Pari", 5) if item.query == "Paris")
    assert paris.score == pytest.approx(0.8)


def test_country_alias_uses_code(countries):
    results = countries.search("allemagne", 5)

    assert results[0].query == "Germany"
    assert results[0].code == "DE"
    assert results[0].country is None
    assert results[0].matched_alias == "allemagne"


def test_gazetteer_rejects_unknown_kind(matcher):
    with pytest.raises(ValueError):
        GazetteerProvider([], matcher, kind="region")


def test_gazetteer_blank_query_returns_nothing(cities):
    assert cities.search("", 5) == []
    assert cities.search("paris", 0) == []


def test_content_orders_by_score_then_rating(records, matcher):
    provider = ContentProvider(lambda: records, matcher)

    results = provider.search("paris", 5)

    assert [item.spot_id for item in results[:2]] == ["1", "2"]
    assert results[0].query == "Paris - Lyon"
    assert results[0].type == "spot"
    assert results[0].score == 1.0


def test_content_matches_description_with_looser_threshold(records, matcher):
    provider = ContentProvider(lambda: records, matcher, description_threshold=0.5)

    results = provider.search("calme", 5)

    assert results[0].spot_id == "1"
    assert 0.0 < results[0].score < 1.0


def test_content_reads_records_lazily(records, matcher):
    source = []
    provider = ContentProvider(lambda: source, matcher)
    assert provider.search("berlin", 5) == []

    source.extend(records)
    assert provider.search("berlin", 5)[0].spot_id == "3"


def test_popular_dedupes_origins(records):
    provider = PopularProvider(lambda: records)

    results = provider.top(3)

    assert [item.query for item in results] == ["Berlin", "Paris"]
    assert results[0].checkins == 200
    assert results[0].source == "popular"


def test_trending_top_skips_falling_entries(matcher):
    provider = TrendingProvider(default_trending(), matcher)

    queries = [item.query for item in provider.top(10)]

    assert "Munich vers Vienne" not in queries
    assert queries[:2] == ["Paris vers Lyon", "Berlin vers Prague"]


def test_trending_search_can_match_falling_entries(matcher):
    provider = TrendingProvider(default_trending(), matcher)

    results = provider.search("munich", 2)

    assert any(item.query == "Munich vers Vienne" and item.trend == "down" for item in results)


def test_trending_replace_rejects_bad_input(matcher):
    provider = TrendingProvider([TrendingEntry("Paris vers Lyon", 10, "up")], matcher)

    assert provider.replace("not a list") is False
    assert provider.replace([{"query": "Lille", "trend": "sideways"}]) is False
    assert [entry.query for entry in provider.entries] == ["Paris vers Lyon"]

    assert provider.replace([{"query": "Lille vers Gand", "count": 5, "trend": "stable"}]) is True
    assert [entry.query for entry in provider.entries] == ["Lille vers Gand"]


def test_history_provider_keeps_recency_order(clock, matcher):
    store = SearchHistoryStore(MemoryKeyValueStore(), clock=clock)
    for query in ("Paris plage", "Lyon", "Paris"):
        store.save(query)
    provider = HistoryProvider(store, matcher)

    results = provider.search("paris", 3)

    assert [item.query for item in results] == ["Paris", "Paris plage"]
    assert [item.query for item in provider.recent(2)] == ["Paris", "Lyon"]


def test_custom_provider_respects_limit(clock, matcher):
    store = CustomSuggestionStore(MemoryKeyValueStore(), clock=clock)
    for query in ("Tour Eiffel", "Tour Montparnasse", "Tour de France"):
        store.add({"query": query, "category": "spots"})
    provider = CustomProvider(store, matcher)

    results = provider.search("tour", 2)

    assert [item.query for item in results] == ["Tour Eiffel", "Tour Montparnasse"]
    assert results[0].category == "spots"
    assert results[0].source == "custom"
