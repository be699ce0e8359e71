from __future__ import annotations

import json
import threading
import time

import pytest

from typeahead.errors import ErrorType, StorageError
from typeahead.storage import (
    CustomSuggestionStore,
    DuckDBKeyValueStore,
    MemoryKeyValueStore,
    SearchHistoryStore,
)
from typeahead.storage.history import HISTORY_KEY


class SlowStore(MemoryKeyValueStore):
    def get(self, key):
        value = super().get(key)
        time.sleep(0.05)
        return value


class FailingStore:
    def get(self, key):
        raise StorageError("read failed")

    def set(self, key, value):
        raise StorageError("write failed")

    def remove(self, key):
        raise StorageError("remove failed")


def test_history_moves_repeat_to_front(clock):
    history = SearchHistoryStore(MemoryKeyValueStore(), clock=clock)

    history.save("Paris")
    clock.advance(1)
    history.save("Lyon")
    clock.advance(1)
    history.save("  paris ")

    entries = history.entries()
    assert [entry.query for entry in entries] == ["paris", "Lyon"]
    assert entries[0].timestamp == clock.now


def test_history_is_capped(clock):
    history = SearchHistoryStore(MemoryKeyValueStore(), max_items=3, clock=clock)

    for query in ("a1", "b2", "c3", "d4", "e5"):
        history.save(query, "city")

    assert [entry.query for entry in history.entries()] == ["e5", "d4", "c3"]
    assert history.entries()[0].type == "city"
    assert [entry.query for entry in history.recent(2)] == ["e5", "d4"]


@pytest.mark.parametrize("query", [None, "", "   ", 42])
def test_history_rejects_blank_queries(query):
    history = SearchHistoryStore(MemoryKeyValueStore())
    assert history.save(query) is False
    assert history.entries() == []


def test_history_clear():
    kv = MemoryKeyValueStore()
    history = SearchHistoryStore(kv)
    history.save("Paris")

    assert history.clear() is True
    assert history.entries() == []
    assert kv.get(HISTORY_KEY) is None


def test_history_survives_failing_store():
    reported = []
    history = SearchHistoryStore(FailingStore(), on_error=lambda kind, details: reported.append(kind))

    assert history.entries() == []
    assert history.save("Paris") is False
    assert history.clear() is False
    assert reported == [
        ErrorType.STORAGE_READ,
        ErrorType.STORAGE_READ,
        ErrorType.STORAGE_WRITE,
        ErrorType.STORAGE_WRITE,
    ]


def test_history_ignores_corrupt_payload():
    reported = []
    kv = MemoryKeyValueStore({HISTORY_KEY: "{not json"})
    history = SearchHistoryStore(kv, on_error=lambda kind, details: reported.append(details))

    assert history.entries() == []
    assert reported[0]["key"] == HISTORY_KEY

    kv.set(HISTORY_KEY, json.dumps({"query": "Paris"}))
    assert history.entries() == []


def test_history_skips_malformed_rows():
    kv = MemoryKeyValueStore({HISTORY_KEY: json.dumps([{"query": "Paris"}, {"type": "city"}, "Lyon"])})
    history = SearchHistoryStore(kv)

    assert [entry.query for entry in history.entries()] == ["Paris"]


def test_custom_add_and_remove(clock):
    custom = CustomSuggestionStore(MemoryKeyValueStore(), clock=clock)

    assert custom.add("Tour Eiffel") is True
    assert custom.add({"query": "tour eiffel"}) is False
    assert custom.add({"query": "Mont Blanc", "type": "spot", "category": "spots"}) is True
    assert custom.add({"type": "spot"}) is False
    assert custom.add(None) is False

    entries = custom.entries()
    assert [entry.query for entry in entries] == ["Tour Eiffel", "Mont Blanc"]
    assert entries[0].type == "custom"
    assert entries[0].added_at == clock.now

    assert custom.remove("TOUR EIFFEL") is True
    assert custom.remove("Tour Eiffel") is False
    assert [entry.query for entry in custom.entries()] == ["Mont Blanc"]


def test_duckdb_store_round_trip(tmp_path):
    store = DuckDBKeyValueStore(tmp_path / "db" / "kv.duckdb")

    assert store.get("missing") is None
    store.set("k", "v1")
    store.set("k", "v2")
    assert store.get("k") == "v2"
    store.remove("k")
    assert store.get("k") is None


def test_duckdb_history_persists_across_instances(tmp_path, clock):
    db_path = tmp_path / "kv.duckdb"
    SearchHistoryStore(DuckDBKeyValueStore(db_path), clock=clock).save("Lisbon", "city")

    reopened = SearchHistoryStore(DuckDBKeyValueStore(db_path), clock=clock)

    assert [(entry.query, entry.type) for entry in reopened.entries()] == [("Lisbon", "city")]


def _run_together(*calls):
    results = [None] * len(calls)

    def run(index, fn, arg):
        results[index] = fn(arg)

    threads = [threading.Thread(target=run, args=(i, fn, arg)) for i, (fn, arg) in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)
    return results


def test_concurrent_history_saves_keep_both_entries():
    history = SearchHistoryStore(SlowStore())

    _run_together((history.save, "Paris"), (history.save, "Lyon"))

    assert sorted(entry.query for entry in history.entries()) == ["Lyon", "Paris"]


def test_concurrent_duplicate_pins_add_once():
    custom = CustomSuggestionStore(SlowStore())

    results = _run_together((custom.add, "Tour Eiffel"), (custom.add, "tour eiffel"))

    assert sorted(results) == [False, True]
    assert len(custom.entries()) == 1
