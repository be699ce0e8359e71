from __future__ import annotations

from typing import List

import pytest

from typeahead.config import EngineSettings
from typeahead.engine import SuggestionEngine
from typeahead.models import ContentRecord
from typeahead.storage import MemoryKeyValueStore


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def telemetry_log(tmp_path, monkeypatch):
    path = tmp_path / "telemetry.ndjson"
    monkeypatch.setenv("TELEMETRY_LOG_PATH", str(path))
    return path


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def records() -> List[ContentRecord]:
    return [
        ContentRecord("1", "Paris", "Lyon", "Aire de repos calme", country="FR", rating=4.5, checkins=120),
        ContentRecord("2", "Paris", "Marseille", "Station service", country="FR", rating=3.9, checkins=80),
        ContentRecord("3", "Berlin", "Prague", "Stationnement gratuit", country="DE", rating=4.8, checkins=200),
        ContentRecord("4", "Lyon", "Nice", "Vue mer", country="FR", rating=4.1, checkins=50),
    ]


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def engine(records, clock, store):
    engine = SuggestionEngine(settings=EngineSettings(), store=store, content=records, clock=clock)
    yield engine
    engine.close()
