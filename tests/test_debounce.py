from __future__ import annotations

import threading
from concurrent.futures import CancelledError

import pytest

from typeahead.debounce import DelayedTaskScheduler


@pytest.fixture
def scheduler():
    scheduler = DelayedTaskScheduler()
    yield scheduler
    scheduler.shutdown()


def test_only_latest_call_runs(scheduler):
    calls = []
    lock = threading.Lock()

    def lookup(query):
        with lock:
            calls.append(query)
        return query.upper()

    first = scheduler.schedule("search", 0.05, lookup, "a")
    second = scheduler.schedule("search", 0.05, lookup, "ab")
    third = scheduler.schedule("search", 0.05, lookup, "abc")

    assert third.result(timeout=2) == "ABC"
    assert calls == ["abc"]
    assert first.cancelled() and second.cancelled()
    with pytest.raises(CancelledError):
        first.result(timeout=0)


def test_keys_are_independent(scheduler):
    left = scheduler.schedule("left", 0.01, lambda: "L")
    right = scheduler.schedule("right", 0.01, lambda: "R")

    assert left.result(timeout=2) == "L"
    assert right.result(timeout=2) == "R"


def test_cancel_pending_task(scheduler):
    future = scheduler.schedule("search", 5, lambda: "never")

    assert scheduler.pending("search")
    assert scheduler.cancel("search") is True
    assert future.cancelled()
    assert not scheduler.pending("search")
    assert scheduler.cancel("search") is False


def test_errors_reach_the_future(scheduler):
    def boom():
        raise RuntimeError("lookup failed")

    future = scheduler.schedule("search", 0.01, boom)

    with pytest.raises(RuntimeError, match="lookup failed"):
        future.result(timeout=2)


def test_shutdown_cancels_everything():
    scheduler = DelayedTaskScheduler()
    futures = [scheduler.schedule(key, 5, lambda: None) for key in ("a", "b")]

    scheduler.shutdown()

    assert all(future.cancelled() for future in futures)
    assert not scheduler.pending("a")
