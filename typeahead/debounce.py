"""Cancellable delayed tasks with one active task per key."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 0.3


@dataclass
class _Task:
    timer: threading.Timer
    future: Future


class DelayedTaskScheduler:
    """Arm, replace and cancel delayed calls keyed by an arbitrary name.

    Scheduling under a key that already holds a pending task cancels that
    task: its timer is stopped and its future is cancelled, so callers
    waiting on a superseded call get ``CancelledError`` instead of
    blocking forever. Only the most recent call for a key runs.
    """

    def __init__(self, timer_factory: Callable[..., threading.Timer] = threading.Timer) -> None:
        self._timer_factory = timer_factory
        self._tasks: Dict[Hashable, _Task] = {}
        self._lock = threading.Lock()

    def schedule(self, key: Hashable, delay: float, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        future: Future = Future()
        with self._lock:
            previous = self._tasks.pop(key, None)
            timer = self._timer_factory(delay, self._fire, args=(key, future, fn, args, kwargs))
            timer.daemon = True
            self._tasks[key] = _Task(timer=timer, future=future)
            timer.start()
        if previous is not None:
            self._discard(key, previous)
        return future

    def cancel(self, key: Hashable) -> bool:
        with self._lock:
            task = self._tasks.pop(key, None)
        if task is None:
            return False
        self._discard(key, task)
        return True

    def pending(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._tasks

    def shutdown(self) -> None:
        with self._lock:
            tasks = list(self._tasks.items())
            self._tasks.clear()
        for key, task in tasks:
            self._discard(key, task)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _discard(self, key: Hashable, task: _Task) -> None:
        task.timer.cancel()
        if task.future.cancel():
            logger.debug("debounced task superseded key=%s", key)

    def _fire(self, key: Hashable, future: Future, fn: Callable[..., Any], args: tuple, kwargs: dict) -> None:
        with self._lock:
            current: Optional[_Task] = self._tasks.get(key)
            if current is None or current.future is not future:
                return
            del self._tasks[key]
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = fn(*args, **kwargs)
        except Exception as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)
