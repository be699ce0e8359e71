"""JSON list persistence shared by the history and pinned-suggestion stores."""
from __future__ import annotations

import json
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from ..errors import ErrorType, StorageError
from .kv import KeyValueStore

logger = logging.getLogger(__name__)

ErrorHook = Callable[[ErrorType, Dict[str, object]], None]

# Failures a key-value backend or the JSON codec may raise; all mean "no data".
PERSISTENCE_ERRORS = (StorageError, OSError, ValueError, TypeError)


class JsonListStore:
    """Read and write one JSON array under a fixed key.

    Every failure is logged and reported to ``on_error``; callers see an
    empty list on read and ``False`` on write.
    Subclasses hold ``_lock`` across each read-modify-write.
    """

    def __init__(self, kv: KeyValueStore, key: str, *, on_error: Optional[ErrorHook] = None) -> None:
        self._kv = kv
        self._key = key
        self._on_error = on_error
        self._lock = threading.RLock()

    def _read(self) -> List[Dict[str, Any]]:
        try:
            raw = self._kv.get(self._key)
            if not raw:
                return []
            data = json.loads(raw)
        except PERSISTENCE_ERRORS as exc:
            self._report(ErrorType.STORAGE_READ, exc)
            return []
        if not isinstance(data, list):
            self._report(ErrorType.STORAGE_READ, ValueError("stored value is not a list"))
            return []
        return [item for item in data if isinstance(item, dict)]

    def _write(self, items: List[Dict[str, Any]]) -> bool:
        try:
            self._kv.set(self._key, json.dumps(items, ensure_ascii=False))
        except PERSISTENCE_ERRORS as exc:
            self._report(ErrorType.STORAGE_WRITE, exc)
            return False
        return True

    def _delete(self) -> bool:
        try:
            self._kv.remove(self._key)
        except PERSISTENCE_ERRORS as exc:
            self._report(ErrorType.STORAGE_WRITE, exc)
            return False
        return True

    def _report(self, err_type: ErrorType, exc: Exception) -> None:
        logger.warning("persistence failure key=%s type=%s: %s", self._key, err_type.value, exc)
        if self._on_error is None:
            return
        self._on_error(err_type, {"key": self._key, "message": str(exc)})
