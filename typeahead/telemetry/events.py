"""Telemetry event logging helpers."""
from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, Optional

from typeahead.errors.taxonomy import ErrorType

__all__ = ["iter_events", "log_error", "log_selection", "parse_timestamp"]

_WRITE_LOCK = threading.Lock()


@dataclass(frozen=True)
class _Config:
    log_relative_path: Path = Path("var") / "log" / "telemetry.ndjson"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _base_dir() -> Path:
    return Path(__file__).resolve().parents[2]


def log_path() -> Path:
    override = os.getenv("TELEMETRY_LOG_PATH")
    if override:
        return Path(override).expanduser()
    return _base_dir() / _Config.log_relative_path


def _serialize_details(details: Dict[str, object]) -> Dict[str, object]:
    if not isinstance(details, dict):
        raise TypeError("details must be a dict")
    try:
        json.dumps(details)
    except TypeError as exc:
        raise TypeError("details must be JSON serialisable") from exc
    return details


def _coerce_error_type(err_type: ErrorType | str) -> ErrorType:
    if isinstance(err_type, ErrorType):
        return err_type
    if not ErrorType.has_value(err_type):
        raise ValueError(f"Unknown error type: {err_type}")
    return ErrorType(err_type)


def _timestamp() -> str:
    return _now().isoformat().replace("+00:00", "Z")


def _append_event(event: Dict[str, object]) -> None:
    path = log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    line = json.dumps(event, ensure_ascii=False, separators=(",", ":"))
    with _WRITE_LOCK, path.open("a", encoding="utf-8") as stream:
        stream.write(line + "\n")


def log_error(err_type: ErrorType | str, details: Dict[str, object]) -> Dict[str, object]:
    """Append an error telemetry event to the NDJSON log."""

    payload = {
        "type": "error",
        "timestamp": _timestamp(),
        "error_type": _coerce_error_type(err_type).value,
        "details": _serialize_details(details),
    }
    _append_event(payload)
    return payload


def log_selection(query: str, source: Optional[str] = None, suggestion_type: Optional[str] = None) -> Dict[str, object]:
    """Append a suggestion-selected event to the NDJSON log."""

    if not query or not isinstance(query, str) or not query.strip():
        raise ValueError("query must be a non-empty string")
    payload: Dict[str, object] = {
        "type": "selection",
        "timestamp": _timestamp(),
        "query": query.strip(),
    }
    if source:
        payload["source"] = source
    if suggestion_type:
        payload["suggestion_type"] = suggestion_type
    _append_event(payload)
    return payload


def iter_events(path: Optional[Path] = None) -> Iterator[Dict[str, object]]:
    """Yield decoded events, skipping blank and malformed lines."""

    path = path or log_path()
    if not path.exists():
        return
    try:
        with path.open("r", encoding="utf-8") as stream:
            for line in stream:
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if isinstance(data, dict):
                    yield data
    except FileNotFoundError:  # pragma: no cover - race condition guard
        return


def parse_timestamp(raw: object) -> Optional[datetime]:
    if not isinstance(raw, str):
        return None
    try:
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
