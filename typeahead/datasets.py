"""Load spot and trending datasets from YAML or JSON files."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .errors import ConfigError
from .models import ContentRecord, TrendingEntry

logger = logging.getLogger(__name__)


def _read_list(path: Path, label: str) -> List[Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read {label} dataset {path}") from exc
    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get(label, [])
    if not isinstance(data, list):
        raise ConfigError(f"{label} dataset {path} must contain a list")
    return data


def load_content_records(path: Optional[Path]) -> List[ContentRecord]:
    """Return spot records; rows missing a location are skipped."""

    if path is None:
        return []
    records: List[ContentRecord] = []
    for row in _read_list(path, "spots"):
        try:
            records.append(ContentRecord.from_dict(row))
        except (AttributeError, TypeError, ValueError) as exc:
            logger.warning("skipping spot row in %s: %s", path, exc)
    return records


def load_trending(path: Optional[Path]) -> Optional[List[TrendingEntry]]:
    if path is None:
        return None
    try:
        return [TrendingEntry.from_dict(row) for row in _read_list(path, "trending")]
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid trending dataset {path}") from exc
