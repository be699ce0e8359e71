"""Weekly trending-searches rollup script."""
from __future__ import annotations

import argparse
import json
from collections import Counter
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional

from typeahead.telemetry.events import iter_events, log_path as telemetry_log_path, parse_timestamp

OUTPUT_RELATIVE_PATH = Path("var") / "data" / "trending.json"
WINDOW = timedelta(days=7)
# Relative change below this band counts as stable.
STABLE_BAND = 0.1


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _default_output_path() -> Path:
    return _repo_root() / OUTPUT_RELATIVE_PATH


def _trend(current: int, previous: int) -> str:
    if previous == 0:
        return "up" if current > 0 else "stable"
    change = (current - previous) / previous
    if change > STABLE_BAND:
        return "up"
    if change < -STABLE_BAND:
        return "down"
    return "stable"


def generate_trending(
    log_path: Optional[Path] = None,
    output_path: Optional[Path] = None,
    *,
    now: Optional[datetime] = None,
    top_n: int = 10,
) -> List[Dict[str, object]]:
    log_file = log_path or telemetry_log_path()
    output_file = output_path or _default_output_path()
    reference_time = now or datetime.now(timezone.utc)
    current_start = reference_time - WINDOW
    previous_start = current_start - WINDOW

    current: Counter[str] = Counter()
    previous: Counter[str] = Counter()
    labels: Dict[str, str] = {}

    for event in iter_events(log_file):
        if event.get("type") != "selection":
            continue
        query = event.get("query")
        if not isinstance(query, str) or not query.strip():
            continue
        timestamp = parse_timestamp(event.get("timestamp"))
        if timestamp is None or timestamp < previous_start or timestamp > reference_time:
            continue
        key = query.strip().lower()
        if timestamp >= current_start:
            current[key] += 1
            labels.setdefault(key, query.strip())
        else:
            previous[key] += 1

    ranked = sorted(current.items(), key=lambda item: (-item[1], item[0]))[:top_n]
    trending = [
        {"query": labels[key], "count": count, "trend": _trend(count, previous[key])}
        for key, count in ranked
    ]

    output_file.parent.mkdir(parents=True, exist_ok=True)
    with output_file.open("w", encoding="utf-8") as handle:
        json.dump({"trending": trending}, handle, ensure_ascii=False, indent=2)
        handle.write("\n")
    return trending


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate trending searches from selection telemetry")
    parser.add_argument("--log-path", type=Path, default=None, help="Override telemetry log path")
    parser.add_argument("--output-path", type=Path, default=None, help="Override trending output path")
    parser.add_argument("--top", type=int, default=10, help="Number of trending rows to keep")
    args = parser.parse_args()
    generate_trending(args.log_path, args.output_path, top_n=args.top)


if __name__ == "__main__":
    main()
