"""Data model shared by providers, stores and the engine."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

TREND_DIRECTIONS = ("up", "stable", "down")

# Category vocabulary accepted by the engine, mapped to the provider it selects.
CATEGORY_ALIASES: Dict[str, str] = {
    "all": "all",
    "history": "history",
    "city": "cities",
    "cities": "cities",
    "country": "countries",
    "countries": "countries",
    "spot": "spots",
    "spots": "spots",
    "route": "trending",
    "routes": "trending",
    "trending": "trending",
    "custom": "custom",
}


@dataclass
class Suggestion:
    """A candidate completion returned to callers."""

    query: str
    type: str = "general"
    source: str = "custom"
    score: float = 0.0
    country: Optional[str] = None
    code: Optional[str] = None
    rating: Optional[float] = None
    count: Optional[int] = None
    trend: Optional[str] = None
    matched_alias: Optional[str] = None
    spot_id: Optional[str] = None
    checkins: Optional[int] = None
    category: Optional[str] = None

    @property
    def key(self) -> str:
        return self.query.strip().lower()

    def to_dict(self) -> Dict[str, Any]:
        return {name: value for name, value in asdict(self).items() if value is not None}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Suggestion":
        known = {name: payload[name] for name in cls.__dataclass_fields__ if name in payload}
        if "query" not in known or not isinstance(known["query"], str):
            raise ValueError("suggestion payload requires a string 'query'")
        return cls(**known)


@dataclass
class HistoryEntry:
    query: str
    type: str = "general"
    timestamp: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "HistoryEntry":
        return cls(
            query=str(payload["query"]),
            type=str(payload.get("type") or "general"),
            timestamp=float(payload.get("timestamp") or 0.0),
        )


@dataclass
class CustomEntry:
    """A user-pinned suggestion."""

    query: str
    type: str = "custom"
    category: str = "spots"
    added_at: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "CustomEntry":
        return cls(
            query=str(payload["query"]),
            type=str(payload.get("type") or "custom"),
            category=str(payload.get("category") or "spots"),
            added_at=float(payload.get("added_at") or 0.0),
        )


@dataclass(frozen=True)
class GazetteerEntry:
    """A place name with its code and free-text aliases.

    For cities ``code`` is the country code, for countries it is the
    country's own ISO code.
    """

    name: str
    code: str
    aliases: Tuple[str, ...] = ()


@dataclass
class TrendingEntry:
    query: str
    count: int = 0
    trend: str = "stable"

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "TrendingEntry":
        trend = str(payload.get("trend") or "stable")
        if trend not in TREND_DIRECTIONS:
            raise ValueError(f"Unknown trend direction '{trend}'")
        return cls(query=str(payload["query"]), count=int(payload.get("count") or 0), trend=trend)


@dataclass
class ContentRecord:
    """A searchable spot: two location fields, a description and counters."""

    id: str
    origin: str
    destination: str
    description: str = ""
    country: Optional[str] = None
    rating: float = 0.0
    checkins: int = 0

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ContentRecord":
        origin = payload.get("origin", payload.get("from"))
        destination = payload.get("destination", payload.get("to"))
        if not origin or not destination:
            raise ValueError("content record requires origin and destination")
        return cls(
            id=str(payload.get("id", "")),
            origin=str(origin),
            destination=str(destination),
            description=str(payload.get("description") or ""),
            country=payload.get("country"),
            rating=float(payload.get("rating", payload.get("globalRating")) or 0.0),
            checkins=int(payload.get("checkins") or 0),
        )


@dataclass(frozen=True)
class SuggestionOptions:
    """Resolved request options: a category plus a result limit."""

    category: str = "all"
    limit: int = 8

    @classmethod
    def resolve(
        cls,
        options: Union["SuggestionOptions", Mapping[str, Any], str, None] = None,
        *,
        default_limit: int = 8,
        legacy_limit: int = 10,
    ) -> "SuggestionOptions":
        """Normalise the accepted option shapes into one value.

        A bare string is a legacy category and gets the larger legacy limit.
        Missing or non-positive limits fall back to ``default_limit``; any
        other shape resolves to the defaults.
        """

        if isinstance(options, SuggestionOptions):
            return options
        if isinstance(options, str):
            return cls(category=_normalise_category(options), limit=legacy_limit)
        payload: Mapping[str, Any] = options if isinstance(options, Mapping) else {}
        category = _normalise_category(payload.get("category") or "all")
        limit = _coerce_limit(payload.get("limit"), default_limit)
        return cls(category=category, limit=limit)


@dataclass
class CategorisedSuggestions:
    history: list = field(default_factory=list)
    cities: list = field(default_factory=list)
    spots: list = field(default_factory=list)
    countries: list = field(default_factory=list)
    trending: list = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {name: [item.to_dict() for item in items] for name, items in vars(self).items()}


def _normalise_category(value: str) -> str:
    cleaned = str(value).strip().lower()
    return CATEGORY_ALIASES.get(cleaned, cleaned)


def _coerce_limit(value: Any, default: int) -> int:
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return default
    return limit if limit > 0 else default
