"""Suggestion sources queried by the engine."""

from .base import ContentSource, SuggestionProvider
from .content import ContentProvider
from .custom import CustomProvider
from .gazetteer import GazetteerProvider
from .history import HistoryProvider
from .popular import PopularProvider
from .trending import TrendingProvider

__all__ = [
    "ContentProvider",
    "ContentSource",
    "CustomProvider",
    "GazetteerProvider",
    "HistoryProvider",
    "PopularProvider",
    "SuggestionProvider",
    "TrendingProvider",
]
