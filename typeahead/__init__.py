"""Typo-tolerant search-as-you-type suggestions."""

from .config import EngineSettings, load_settings
from .engine import SuggestionEngine
from .matching import fuzzy_match, levenshtein_distance, similarity
from .models import Suggestion, SuggestionOptions

get_similarity = similarity

__all__ = [
    "EngineSettings",
    "Suggestion",
    "SuggestionEngine",
    "SuggestionOptions",
    "fuzzy_match",
    "get_similarity",
    "levenshtein_distance",
    "load_settings",
    "similarity",
]
