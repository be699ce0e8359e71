"""Fuzzy string matching primitives."""

from .fuzzy import FuzzyMatcher, fuzzy_match, levenshtein_distance, similarity

__all__ = ["FuzzyMatcher", "fuzzy_match", "levenshtein_distance", "similarity"]
