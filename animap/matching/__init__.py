"""Matching layer: similarity metrics and candidate selection.

This module provides:
- similarity: best-of-three string similarity
- MatchSelector: two-tier candidate selection with season/base-title boosts
- ConfidenceCalculator: unboosted confidence for the selected entry
"""

from .engine import ConfidenceCalculator, MatchSelector, entry_matches_season, raw_title_score
from .models import MatchCandidate
from .similarity import (
    common_substring_similarity,
    jaro_winkler,
    levenshtein_distance,
    levenshtein_similarity,
    similarity,
)

__all__ = [
    "MatchSelector",
    "ConfidenceCalculator",
    "MatchCandidate",
    "raw_title_score",
    "entry_matches_season",
    "similarity",
    "levenshtein_distance",
    "levenshtein_similarity",
    "jaro_winkler",
    "common_substring_similarity",
]
