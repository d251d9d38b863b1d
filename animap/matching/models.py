"""Data models for the matching engine.

This module defines the per-candidate scoring record produced by
MatchSelector, kept separate so that tests and debug logging can inspect
why a candidate won or lost.
"""

from dataclasses import dataclass

from animap.domain.models import CatalogEntry


@dataclass(frozen=True)
class MatchCandidate:
    """Scoring breakdown of one catalog entry against a raw release title.

    Attributes:
        entry: Catalog entry being scored
        raw_score: Best similarity between the normalized title and any title variant
        score: raw_score with boosts applied (may exceed 1.0 unless clamped)
        season_boosted: True if the season boost was applied
        base_title_boosted: True if the base-title boost was applied
        base_similarity: Similarity of the two base titles
    """

    entry: CatalogEntry
    raw_score: float
    score: float
    season_boosted: bool = False
    base_title_boosted: bool = False
    base_similarity: float = 0.0

    def to_log_dict(self) -> dict:
        """Compact form for structured log extras."""
        return {
            "anilist_id": self.entry.id,
            "title": self.entry.display_title,
            "raw_score": round(self.raw_score, 4),
            "score": round(self.score, 4),
            "season_boosted": self.season_boosted,
            "base_title_boosted": self.base_title_boosted,
            "base_similarity": round(self.base_similarity, 4),
        }
