"""Candidate selection engine for catalog search results.

This module implements the matching logic that:
1. Scores every candidate against the normalized release title
2. Applies the season and base-title boosts
3. Picks a winner under a two-tier acceptance policy
4. Reports the unboosted title resemblance as confidence
"""

import logging
from typing import List, Optional, Sequence

from animap.config.models import MatchingConfig
from animap.domain.models import CatalogEntry
from animap.logging import get_logger
from animap.normalization import (
    TitleNormalizer,
    base_title_from_entry,
    base_title_from_torrent,
    extract_season,
)
from animap.normalization.tokens import CATALOG_SEASON_INDICATOR, CATALOG_SEASON_NUMBER

from .models import MatchCandidate
from .similarity import similarity

logger = get_logger(__name__, component="matching")


def raw_title_score(normalized_title: str, entry: CatalogEntry) -> float:
    """Best similarity between a normalized title and any title variant of an entry.

    Variants are the non-empty romaji and English titles and every non-empty
    synonym. An entry without any variant scores 0.0.
    """
    return max(
        (similarity(normalized_title, variant) for variant in entry.title_variants()),
        default=0.0,
    )


def entry_matches_season(entry: CatalogEntry, season: int) -> bool:
    """Check whether a catalog entry's display title agrees with a season number.

    A season number in the display title must equal the requested season.
    Without one, only season 1 matches, and only if the title carries no
    season or ordinal indicator at all.

    Args:
        entry: Catalog entry
        season: Season number extracted from the raw title

    Returns:
        True if the entry is plausibly that season
    """
    display_title = entry.display_title

    match = CATALOG_SEASON_NUMBER.search(display_title)
    if match:
        return int(match.group(1)) == season

    return season == 1 and not CATALOG_SEASON_INDICATOR.search(display_title)


class MatchSelector:
    """Picks the best catalog entry for a raw release title.

    Responsibilities:
    - Compute each candidate's raw score from its title variants
    - Multiply in the season boost and the base-title boost
    - Accept the strictly highest boosted score above the accept threshold
    - Otherwise return the first candidate whose base title is close enough
    """

    def __init__(
        self,
        normalizer: Optional[TitleNormalizer] = None,
        config: Optional[MatchingConfig] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize MatchSelector.

        Args:
            normalizer: TitleNormalizer used on the raw title (defaults to standard vocabulary)
            config: Thresholds and boost factors (defaults to MatchingConfig())
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.normalizer = normalizer or TitleNormalizer()
        self.config = config or MatchingConfig()
        self.logger = logger_instance or logger

    def score_candidates(self, raw_title: str, candidates: Sequence[CatalogEntry]) -> List[MatchCandidate]:
        """Score every candidate in original order.

        Args:
            raw_title: Unparsed release title
            candidates: Catalog entries returned by the search pipeline

        Returns:
            One MatchCandidate per entry, in the same order
        """
        normalized = self.normalizer.normalize(raw_title)
        season = extract_season(raw_title)
        torrent_base = base_title_from_torrent(raw_title)

        return [
            self.score_candidate(normalized, season, torrent_base, entry)
            for entry in candidates
        ]

    def score_candidate(
        self,
        normalized_title: str,
        season: Optional[int],
        torrent_base: str,
        entry: CatalogEntry,
    ) -> MatchCandidate:
        """Score a single candidate.

        Args:
            normalized_title: Normalized raw title
            season: Season extracted from the raw title, or None
            torrent_base: Base title of the raw title
            entry: Candidate entry

        Returns:
            MatchCandidate with raw and boosted scores
        """
        raw_score = raw_title_score(normalized_title, entry)
        score = raw_score

        season_boosted = season is not None and entry_matches_season(entry, season)
        if season_boosted:
            score *= self.config.season_boost

        base_similarity = similarity(torrent_base, base_title_from_entry(entry))
        base_title_boosted = base_similarity > self.config.base_title_threshold
        if base_title_boosted:
            score *= self.config.base_title_boost

        if self.config.clamp_boosted_scores:
            score = min(score, 1.0)

        return MatchCandidate(
            entry=entry,
            raw_score=raw_score,
            score=score,
            season_boosted=season_boosted,
            base_title_boosted=base_title_boosted,
            base_similarity=base_similarity,
        )

    def select(self, raw_title: str, candidates: Sequence[CatalogEntry]) -> Optional[CatalogEntry]:
        """Select the best candidate for a raw title.

        Algorithm:
        1. Score every candidate (raw score, boosts)
        2. Keep the strictly highest boosted score; the first candidate wins ties
        3. Accept it if its score exceeds accept_threshold
        4. Otherwise return the first candidate, in original order, whose
           base-title similarity exceeds fallback_threshold
        5. Otherwise return None

        Args:
            raw_title: Unparsed release title
            candidates: Catalog entries returned by the search pipeline

        Returns:
            Selected CatalogEntry, or None when no candidate is acceptable
        """
        if not candidates:
            return None

        scored = self.score_candidates(raw_title, candidates)

        best: Optional[MatchCandidate] = None
        for candidate in scored:
            if best is None or candidate.score > best.score:
                best = candidate

        if best is not None and best.score > self.config.accept_threshold:
            self.logger.debug(
                "Accepted best-scoring candidate",
                extra={
                    "event": "matching.select.accepted",
                    "tier": "score",
                    "candidate_count": len(scored),
                    **best.to_log_dict(),
                },
            )
            return best.entry

        # First match by candidate order, not best match
        for candidate in scored:
            if candidate.base_similarity > self.config.fallback_threshold:
                self.logger.debug(
                    "Accepted candidate by base-title fallback",
                    extra={
                        "event": "matching.select.fallback",
                        "tier": "base_title",
                        "candidate_count": len(scored),
                        **candidate.to_log_dict(),
                    },
                )
                return candidate.entry

        self.logger.debug(
            "No candidate cleared either acceptance tier",
            extra={
                "event": "matching.select.rejected",
                "candidate_count": len(scored),
                "best_score": round(best.score, 4) if best else None,
            },
        )
        return None


class ConfidenceCalculator:
    """Reports literal title resemblance for a selected entry.

    The value is the unboosted raw score, deliberately independent of the
    boosted score that decided selection.
    """

    def __init__(self, normalizer: Optional[TitleNormalizer] = None):
        self.normalizer = normalizer or TitleNormalizer()

    def confidence(self, raw_title: str, entry: CatalogEntry) -> float:
        """Unboosted similarity between the normalized raw title and the entry's titles."""
        return raw_title_score(self.normalizer.normalize(raw_title), entry)
