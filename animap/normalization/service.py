"""Release-title normalization service.

This module implements the cleaning heuristics that:
1. Isolate the main title of a scene-style release name
2. Re-append a season marker exactly once
3. Preserve an embedded alternate-language title fragment
4. Strip resolutions, codecs, source tags and other technical noise

The output is used both as the primary catalog query and as the left-hand
operand of every similarity comparison.
"""

import logging
from typing import Match, Optional, Pattern, Tuple

from animap.logging import get_logger

from .tokens import (
    NOISE_PATTERNS,
    PARENTHESIZED_FRAGMENT,
    PARTICLE_FRAGMENT,
    PARTICLE_WORD,
    SEASON_MARKER,
    SEASON_NUMBER,
    STRAY_BRACKET,
    STRUCTURED_TITLE,
    TECHNICAL_SUFFIX,
    WHITESPACE,
)

logger = get_logger(__name__, component="normalization")

NoiseTable = Tuple[Tuple[str, Pattern[str]], ...]


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to one space and trim."""
    return WHITESPACE.sub(" ", text).strip()


def strip_noise(text: str, patterns: NoiseTable = NOISE_PATTERNS) -> str:
    """Replace every noise-token match with a single space.

    Patterns are applied in table order, each on the output of the previous one.

    Args:
        text: Text to clean
        patterns: Sequence of (name, compiled pattern) pairs

    Returns:
        Text with noise tokens replaced by spaces (whitespace not collapsed)
    """
    for _name, pattern in patterns:
        text = pattern.sub(" ", text)
    return text


def strip_technical_suffix(fragment: str) -> str:
    """Remove a trailing ", Dual-Audio, Multi-Subs" style suffix."""
    return TECHNICAL_SUFFIX.sub("", fragment).strip()


def extract_season(title: str) -> Optional[int]:
    """Extract the season number from a release title.

    Args:
        title: Raw release title

    Returns:
        Season number, or None when the title carries no season marker

    Example:
        >>> extract_season("Show S02 1080p")
        2
        >>> extract_season("Show 1080p") is None
        True
    """
    match = SEASON_NUMBER.search(title or "")
    if match:
        return int(match.group(1))
    return None


def extract_alternate_title(title: str, fragment_pattern: Pattern[str] = PARTICLE_FRAGMENT) -> Optional[str]:
    """Extract an embedded alternate-language title from parentheses.

    "(Ore dake Level Up na Ken, Dual-Audio, Multi-Subs)" yields
    "Ore dake Level Up na Ken".

    Args:
        title: Raw release title
        fragment_pattern: Pattern whose group 1 is the fragment content

    Returns:
        Fragment with the technical suffix removed, or None when absent or
        not longer than 3 characters
    """
    match = fragment_pattern.search(title or "")
    if not match:
        return None

    fragment = strip_technical_suffix(match.group(1).strip())
    if len(fragment) > 3:
        return fragment
    return None


class TitleNormalizer:
    """Strips technical noise from raw release titles.

    Responsibilities:
    - Detect the structured "Title [S02] 1080p ..." layout and keep its main title
    - Fall back to token-by-token cleaning for anything else
    - Keep an embedded alternate-language title when one is present
    - Guarantee whitespace-collapsed, trimmed output

    Instances hold only immutable token tables and are safe to share across
    threads.
    """

    def __init__(
        self,
        noise_patterns: NoiseTable = NOISE_PATTERNS,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize TitleNormalizer.

        Args:
            noise_patterns: Ordered noise-token table (defaults to NOISE_PATTERNS)
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.noise_patterns = tuple(noise_patterns)
        self.logger = logger_instance or logger

    def normalize(self, raw_title: str) -> str:
        """Normalize a raw release title.

        Args:
            raw_title: Unparsed release title

        Returns:
            Normalized title; empty string for empty input
        """
        if not raw_title or not raw_title.strip():
            return ""

        match = STRUCTURED_TITLE.match(raw_title)
        if match:
            path = "structured"
            cleaned = self._normalize_structured(raw_title, match.group(1))
        else:
            path = "fallback"
            cleaned = self._normalize_fallback(raw_title)

        normalized = collapse_whitespace(cleaned)

        self.logger.debug(
            "Normalized title",
            extra={
                "event": "normalization.title.normalized",
                "path": path,
                "raw_title": raw_title,
                "normalized_title": normalized,
            },
        )

        return normalized

    def extract_season(self, raw_title: str) -> Optional[int]:
        """Extract the season number from a raw title (see module function)."""
        return extract_season(raw_title)

    def _normalize_structured(self, raw_title: str, main_title: str) -> str:
        """Build "<main title> <season> <alternate title>" from a structured name.

        The season marker is removed from the main title before it is
        re-appended, so it appears at most once. The alternate title is
        scrubbed of noise and brackets like the main title.
        """
        main_title = SEASON_MARKER.sub(" ", main_title)
        main_title = collapse_whitespace(strip_noise(main_title, self.noise_patterns))

        parts = [main_title]

        season_match = SEASON_MARKER.search(raw_title)
        if season_match:
            parts.append(season_match.group(1))

        alternate = extract_alternate_title(raw_title)
        if alternate:
            alternate = collapse_whitespace(
                STRAY_BRACKET.sub(" ", strip_noise(alternate, self.noise_patterns))
            )
        if alternate and alternate.lower() not in main_title.lower():
            parts.append(alternate)

        return " ".join(parts)

    def _normalize_fallback(self, raw_title: str) -> str:
        """Clean an unstructured title token by token."""
        cleaned = strip_noise(raw_title, self.noise_patterns)
        return PARENTHESIZED_FRAGMENT.sub(self._keep_alternate_fragment, cleaned)

    @staticmethod
    def _keep_alternate_fragment(match: Match[str]) -> str:
        """Keep a parenthesized fragment only if it reads like a romanized title."""
        content = match.group(1).strip()
        if PARTICLE_WORD.search(content):
            return " " + strip_technical_suffix(content)
        return ""


_DEFAULT_NORMALIZER = TitleNormalizer()


def normalize_title(raw_title: str) -> str:
    """Normalize a raw title with the default noise vocabulary."""
    return _DEFAULT_NORMALIZER.normalize(raw_title)
