"""Base-title extraction for coarse title equality checks.

A base title drops season, episode and bracketed metadata so that
"Show S02 E05 [1080p]" and the catalog's "Show Season 2" compare as "Show".
Base titles are used only for score boosting and the lenient fallback tier
of match selection, never as the primary search query.
"""

from animap.domain.models import CatalogEntry

from .tokens import (
    BRACKETED_SPAN,
    CATALOG_SEQUEL_WORDS,
    CATALOG_SUBTITLE_CLAUSE,
    EPISODE_MARKER,
    PARENTHESIZED_SPAN,
    RESOLUTION,
    SEASON_MARKER,
    WHITESPACE,
)


def base_title_from_torrent(title: str) -> str:
    """Derive the base title of a raw release title.

    Removes season markers, episode markers, bracketed and parenthesized
    spans and resolution tokens, then collapses whitespace.

    Args:
        title: Raw release title

    Returns:
        Base title (may be empty)

    Example:
        >>> base_title_from_torrent("[Group] Show S02 E05 (1080p)")
        'Show'
    """
    base = title or ""
    base = SEASON_MARKER.sub("", base)
    base = EPISODE_MARKER.sub("", base)
    base = BRACKETED_SPAN.sub("", base)
    base = PARENTHESIZED_SPAN.sub("", base)
    base = RESOLUTION.sub("", base)
    return WHITESPACE.sub(" ", base).strip()


def base_title_from_entry(entry: CatalogEntry) -> str:
    """Derive the base title of a catalog entry.

    Starts from the display title (English if present, else romaji), removes
    "Season N", "Part N" and ordinal words, then drops a colon or hyphen
    separator together with the token that follows it.

    Args:
        entry: Catalog entry

    Returns:
        Base title (may be empty)

    Example:
        "Attack on Titan Season 3 Part 2" -> "Attack on Titan"
    """
    base = CATALOG_SEQUEL_WORDS.sub("", entry.display_title)
    base = CATALOG_SUBTITLE_CLAUSE.sub("", base)
    return WHITESPACE.sub(" ", base).strip()
