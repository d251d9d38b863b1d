"""Noise vocabulary for release-title normalization.

Token tables are plain data so the vocabulary can be extended without
touching the normalization control flow. Each noise pattern is applied in
table order and every match is replaced with a single space.
"""

import re
from typing import Pattern, Tuple

# Romanization particles that mark an embedded alternate-language title,
# e.g. "(Ore dake Level Up na Ken)".
ROMANIZATION_PARTICLES: Tuple[str, ...] = (
    "dake", "Level", "Ken", "no", "wo", "ga", "ni", "de", "to", "wa", "ka",
)

# Fallback path also accepts the pronoun that opens many light-novel titles.
FALLBACK_PARTICLES: Tuple[str, ...] = ROMANIZATION_PARTICLES + ("Ore",)

# Trailing ", Dual-Audio, Multi-Subs" style suffix inside a parenthesized fragment.
TECHNICAL_SUFFIX: Pattern[str] = re.compile(r",\s*(Dual-Audio|Multi-Subs|DUAL).*$", re.IGNORECASE)

# "Title [S02] 1080p" / "Title (" boundary of the structured path.
STRUCTURED_TITLE: Pattern[str] = re.compile(
    r"^([^\[(]+?)(?:\s+(?:S\d+|Season\s*\d+))?\s*(?:\d{3,4}p|[\[(])",
    re.IGNORECASE,
)

SEASON_MARKER: Pattern[str] = re.compile(r"\b(S\d+|Season\s*\d+)\b", re.IGNORECASE)
SEASON_NUMBER: Pattern[str] = re.compile(r"\b(?:S|Season\s*)(\d+)\b", re.IGNORECASE)
TRAILING_SEASON_CLAUSE: Pattern[str] = re.compile(r"\s+(S\d+|Season\s*\d+).*$", re.IGNORECASE)
EPISODE_MARKER: Pattern[str] = re.compile(r"\b(E\d+|Episode\s*\d+)\b", re.IGNORECASE)
RESOLUTION: Pattern[str] = re.compile(r"\b\d{3,4}p\b")
BRACKETED_SPAN: Pattern[str] = re.compile(r"\[.*?\]")
PARENTHESIZED_SPAN: Pattern[str] = re.compile(r"\(.*?\)")
PARENTHESIZED_FRAGMENT: Pattern[str] = re.compile(r"\(([^)]*)\)")
LEADING_ALNUM_TITLE: Pattern[str] = re.compile(
    r"^([A-Za-z0-9\s]+?)(?:\s+S\d+|\s+Season|\s*[\[(])",
    re.IGNORECASE,
)
WHITESPACE: Pattern[str] = re.compile(r"\s+")
STRAY_BRACKET: Pattern[str] = re.compile(r"[\[\]()]")

# Catalog-side season indicators, matched against lower-cased display titles.
CATALOG_SEASON_NUMBER: Pattern[str] = re.compile(r"\b(?:season\s*|s)(\d+)\b", re.IGNORECASE)
CATALOG_SEASON_INDICATOR: Pattern[str] = re.compile(
    r"\b(?:season|s\d+|2nd|3rd|second|third)\b", re.IGNORECASE
)
CATALOG_SEQUEL_WORDS: Pattern[str] = re.compile(
    r"\b(Season\s*\d+|Part\s*\d+|2nd|3rd|Second|Third)\b", re.IGNORECASE
)
CATALOG_SUBTITLE_CLAUSE: Pattern[str] = re.compile(r"[-:]\s*\w+")

NOISE_PATTERNS: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("resolution", re.compile(r"\b\d{3,4}p\b", re.IGNORECASE)),
    ("source", re.compile(r"\b(WEB-DL|HDTV|BluRay|Blu-ray|BD-?Rip|DVD-?Rip)\b", re.IGNORECASE)),
    ("video_codec_x26x", re.compile(r"\bx26[45]\b", re.IGNORECASE)),
    ("video_codec_hevc", re.compile(r"\bHEVC\b", re.IGNORECASE)),
    ("video_codec_h26x", re.compile(r"\bH\.?26[45]\b", re.IGNORECASE)),
    ("audio_codec", re.compile(r"\b(AAC|FLAC|MP3)[\d.]*\b", re.IGNORECASE)),
    ("dual_audio", re.compile(r"\b(DUAL|Dual)(-?Audio)?\b", re.IGNORECASE)),
    ("subtitles", re.compile(r"\b(Multi-?Subs?|English-?Sub)\b", re.IGNORECASE)),
    ("batch", re.compile(r"\b(Batch|Complete|Collection)\b", re.IGNORECASE)),
    # Case-sensitive: release groups like CR-VARYG are all caps.
    ("release_group", re.compile(r"\b[A-Z]{2,4}-[A-Z]+\b")),
    ("bracketed", re.compile(r"\[[^\]]*\]")),
    ("episode", re.compile(r"\b(Episode|Ep|E)\s*\d+\b", re.IGNORECASE)),
    ("file_size", re.compile(r"\b\d+\.\d+\s?(GB|MB)\b", re.IGNORECASE)),
)


def particle_fragment_pattern(particles: Tuple[str, ...] = ROMANIZATION_PARTICLES) -> Pattern[str]:
    """Pattern for a parenthesized fragment containing any particle.

    Particles are matched as substrings, so "(Ore dake Level Up na Ken, ...)"
    and "(Kimi no Na wa)" both qualify.

    Args:
        particles: Particle vocabulary

    Returns:
        Compiled pattern whose group 1 is the fragment content
    """
    alternation = "|".join(re.escape(p) for p in particles)
    return re.compile(rf"\(([^)]*(?:{alternation})[^)]*)\)", re.IGNORECASE)


def particle_word_pattern(particles: Tuple[str, ...] = FALLBACK_PARTICLES) -> Pattern[str]:
    """Pattern matching any particle as a whole word."""
    alternation = "|".join(re.escape(p) for p in particles)
    return re.compile(rf"\b({alternation})\b", re.IGNORECASE)


PARTICLE_FRAGMENT: Pattern[str] = particle_fragment_pattern()
PARTICLE_WORD: Pattern[str] = particle_word_pattern()
