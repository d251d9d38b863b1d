"""Title normalization layer for raw release names.

This module provides:
- TitleNormalizer: strips technical noise and keeps season/alternate titles
- extract_season: reads S<n> / Season <n> markers
- base_title_from_torrent / base_title_from_entry: coarse base titles
- tokens: the noise vocabulary as data tables
"""

from .base_title import base_title_from_entry, base_title_from_torrent
from .service import (
    TitleNormalizer,
    collapse_whitespace,
    extract_alternate_title,
    extract_season,
    normalize_title,
    strip_noise,
    strip_technical_suffix,
)

__all__ = [
    "TitleNormalizer",
    "normalize_title",
    "extract_season",
    "extract_alternate_title",
    "strip_noise",
    "strip_technical_suffix",
    "collapse_whitespace",
    "base_title_from_torrent",
    "base_title_from_entry",
]
