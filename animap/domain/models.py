"""Core domain models for catalog entries and mapping results.

This module defines the data structures used throughout the application:
- CatalogTitle: romaji/english/native title variants of a catalog entry
- RelatedEntry: a related catalog entry (sequel, prequel, side story, ...)
- CatalogEntry: canonical media record returned by the catalog collaborator
- MappingResult: outcome of mapping one release title to the catalog
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from animap.utils.timestamps import ensure_utc, format_timestamp


class CatalogTitle(BaseModel):
    """Title variants of a catalog entry.

    Missing variants are stored as empty strings so callers can test
    truthiness without None checks.
    """

    romaji: str = Field("", description="Romanized title")
    english: str = Field("", description="English title")
    native: str = Field("", description="Title in the native script")

    @field_validator("romaji", "english", "native", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        """Coerce None to an empty string and strip whitespace."""
        if v is None:
            return ""
        return str(v).strip()

    model_config = {"frozen": True}


class RelatedEntry(BaseModel):
    """Reference to a related catalog entry."""

    id: int = Field(..., description="Catalog ID of the related entry")
    title: str = Field("", description="Romaji title, else English title")
    relation_type: str = Field("", description="Relation kind, lower-cased (e.g. sequel)")

    @field_validator("relation_type", mode="before")
    @classmethod
    def lower_relation(cls, v: Optional[str]) -> str:
        """Lower-case relation kinds."""
        return (v or "").lower()

    model_config = {"frozen": True}


class CoverImage(BaseModel):
    """Cover image URLs of a catalog entry."""

    large: str = ""
    medium: str = ""

    model_config = {"frozen": True}


class CatalogEntry(BaseModel):
    """Canonical media record from the external catalog.

    Entries are immutable once returned by the catalog client and are owned
    by the call that retrieved them.
    """

    id: int = Field(..., description="Catalog ID")
    title: CatalogTitle = Field(default_factory=CatalogTitle, description="Title variants")
    format: str = Field("", description="Media format (TV, MOVIE, OVA, ...)")
    status: str = Field("", description="Airing status, lower-cased")
    episodes: Optional[int] = Field(None, description="Episode count, if known")
    season: str = Field("", description="Airing season (WINTER, SPRING, ...)")
    year: Optional[int] = Field(None, description="Season year, else start year")
    genres: List[str] = Field(default_factory=list)
    studios: List[str] = Field(default_factory=list)
    cover_image: CoverImage = Field(default_factory=CoverImage)
    description: str = Field("", description="Plain-text description")
    score: Optional[int] = Field(None, description="Average score (0-100)")
    popularity: Optional[int] = Field(None, description="Popularity count")
    synonyms: List[str] = Field(default_factory=list, description="Alternative titles")
    start_date: Optional[str] = Field(None, description="Start date (YYYY-MM-DD)")
    end_date: Optional[str] = Field(None, description="End date (YYYY-MM-DD)")
    relations: List[RelatedEntry] = Field(default_factory=list)

    @field_validator("format", "season", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        """Coerce None to an empty string."""
        return "" if v is None else v

    @field_validator("status", mode="before")
    @classmethod
    def lower_status(cls, v: Optional[str]) -> str:
        """Lower-case the airing status."""
        return (v or "").lower()

    @field_validator("synonyms", "genres", "studios", mode="before")
    @classmethod
    def none_to_list(cls, v: Optional[List[str]]) -> List[str]:
        """Coerce None to an empty list."""
        return [] if v is None else v

    @property
    def display_title(self) -> str:
        """English title if present, else romaji."""
        return self.title.english or self.title.romaji

    def title_variants(self) -> List[str]:
        """Title strings used for similarity scoring.

        Returns:
            Non-empty romaji and English titles followed by non-empty synonyms
        """
        variants = []
        if self.title.romaji:
            variants.append(self.title.romaji)
        if self.title.english:
            variants.append(self.title.english)
        variants.extend(synonym for synonym in self.synonyms if synonym)
        return variants

    model_config = {"frozen": True, "json_schema_extra": {"example": {
        "id": 176496,
        "title": {
            "romaji": "Ore dake Level Up na Ken: Season 2 - Arise from the Shadow",
            "english": "Solo Leveling Season 2 -Arise from the Shadow-",
            "native": "俺だけレベルアップな件 Season 2 -Arise from the Shadow-",
        },
        "format": "TV",
        "status": "finished",
        "episodes": 13,
        "season": "WINTER",
        "year": 2025,
        "synonyms": ["Solo Leveling S2"],
        "start_date": "2025-01-05",
    }}}


class MappingResult(BaseModel):
    """Outcome of mapping a release title to the catalog.

    Created once per mapping call and immutable afterward. A missing match is
    a successful outcome with anilist_match=None and confidence 0.

    confidence is None only when the entry came from an explicit ID lookup,
    where no similarity is computed.
    """

    torrent_title: str = Field(..., description="Original raw release title")
    anilist_match: Optional[CatalogEntry] = Field(None, description="Matched entry, if any")
    confidence: Optional[float] = Field(0.0, description="Unboosted title similarity")
    matched_at: datetime = Field(..., description="When the mapping was computed (UTC)")

    @field_validator("matched_at")
    @classmethod
    def normalize_matched_at(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    @property
    def is_match(self) -> bool:
        """Whether a catalog entry was found."""
        return self.anilist_match is not None

    def to_dict(self) -> Dict[str, Any]:
        """Plain record for the hosting layer.

        Returns:
            Dict with torrent_title, anilist_match, confidence and matched_at
            (ISO 8601 string with 'Z' suffix)
        """
        return {
            "torrent_title": self.torrent_title,
            "anilist_match": (
                self.anilist_match.model_dump(mode="json") if self.anilist_match else None
            ),
            "confidence": self.confidence,
            "matched_at": format_timestamp(self.matched_at),
        }

    model_config = {"frozen": True}
