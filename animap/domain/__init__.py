"""Domain models for catalog entries and mapping results."""

from .models import CatalogEntry, CatalogTitle, CoverImage, MappingResult, RelatedEntry

__all__ = [
    "CatalogEntry",
    "CatalogTitle",
    "CoverImage",
    "RelatedEntry",
    "MappingResult",
]
