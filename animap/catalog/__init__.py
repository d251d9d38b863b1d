"""Catalog clients for the external anime database.

The mapping core depends only on the CatalogClient protocol:
    search(query) -> List[CatalogEntry]
    get_by_id(anilist_id) -> Optional[CatalogEntry]

Use the factory function to build the AniList client from configuration:
    from animap.catalog import build_catalog_client
    client = build_catalog_client(app_config)

Exception handling:
    from animap.catalog import CatalogError, CatalogRateLimitError, CatalogHTTPError
"""

from .anilist import ANILIST_API_URL, AniListClient, format_media
from .base import BaseCatalogClient, CatalogClient
from .cache import ResponseCache
from .exceptions import (
    CatalogConfigurationError,
    CatalogError,
    CatalogHTTPError,
    CatalogRateLimitError,
    CatalogResponseError,
    CatalogTimeoutError,
)
from .factory import build_catalog_client
from .ratelimit import SlidingWindowRateLimiter

__all__ = [
    # Protocol, base and factory
    "CatalogClient",
    "BaseCatalogClient",
    "build_catalog_client",
    # AniList
    "AniListClient",
    "ANILIST_API_URL",
    "format_media",
    # Infrastructure
    "SlidingWindowRateLimiter",
    "ResponseCache",
    # Exceptions
    "CatalogError",
    "CatalogRateLimitError",
    "CatalogHTTPError",
    "CatalogTimeoutError",
    "CatalogResponseError",
    "CatalogConfigurationError",
]
