"""Factory function for instantiating the catalog client from configuration."""

from animap.config.models import AppConfig
from animap.logging import get_logger

from .anilist import AniListClient
from .cache import ResponseCache
from .exceptions import CatalogConfigurationError
from .ratelimit import SlidingWindowRateLimiter

logger = get_logger(__name__, component="catalog")


def build_catalog_client(app_config: AppConfig) -> AniListClient:
    """Build an AniList client with its rate limiter and response cache.

    Args:
        app_config: Validated application configuration

    Returns:
        Ready-to-use AniListClient

    Raises:
        CatalogConfigurationError: If the client cannot be constructed

    Example:
        >>> client = build_catalog_client(AppConfig())
        >>> entries = client.search("Solo Leveling")
    """
    catalog = app_config.catalog
    cache_config = app_config.cache

    try:
        rate_limiter = SlidingWindowRateLimiter(
            limit=catalog.rate_limit_per_minute,
            window_seconds=catalog.rate_limit_window_seconds,
        )
        cache = ResponseCache(
            directory=cache_config.directory,
            ttl_seconds=cache_config.ttl_seconds,
            enabled=cache_config.enabled,
        )
    except ValueError as e:
        raise CatalogConfigurationError(f"Failed to create catalog client: {e}") from e

    logger.debug(
        "Creating catalog client",
        extra={
            "event": "catalog.client.created",
            "api_url": catalog.api_url,
            "rate_limit": catalog.rate_limit_per_minute,
            "rate_limit_window_seconds": catalog.rate_limit_window_seconds,
            "cache_enabled": cache_config.enabled,
            "cache_directory": cache_config.directory,
        },
    )

    return AniListClient(
        api_url=catalog.api_url,
        timeout=catalog.request_timeout,
        user_agent=catalog.user_agent,
        per_page=catalog.per_page,
        rate_limiter=rate_limiter,
        cache=cache,
    )
