"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

# Published AniList limit per minute
ANILIST_REQUESTS_PER_MINUTE = 90


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    catalog = config_dict.get("catalog", {})
    if isinstance(catalog, dict):
        rate_limit = catalog.get("rate_limit_per_minute")
        if isinstance(rate_limit, int) and rate_limit > ANILIST_REQUESTS_PER_MINUTE:
            warning_messages.append(
                f"rate_limit_per_minute ({rate_limit}) exceeds the AniList limit of "
                f"{ANILIST_REQUESTS_PER_MINUTE} requests per minute"
            )

    cache = config_dict.get("cache", {})
    if isinstance(cache, dict) and cache.get("enabled") is False:
        warning_messages.append(
            "Response cache is disabled; every lookup will hit the catalog API"
        )

    matching = config_dict.get("matching", {})
    if isinstance(matching, dict):
        accept = matching.get("accept_threshold", 0.4)
        fallback = matching.get("fallback_threshold", 0.7)
        if isinstance(accept, (int, float)) and isinstance(fallback, (int, float)) and fallback < accept:
            warning_messages.append(
                f"fallback_threshold ({fallback}) is below accept_threshold ({accept}); "
                "the base-title fallback will accept weaker matches than the primary pass"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
