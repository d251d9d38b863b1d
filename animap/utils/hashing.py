"""Hashing utilities for deriving stable cache keys.

This module provides the deterministic hashing function for
namespaced cache keys of catalog responses.
"""

import hashlib
import re


def compute_cache_key(namespace: str, value: str) -> str:
    """Compute a cache key for a catalog response.

    The cache key is a SHA256 hash of: namespace:value
    Queries are compared after whitespace collapsing so that trivially
    different spellings of the same query share one cache entry.

    Args:
        namespace: Kind of cached response (e.g. "search", "media")
        value: Query string or identifier

    Returns:
        Hexadecimal string representation of SHA256 hash (64 characters)

    Example:
        >>> len(compute_cache_key("search", "Solo Leveling"))
        64
    """
    normalized_namespace = namespace.lower().strip()
    normalized_value = re.sub(r"\s+", " ", str(value).strip())

    composite_key = f"{normalized_namespace}:{normalized_value}"

    hash_obj = hashlib.sha256(composite_key.encode("utf-8"))
    return hash_obj.hexdigest()
