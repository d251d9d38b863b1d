"""AniList GraphQL catalog client."""

from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from animap.domain.models import CatalogEntry
from animap.logging import get_logger
from animap.utils.hashing import compute_cache_key
from animap.utils.timestamps import format_calendar_date

from .base import DEFAULT_USER_AGENT, BaseCatalogClient
from .cache import ResponseCache
from .exceptions import CatalogRateLimitError, CatalogResponseError
from .ratelimit import SlidingWindowRateLimiter

logger = get_logger(__name__, component="catalog")

ANILIST_API_URL = "https://graphql.anilist.co"

MEDIA_FIELDS = """
      id
      title {
        romaji
        english
        native
      }
      format
      status
      episodes
      season
      seasonYear
      genres
      studios {
        nodes {
          name
        }
      }
      coverImage {
        large
        medium
      }
      description
      averageScore
      popularity
      synonyms
      startDate {
        year
        month
        day
      }
      endDate {
        year
        month
        day
      }
"""


def _nested(mapping: Optional[Dict[str, Any]], *keys: str) -> Any:
    value: Any = mapping
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _format_date(date: Optional[Dict[str, Any]]) -> Optional[str]:
    if not date:
        return None
    return format_calendar_date(date.get("year"), date.get("month"), date.get("day"))


def _format_relations(edges: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    relations = []
    for edge in edges or []:
        node = edge.get("node") or {}
        if node.get("id") is None:
            continue
        relations.append(
            {
                "id": node["id"],
                "title": _nested(node, "title", "romaji") or _nested(node, "title", "english") or "",
                "relation_type": edge.get("relationType"),
            }
        )
    return relations


def format_media(media: Dict[str, Any]) -> CatalogEntry:
    """Convert an AniList Media object to a CatalogEntry.

    - status is lower-cased
    - year is seasonYear, else the start year
    - studios are reduced to their names
    - description is stripped of HTML
    - dates become YYYY-MM-DD with missing month/day set to 1
    - relations keep id, romaji (else English) title and relation type

    Args:
        media: Media object from a GraphQL response

    Returns:
        CatalogEntry

    Raises:
        CatalogResponseError: If the object cannot be converted
    """
    if not isinstance(media, dict):
        raise CatalogResponseError(f"Expected media object, got {type(media).__name__}")

    start_date = media.get("startDate") or {}
    year = media.get("seasonYear")
    if year is None:
        year = start_date.get("year")

    record = {
        "id": media.get("id"),
        "title": media.get("title") or {},
        "format": media.get("format"),
        "status": media.get("status"),
        "episodes": media.get("episodes"),
        "season": media.get("season"),
        "year": year,
        "genres": media.get("genres"),
        "studios": [
            node.get("name")
            for node in (_nested(media, "studios", "nodes") or [])
            if isinstance(node, dict) and node.get("name")
        ],
        "cover_image": {
            "large": _nested(media, "coverImage", "large") or "",
            "medium": _nested(media, "coverImage", "medium") or "",
        },
        "description": BaseCatalogClient._clean_html(media.get("description")),
        "score": media.get("averageScore"),
        "popularity": media.get("popularity"),
        "synonyms": [synonym for synonym in (media.get("synonyms") or []) if synonym],
        "start_date": _format_date(start_date),
        "end_date": _format_date(media.get("endDate")),
        "relations": _format_relations(_nested(media, "relations", "edges")),
    }

    try:
        return CatalogEntry.model_validate(record)
    except ValidationError as e:
        raise CatalogResponseError(f"Invalid media record {media.get('id')!r}: {e}") from e


class AniListClient(BaseCatalogClient):
    """Catalog client for the AniList GraphQL API.

    Every call consults the response cache first, then the rate limiter,
    then the network. Successful responses are cached; errors are not.

    API Details:
        Endpoint: https://graphql.anilist.co
        Method: POST (GraphQL)
        Authentication: None required for public media queries
        Rate limit: 90 requests per minute
    """

    CLIENT_NAME = "anilist"

    SEARCH_QUERY = """
query ($search: String, $perPage: Int) {
  Page(page: 1, perPage: $perPage) {
    media(search: $search, type: ANIME) {%s    }
  }
}
""" % MEDIA_FIELDS

    MEDIA_QUERY = """
query ($id: Int) {
  Media(id: $id, type: ANIME) {%s      relations {
        edges {
          node {
            id
            title {
              romaji
              english
            }
          }
          relationType
        }
      }
  }
}
""" % MEDIA_FIELDS

    def __init__(
        self,
        api_url: str = ANILIST_API_URL,
        timeout: int = 30,
        user_agent: str = DEFAULT_USER_AGENT,
        per_page: int = 10,
        rate_limiter: Optional[SlidingWindowRateLimiter] = None,
        cache: Optional[ResponseCache] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the AniList client.

        Args:
            api_url: GraphQL endpoint
            timeout: HTTP request timeout in seconds
            user_agent: User-Agent header
            per_page: Search results requested per query
            rate_limiter: Optional limiter; None disables local rate limiting
            cache: Optional response cache; None disables caching
            session: Optional requests session
        """
        super().__init__(api_url=api_url, timeout=timeout, user_agent=user_agent, session=session)
        self.per_page = per_page
        self.rate_limiter = rate_limiter
        self.cache = cache

    def search(self, query: str) -> List[CatalogEntry]:
        """Search AniList for anime matching a free-text query.

        Args:
            query: Search text

        Returns:
            Up to per_page entries in AniList relevance order; empty for a blank query

        Raises:
            CatalogRateLimitError: If the local request budget is exhausted
            CatalogError: On transport or response failures
        """
        if not query or not query.strip():
            return []

        cache_key = compute_cache_key("search", query)
        cached = self._cached_entries(cache_key, many=True)
        if cached is not None:
            return cached

        self._acquire("search")
        data = self._execute_graphql(self.SEARCH_QUERY, {"search": query, "perPage": self.per_page})

        media_list = _nested(data, "Page", "media")
        if media_list is None:
            return []
        if not isinstance(media_list, list):
            raise CatalogResponseError(
                f"Expected 'media' to be array, got {type(media_list).__name__}"
            )

        entries = [format_media(media) for media in media_list]

        logger.info(
            "Catalog search completed",
            extra={
                "event": "catalog.search.completed",
                "client": self.CLIENT_NAME,
                "query": query,
                "result_count": len(entries),
            },
        )

        self._cache_set(cache_key, [entry.model_dump(mode="json") for entry in entries])
        return entries

    def get_by_id(self, anilist_id: int) -> Optional[CatalogEntry]:
        """Fetch one anime by AniList ID, including its relations.

        Args:
            anilist_id: AniList media ID

        Returns:
            CatalogEntry, or None when AniList returns no media

        Raises:
            CatalogRateLimitError: If the local request budget is exhausted
            CatalogError: On transport or response failures
        """
        anilist_id = int(anilist_id)

        cache_key = compute_cache_key("media", str(anilist_id))
        cached = self._cached_entries(cache_key)
        if cached is not None:
            return cached

        self._acquire("media")
        data = self._execute_graphql(self.MEDIA_QUERY, {"id": anilist_id})

        media = data.get("Media")
        if not media:
            logger.info(
                "No catalog entry for ID",
                extra={"event": "catalog.lookup.missing", "client": self.CLIENT_NAME, "anilist_id": anilist_id},
            )
            return None

        entry = format_media(media)
        self._cache_set(cache_key, entry.model_dump(mode="json"))
        return entry

    def _acquire(self, operation: str) -> None:
        if self.rate_limiter is None or self.rate_limiter.try_acquire():
            return

        logger.warning(
            "Catalog rate limit exceeded",
            extra={
                "event": "catalog.request.rate_limited",
                "client": self.CLIENT_NAME,
                "operation": operation,
                "limit": self.rate_limiter.limit,
                "window_seconds": self.rate_limiter.window_seconds,
            },
        )
        raise CatalogRateLimitError(
            "AniList API rate limit exceeded",
            limit=self.rate_limiter.limit,
            window_seconds=self.rate_limiter.window_seconds,
        )

    def _cached_entries(self, key: str, many: bool = False) -> Optional[Any]:
        """Load cached entries for key; payloads that no longer validate count as misses."""
        if self.cache is None:
            return None
        cached = self.cache.get(key)
        if cached is None:
            return None

        try:
            if many:
                return [CatalogEntry.model_validate(item) for item in cached]
            return CatalogEntry.model_validate(cached)
        except (ValidationError, TypeError) as e:
            logger.warning(
                "Discarding invalid cached payload",
                extra={
                    "event": "cache.entry.invalid",
                    "client": self.CLIENT_NAME,
                    "key": key,
                    "error": str(e),
                },
            )
            self.cache.delete(key)
            return None

    def _cache_set(self, key: str, value: Any) -> None:
        if self.cache is not None:
            self.cache.set(key, value)
