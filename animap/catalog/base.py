"""Base catalog client with shared HTTP and GraphQL handling.

This module provides the CatalogClient protocol that the mapping core depends
on, and the abstract base class that concrete clients build on, with shared
utilities for GraphQL requests and HTML cleaning.
"""

import html
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

import requests

from animap.domain.models import CatalogEntry
from animap.logging import get_logger

from .exceptions import (
    CatalogConfigurationError,
    CatalogHTTPError,
    CatalogResponseError,
    CatalogTimeoutError,
)

logger = get_logger(__name__, component="catalog")

DEFAULT_USER_AGENT = "animap/1.0"


@runtime_checkable
class CatalogClient(Protocol):
    """What the mapping core needs from a catalog.

    Implementations may raise CatalogError subclasses; the core lets them
    propagate.
    """

    def search(self, query: str) -> List[CatalogEntry]:
        ...

    def get_by_id(self, anilist_id: int) -> Optional[CatalogEntry]:
        ...


class BaseCatalogClient(ABC):
    """Base class for catalog clients talking to a GraphQL endpoint.

    Provides shared HTTP request handling, error management, and HTML
    cleaning. Subclasses implement search() and get_by_id().

    Attributes:
        api_url: GraphQL endpoint
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    def __init__(
        self,
        api_url: str,
        timeout: int = 30,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize client with configuration.

        Args:
            api_url: GraphQL endpoint URL
            timeout: HTTP request timeout in seconds (default 30, range 5-300)
            user_agent: User-Agent header for requests
            session: Optional pre-built requests session (tests inject a mock)

        Raises:
            CatalogConfigurationError: If timeout is outside valid range, or
                api_url or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise CatalogConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise CatalogConfigurationError("user_agent cannot be empty")
        if not api_url or not api_url.strip():
            raise CatalogConfigurationError("api_url cannot be empty")

        self.api_url = api_url.strip()
        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": self.user_agent,
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )

    @abstractmethod
    def search(self, query: str) -> List[CatalogEntry]:
        """Search the catalog by free-text query.

        Returns:
            Matching entries in catalog order; empty list when nothing matches

        Raises:
            CatalogError: On rate-limit exhaustion, transport or response failures
        """
        pass

    @abstractmethod
    def get_by_id(self, anilist_id: int) -> Optional[CatalogEntry]:
        """Fetch a single entry by catalog ID.

        Returns:
            The entry, or None when the catalog has no such entry

        Raises:
            CatalogError: On rate-limit exhaustion, transport or response failures
        """
        pass

    def _execute_graphql(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """POST a GraphQL query and return its `data` object.

        Args:
            query: GraphQL document
            variables: Query variables

        Returns:
            The response's `data` mapping (empty dict when absent)

        Raises:
            CatalogResponseError: If the response carries GraphQL errors or is not an object
        """
        response = self._make_request(
            self.api_url,
            method="POST",
            json_data={"query": query, "variables": variables},
        )

        if not isinstance(response, dict):
            raise CatalogResponseError(
                f"Expected JSON object from {self.api_url}, got {type(response).__name__}"
            )

        errors = response.get("errors")
        if errors:
            error_messages = [
                err.get("message", "Unknown error") if isinstance(err, dict) else str(err)
                for err in errors
            ]
            logger.error(
                "Catalog API returned GraphQL errors",
                extra={
                    "event": "catalog.request.failed",
                    "error_type": "GraphQLError",
                    "url": self.api_url,
                    "errors": error_messages,
                },
            )
            raise CatalogResponseError(f"GraphQL errors: {', '.join(error_messages)}")

        return response.get("data") or {}

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make HTTP request with error handling.

        Handles:
        - Setting user agent and timeout
        - Connection errors and timeouts
        - HTTP error status codes
        - Invalid JSON responses
        - Logging of request details

        Args:
            url: URL to request
            method: HTTP method (default "GET")
            headers: Additional headers to include (merged with defaults)
            json_data: JSON body for POST requests

        Returns:
            Parsed JSON response

        Raises:
            CatalogHTTPError: On 4xx or 5xx HTTP status, or when the request cannot be sent
            CatalogTimeoutError: On request timeout
            CatalogResponseError: On invalid JSON
        """
        request_headers = dict(self._session.headers)
        if headers:
            request_headers.update(headers)

        try:
            logger.debug(
                f"HTTP {method} request to {url}",
                extra={
                    "event": "catalog.request.sent",
                    "method": method,
                    "url": url,
                    "timeout": self.timeout,
                },
            )

            response = self._session.request(
                method=method,
                url=url,
                headers=request_headers,
                json=json_data,
                timeout=self.timeout,
            )

            if response.status_code >= 400:
                is_retryable = response.status_code >= 500 or response.status_code == 429
                log_level = logging.WARNING if is_retryable else logging.ERROR

                logger.log(
                    log_level,
                    f"HTTP {response.status_code} error from {url}",
                    extra={
                        "event": "catalog.request.failed",
                        "status_code": response.status_code,
                        "url": url,
                        "retryable": is_retryable,
                        "retry_after_seconds": response.headers.get("Retry-After"),
                    },
                )

                raise CatalogHTTPError(
                    f"HTTP {response.status_code}: {response.reason}",
                    status_code=response.status_code,
                    url=url,
                )

            try:
                data = response.json()
            except ValueError as e:
                logger.error(
                    f"Failed to parse JSON response from {url}",
                    extra={
                        "event": "catalog.request.failed",
                        "error_type": "JSONDecodeError",
                        "url": url,
                    },
                )
                raise CatalogResponseError(
                    f"Failed to parse JSON response from {url}: {e}"
                ) from e

            logger.debug(
                "HTTP request succeeded",
                extra={
                    "event": "catalog.request.succeeded",
                    "status_code": response.status_code,
                    "url": url,
                },
            )
            return data

        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "catalog.request.failed",
                    "error_type": "Timeout",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise CatalogTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "catalog.request.failed",
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise CatalogHTTPError(
                f"Request to {url} failed: {e}",
                status_code=0,
                url=url,
            ) from e

    @staticmethod
    def _clean_html(html_text: Optional[str]) -> str:
        """Reduce an HTML description to a single line of plain text.

        Decodes entities, turns <br> into spaces, strips remaining tags and
        collapses all whitespace.

        Args:
            html_text: Text containing HTML formatting

        Returns:
            Plain text, or "" for empty input
        """
        if not html_text:
            return ""

        text = html.unescape(html_text)
        text = re.sub(r"<br\s*/?>", " ", text, flags=re.IGNORECASE)
        text = re.sub(r"<[^>]+>", "", text)
        text = re.sub(r"\s+", " ", text)
        return text.strip()
