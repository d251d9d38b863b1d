"""Custom exceptions for catalog clients."""


class CatalogError(Exception):
    """Base exception for all catalog client errors.

    The mapping core never catches these: any catalog failure aborts the
    mapping call and reaches the caller unchanged. Catching this exception
    catches every catalog-related failure.
    """

    pass


class CatalogRateLimitError(CatalogError):
    """Local request budget for the catalog API is exhausted.

    Raised before any network traffic when the sliding-window limiter
    refuses a request. Retrying after the window has moved on may succeed.
    """

    def __init__(self, message: str, limit: int, window_seconds: float) -> None:
        """Initialize rate-limit error with the limiter settings.

        Args:
            message: Human-readable error message
            limit: Maximum requests per window
            window_seconds: Window length in seconds
        """
        super().__init__(message)
        self.limit = limit
        self.window_seconds = window_seconds


class CatalogHTTPError(CatalogError):
    """HTTP request failed with 4xx or 5xx error, or could not be sent.

    status_code is 0 when the request failed before a response arrived
    (connection refused, DNS failure, ...).
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        """Initialize HTTP error with status code and URL.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (e.g., 404, 500), or 0
            url: URL that failed
        """
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class CatalogTimeoutError(CatalogError):
    """HTTP request timed out."""

    def __init__(self, message: str, url: str) -> None:
        """Initialize timeout error with URL.

        Args:
            message: Human-readable error message
            url: URL that timed out
        """
        super().__init__(message)
        self.url = url


class CatalogResponseError(CatalogError):
    """Response parsing or validation failed.

    Raised for invalid JSON, GraphQL `errors` payloads and media records
    that cannot be converted to CatalogEntry.
    """

    pass


class CatalogConfigurationError(CatalogError):
    """Invalid catalog client configuration (timeout, user agent, endpoint)."""

    pass
