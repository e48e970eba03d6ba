"""
Exceptions raised by the zKillboard statistics pipeline.
"""

from __future__ import annotations


class ZkbStatsError(Exception):
    """Base exception for all zkb-stats errors."""

    pass


class ConfigurationError(ZkbStatsError):
    """Raised for invalid user input or configuration before any network activity."""

    pass


class FetchError(ZkbStatsError):
    """Raised when an HTTP request fails."""

    def __init__(self, message: str, url: str | None = None, status: int | None = None):
        self.url = url
        self.status = status
        super().__init__(message)


class TransientNetworkError(FetchError):
    """Connection error, timeout, 429 or 5xx that survived the retry policy."""

    pass


class NotFoundError(FetchError):
    """Raised when the requested record does not exist (HTTP 404)."""

    pass


class PageFetchFailure(FetchError):
    """Raised when a list page cannot be fetched; aborts the whole run."""

    def __init__(self, key, page: int, cause: Exception | None = None):
        self.key = key
        self.page = page
        reason = f": {cause}" if cause is not None else ""
        super().__init__(
            f"Failed to fetch page {page} of {key.cache_name}{reason}",
            url=getattr(cause, 'url', None),
            status=getattr(cause, 'status', None),
        )


class BatchResolutionError(FetchError):
    """Raised when a name resolution batch request fails."""

    pass
