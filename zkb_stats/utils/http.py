"""HTTP utilities with retry logic and error handling."""

from __future__ import annotations

from itertools import takewhile
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from zkb_stats.errors import FetchError, NotFoundError, TransientNetworkError

RETRY_STATUSES = (429, 500, 502, 503, 504)


class LinearRetry(Retry):
    """Retry policy that waits attempt * backoff_factor seconds between attempts."""

    def get_backoff_time(self) -> float:
        consecutive_errors = len(list(
            takewhile(lambda x: x.redirect_location is None, reversed(self.history))
        ))
        if consecutive_errors < 1:
            return 0
        return min(self.backoff_factor * consecutive_errors, self.backoff_max)


def create_session(
    user_agent: str,
    retries: int = 3,
    backoff_factor: float = 1.0,
    status_forcelist: tuple[int, ...] = RETRY_STATUSES,
) -> requests.Session:
    """
    Create a requests session with linear retry logic and zKillboard-friendly headers.

    Args:
        user_agent: User-Agent header sent with every request
        retries: Number of retries for failed requests
        backoff_factor: Linear backoff step (1.0 = 1s, 2s, 3s...); Retry-After is ignored
        status_forcelist: HTTP status codes that trigger a retry

    Returns:
        Configured requests.Session with retry adapters mounted
    """
    session = requests.Session()
    session.headers.update({
        "User-Agent": user_agent,
        "Accept-Encoding": "gzip",
        "Accept": "application/json",
    })

    retry = LinearRetry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=list(status_forcelist),
        allowed_methods=["HEAD", "GET", "POST", "OPTIONS"],
        raise_on_status=False,
        respect_retry_after_header=False,
    )

    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    return session


def request_json(
    session: requests.Session,
    method: str,
    url: str,
    timeout: float = 30.0,
    **kwargs: Any,
) -> Any:
    """
    Issue a request and decode its JSON body, mapping failures onto FetchError.

    Args:
        session: Session created by create_session()
        method: HTTP method ('GET' or 'POST')
        url: URL to fetch
        timeout: Request timeout in seconds
        **kwargs: Additional arguments passed to session.request()

    Returns:
        Decoded JSON payload

    Raises:
        NotFoundError: HTTP 404
        TransientNetworkError: Connection error, timeout, or retryable status after retries
        FetchError: Any other HTTP or decoding failure
    """
    short_url = _truncate_url(url)

    try:
        response = session.request(method, url, timeout=timeout, **kwargs)
    except requests.exceptions.Timeout as e:
        raise TransientNetworkError(
            f"Request to {short_url} timed out after {timeout}s", url=url
        ) from e
    except (requests.exceptions.ConnectionError, requests.exceptions.RetryError) as e:
        raise TransientNetworkError(
            f"Could not connect to {short_url}: {type(e).__name__}", url=url
        ) from e
    except requests.exceptions.RequestException as e:
        raise FetchError(f"Request to {short_url} failed: {type(e).__name__}", url=url) from e

    status = response.status_code
    if status == 404:
        raise NotFoundError(f"Not found: {short_url}", url=url, status=status)
    if status in RETRY_STATUSES:
        raise TransientNetworkError(
            f"API returned HTTP {status} for {short_url}", url=url, status=status
        )

    try:
        response.raise_for_status()
        return response.json()
    except requests.exceptions.HTTPError as e:
        raise FetchError(f"API returned HTTP {status} for {short_url}", url=url, status=status) from e
    except ValueError as e:
        raise FetchError(f"Invalid JSON from {short_url}", url=url, status=status) from e


def _truncate_url(url: str, max_length: int = 80) -> str:
    """Truncate URL for display in error messages."""
    if len(url) <= max_length:
        return url
    return url[:max_length - 3] + "..."
