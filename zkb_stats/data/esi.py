"""
ESI API client.

Fetches full killmail details and public entity info, and resolves numeric
IDs to names.

Sources:
- ESI API: https://esi.evetech.net/
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import requests

from zkb_stats.config.loader import FetchSettings
from zkb_stats.errors import BatchResolutionError, FetchError
from zkb_stats.utils.http import create_session, request_json

logger = logging.getLogger(__name__)

# Upstream ceiling for POST /universe/names/
MAX_NAME_BATCH = 1000


class ESIClient:
    """Thin wrapper over the ESI endpoints used by the statistics run."""

    def __init__(self, settings: FetchSettings, session: requests.Session | None = None):
        self.settings = settings
        self.base_url = settings.esi_url.rstrip('/')
        if session is None:
            session = create_session(
                user_agent=settings.user_agent,
                retries=settings.max_retries,
                backoff_factor=settings.retry_backoff,
                status_forcelist=settings.retry_statuses,
            )
        self.session = session

    def get_killmail(self, killmail_id: int, killmail_hash: str) -> dict[str, Any]:
        """
        Fetch a killmail by ID and hash.

        Raises:
            NotFoundError: ESI has no such killmail
            TransientNetworkError: Network failure or 429/5xx after retries
            FetchError: Any other failure
        """
        url = f"{self.base_url}/killmails/{killmail_id}/{killmail_hash}/"
        data = request_json(self.session, "GET", url, timeout=self.settings.detail_timeout)
        if not isinstance(data, dict):
            raise FetchError(f"Unexpected killmail payload for {killmail_id}", url=url)
        return data

    def post_names(self, ids: Iterable[int]) -> list[dict[str, Any]]:
        """
        Resolve up to 1000 IDs via POST /universe/names/.

        Returns:
            List of {'id', 'name', 'category'} dicts

        Raises:
            ValueError: More than 1000 IDs
            BatchResolutionError: The request failed
        """
        ids = [int(i) for i in ids]
        if len(ids) > MAX_NAME_BATCH:
            raise ValueError(f"At most {MAX_NAME_BATCH} IDs per request, got {len(ids)}")
        if not ids:
            return []

        url = f"{self.base_url}/universe/names/"
        try:
            data = request_json(
                self.session, "POST", url,
                timeout=self.settings.names_timeout,
                json=ids,
            )
        except FetchError as e:
            raise BatchResolutionError(
                f"Name resolution failed for {len(ids)} IDs: {e}", url=url, status=e.status
            ) from e

        if not isinstance(data, list):
            raise BatchResolutionError("Unexpected /universe/names/ payload", url=url)
        return data

    def _get_entity(self, path: str, label: str) -> Optional[dict[str, Any]]:
        url = f"{self.base_url}/{path}"
        try:
            data = request_json(self.session, "GET", url, timeout=self.settings.detail_timeout)
        except FetchError as e:
            logger.warning("Failed to fetch %s info: %s", label, e)
            return None
        if not isinstance(data, dict):
            logger.warning("Unexpected %s payload from %s", label, url)
            return None
        return data

    def get_corporation(self, corporation_id: int) -> Optional[dict[str, Any]]:
        """Public corporation info (name, ticker, member_count, ...), or None on failure."""
        return self._get_entity(f"corporations/{corporation_id}/", "corporation")

    def get_character(self, character_id: int) -> Optional[dict[str, Any]]:
        """Public character info (name, corporation_id, birthday, ...), or None on failure."""
        return self._get_entity(f"characters/{character_id}/", "character")

    def get_alliance(self, alliance_id: int) -> Optional[dict[str, Any]]:
        """Public alliance info (name, ticker, ...), or None on failure."""
        return self._get_entity(f"alliances/{alliance_id}/", "alliance")

    def search_character(self, name: str, strict: bool = False) -> list[int]:
        """
        Search character IDs by name via GET /search/.

        Returns:
            Matching character IDs; empty if nothing matched or the request failed
        """
        url = f"{self.base_url}/search/"
        params = {
            'search': name,
            'categories': 'character',
            'strict': 'true' if strict else 'false',
        }
        try:
            data = request_json(
                self.session, "GET", url, timeout=self.settings.detail_timeout, params=params
            )
        except FetchError as e:
            logger.warning("Character search for '%s' failed: %s", name, e)
            return []
        if not isinstance(data, dict):
            return []
        return [i for i in data.get('character') or [] if isinstance(i, int)]
