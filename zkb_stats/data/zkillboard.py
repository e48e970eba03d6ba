"""
zKillboard list client with ESI detail reconciliation.

Pages through a corporation's kills or losses for one month, reconciles each
(killmail_id, hash) against the partition cache, fetches misses from ESI one
at a time, and persists the partition after every page. The unpaged
pastSeconds and warID queries are also supported, uncached.

Sources:
- zkillboard API: https://github.com/zKillboard/zKillboard/wiki/API-(Killmails)
- ESI API: https://esi.evetech.net/
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import requests

from zkb_stats.config.loader import FetchSettings
from zkb_stats.data.cache import KillmailCache
from zkb_stats.data.esi import ESIClient
from zkb_stats.data.killmail import KILL_KINDS, Killmail, KillmailSummary, PartitionKey
from zkb_stats.errors import FetchError, NotFoundError, PageFetchFailure
from zkb_stats.utils.http import create_session, request_json

logger = logging.getLogger(__name__)


@dataclass
class PageResult:
    """Outcome of reconciling one list page against the cache."""
    killmails: list[Killmail] = field(default_factory=list)
    raw_count: int = 0
    fetched: int = 0
    failed: int = 0


class ZKillboardClient:
    """Fetches a corporation's killmails month by month."""

    def __init__(
        self,
        corporation_id: int,
        settings: FetchSettings,
        cache: KillmailCache | None = None,
        esi: ESIClient | None = None,
        session: requests.Session | None = None,
        ship_name: Callable[[int], str] | None = None,
        rng: random.Random | None = None,
    ):
        self.corporation_id = corporation_id
        self.settings = settings
        self.base_url = settings.zkillboard_url.rstrip('/')
        self.cache = cache or KillmailCache(settings.cache_root, settings.killmail_dir)
        self.esi = esi or ESIClient(settings)
        if session is None:
            session = create_session(
                user_agent=settings.user_agent,
                retries=settings.max_retries,
                backoff_factor=settings.retry_backoff,
                status_forcelist=settings.retry_statuses,
            )
        self.session = session
        self.ship_name = ship_name
        self._rng = rng or random.Random()

    def partition_key(
        self,
        year: int,
        month: int,
        solo: bool = False,
        wspace: bool = False,
        kind: str = "kills",
    ) -> PartitionKey:
        return PartitionKey(self.corporation_id, year, month, solo=solo, wspace=wspace, kind=kind)

    def _parse_rows(self, data: list, source: str) -> list[KillmailSummary]:
        summaries = []
        for row in data:
            try:
                summaries.append(KillmailSummary.from_api(row))
            except (AttributeError, TypeError, ValueError) as e:
                logger.warning("Skipping list row from %s: %s", source, e)
        if len(summaries) < len(data):
            logger.warning("%s: %d of %d rows unusable", source, len(data) - len(summaries), len(data))
        return summaries

    def fetch_page(self, key: PartitionKey, page: int) -> list[KillmailSummary]:
        """
        Fetch one page of (killmail_id, hash) summaries.

        An empty list means the upstream page was empty: there are no more pages.

        Raises:
            PageFetchFailure: The page could not be fetched after retries, the
                payload was not a list, or none of its rows were usable
        """
        url = f"{self.base_url}/{key.list_path(page)}"
        logger.info("Fetching %s", url)

        try:
            data = request_json(self.session, "GET", url, timeout=self.settings.list_timeout)
        except FetchError as e:
            raise PageFetchFailure(key, page, e) from e

        if not isinstance(data, list):
            raise PageFetchFailure(key, page, FetchError(f"Expected a JSON array from {url}", url=url))

        summaries = self._parse_rows(data, f"page {page}")
        if data and not summaries:
            raise PageFetchFailure(
                key, page, FetchError(f"No usable rows in {len(data)} returned by {url}", url=url)
            )
        return summaries

    def fetch_killmail(self, summary: KillmailSummary) -> Optional[Killmail]:
        """
        Fetch full killmail details from ESI.

        Returns:
            Killmail, or None if ESI has no such record or the request failed
        """
        try:
            data = self.esi.get_killmail(summary.killmail_id, summary.hash)
        except NotFoundError:
            logger.warning("Killmail %d not found on ESI, skipping", summary.killmail_id)
            return None
        except FetchError as e:
            logger.error("Failed to fetch killmail %d: %s", summary.killmail_id, e)
            return None

        return Killmail.from_esi(
            summary.killmail_id, summary.hash, data,
            zkb=summary.zkb, ship_name=self.ship_name,
        )

    def _detail_pause(self) -> None:
        time.sleep(self.settings.detail_delay + self._rng.uniform(0, self.settings.detail_jitter))

    def get_page(self, key: PartitionKey, page: int = 1) -> PageResult:
        """
        Fetch one list page and reconcile it against the cache partition.

        Cache misses are fetched sequentially with a jittered pause between
        requests. Newly fetched records are persisted before returning. Records
        whose detail fetch failed are left out and will be retried next run.
        """
        summaries = self.fetch_page(key, page)
        if not summaries:
            return PageResult()

        cached = self.cache.get(key)
        misses = [s for s in summaries if s.killmail_id not in cached]
        logger.info(
            "  Page %d: %d killmails, cache hit %d, to fetch %d",
            page, len(summaries), len(summaries) - len(misses), len(misses),
        )

        fetched: dict[int, Killmail] = {}
        failed = 0
        for i, summary in enumerate(misses, 1):
            if summary.killmail_id in fetched:
                continue
            killmail = self.fetch_killmail(summary)
            if killmail is None:
                failed += 1
            else:
                fetched[summary.killmail_id] = killmail
            if i % 10 == 0 or i == len(misses):
                logger.info("  Killmail details: %d/%d", i, len(misses))
            self._detail_pause()

        if fetched:
            cached = self.cache.merge(key, fetched)
            logger.info("  Cached %d killmails in %s", len(cached), self.cache.partition_path(key).name)

        killmails = [cached[s.killmail_id] for s in summaries if s.killmail_id in cached]
        return PageResult(killmails=killmails, raw_count=len(summaries), fetched=len(fetched), failed=failed)

    def get_all(self, key: PartitionKey) -> list[Killmail]:
        """
        Fetch every page for a partition until the first empty page.

        Returns:
            Killmails in (page, position) order, each killmail ID at most once

        Raises:
            PageFetchFailure: Any page failed; no partial result is returned
        """
        logger.info(
            "Fetching %s for corporation %d [%s]", key.kind, key.corporation_id, key.period
        )
        killmails: list[Killmail] = []
        seen: set[int] = set()
        page = 1
        total_raw = 0

        while True:
            result = self.get_page(key, page)
            if result.raw_count == 0:
                logger.info("  Page %d: empty, done", page)
                break

            for killmail in result.killmails:
                if killmail.killmail_id not in seen:
                    seen.add(killmail.killmail_id)
                    killmails.append(killmail)
            total_raw += result.raw_count
            logger.info(
                "  Page %d: %d/%d usable (total %d, raw %d)",
                page, len(result.killmails), result.raw_count, len(killmails), total_raw,
            )

            page += 1
            time.sleep(self.settings.page_delay)

        logger.info("Fetched %d killmails over %d pages", len(killmails), page - 1)
        return killmails

    def get_all_kills(self, year: int, month: int, solo: bool = False, wspace: bool = False) -> list[Killmail]:
        return self.get_all(self.partition_key(year, month, solo=solo, wspace=wspace, kind="kills"))

    def get_all_losses(self, year: int, month: int, solo: bool = False, wspace: bool = False) -> list[Killmail]:
        return self.get_all(self.partition_key(year, month, solo=solo, wspace=wspace, kind="losses"))

    def _fetch_unpaged(self, path: str) -> list[Killmail]:
        """
        Fetch a single list endpoint and resolve every row through ESI.

        These queries do not map onto a month partition, so results are not cached.

        Raises:
            FetchError: The list request failed or did not return a JSON array
        """
        url = f"{self.base_url}/{path}"
        logger.info("Fetching %s", url)
        data = request_json(self.session, "GET", url, timeout=self.settings.list_timeout)
        if not isinstance(data, list):
            raise FetchError(f"Expected a JSON array from {url}", url=url)

        killmails: list[Killmail] = []
        seen: set[int] = set()
        for summary in self._parse_rows(data, url):
            if summary.killmail_id in seen:
                continue
            seen.add(summary.killmail_id)
            killmail = self.fetch_killmail(summary)
            if killmail is not None:
                killmails.append(killmail)
            self._detail_pause()
        return killmails

    def fetch_since(self, seconds: int, kind: str = "kills") -> list[Killmail]:
        """
        Fetch the corporation's kills or losses from the last `seconds` seconds.

        zKillboard rounds pastSeconds to whole hours and caps it at one week.
        """
        if seconds <= 0:
            raise ValueError(f"seconds must be positive, got {seconds}")
        if kind not in KILL_KINDS:
            raise ValueError(f"Unknown kind '{kind}'. Expected one of {KILL_KINDS}")
        return self._fetch_unpaged(f"{kind}/corporationID/{self.corporation_id}/pastSeconds/{seconds}/")

    def fetch_war(self, war_id: int, kind: str = "kills") -> list[Killmail]:
        """Fetch the corporation's kills or losses in one war."""
        if kind not in KILL_KINDS:
            raise ValueError(f"Unknown kind '{kind}'. Expected one of {KILL_KINDS}")
        return self._fetch_unpaged(f"{kind}/corporationID/{self.corporation_id}/warID/{war_id}/")
