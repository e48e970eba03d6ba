"""
Shared pipeline for the statistics CLI.

Fetch -> resolve names -> aggregate -> render, with each collaborator
injectable for tests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from zkb_stats.config.loader import FetchSettings, StatsSettings
from zkb_stats.data.killmail import Killmail, PartitionKey
from zkb_stats.data.names import CharacterNameResolver
from zkb_stats.data.ships import ship_type_name
from zkb_stats.data.zkillboard import ZKillboardClient
from zkb_stats.formatters.export import ranking_frame, write_ranking
from zkb_stats.formatters.markdown import render_kill_report, render_loss_report, report_path
from zkb_stats.stats import KillStatistics, LossStatistics

logger = logging.getLogger(__name__)

Statistics = Union[KillStatistics, LossStatistics]

OUTPUT_FORMATS = ('markdown', 'csv', 'json')


def collect_character_ids(killmails: Iterable[Killmail], corporation_id: int, kind: str) -> set[int]:
    """
    Collect the character IDs that will appear in the statistics.

    For kills these are the tracked corporation's attackers; for losses, its victims.
    """
    ids: set[int] = set()
    for killmail in killmails:
        if kind == 'losses':
            victim = killmail.victim
            if victim.character_id and victim.corporation_id == corporation_id:
                ids.add(victim.character_id)
        else:
            for attacker in killmail.attackers:
                if attacker.character_id and attacker.corporation_id == corporation_id:
                    ids.add(attacker.character_id)
    return ids


def build_statistics(
    key: PartitionKey,
    stats_settings: StatsSettings,
    corporation_name: Optional[str] = None,
) -> Statistics:
    """Create the aggregator matching the partition kind."""
    cls = LossStatistics if key.kind == 'losses' else KillStatistics
    return cls(
        key.corporation_id,
        corporation_name,
        capsule_type_id=stats_settings.capsule_type_id,
        capsule_name=stats_settings.capsule_name,
    )


def run_statistics(
    key: PartitionKey,
    settings: FetchSettings,
    stats_settings: StatsSettings,
    resolve_names: bool = True,
    ship_name: Optional[Callable[[int], str]] = ship_type_name,
    client: Optional[ZKillboardClient] = None,
    resolver: Optional[CharacterNameResolver] = None,
) -> Optional[Statistics]:
    """
    Fetch a partition and aggregate it.

    Returns:
        The populated statistics, or None if the partition has no killmails

    Raises:
        PageFetchFailure: A list page could not be fetched
    """
    if client is None:
        client = ZKillboardClient(key.corporation_id, settings, ship_name=ship_name)

    killmails = client.get_all(key)
    if not killmails:
        return None

    if not resolve_names:
        stats = build_statistics(key, stats_settings)
    else:
        info = client.esi.get_corporation(key.corporation_id)
        stats = build_statistics(key, stats_settings, (info or {}).get('name'))
        if resolver is None:
            resolver = CharacterNameResolver(
                client.esi,
                settings.cache_root,
                cache_file=settings.character_file,
                batch_size=settings.name_batch_size,
            )
        character_ids = collect_character_ids(killmails, key.corporation_id, key.kind)
        logger.info("Resolving names for %d characters", len(character_ids))
        names = resolver.resolve_names(character_ids)
        logger.info("Resolved %d/%d character names", len(names), len(character_ids))
        stats.set_character_names(names)

    stats.process_killmails(killmails)
    return stats


def write_report(
    stats: Statistics,
    key: PartitionKey,
    output_dir: Path,
    fmt: str = 'markdown',
    sort_by: Optional[str] = None,
    top: int = 100,
) -> Path:
    """
    Render the statistics and write them to the partition's report file.

    Returns:
        Path of the written file
    """
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported format '{fmt}'. Available: {', '.join(OUTPUT_FORMATS)}")

    sort_by = sort_by or stats.DEFAULT_SORT
    if fmt != 'markdown':
        frame = ranking_frame(stats, sort_by=sort_by, top=top)
        return write_ranking(frame, report_path(output_dir, key, fmt), fmt)

    if isinstance(stats, LossStatistics):
        content = render_loss_report(stats, key, sort_by=sort_by, top=top)
    else:
        content = render_kill_report(stats, key, sort_by=sort_by, top=top)

    path = report_path(output_dir, key, 'md')
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')
    return path
