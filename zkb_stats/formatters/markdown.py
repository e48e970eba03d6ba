"""
Markdown rendering of kill and loss rankings.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from zkb_stats.data.killmail import PartitionKey
from zkb_stats.formatters.isk import format_isk
from zkb_stats.formatters.names import display_name, escape_cell
from zkb_stats.stats import KillStatistics, LossStatistics


def report_path(output_dir: Path, key: PartitionKey, extension: str = "md") -> Path:
    """Report file for a partition, e.g. docs/98626718-2026-01-losses.md."""
    return Path(output_dir) / f"{key.cache_name}.{extension}"


def _title(corporation_name: str, key: PartitionKey, label: str) -> str:
    filters = [name for name, enabled in (("solo", key.solo), ("w-space", key.wspace)) if enabled]
    suffix = f", {', '.join(filters)}" if filters else ""
    return f"# {corporation_name} {label} ({key.period}{suffix})"


def _table(header: list[str], rows: list[list[str]]) -> list[str]:
    lines = ["| " + " | ".join(header) + " |"]
    lines.append("| " + " | ".join("-" * max(3, len(h)) for h in header) + " |")
    for row in rows:
        lines.append("| " + " | ".join(escape_cell(cell) for cell in row) + " |")
    return lines


def _ship_cells(ships: list[dict], width: int) -> list[str]:
    cells = [f"{ship['ship_type']} ({ship['count']})" for ship in ships[:width]]
    return cells + [""] * (width - len(cells))


def render_kill_report(
    stats: KillStatistics,
    key: PartitionKey,
    sort_by: str = "kills",
    top: int = 100,
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Render the kill ranking as Markdown.

    Columns are character, kills, final blows, then one column per ship type
    the widest participant flew.
    """
    generated_at = generated_at or datetime.now()
    summary = stats.get_summary()
    ranking = stats.get_participant_ranking(sort_by=sort_by, limit=top)
    ships = {p.character_id: stats.get_participant_ships(p.character_id) for p in ranking}
    width = max((len(s) for s in ships.values()), default=0)

    lines = [_title(stats.corporation_name, key, "Kill Statistics"), ""]
    lines += [f"**Generated**: {generated_at:%Y-%m-%d %H:%M:%S}", ""]
    lines += [f"**Total kills**: {summary['total_kills']}", ""]
    lines += [f"**Participants**: {summary['total_participants']}", ""]
    lines += ["## Participant Ranking", ""]

    header = ["Character", "Kills", "Final Blows"] + [f"Ship {i + 1}" for i in range(width)]
    rows = [
        [display_name(p.character_name), str(p.total_kills), str(p.final_blows)]
        + _ship_cells(ships[p.character_id], width)
        for p in ranking
    ]
    lines += _table(header, rows)

    ship_ranking = stats.get_ship_type_ranking()
    if ship_ranking:
        lines += ["", "## Ship Types", ""]
        lines += _table(
            ["Ship", "Kills", "Pilots"],
            [[s.ship_type_name, str(s.total_kills), str(len(s.participants))] for s in ship_ranking],
        )

    return "\n".join(lines) + "\n"


def render_loss_report(
    stats: LossStatistics,
    key: PartitionKey,
    sort_by: str = "losses",
    top: int = 100,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render the loss ranking as Markdown, with ISK value instead of final blows."""
    generated_at = generated_at or datetime.now()
    summary = stats.get_summary()
    ranking = stats.get_participant_ranking(sort_by=sort_by, limit=top)
    ships = {p.character_id: stats.get_participant_ships(p.character_id) for p in ranking}
    width = max((len(s) for s in ships.values()), default=0)

    lines = [_title(stats.corporation_name, key, "Loss Statistics"), ""]
    lines += [f"**Generated**: {generated_at:%Y-%m-%d %H:%M:%S}", ""]
    lines += [f"**Total losses**: {summary['total_losses']}", ""]
    lines += [f"**Total value**: {format_isk(summary['total_value'])} ISK", ""]
    lines += [f"**Participants**: {summary['total_participants']}", ""]
    lines += ["## Participant Ranking", ""]

    header = ["Character", "Losses", "Value (ISK)"] + [f"Ship {i + 1}" for i in range(width)]
    rows = [
        [display_name(p.character_name), str(p.total_losses), format_isk(p.total_value)]
        + _ship_cells(ships[p.character_id], width)
        for p in ranking
    ]
    lines += _table(header, rows)

    ship_ranking = stats.get_ship_type_ranking()
    if ship_ranking:
        lines += ["", "## Ship Types", ""]
        lines += _table(
            ["Ship", "Losses", "Value (ISK)"],
            [[s.ship_type_name, str(s.total_losses), format_isk(s.total_value)] for s in ship_ranking],
        )

    return "\n".join(lines) + "\n"
