"""
CSV/JSON export of participant rankings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import pandas as pd

from zkb_stats.formatters.names import display_name
from zkb_stats.stats import KillStatistics, LossStatistics

EXPORT_FORMATS = ('csv', 'json')


def ranking_frame(
    stats: Union[KillStatistics, LossStatistics],
    sort_by: Optional[str] = None,
    top: Optional[int] = 100,
) -> pd.DataFrame:
    """
    Build a DataFrame of the participant ranking.

    Kill rankings carry kills, final_blows and ship_signature; loss rankings
    carry losses, total_value and damage_taken. Both carry a 'ships' column
    formatted as 'Ship (n), Ship (n)'.
    """
    ranking = stats.get_participant_ranking(sort_by=sort_by, limit=top)

    rows = []
    for rank, p in enumerate(ranking, 1):
        ships = stats.get_participant_ships(p.character_id)
        row = {
            'rank': rank,
            'character_id': p.character_id,
            'character_name': display_name(p.character_name),
        }
        if isinstance(stats, LossStatistics):
            row.update({
                'losses': p.total_losses,
                'total_value': p.total_value,
                'damage_taken': p.damage_taken,
            })
        else:
            row.update({
                'kills': p.total_kills,
                'final_blows': p.final_blows,
                'ship_signature': p.ship_signature,
            })
        row['ships'] = ", ".join(f"{s['ship_type']} ({s['count']})" for s in ships)
        rows.append(row)

    if isinstance(stats, LossStatistics):
        columns = ['rank', 'character_id', 'character_name', 'losses', 'total_value', 'damage_taken', 'ships']
    else:
        columns = ['rank', 'character_id', 'character_name', 'kills', 'final_blows', 'ship_signature', 'ships']
    return pd.DataFrame(rows, columns=columns)


def write_ranking(frame: pd.DataFrame, path: Path, fmt: str = 'csv') -> Path:
    """
    Write a ranking DataFrame to disk.

    Raises:
        ValueError: Unsupported format
    """
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format '{fmt}'. Available: {', '.join(EXPORT_FORMATS)}")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == 'csv':
        frame.to_csv(path, index=False)
    else:
        frame.to_json(path, orient='records', indent=2, force_ascii=False)
    return path
