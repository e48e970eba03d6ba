"""
Kill and loss aggregation for a corporation's killmails.
"""

from zkb_stats.stats.kills import KillStatistics
from zkb_stats.stats.losses import LossStatistics
from zkb_stats.stats.models import (
    KillSummary,
    LossParticipantStats,
    LossShipTypeStats,
    LossSummary,
    ParticipantStats,
    ShipCount,
    ShipTypeStats,
)

__all__ = [
    'KillStatistics',
    'LossStatistics',
    'KillSummary',
    'LossParticipantStats',
    'LossShipTypeStats',
    'LossSummary',
    'ParticipantStats',
    'ShipCount',
    'ShipTypeStats',
]
