"""
Kill statistics: credits the tracked corporation's attackers on each killmail.
"""

from __future__ import annotations

from datetime import datetime

from zkb_stats.data.killmail import Killmail
from zkb_stats.stats.base import BaseStatistics
from zkb_stats.stats.models import KillSummary, ParticipantStats, ShipTypeStats


class KillStatistics(BaseStatistics):
    """Per-character and per-ship kill counts for one corporation."""

    SORT_KEYS = {
        'kills': 'total_kills',
        'finalblows': 'final_blows',
    }
    DEFAULT_SORT = 'kills'
    SHIP_TOTAL_ATTR = 'total_kills'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.total_kills = 0
        self.participants: dict[int, ParticipantStats] = {}
        self.ship_types: dict[int, ShipTypeStats] = {}

    def process_killmail(self, killmail: Killmail) -> None:
        """
        Fold one killmail into the statistics.

        Killmails whose victim is a capsule are ignored entirely. Attackers
        flying a capsule get no kill or ship credit, only finishing-blow credit.
        """
        if self.is_capsule(killmail.victim.ship_type_id, killmail.victim.ship_type_name):
            return

        self.total_kills += 1
        self.last_updated = datetime.now()

        for attacker in killmail.attackers:
            if attacker.corporation_id != self.corporation_id:
                continue
            character_id = attacker.character_id
            if not character_id:
                continue

            name = self.display_name(character_id, attacker.character_name)
            participant = self.participants.get(character_id)
            if participant is None:
                participant = ParticipantStats(
                    character_id=character_id,
                    character_name=name,
                    corporation_id=attacker.corporation_id,
                    corporation_name=attacker.corporation_name or "",
                )
                self.participants[character_id] = participant
            elif participant.character_name != name:
                participant.character_name = name

            if attacker.final_blow:
                participant.final_blows += 1

            ship_type_id = attacker.ship_type_id
            if not ship_type_id:
                continue
            ship_name = attacker.ship_type_name or f"Ship {ship_type_id}"
            if self.is_capsule(ship_type_id, ship_name):
                continue

            participant.total_kills += 1
            previous = participant.ship_types.get(ship_name, 0)
            participant.ship_types[ship_name] = previous + 1
            if previous == 0:
                participant.ship_signature += 1

            ship_stats = self.ship_types.get(ship_type_id)
            if ship_stats is None:
                ship_stats = ShipTypeStats(ship_type_id=ship_type_id, ship_type_name=ship_name)
                self.ship_types[ship_type_id] = ship_stats
            ship_stats.total_kills += 1
            ship_stats.participants[character_id] = ship_stats.participants.get(character_id, 0) + 1

    def get_summary(self) -> KillSummary:
        return {
            'corporation_id': self.corporation_id,
            'corporation_name': self.corporation_name,
            'total_kills': self.total_kills,
            'total_participants': len(self.participants),
            'total_ship_types': len(self.ship_types),
            'last_updated': self.last_updated,
        }
