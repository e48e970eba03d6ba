"""
Loss statistics: tracks the tracked corporation's victims on each killmail.
"""

from __future__ import annotations

from datetime import datetime

from zkb_stats.data.killmail import Killmail
from zkb_stats.stats.base import BaseStatistics
from zkb_stats.stats.models import LossParticipantStats, LossShipTypeStats, LossSummary


class LossStatistics(BaseStatistics):
    """Per-character and per-ship losses, ISK value and damage taken."""

    SORT_KEYS = {
        'losses': 'total_losses',
        'value': 'total_value',
        'damage': 'damage_taken',
    }
    DEFAULT_SORT = 'losses'
    SHIP_TOTAL_ATTR = 'total_losses'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.total_losses = 0
        self.total_value = 0.0
        self.participants: dict[int, LossParticipantStats] = {}
        self.ship_types: dict[int, LossShipTypeStats] = {}

    def process_killmail(self, killmail: Killmail) -> None:
        """
        Fold one killmail's victim into the statistics.

        Only victims of the tracked corporation with a character count, and
        capsule losses are ignored entirely.
        """
        victim = killmail.victim
        if victim.corporation_id != self.corporation_id:
            return
        character_id = victim.character_id
        if not character_id:
            return
        if self.is_capsule(victim.ship_type_id, victim.ship_type_name):
            return

        self.total_losses += 1
        self.last_updated = datetime.now()

        name = self.display_name(character_id, victim.character_name)
        participant = self.participants.get(character_id)
        if participant is None:
            participant = LossParticipantStats(
                character_id=character_id,
                character_name=name,
                corporation_id=victim.corporation_id,
                corporation_name=victim.corporation_name or "",
            )
            self.participants[character_id] = participant
        elif participant.character_name != name:
            participant.character_name = name

        value = killmail.total_value
        damage = victim.damage_taken or 0
        self.total_value += value
        participant.damage_taken += damage

        ship_type_id = victim.ship_type_id
        if not ship_type_id:
            participant.total_value += value
            return
        ship_name = victim.ship_type_name or f"Ship {ship_type_id}"

        participant.total_losses += 1
        participant.total_value += value
        participant.ship_types[ship_name] = participant.ship_types.get(ship_name, 0) + 1

        ship_stats = self.ship_types.get(ship_type_id)
        if ship_stats is None:
            ship_stats = LossShipTypeStats(ship_type_id=ship_type_id, ship_type_name=ship_name)
            self.ship_types[ship_type_id] = ship_stats
        ship_stats.total_losses += 1
        ship_stats.total_value += value
        ship_stats.damage_taken += damage
        ship_stats.participants[character_id] = ship_stats.participants.get(character_id, 0) + 1

    def get_summary(self) -> LossSummary:
        return {
            'corporation_id': self.corporation_id,
            'corporation_name': self.corporation_name,
            'total_losses': self.total_losses,
            'total_value': self.total_value,
            'total_participants': len(self.participants),
            'total_ship_types': len(self.ship_types),
            'last_updated': self.last_updated,
        }
