"""
Shared behaviour for the kill and loss aggregators.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Iterable, Mapping, Optional

from zkb_stats.data.killmail import Killmail
from zkb_stats.data.names import fallback_name
from zkb_stats.stats.models import ShipCount

logger = logging.getLogger(__name__)


class BaseStatistics:
    """
    Name handling, ranking and ship breakdown common to both aggregators.

    Subclasses define SORT_KEYS (sort option -> participant attribute),
    DEFAULT_SORT, and process_killmail(). Participants and ship types are kept
    in insertion order so equal ranks stay in first-seen order.
    """

    SORT_KEYS: dict[str, str] = {}
    DEFAULT_SORT = ""
    SHIP_TOTAL_ATTR = ""

    def __init__(
        self,
        corporation_id: int,
        corporation_name: Optional[str] = None,
        capsule_type_id: int = 670,
        capsule_name: str = "Capsule",
    ):
        self.corporation_id = corporation_id
        self.corporation_name = corporation_name or f"Corp {corporation_id}"
        self.capsule_type_id = capsule_type_id
        self.capsule_name = capsule_name
        self.participants: dict = {}
        self.ship_types: dict = {}
        self.last_updated = datetime.now()
        self._character_names: dict[int, str] = {}

    def set_character_names(self, names: Mapping[int, str]) -> None:
        """Replace the pre-resolved character name mapping."""
        self._character_names = {int(k): v for k, v in names.items()}

    def get_character_name(self, character_id: int) -> Optional[str]:
        return self._character_names.get(character_id)

    def display_name(self, character_id: int, raw_name: Optional[str] = None) -> str:
        """Resolved name, else '<raw> (<id>)', else 'Character_<id>'."""
        return self.get_character_name(character_id) or fallback_name(character_id, raw_name)

    def is_capsule(self, ship_type_id: Optional[int], ship_name: Optional[str] = None) -> bool:
        return ship_type_id == self.capsule_type_id or (
            ship_name is not None and ship_name == self.capsule_name
        )

    def process_killmail(self, killmail: Killmail) -> None:
        raise NotImplementedError

    def process_killmails(self, killmails: Iterable[Killmail]) -> None:
        """Fold a sequence of killmails. Each killmail must be passed at most once."""
        count = 0
        for killmail in killmails:
            self.process_killmail(killmail)
            count += 1
        logger.info("Processed %d killmails for corporation %d", count, self.corporation_id)

    def get_participant_ranking(self, sort_by: Optional[str] = None, limit: Optional[int] = 50) -> list:
        """
        Rank participants by a count, descending.

        Args:
            sort_by: One of SORT_KEYS (defaults to DEFAULT_SORT)
            limit: Maximum number of rows (None for all)

        Raises:
            ValueError: Unknown sort key
        """
        sort_by = sort_by or self.DEFAULT_SORT
        if sort_by not in self.SORT_KEYS:
            available = ', '.join(self.SORT_KEYS)
            raise ValueError(f"Unknown sort key '{sort_by}'. Available: {available}")

        attr = self.SORT_KEYS[sort_by]
        ranking = sorted(self.participants.values(), key=lambda p: getattr(p, attr), reverse=True)
        return ranking if limit is None else ranking[:limit]

    def get_ship_type_ranking(self, limit: Optional[int] = 20) -> list:
        ranking = sorted(
            self.ship_types.values(), key=lambda s: getattr(s, self.SHIP_TOTAL_ATTR), reverse=True
        )
        return ranking if limit is None else ranking[:limit]

    def get_participant_ships(self, character_id: int) -> list[ShipCount]:
        """A participant's ship types sorted by count, descending. Empty if unknown."""
        participant = self.participants.get(character_id)
        if participant is None:
            return []
        rows = [{'ship_type': name, 'count': count} for name, count in participant.ship_types.items()]
        return sorted(rows, key=lambda r: r['count'], reverse=True)

    def get_summary(self) -> dict:
        raise NotImplementedError

    def to_json(self) -> str:
        """Summary as indented JSON."""
        return json.dumps(self.get_summary(), indent=2, default=lambda v: v.isoformat())
