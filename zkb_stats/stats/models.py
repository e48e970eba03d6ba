"""
Running aggregates built by the kill and loss statistics.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TypedDict


@dataclass
class ParticipantStats:
    """Kills credited to one character of the tracked corporation."""
    character_id: int
    character_name: str
    corporation_id: int
    corporation_name: str = ""
    total_kills: int = 0
    ship_types: dict[str, int] = field(default_factory=dict)
    ship_signature: int = 0
    final_blows: int = 0


@dataclass
class ShipTypeStats:
    """Kills credited to one ship type, with a per-character breakdown."""
    ship_type_id: int
    ship_type_name: str
    total_kills: int = 0
    participants: dict[int, int] = field(default_factory=dict)


@dataclass
class LossParticipantStats:
    """Losses suffered by one character of the tracked corporation."""
    character_id: int
    character_name: str
    corporation_id: int
    corporation_name: str = ""
    total_losses: int = 0
    ship_types: dict[str, int] = field(default_factory=dict)
    total_value: float = 0.0
    damage_taken: int = 0


@dataclass
class LossShipTypeStats:
    """Losses of one ship type, with value, damage and a per-character breakdown."""
    ship_type_id: int
    ship_type_name: str
    total_losses: int = 0
    total_value: float = 0.0
    damage_taken: int = 0
    participants: dict[int, int] = field(default_factory=dict)


class ShipCount(TypedDict):
    """One row of a participant's ship breakdown."""
    ship_type: str
    count: int


class KillSummary(TypedDict):
    corporation_id: int
    corporation_name: str
    total_kills: int
    total_participants: int
    total_ship_types: int
    last_updated: datetime


class LossSummary(TypedDict):
    corporation_id: int
    corporation_name: str
    total_losses: int
    total_value: float
    total_participants: int
    total_ship_types: int
    last_updated: datetime
