"""
Killmail record types.

Records are immutable once built: a killboard never changes a killmail after
assigning its (killmail_id, hash) identity, which is what makes caching them
by ID safe.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Callable, Optional

KILL_KINDS = ("kills", "losses")


def _pick(cls, data: dict[str, Any]) -> dict[str, Any]:
    """Keep only the keys that are fields of the dataclass."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass(frozen=True)
class Victim:
    """The destroyed ship and its owner. NPC and structure losses have no character."""
    ship_type_id: Optional[int] = None
    ship_type_name: Optional[str] = None
    character_id: Optional[int] = None
    character_name: Optional[str] = None
    corporation_id: Optional[int] = None
    corporation_name: Optional[str] = None
    alliance_id: Optional[int] = None
    faction_id: Optional[int] = None
    damage_taken: Optional[int] = None


@dataclass(frozen=True)
class Attacker:
    """One participant on the attacking side of a killmail."""
    character_id: Optional[int] = None
    character_name: Optional[str] = None
    corporation_id: Optional[int] = None
    corporation_name: Optional[str] = None
    alliance_id: Optional[int] = None
    faction_id: Optional[int] = None
    ship_type_id: Optional[int] = None
    ship_type_name: Optional[str] = None
    weapon_type_id: Optional[int] = None
    damage_done: Optional[int] = None
    final_blow: bool = False
    security_status: Optional[float] = None


@dataclass(frozen=True)
class ZkbInfo:
    """zKillboard metadata attached to a killmail in list responses."""
    hash: Optional[str] = None
    location_id: Optional[int] = None
    fitted_value: Optional[float] = None
    dropped_value: Optional[float] = None
    destroyed_value: Optional[float] = None
    total_value: Optional[float] = None
    points: Optional[int] = None
    npc: bool = False
    solo: bool = False
    awox: bool = False

    @classmethod
    def from_api(cls, zkb: dict[str, Any] | None) -> ZkbInfo:
        """Build from the camelCase 'zkb' object of a list response row."""
        zkb = zkb or {}
        return cls(
            hash=zkb.get('hash'),
            location_id=zkb.get('locationID'),
            fitted_value=zkb.get('fittedValue'),
            dropped_value=zkb.get('droppedValue'),
            destroyed_value=zkb.get('destroyedValue'),
            total_value=zkb.get('totalValue'),
            points=zkb.get('points'),
            npc=bool(zkb.get('npc', False)),
            solo=bool(zkb.get('solo', False)),
            awox=bool(zkb.get('awox', False)),
        )


@dataclass(frozen=True)
class KillmailSummary:
    """One row of the zKillboard list endpoint: identity plus zkb metadata."""
    killmail_id: int
    hash: str
    zkb: ZkbInfo = field(default_factory=ZkbInfo)

    @classmethod
    def from_api(cls, row: dict[str, Any]) -> KillmailSummary:
        """
        Parse a list response row.

        Raises:
            ValueError: If the row has no killmail ID or hash
        """
        zkb = row.get('zkb') or {}
        killmail_id = row.get('killmail_id')
        killmail_hash = zkb.get('hash')
        if not killmail_id or not killmail_hash:
            raise ValueError(f"List row without killmail_id/hash: {row!r}")
        return cls(killmail_id=int(killmail_id), hash=str(killmail_hash), zkb=ZkbInfo.from_api(zkb))


def resolve_final_blows(flags: list[Optional[bool]]) -> list[bool]:
    """
    Decide which attackers landed the finishing blow.

    An attacker flagged final_blow keeps the credit. When no attacker in the
    record carries the flag, the first attacker in arrival order is credited.
    This fallback may not match the real finishing blow.
    """
    resolved = [bool(flag) for flag in flags]
    if resolved and not any(resolved):
        resolved[0] = True
    return resolved


@dataclass(frozen=True)
class Killmail:
    """A fully resolved killmail: one victim, N attackers, zkb metadata."""
    killmail_id: int
    killmail_hash: str
    killmail_time: Optional[str] = None
    solar_system_id: Optional[int] = None
    victim: Victim = field(default_factory=Victim)
    attackers: tuple[Attacker, ...] = ()
    zkb: ZkbInfo = field(default_factory=ZkbInfo)

    @property
    def total_value(self) -> float:
        """Reported ISK value of the loss, 0 when zKillboard did not price it."""
        return float(self.zkb.total_value or 0)

    @property
    def final_blow_attacker(self) -> Optional[Attacker]:
        for attacker in self.attackers:
            if attacker.final_blow:
                return attacker
        return None

    @classmethod
    def from_esi(
        cls,
        killmail_id: int,
        killmail_hash: str,
        esi_data: dict[str, Any],
        zkb: ZkbInfo | None = None,
        ship_name: Callable[[int], str] | None = None,
    ) -> Killmail:
        """
        Convert an ESI /killmails/{id}/{hash}/ payload.

        Args:
            killmail_id: Killmail ID
            killmail_hash: Killmail hash
            esi_data: Decoded ESI response
            zkb: zKillboard metadata from the list row
            ship_name: Optional ship type ID -> name lookup

        Returns:
            Killmail record
        """
        def _ship(type_id):
            if type_id is None or ship_name is None:
                return None
            return ship_name(type_id)

        victim_data = esi_data.get('victim') or {}
        victim = Victim(
            ship_type_id=victim_data.get('ship_type_id'),
            ship_type_name=_ship(victim_data.get('ship_type_id')),
            character_id=victim_data.get('character_id'),
            corporation_id=victim_data.get('corporation_id'),
            alliance_id=victim_data.get('alliance_id'),
            faction_id=victim_data.get('faction_id'),
            damage_taken=victim_data.get('damage_taken'),
        )

        attacker_data = esi_data.get('attackers') or []
        final_blows = resolve_final_blows([a.get('final_blow') for a in attacker_data])
        attackers = tuple(
            Attacker(
                character_id=a.get('character_id'),
                corporation_id=a.get('corporation_id'),
                alliance_id=a.get('alliance_id'),
                faction_id=a.get('faction_id'),
                ship_type_id=a.get('ship_type_id'),
                ship_type_name=_ship(a.get('ship_type_id')),
                weapon_type_id=a.get('weapon_type_id'),
                damage_done=a.get('damage_done'),
                final_blow=final_blow,
                security_status=a.get('security_status'),
            )
            for a, final_blow in zip(attacker_data, final_blows)
        )

        if zkb is None:
            zkb = ZkbInfo(hash=killmail_hash)

        return cls(
            killmail_id=int(killmail_id),
            killmail_hash=killmail_hash,
            killmail_time=esi_data.get('killmail_time'),
            solar_system_id=esi_data.get('solar_system_id'),
            victim=victim,
            attackers=attackers,
            zkb=zkb,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the JSON cache."""
        data = asdict(self)
        data['attackers'] = list(data['attackers'])
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Killmail:
        """Rebuild a record written by to_dict()."""
        return cls(
            killmail_id=int(data['killmail_id']),
            killmail_hash=data['killmail_hash'],
            killmail_time=data.get('killmail_time'),
            solar_system_id=data.get('solar_system_id'),
            victim=Victim(**_pick(Victim, data.get('victim') or {})),
            attackers=tuple(Attacker(**_pick(Attacker, a)) for a in data.get('attackers') or []),
            zkb=ZkbInfo(**_pick(ZkbInfo, data.get('zkb') or {})),
        )


@dataclass(frozen=True)
class PartitionKey:
    """Identifies one cache partition and one report: corporation, month, filters, kind."""
    corporation_id: int
    year: int
    month: int
    solo: bool = False
    wspace: bool = False
    kind: str = "kills"

    def __post_init__(self):
        if self.kind not in KILL_KINDS:
            raise ValueError(f"Unknown kind '{self.kind}'. Expected one of {KILL_KINDS}")
        if not 1 <= self.month <= 12:
            raise ValueError(f"Invalid month: {self.month}")

    @property
    def period(self) -> str:
        return f"{self.year}-{self.month:02d}"

    @property
    def cache_name(self) -> str:
        """File stem, e.g. '98626718-2026-01-solo-losses'."""
        name = f"{self.corporation_id}-{self.period}"
        if self.solo:
            name += "-solo"
        if self.wspace:
            name += "-wspace"
        if self.kind == "losses":
            name += "-losses"
        return name

    def list_path(self, page: int) -> str:
        """Relative list endpoint path for a 1-indexed page."""
        path = f"{self.kind}/corporationID/{self.corporation_id}/"
        if self.solo:
            path += "solo/"
        if self.wspace:
            path += "w-space/"
        return path + f"year/{self.year}/month/{self.month}/page/{page}/"
