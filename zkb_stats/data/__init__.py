"""
Data fetching modules for zKillboard and ESI killmail data.
"""

from zkb_stats.data.killmail import (
    Attacker,
    Killmail,
    KillmailSummary,
    PartitionKey,
    Victim,
    ZkbInfo,
    resolve_final_blows,
)
from zkb_stats.data.cache import KillmailCache
from zkb_stats.data.esi import ESIClient
from zkb_stats.data.names import CharacterNameResolver, fallback_name
from zkb_stats.data.ships import ship_type_name
from zkb_stats.data.zkillboard import PageResult, ZKillboardClient

__all__ = [
    'Attacker',
    'Killmail',
    'KillmailSummary',
    'PartitionKey',
    'Victim',
    'ZkbInfo',
    'resolve_final_blows',
    'KillmailCache',
    'ESIClient',
    'CharacterNameResolver',
    'fallback_name',
    'ship_type_name',
    'PageResult',
    'ZKillboardClient',
]
