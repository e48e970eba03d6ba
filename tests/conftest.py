"""
Pytest configuration and shared fixtures.
"""

from unittest.mock import patch

import pytest

from zkb_stats.config.loader import clear_cache, get_fetch_settings
from zkb_stats.data.killmail import Attacker, Killmail, Victim, ZkbInfo

CORP_ID = 98626718
OTHER_CORP_ID = 1000001
CAPSULE = 670
RIFTER = 587
THORAX = 627
DRAKE = 24698

ZKB_URL = "https://zkillboard.com/api"
ESI_URL = "https://esi.evetech.net/latest"


@pytest.fixture(autouse=True)
def fresh_config():
    """Reload YAML config for every test."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def no_sleep():
    """Replace time.sleep so rate-limit pauses and retry backoff are instant."""
    with patch("zkb_stats.data.zkillboard.time.sleep") as mock_sleep:
        yield mock_sleep


@pytest.fixture
def fetch_settings(tmp_path):
    """Fetch settings pointing at a temporary cache root with no retry backoff."""
    return get_fetch_settings(cache_root=tmp_path / "cache", retry_backoff=0.0)


@pytest.fixture
def make_killmail():
    """Factory for Killmail records."""
    def _make(
        killmail_id=1,
        victim_ship=RIFTER,
        victim_ship_name=None,
        victim_character=None,
        victim_corp=OTHER_CORP_ID,
        damage_taken=1000,
        attackers=(),
        total_value=None,
    ):
        victim = Victim(
            ship_type_id=victim_ship,
            ship_type_name=victim_ship_name,
            character_id=victim_character,
            corporation_id=victim_corp,
            damage_taken=damage_taken,
        )
        return Killmail(
            killmail_id=killmail_id,
            killmail_hash=f"hash{killmail_id}",
            killmail_time="2026-01-15T20:00:00Z",
            solar_system_id=30002187,
            victim=victim,
            attackers=tuple(attackers),
            zkb=ZkbInfo(hash=f"hash{killmail_id}", total_value=total_value),
        )
    return _make


@pytest.fixture
def make_attacker():
    """Factory for Attacker entries of the tracked corporation by default."""
    def _make(
        character_id=111,
        ship_type_id=RIFTER,
        ship_type_name="Rifter",
        corporation_id=CORP_ID,
        final_blow=False,
        character_name=None,
    ):
        return Attacker(
            character_id=character_id,
            character_name=character_name,
            corporation_id=corporation_id,
            ship_type_id=ship_type_id,
            ship_type_name=ship_type_name,
            weapon_type_id=2881,
            damage_done=500,
            final_blow=final_blow,
            security_status=1.5,
        )
    return _make


@pytest.fixture
def esi_killmail():
    """Factory for ESI /killmails/{id}/{hash}/ payloads."""
    def _make(killmail_id, victim_ship=RIFTER, victim_character=222, victim_corp=OTHER_CORP_ID, attackers=None):
        if attackers is None:
            attackers = [{
                "character_id": 111,
                "corporation_id": CORP_ID,
                "ship_type_id": THORAX,
                "weapon_type_id": 2881,
                "damage_done": 1000,
                "final_blow": True,
                "security_status": 2.1,
            }]
        return {
            "killmail_id": killmail_id,
            "killmail_time": "2026-01-15T20:00:00Z",
            "solar_system_id": 30002187,
            "victim": {
                "character_id": victim_character,
                "corporation_id": victim_corp,
                "ship_type_id": victim_ship,
                "damage_taken": 1000,
            },
            "attackers": attackers,
        }
    return _make


@pytest.fixture
def list_row():
    """Factory for zKillboard list endpoint rows."""
    def _make(killmail_id, total_value=10_000_000.0, solo=False):
        return {
            "killmail_id": killmail_id,
            "zkb": {
                "locationID": 40138000,
                "hash": f"hash{killmail_id}",
                "fittedValue": total_value / 2,
                "droppedValue": 0,
                "destroyedValue": total_value,
                "totalValue": total_value,
                "points": 5,
                "npc": False,
                "solo": solo,
                "awox": False,
            },
        }
    return _make
