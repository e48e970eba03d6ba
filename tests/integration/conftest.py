"""
Integration test fixtures.

Provides mock HTTP responses for one corporation-month: corp 98626718,
January 2026.
"""

from __future__ import annotations

import pytest
import responses

CORP_ID = 98626718
VICTIM_CORP_ID = 1000001

LIST_URL = "https://zkillboard.com/api/{kind}/corporationID/98626718/year/2026/month/1/page/{page}/"
DETAIL_URL = "https://esi.evetech.net/latest/killmails/{id}/hash{id}/"
NAMES_URL = "https://esi.evetech.net/latest/universe/names/"
CORP_URL = "https://esi.evetech.net/latest/corporations/98626718/"


def _row(killmail_id: int, total_value: float) -> dict:
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
            "solo": False,
            "awox": False,
        },
    }


def _detail(killmail_id: int, victim_ship: int, victim_character: int, victim_corp: int, attackers: list) -> dict:
    return {
        "killmail_id": killmail_id,
        "killmail_time": "2026-01-15T20:00:00Z",
        "solar_system_id": 30002187,
        "victim": {
            "character_id": victim_character,
            "corporation_id": victim_corp,
            "ship_type_id": victim_ship,
            "damage_taken": 2500,
        },
        "attackers": attackers,
    }


@pytest.fixture
def mocked_api():
    """Intercept all HTTP traffic; unregistered URLs fail as connection errors."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def january_kills(mocked_api):
    """
    Register a month with three kills on page 1 and an empty page 2.

    Killmail 1001 podded a victim, 1002 is a Rifter kill finished by pilot 111,
    and 1003 is missing from ESI.
    """
    corp_attacker = {
        "character_id": 111,
        "corporation_id": CORP_ID,
        "ship_type_id": 627,
        "weapon_type_id": 2881,
        "damage_done": 2500,
        "final_blow": True,
    }
    mocked_api.add(responses.GET, LIST_URL.format(kind="kills", page=1), json=[
        _row(1001, 10_000.0),
        _row(1002, 12_000_000.0),
        _row(1003, 5_000_000.0),
    ])
    mocked_api.add(responses.GET, LIST_URL.format(kind="kills", page=2), json=[])
    mocked_api.add(responses.GET, DETAIL_URL.format(id=1001),
                   json=_detail(1001, 670, 222, VICTIM_CORP_ID, [corp_attacker]))
    mocked_api.add(responses.GET, DETAIL_URL.format(id=1002),
                   json=_detail(1002, 587, 222, VICTIM_CORP_ID, [corp_attacker]))
    mocked_api.add(responses.GET, DETAIL_URL.format(id=1003), json={"error": "Killmail not found"}, status=404)
    mocked_api.add(responses.POST, NAMES_URL, json=[
        {"id": 111, "name": "Alpha Pilot", "category": "character"},
    ])
    mocked_api.add(responses.GET, CORP_URL, json={"name": "Test Corporation", "ticker": "TEST"})
    return mocked_api


@pytest.fixture
def january_losses(mocked_api):
    """Register a month with one Drake loss and one pod loss for pilot 111."""
    mocked_api.add(responses.GET, LIST_URL.format(kind="losses", page=1), json=[
        _row(2001, 80_000_000.0),
        _row(2002, 20_000.0),
    ])
    mocked_api.add(responses.GET, LIST_URL.format(kind="losses", page=2), json=[])
    hostile = [{"character_id": 999, "corporation_id": VICTIM_CORP_ID, "ship_type_id": 587}]
    mocked_api.add(responses.GET, DETAIL_URL.format(id=2001), json=_detail(2001, 24698, 111, CORP_ID, hostile))
    mocked_api.add(responses.GET, DETAIL_URL.format(id=2002), json=_detail(2002, 670, 111, CORP_ID, hostile))
    mocked_api.add(responses.POST, NAMES_URL, json=[
        {"id": 111, "name": "Alpha Pilot", "category": "character"},
    ])
    mocked_api.add(responses.GET, CORP_URL, json={"name": "Test Corporation", "ticker": "TEST"})
    return mocked_api
