"""
Unit tests for kill statistics aggregation.
"""

import json

import pytest

from zkb_stats.stats.kills import KillStatistics

CORP_ID = 98626718
OTHER_CORP_ID = 1000001
CAPSULE = 670
RIFTER = 587
THORAX = 627
DRAKE = 24698


@pytest.fixture
def stats():
    return KillStatistics(CORP_ID, "Test Corp")


class TestProcessKillmail:
    """Tests for folding killmails into kill counts."""

    def test_credits_corp_attackers(self, stats, make_killmail, make_attacker):
        km = make_killmail(1, attackers=[
            make_attacker(111, final_blow=True),
            make_attacker(112, ship_type_id=THORAX, ship_type_name="Thorax"),
            make_attacker(999, corporation_id=OTHER_CORP_ID),
        ])

        stats.process_killmail(km)

        assert stats.total_kills == 1
        assert set(stats.participants) == {111, 112}
        assert stats.participants[111].total_kills == 1
        assert stats.participants[111].final_blows == 1
        assert stats.participants[112].final_blows == 0
        assert stats.ship_types[RIFTER].total_kills == 1
        assert stats.ship_types[THORAX].participants == {112: 1}

    def test_capsule_victim_ignored(self, stats, make_killmail, make_attacker):
        """Pod kills change nothing, including the final blow count."""
        km = make_killmail(1, victim_ship=CAPSULE, attackers=[make_attacker(111, final_blow=True)])

        stats.process_killmail(km)

        assert stats.total_kills == 0
        assert stats.participants == {}
        assert stats.ship_types == {}

    def test_capsule_victim_detected_by_name(self, stats, make_killmail, make_attacker):
        km = make_killmail(1, victim_ship=33328, victim_ship_name="Capsule", attackers=[make_attacker(111)])

        stats.process_killmail(km)

        assert stats.total_kills == 0

    def test_capsule_attacker_gets_final_blow_only(self, stats, make_killmail, make_attacker):
        km = make_killmail(1, attackers=[
            make_attacker(111, ship_type_id=CAPSULE, ship_type_name="Capsule", final_blow=True),
        ])

        stats.process_killmail(km)

        participant = stats.participants[111]
        assert participant.final_blows == 1
        assert participant.total_kills == 0
        assert participant.ship_types == {}
        assert CAPSULE not in stats.ship_types
        assert stats.total_kills == 1

    def test_attacker_without_ship_gets_final_blow_only(self, stats, make_killmail, make_attacker):
        km = make_killmail(1, attackers=[
            make_attacker(111, ship_type_id=None, ship_type_name=None, final_blow=True),
        ])

        stats.process_killmail(km)

        assert stats.participants[111].final_blows == 1
        assert stats.participants[111].total_kills == 0

    def test_attacker_without_character_skipped(self, stats, make_killmail, make_attacker):
        """Corp-owned structures and drones have no character."""
        stats.process_killmail(make_killmail(1, attackers=[make_attacker(None)]))

        assert stats.participants == {}
        assert stats.total_kills == 1

    def test_unknown_ship_name_placeholder(self, stats, make_killmail, make_attacker):
        km = make_killmail(1, attackers=[make_attacker(111, ship_type_id=99999, ship_type_name=None)])

        stats.process_killmail(km)

        assert stats.participants[111].ship_types == {"Ship 99999": 1}
        assert stats.ship_types[99999].ship_type_name == "Ship 99999"

    def test_totals_are_monotonic(self, stats, make_killmail, make_attacker):
        totals = []
        for i in range(1, 6):
            stats.process_killmail(make_killmail(i, attackers=[make_attacker(111)]))
            totals.append(stats.total_kills)

        assert totals == [1, 2, 3, 4, 5]
        assert stats.participants[111].total_kills == 5

    def test_ship_signature_counts_distinct_ships(self, stats, make_killmail, make_attacker):
        stats.process_killmail(make_killmail(1, attackers=[make_attacker(111)]))
        stats.process_killmail(make_killmail(2, attackers=[make_attacker(111)]))
        stats.process_killmail(make_killmail(3, attackers=[
            make_attacker(111, ship_type_id=DRAKE, ship_type_name="Drake"),
        ]))

        participant = stats.participants[111]
        assert participant.ship_signature == 2
        assert participant.ship_types == {"Rifter": 2, "Drake": 1}
        assert participant.ship_signature == len(participant.ship_types)


class TestNames:
    """Tests for participant naming priority."""

    def test_resolved_name_wins(self, stats, make_killmail, make_attacker):
        stats.set_character_names({111: "Resolved Pilot"})

        stats.process_killmail(make_killmail(1, attackers=[make_attacker(111, character_name="Raw")]))

        assert stats.participants[111].character_name == "Resolved Pilot"

    def test_raw_name_with_id(self, stats, make_killmail, make_attacker):
        stats.process_killmail(make_killmail(1, attackers=[make_attacker(111, character_name="Raw")]))

        assert stats.participants[111].character_name == "Raw (111)"

    def test_placeholder_name(self, stats, make_killmail, make_attacker):
        stats.process_killmail(make_killmail(1, attackers=[make_attacker(111)]))

        assert stats.participants[111].character_name == "Character_111"

    def test_name_refreshed_when_resolution_arrives(self, stats, make_killmail, make_attacker):
        stats.process_killmail(make_killmail(1, attackers=[make_attacker(111)]))
        stats.set_character_names({111: "Later Name"})
        stats.process_killmail(make_killmail(2, attackers=[make_attacker(111)]))

        assert stats.participants[111].character_name == "Later Name"


class TestRankings:
    """Tests for participant and ship rankings."""

    def _fold(self, stats, make_killmail, make_attacker):
        # 111: 1 kill, 2 final blows (one from a pod); 112: 3 kills; 113: 1 kill
        stats.process_killmails([
            make_killmail(1, attackers=[make_attacker(111, final_blow=True), make_attacker(112)]),
            make_killmail(2, attackers=[make_attacker(112), make_attacker(113)]),
            make_killmail(3, attackers=[
                make_attacker(112, ship_type_id=THORAX, ship_type_name="Thorax"),
                make_attacker(111, ship_type_id=CAPSULE, ship_type_name="Capsule", final_blow=True),
            ]),
        ])

    def test_default_sort_by_kills(self, stats, make_killmail, make_attacker):
        self._fold(stats, make_killmail, make_attacker)

        ranking = stats.get_participant_ranking()

        assert [p.character_id for p in ranking] == [112, 111, 113]

    def test_ties_keep_first_seen_order(self, stats, make_killmail, make_attacker):
        stats.process_killmails([
            make_killmail(1, attackers=[make_attacker(300)]),
            make_killmail(2, attackers=[make_attacker(100)]),
            make_killmail(3, attackers=[make_attacker(200)]),
        ])

        assert [p.character_id for p in stats.get_participant_ranking()] == [300, 100, 200]

    def test_sort_by_final_blows(self, stats, make_killmail, make_attacker):
        self._fold(stats, make_killmail, make_attacker)

        ranking = stats.get_participant_ranking(sort_by="finalblows")

        assert ranking[0].character_id == 111
        assert ranking[0].final_blows == 2

    def test_unknown_sort_key(self, stats):
        with pytest.raises(ValueError, match="Available: kills, finalblows"):
            stats.get_participant_ranking(sort_by="value")

    def test_limit(self, stats, make_killmail, make_attacker):
        self._fold(stats, make_killmail, make_attacker)

        assert len(stats.get_participant_ranking(limit=2)) == 2
        assert len(stats.get_participant_ranking(limit=None)) == 3

    def test_ship_type_ranking(self, stats, make_killmail, make_attacker):
        self._fold(stats, make_killmail, make_attacker)

        ranking = stats.get_ship_type_ranking()

        assert [s.ship_type_name for s in ranking] == ["Rifter", "Thorax"]
        assert ranking[0].total_kills == 4

    def test_participant_ships(self, stats, make_killmail, make_attacker):
        self._fold(stats, make_killmail, make_attacker)

        assert stats.get_participant_ships(112) == [
            {"ship_type": "Rifter", "count": 2},
            {"ship_type": "Thorax", "count": 1},
        ]
        assert stats.get_participant_ships(404) == []


class TestSummary:
    """Tests for summary output."""

    def test_summary_counts(self, stats, make_killmail, make_attacker):
        stats.process_killmails([
            make_killmail(1, attackers=[make_attacker(111)]),
            make_killmail(2, victim_ship=CAPSULE, attackers=[make_attacker(111)]),
        ])

        summary = stats.get_summary()

        assert summary["corporation_id"] == CORP_ID
        assert summary["corporation_name"] == "Test Corp"
        assert summary["total_kills"] == 1
        assert summary["total_participants"] == 1
        assert summary["total_ship_types"] == 1

    def test_default_corporation_name(self):
        assert KillStatistics(CORP_ID).corporation_name == f"Corp {CORP_ID}"

    def test_to_json(self, stats, make_killmail, make_attacker):
        stats.process_killmail(make_killmail(1, attackers=[make_attacker(111)]))

        data = json.loads(stats.to_json())

        assert data["total_kills"] == 1
        assert isinstance(data["last_updated"], str)
