"""
Tests for individual-mode formation building.
"""
import unittest

from fairrotation.models.team_config import TeamConfig
from fairrotation.services.formation_builder import (
    assign_deficit_positions, assign_role_time_positions, assign_two_role_positions,
    build_individual_recommendation, partition_players
)
from fairrotation.services.mode_definitions import resolve_mode_definition
from fairrotation.services.role_balance import RoleProfile


def _profile(pid, index, total=0, defender=0, midfielder=0, attacker=0, inactive=False):
    return RoleProfile(
        player_id=pid,
        defender_time=defender,
        midfielder_time=midfielder,
        attacker_time=attacker,
        total_outfield_time=total,
        is_inactive=inactive,
        roster_index=index,
    )


class TestTwoRoleFormation(unittest.TestCase):
    """5v5 2-2 with seven players."""

    def setUp(self) -> None:
        self.definition = resolve_mode_definition(TeamConfig("5v5", 7, "2-2"))
        self.profiles = [
            _profile("p1", 0, total=100, defender=100),
            _profile("p2", 1, total=200, attacker=200),
            _profile("p3", 2, total=300, defender=150, attacker=150),
            _profile("p4", 3, total=400, attacker=400),
            _profile("p5", 4, total=500, defender=250, attacker=250),
            _profile("p6", 5, total=600, defender=300, attacker=300),
        ]

    def test_attacker_surplus_defends(self) -> None:
        rec = build_individual_recommendation("g", self.profiles, self.definition,
                                              assign_two_role_positions)
        self.assertEqual(rec.formation.to_dict(), {
            "goalie": "g",
            "leftDefender": "p4",
            "rightDefender": "p2",
            "leftAttacker": "p3",
            "rightAttacker": "p1",
            "substitute_1": "p5",
            "substitute_2": "p6",
        })

    def test_queue_orders_field_most_time_first(self) -> None:
        rec = build_individual_recommendation("g", self.profiles, self.definition,
                                              assign_two_role_positions)
        self.assertEqual(rec.rotation_queue, ("p4", "p3", "p2", "p1", "p5", "p6"))
        self.assertEqual(rec.next_player_to_rotate_off, "p4")

    def test_is_deterministic(self) -> None:
        first = build_individual_recommendation("g", self.profiles, self.definition,
                                                assign_two_role_positions)
        second = build_individual_recommendation("g", self.profiles, self.definition,
                                                 assign_two_role_positions)
        self.assertEqual(first, second)

    def test_inactive_player_is_benched_deepest(self) -> None:
        profiles = list(self.profiles)
        profiles[0] = _profile("p1", 0, total=100, defender=100, inactive=True)
        rec = build_individual_recommendation("g", profiles, self.definition,
                                              assign_two_role_positions)
        field = [rec.formation[pos] for pos in self.definition.field_positions]
        self.assertNotIn("p1", field)
        self.assertEqual(rec.formation["substitute_1"], "p6")
        self.assertEqual(rec.formation["substitute_2"], "p1")
        self.assertNotIn("p1", rec.rotation_queue)


class TestDeficitFormation(unittest.TestCase):
    """5v5 1-2-1 balanced on role deficits."""

    def setUp(self) -> None:
        self.definition = resolve_mode_definition(TeamConfig("5v5", 6, "1-2-1"))
        self.profiles = [
            _profile("p1", 0, total=600, midfielder=300, attacker=300),
            _profile("p2", 1, total=600, defender=300, attacker=300),
            _profile("p3", 2, total=600, defender=300, midfielder=300),
            _profile("p4", 3, total=600, defender=200, midfielder=200, attacker=200),
            _profile("p5", 4, total=1000, defender=400, midfielder=300, attacker=300),
        ]

    def test_positions_follow_deficits(self) -> None:
        rec = build_individual_recommendation("g", self.profiles, self.definition,
                                              assign_deficit_positions)
        self.assertEqual(rec.formation.to_dict(), {
            "goalie": "g",
            "defender": "p1",
            "left": "p2",
            "right": "p4",
            "attacker": "p3",
            "substitute_1": "p5",
        })
        self.assertEqual(rec.rotation_queue, ("p1", "p2", "p3", "p4", "p5"))
        self.assertEqual(rec.next_player_to_rotate_off, "p1")

    def test_zero_time_squad_fills_every_position(self) -> None:
        field = [_profile(f"p{i}", i) for i in range(4)]
        assignments = assign_deficit_positions(field, self.definition)
        self.assertEqual(sorted(assignments.values()), ["p0", "p1", "p2", "p3"])
        self.assertEqual(list(assignments), ["defender", "left", "right", "attacker"])

    def test_deficit_ties_go_to_least_total_time(self) -> None:
        profiles = [
            _profile("a", 0, total=300),
            _profile("b", 1, total=90),
            _profile("c", 2, total=150),
            _profile("d", 3, total=240),
            _profile("e", 4, total=600),
        ]
        rec = build_individual_recommendation("g", profiles, self.definition,
                                              assign_deficit_positions)
        self.assertEqual(rec.formation.to_dict(), {
            "goalie": "g",
            "defender": "b",
            "left": "d",
            "right": "a",
            "attacker": "c",
            "substitute_1": "e",
        })


class TestRoleTimeFormation(unittest.TestCase):
    """7v7 shapes fill each role with the least time in it."""

    def setUp(self) -> None:
        self.profiles = [
            _profile("p1", 0, total=200, midfielder=100, attacker=100),
            _profile("p2", 1, total=200, midfielder=100, attacker=100),
            _profile("p3", 2, total=200, defender=100, attacker=100),
            _profile("p4", 3, total=200, defender=100, attacker=100),
            _profile("p5", 4, total=200, defender=100, midfielder=100),
            _profile("p6", 5, total=200, defender=100, midfielder=100),
            _profile("p7", 6, total=500, defender=200, midfielder=200, attacker=100),
        ]

    def test_two_two_two(self) -> None:
        definition = resolve_mode_definition(TeamConfig("7v7", 8, "2-2-2"))
        rec = build_individual_recommendation("g", self.profiles, definition,
                                              assign_role_time_positions)
        self.assertEqual(rec.formation.to_dict(), {
            "goalie": "g",
            "leftDefender": "p1",
            "rightDefender": "p2",
            "leftMidfielder": "p3",
            "rightMidfielder": "p4",
            "leftAttacker": "p5",
            "rightAttacker": "p6",
            "substitute_1": "p7",
        })
        self.assertEqual(len(rec.rotation_queue), 7)

    def test_two_three_one(self) -> None:
        definition = resolve_mode_definition(TeamConfig("7v7", 8, "2-3-1"))
        assignments = assign_role_time_positions(self.profiles[:6], definition)
        self.assertEqual(assignments, {
            "leftDefender": "p1",
            "rightDefender": "p2",
            "leftMidfielder": "p3",
            "centerMidfielder": "p4",
            "rightMidfielder": "p5",
            "attacker": "p6",
        })


class TestLimitedPlayers(unittest.TestCase):
    """No rotation when active players do not exceed field positions."""

    def setUp(self) -> None:
        self.definition = resolve_mode_definition(TeamConfig("5v5", 7, "2-2"))

    def test_exactly_enough_active_players(self) -> None:
        profiles = [
            _profile("a", 0, total=300),
            _profile("b", 1, total=100),
            _profile("x", 2, inactive=True),
            _profile("c", 3, total=200),
            _profile("d", 4, total=400),
            _profile("y", 5, inactive=True),
        ]
        rec = build_individual_recommendation("g", profiles, self.definition,
                                              assign_two_role_positions)
        self.assertEqual(rec.formation.to_dict(), {
            "goalie": "g",
            "leftDefender": "b",
            "rightDefender": "c",
            "leftAttacker": "a",
            "rightAttacker": "d",
            "substitute_1": "x",
            "substitute_2": "y",
        })
        self.assertEqual(rec.rotation_queue, ())
        self.assertIsNone(rec.next_player_to_rotate_off)

    def test_short_squad_leaves_positions_empty(self) -> None:
        profiles = [_profile("a", 0), _profile("b", 1), _profile("c", 2)]
        rec = build_individual_recommendation("g", profiles, self.definition,
                                              assign_two_role_positions)
        self.assertIsNone(rec.formation["rightAttacker"])
        self.assertEqual(rec.formation["leftDefender"], "a")
        self.assertEqual(rec.rotation_queue, ())


def test_partition_players_sorts_by_total_time():
    profiles = [
        _profile("a", 0, total=50),
        _profile("b", 1, total=10),
        _profile("c", 2, total=30, inactive=True),
        _profile("d", 3, total=10),
    ]
    field, substitutes, inactive = partition_players(profiles, 2)
    assert [p.player_id for p in field] == ["b", "d"]
    assert [p.player_id for p in substitutes] == ["a"]
    assert [p.player_id for p in inactive] == ["c"]
