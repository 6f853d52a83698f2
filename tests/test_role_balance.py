"""Tests for role profiles, role deficits and required roles."""

import unittest

from fairrotation.models.player import Player, PlayerStats, Role
from fairrotation.services.role_balance import (
    RoleProfile, build_role_profiles, calculate_role_deficit, can_play_role,
    required_role
)


class TestRequiredRole(unittest.TestCase):
    """The 0.8 / 1.25 thresholds on (defender + 1) / (attacker + 1)."""

    def test_balanced_player_is_flexible(self) -> None:
        self.assertIsNone(required_role(0, 0))
        self.assertIsNone(required_role(600, 600))

    def test_heavy_defender_must_attack(self) -> None:
        self.assertIs(required_role(1000, 1), Role.ATTACKER)

    def test_heavy_attacker_must_defend(self) -> None:
        self.assertIs(required_role(1, 1000), Role.DEFENDER)

    def test_thresholds_are_exclusive(self) -> None:
        # 4 / 5 == 0.8 exactly, 5 / 4 == 1.25 exactly
        self.assertIsNone(required_role(3, 4))
        self.assertIsNone(required_role(4, 3))

    def test_thresholds_are_asymmetric(self) -> None:
        # 0.79 is below the defender threshold, 1.26 above the attacker one
        self.assertIs(required_role(78, 99), Role.DEFENDER)
        self.assertIs(required_role(125, 99), Role.ATTACKER)
        # 1.24 is still flexible
        self.assertIsNone(required_role(123, 99))

    def test_can_play_role(self) -> None:
        self.assertTrue(can_play_role(None, Role.DEFENDER))
        self.assertTrue(can_play_role(Role.ATTACKER, Role.ATTACKER))
        self.assertFalse(can_play_role(Role.ATTACKER, Role.DEFENDER))


class TestRoleDeficit(unittest.TestCase):
    """Deficit against an equal share of role time."""

    roles = (Role.DEFENDER, Role.MIDFIELDER, Role.ATTACKER)

    def test_no_time_means_no_deficit(self) -> None:
        profile = RoleProfile("a")
        self.assertEqual(calculate_role_deficit(profile, Role.DEFENDER, self.roles), 0)

    def test_deficit_against_equal_share(self) -> None:
        profile = RoleProfile("a", defender_time=0, midfielder_time=300, attacker_time=600)
        self.assertEqual(calculate_role_deficit(profile, Role.DEFENDER, self.roles), 300)
        self.assertEqual(calculate_role_deficit(profile, Role.MIDFIELDER, self.roles), 0)
        self.assertEqual(calculate_role_deficit(profile, Role.ATTACKER, self.roles), 0)

    def test_two_role_share(self) -> None:
        profile = RoleProfile("a", defender_time=100, attacker_time=300)
        roles = (Role.DEFENDER, Role.ATTACKER)
        self.assertEqual(calculate_role_deficit(profile, Role.DEFENDER, roles), 100)


def test_build_role_profiles_excludes_goalie_and_keeps_roster_order():
    squad = [
        Player("g"),
        Player("a", stats=PlayerStats(time_on_field_seconds=60, time_as_defender_seconds=60)),
        Player("b", stats=PlayerStats(is_inactive=True)),
    ]
    profiles = build_role_profiles(squad, goalie_id="g")
    assert [p.player_id for p in profiles] == ["a", "b"]
    assert profiles[0].defender_time == 60
    assert profiles[0].total_outfield_time == 60
    assert profiles[0].roster_index == 1
    assert profiles[1].is_inactive


def test_build_role_profiles_prefers_stats_snapshot():
    squad = [Player("a", stats=PlayerStats(time_on_field_seconds=10))]
    snapshot = {"a": PlayerStats(time_on_field_seconds=999, time_as_attacker_seconds=999)}
    profile = build_role_profiles(squad, snapshot)[0]
    assert profile.total_outfield_time == 999
    assert profile.required_role is Role.DEFENDER


def test_missing_stats_are_zero():
    profile = build_role_profiles([Player("a")], {})[0]
    assert profile.total_outfield_time == 0
    assert profile.required_role is None
