"""
Tests for pre-match position recommendations.
"""
import random
import unittest

import pytest

from fairrotation.models import Player, PlayerStats, Role
from fairrotation.models.team_config import SubstitutionType, TeamConfig
from fairrotation.services.mode_definitions import resolve_mode_definition
from fairrotation.services.position_recommendations import (
    calculate_percentage_deficits, calculate_position_recommendations,
    calculate_target_percentages
)


def _player(pid, defender=0, midfielder=0, attacker=0):
    return Player(pid, pid.upper(), PlayerStats(
        time_as_defender_seconds=defender,
        time_as_midfielder_seconds=midfielder,
        time_as_attacker_seconds=attacker,
    ))


class TestTargetPercentages(unittest.TestCase):

    def test_two_two(self) -> None:
        targets = calculate_target_percentages(resolve_mode_definition(TeamConfig("5v5", 7, "2-2")))
        self.assertEqual(targets, {Role.DEFENDER: 50.0, Role.MIDFIELDER: 0.0, Role.ATTACKER: 50.0})

    def test_one_two_one(self) -> None:
        targets = calculate_target_percentages(resolve_mode_definition(TeamConfig("5v5", 7, "1-2-1")))
        self.assertEqual(targets, {Role.DEFENDER: 25.0, Role.MIDFIELDER: 50.0, Role.ATTACKER: 25.0})

    def test_two_three_one(self) -> None:
        targets = calculate_target_percentages(resolve_mode_definition(TeamConfig("7v7", 9, "2-3-1")))
        self.assertAlmostEqual(targets[Role.DEFENDER], 33.333, places=2)
        self.assertEqual(targets[Role.MIDFIELDER], 50.0)
        self.assertAlmostEqual(targets[Role.ATTACKER], 16.667, places=2)

    def test_no_definition(self) -> None:
        self.assertEqual(set(calculate_target_percentages(None).values()), {0.0})


def test_percentage_deficits_skip_excluded_players():
    targets = {Role.DEFENDER: 50.0, Role.MIDFIELDER: 0.0, Role.ATTACKER: 50.0}
    deficits = calculate_percentage_deficits(
        [_player("g"), _player("a", defender=300, attacker=100), _player("b")], targets, ["g"])
    assert [d.player_id for d in deficits] == ["a", "b"]
    assert deficits[0].deficits[Role.DEFENDER] == -25.0
    assert deficits[0].deficits[Role.ATTACKER] == 25.0
    assert deficits[0].has_history
    assert not deficits[1].has_history


class TestPositionRecommendations(unittest.TestCase):
    """Players furthest below a role's target share get that role."""

    def setUp(self) -> None:
        self.config = TeamConfig("5v5", 6, "2-2")
        self.players = [
            _player("g", defender=500),
            _player("a", defender=600),
            _player("b", attacker=600),
            _player("c", defender=150, attacker=450),
            _player("d", defender=450, attacker=150),
            _player("e"),
        ]

    def test_assigns_by_deficit(self) -> None:
        result = calculate_position_recommendations(
            self.players, self.config, "g", substitute_ids=["e"], rng=random.Random(1))
        assigned = {pos: rec.player_id for pos, rec in result.recommendations.items()}
        self.assertEqual(assigned, {
            "leftDefender": "b",
            "rightDefender": "c",
            "leftAttacker": "a",
            "rightAttacker": "d",
        })
        self.assertEqual(result.players_considered, 4)
        self.assertEqual(result.recommendations["leftDefender"].reason, "0.0% defender time")
        self.assertEqual(result.recommendations["rightAttacker"].reason, "25.0% attacker time")

    def test_to_dict(self) -> None:
        result = calculate_position_recommendations(
            self.players, self.config, "g", substitute_ids=["e"], rng=random.Random(1))
        data = result.to_dict()
        self.assertEqual(data["recommendations"]["leftDefender"],
                         {"playerId": "b", "reason": "0.0% defender time"})
        self.assertEqual(data["metadata"]["playersConsidered"], 4)
        self.assertEqual(data["metadata"]["targetPercentages"],
                         {"defender": 50.0, "midfielder": 0.0, "attacker": 50.0})

    def test_ties_are_reproducible_with_a_seed(self) -> None:
        fresh = [_player(pid) for pid in ("g", "a", "b", "c", "d")]
        first = calculate_position_recommendations(fresh, self.config, "g", rng=random.Random(7))
        second = calculate_position_recommendations(fresh, self.config, "g", rng=random.Random(7))
        self.assertEqual(first.recommendations, second.recommendations)

        ids = [rec.player_id for rec in first.recommendations.values()]
        self.assertEqual(sorted(ids), ["a", "b", "c", "d"])
        self.assertEqual({rec.reason for rec in first.recommendations.values()},
                         {"No match history"})

    def test_fewer_players_than_positions(self) -> None:
        result = calculate_position_recommendations(
            [_player("g"), _player("a", attacker=60)], self.config, "g")
        self.assertEqual(result.recommendations["leftDefender"].player_id, "a")
        self.assertEqual(len(result.recommendations), 1)


@pytest.mark.parametrize("config", [
    TeamConfig("5v5", 7, "2-2", SubstitutionType.PAIRS),
    TeamConfig("9v9", 9, "3-3-2"),
])
def test_unavailable_for_paired_or_unknown_configs(config):
    players = [_player("g"), _player("a"), _player("b")]
    assert calculate_position_recommendations(players, config, "g") is None


def test_no_players():
    assert calculate_position_recommendations([], TeamConfig(), "g") is None


def test_everyone_excluded():
    players = [_player("g"), _player("a")]
    assert calculate_position_recommendations(players, TeamConfig(), "g", ["a"]) is None
