"""
Tests for rotation queue builders and the live RotationQueue.
"""
import unittest

from fairrotation.models.formation import Formation, FormationRecommendation, PositionPair
from fairrotation.models.team_config import PairedRoleStrategy, TeamConfig
from fairrotation.services.mode_definitions import resolve_mode_definition
from fairrotation.services.rotation_queue import (
    RotationQueue, build_paired_rotation_queue, build_rotation_queue
)


class TestQueueBuilders(unittest.TestCase):
    """Field players first, substitutes after, next off from the field."""

    def test_individual_queue(self) -> None:
        queue, next_off = build_rotation_queue(["c", "b"], ["d", "e"])
        self.assertEqual(queue, ["c", "b", "d", "e"])
        self.assertEqual(next_off, "c")

    def test_no_field_players(self) -> None:
        queue, next_off = build_rotation_queue([], ["d"])
        self.assertEqual(queue, ["d"])
        self.assertIsNone(next_off)

    def test_paired_queue_keeps_pairs_together(self) -> None:
        queue, next_off = build_paired_rotation_queue(
            PositionPair("a", "b"), PositionPair("c", "d"), [PositionPair("e", "f")],
            PairedRoleStrategy.KEEP_THROUGHOUT_PERIOD)
        self.assertEqual(queue, ["a", "b", "c", "d", "e", "f"])
        self.assertEqual(next_off, "a")

    def test_paired_queue_groups_roles(self) -> None:
        queue, next_off = build_paired_rotation_queue(
            PositionPair("a", "b"), PositionPair("c", "d"), [PositionPair("e", "f")],
            PairedRoleStrategy.SWAP_EVERY_ROTATION)
        self.assertEqual(queue, ["a", "c", "b", "d", "e", "f"])
        self.assertEqual(next_off, "a")

    def test_role_groups_fall_back_to_pairs_when_incomplete(self) -> None:
        queue, _ = build_paired_rotation_queue(
            PositionPair("a", "b"), PositionPair("c", None), [],
            PairedRoleStrategy.SWAP_EVERY_ROTATION)
        self.assertEqual(queue, ["a", "b", "c"])

    def test_paired_queue_excludes_ids(self) -> None:
        queue, next_off = build_paired_rotation_queue(
            PositionPair("a", "b"), PositionPair("c", "d"), [PositionPair("e", "x")],
            exclude_ids={"x"})
        self.assertEqual(queue, ["a", "b", "c", "d", "e"])
        self.assertEqual(next_off, "a")


class TestRotationQueue(unittest.TestCase):
    """Live queue manipulation."""

    def setUp(self) -> None:
        self.queue = RotationQueue(["a", "b", "c", "d", "e", "f"], field_count=4)

    def test_rotate_player_moves_to_end(self) -> None:
        self.queue.rotate_player("a")
        self.assertEqual(self.queue.to_list(), ["b", "c", "d", "e", "f", "a"])
        self.queue.rotate_player("zz")
        self.assertEqual(len(self.queue), 6)

    def test_next_player(self) -> None:
        self.assertEqual(self.queue.next_player(), "a")
        self.assertEqual(self.queue.next_player(2), ["a", "b"])
        self.assertIsNone(RotationQueue([], field_count=4).next_player())

    def test_add_player_positions(self) -> None:
        self.queue.add_player("z", "start")
        self.assertEqual(self.queue.position_of("z"), 0)
        self.queue.add_player("z", 3)
        self.assertEqual(self.queue.position_of("z"), 3)
        self.queue.add_player("z")
        self.assertEqual(self.queue.to_list()[-1], "z")
        self.assertEqual(self.queue.to_list().count("z"), 1)
        with self.assertRaises(ValueError):
            self.queue.add_player("z", "middle")

    def test_move_to_front_and_insert_before(self) -> None:
        self.queue.move_to_front("e")
        self.assertEqual(self.queue.to_list()[:2], ["e", "a"])
        self.queue.insert_before("f", "a")
        self.assertEqual(self.queue.to_list()[:3], ["e", "f", "a"])
        self.queue.insert_before("f", "missing")
        self.assertEqual(self.queue.position_of("f"), 1)

    def test_deactivate_and_reactivate(self) -> None:
        self.queue.deactivate_player("b")
        self.assertFalse(self.queue.contains("b"))
        self.assertTrue(self.queue.is_inactive("b"))
        self.assertEqual(self.queue.inactive_players, ["b"])

        self.queue.reactivate_player("b")
        self.assertFalse(self.queue.is_inactive("b"))
        # first substitute position after the four field players
        self.assertEqual(self.queue.position_of("b"), 4)

    def test_reactivate_into_short_queue(self) -> None:
        queue = RotationQueue(["a", "b"], field_count=4)
        queue.deactivate_player("a")
        queue.reactivate_player("a")
        self.assertEqual(queue.to_list(), ["b", "a"])

    def test_reorder_by_positions(self) -> None:
        self.queue.reorder_by_positions(["d", None, "a", "zz", "d"])
        self.assertEqual(self.queue.to_list(), ["d", "a", "b", "c", "e", "f"])

    def test_clone_is_independent(self) -> None:
        self.queue.deactivate_player("f")
        cloned = self.queue.clone()
        cloned.rotate_player("a")
        cloned.reactivate_player("f")
        self.assertEqual(self.queue.to_list(), ["a", "b", "c", "d", "e"])
        self.assertEqual(self.queue.inactive_players, ["f"])
        self.assertEqual(cloned.inactive_players, [])

    def test_position_of_missing(self) -> None:
        self.assertEqual(self.queue.position_of("zz"), -1)


def test_reactivation_uses_the_mode_field_count():
    definition = resolve_mode_definition(TeamConfig("7v7", 9, "2-2-2"))
    recommendation = FormationRecommendation(
        formation=Formation(goalie="g"),
        rotation_queue=("a", "b", "c", "d", "e", "f", "h", "i"),
        next_player_to_rotate_off="a",
    )
    queue = RotationQueue.from_recommendation(recommendation, definition)
    assert queue.field_count == 6

    queue.deactivate_player("i")
    queue.reactivate_player("i")
    # first substitute position after six field players
    assert queue.position_of("i") == 6
