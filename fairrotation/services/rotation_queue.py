"""
Rotation queue construction and manipulation.

The builders produce the queue handed back with a formation recommendation;
RotationQueue lets callers adjust a copy of that queue between engine calls
(manual reordering, players going inactive and coming back).
"""

from __future__ import annotations

from typing import Container, Iterable, List, Optional, Sequence, Tuple, Union

from ..models.formation import FormationRecommendation, ModeDefinition, PositionPair
from ..models.team_config import PairedRoleStrategy


def build_rotation_queue(field_ordered: Sequence[str],
                         substitutes_ordered: Sequence[str]) -> Tuple[List[str], Optional[str]]:
    """
    Concatenate field players and substitutes into a rotation queue.

    Args:
        field_ordered: Field players, most time first
        substitutes_ordered: Active substitutes, least time first

    Returns:
        Tuple of (queue, next player to rotate off). The next player is the
        front field player and is None when nobody is on the field.
    """
    queue = list(field_ordered) + list(substitutes_ordered)
    next_off = field_ordered[0] if field_ordered else None
    return queue, next_off


def _pair_ids(pair: Optional[PositionPair], exclude: Container[str]) -> List[str]:
    if pair is None:
        return []
    return [pid for pid in pair.members() if pid not in exclude]


def build_paired_rotation_queue(first_pair: PositionPair,
                                other_pair: PositionPair,
                                substitute_pairs: Iterable[PositionPair] = (),
                                strategy: Optional[PairedRoleStrategy] = None,
                                exclude_ids: Container[str] = ()) -> Tuple[List[str], Optional[str]]:
    """
    Build the queue for paired substitutions.

    ``keep_throughout_period`` (the default) orders pair by pair starting
    with the first pair to rotate off, defender before attacker.
    ``swap_every_rotation`` groups both defenders then both attackers when
    both field pairs are complete, else falls back to pair order.
    Substitute pairs always follow the field players.

    Args:
        first_pair: Field pair flagged to rotate off first
        other_pair: The remaining field pair
        substitute_pairs: Bench pairs, next on first
        strategy: Ordering preference
        exclude_ids: Ids to leave out (inactive players)

    Returns:
        Tuple of (queue, next player to rotate off)
    """
    field_ids: List[str] = []
    if (strategy is PairedRoleStrategy.SWAP_EVERY_ROTATION
            and first_pair.is_complete and other_pair.is_complete):
        for pid in (first_pair.defender, other_pair.defender,
                    first_pair.attacker, other_pair.attacker):
            if pid not in exclude_ids:
                field_ids.append(pid)
    else:
        field_ids.extend(_pair_ids(first_pair, exclude_ids))
        field_ids.extend(_pair_ids(other_pair, exclude_ids))

    substitute_ids: List[str] = []
    for pair in substitute_pairs:
        substitute_ids.extend(_pair_ids(pair, exclude_ids))

    return build_rotation_queue(field_ids, substitute_ids)


class RotationQueue:
    """
    Mutable rotation queue with inactive-player tracking.

    Inactive players are removed from the queue and remembered separately
    so they can be put back at the first substitute position.

    Args:
        players: Initial queue, front rotates off first
        field_count: Field positions of the mode, see ModeDefinition.field_count
    """

    def __init__(self, players: Iterable[str], field_count: int):
        self._queue: List[str] = list(players)
        self._inactive: List[str] = []
        self.field_count = field_count

    @classmethod
    def from_recommendation(cls, recommendation: FormationRecommendation,
                            definition: ModeDefinition) -> RotationQueue:
        """Live queue for a recommendation, sized to the mode's field."""
        return cls(recommendation.rotation_queue, field_count=definition.field_count)

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self):
        return iter(list(self._queue))

    def __contains__(self, player_id: str) -> bool:
        return player_id in self._queue

    def to_list(self) -> List[str]:
        return list(self._queue)

    @property
    def inactive_players(self) -> List[str]:
        return list(self._inactive)

    def next_player(self, count: int = 1) -> Union[Optional[str], List[str]]:
        """Front player, or the first ``count`` players when count > 1."""
        if count == 1:
            return self._queue[0] if self._queue else None
        return self._queue[:count]

    def rotate_player(self, player_id: str) -> None:
        """Move a player to the end of the queue."""
        if player_id not in self._queue:
            return
        self._queue.remove(player_id)
        self._queue.append(player_id)

    def add_player(self, player_id: str, position: Union[str, int] = "end") -> None:
        """
        Add a player, removing any existing entry first.

        Args:
            player_id: Player to add
            position: "start", "end" or an index
        """
        self.remove_player(player_id)
        if position == "start":
            self._queue.insert(0, player_id)
        elif position == "end":
            self._queue.append(player_id)
        elif isinstance(position, int):
            self._queue.insert(position, player_id)
        else:
            raise ValueError(f"Invalid queue position: {position!r}")

    def remove_player(self, player_id: str) -> None:
        if player_id in self._queue:
            self._queue.remove(player_id)

    def move_to_front(self, player_id: str) -> None:
        self.add_player(player_id, "start")

    def insert_before(self, player_id: str, target_id: str) -> None:
        """Place a player directly in front of a target player."""
        if target_id not in self._queue or player_id == target_id:
            return
        self.remove_player(player_id)
        self._queue.insert(self._queue.index(target_id), player_id)

    def deactivate_player(self, player_id: str) -> None:
        self.remove_player(player_id)
        if player_id not in self._inactive:
            self._inactive.append(player_id)

    def reactivate_player(self, player_id: str) -> None:
        """Bring an inactive player back at the first substitute position."""
        if player_id in self._inactive:
            self._inactive.remove(player_id)
        self.remove_player(player_id)
        self.add_player(player_id, min(self.field_count, len(self._queue)))

    def is_inactive(self, player_id: str) -> bool:
        return player_id in self._inactive

    def reorder_by_positions(self, position_order: Iterable[Optional[str]]) -> None:
        """
        Reorder to follow ``position_order``; unlisted players keep their
        relative order at the end.
        """
        ordered: List[str] = []
        for player_id in position_order:
            if player_id and player_id in self._queue and player_id not in ordered:
                ordered.append(player_id)
        ordered.extend(pid for pid in self._queue if pid not in ordered)
        self._queue = ordered

    def contains(self, player_id: str) -> bool:
        return player_id in self._queue

    def position_of(self, player_id: str) -> int:
        """Index of a player, or -1 when absent."""
        try:
            return self._queue.index(player_id)
        except ValueError:
            return -1

    def clone(self) -> RotationQueue:
        cloned = RotationQueue(self._queue, field_count=self.field_count)
        cloned._inactive = list(self._inactive)
        return cloned
