"""
Pair continuity for paired substitution mode.

Rebuilds defender/attacker pairs for a new period, keeping previous pairs
together and alternating roles within them while honouring required-role
constraints. Also picks which pairs sit out and which field pair rotates
off first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models.formation import Formation, PositionPair
from ..models.player import Role
from ..utils.constants import FIELD_PAIR_POSITIONS, LEFT_PAIR, RIGHT_PAIR
from ..utils.logging_utils import get_logger
from .role_balance import RoleProfile, can_play_role

logger = get_logger(__name__)


class PlayerPool:
    """
    Players still waiting for a pair, in roster order.

    Removal is tracked by id so each matching step can be read and tested
    on its own.
    """

    def __init__(self, profiles: Iterable[RoleProfile]):
        self._profiles: Dict[str, RoleProfile] = {p.player_id: p for p in profiles}
        self._order: List[str] = list(self._profiles)
        self._taken: set = set()

    def __contains__(self, player_id: Optional[str]) -> bool:
        return player_id in self._profiles and player_id not in self._taken

    def __len__(self) -> int:
        return len(self._order) - len(self._taken)

    def get(self, player_id: Optional[str]) -> Optional[RoleProfile]:
        return self._profiles.get(player_id) if player_id in self else None

    def take(self, *player_ids: str) -> None:
        for player_id in player_ids:
            if player_id not in self:
                raise KeyError(f"Player {player_id} is not available")
            self._taken.add(player_id)

    def remaining(self) -> List[RoleProfile]:
        return [self._profiles[pid] for pid in self._order if pid not in self._taken]


@dataclass
class PairSelection:
    """Outcome of substitute pair selection."""
    field_pairs: List[PositionPair]
    substitute_pairs: List[PositionPair]
    first_pair_to_rotate_off: str = LEFT_PAIR
    field_pair_keys: Tuple[str, ...] = field(default=FIELD_PAIR_POSITIONS)

    @property
    def first_pair(self) -> PositionPair:
        index = self.field_pair_keys.index(self.first_pair_to_rotate_off)
        return self.field_pairs[index]

    @property
    def other_pair(self) -> PositionPair:
        index = self.field_pair_keys.index(self.first_pair_to_rotate_off)
        return self.field_pairs[1 - index]


def previous_pairs(previous_formation: Optional[Formation]) -> List[Tuple[str, PositionPair]]:
    """Pairs of the previous formation, field pairs first, then substitute pairs."""
    if previous_formation is None:
        return []
    pairs = dict(previous_formation.pairs())
    ordered = [(key, pairs[key]) for key in FIELD_PAIR_POSITIONS if key in pairs]
    ordered.extend((key, pair) for key, pair in pairs.items() if key not in FIELD_PAIR_POSITIONS)
    return ordered


class PairContinuityResolver:
    """
    Builds the ordered pair list for a paired period.

    Only active players go through the continuity and matching steps.
    Inactive players are paired afterwards, among themselves or as filler
    for a leftover active player, and placed after the active pairs so
    they can be benched.

    Args:
        balanced: When True continuity steps only try the role swap and are
            skipped if it breaks a required role. Otherwise a swap that breaks
            a required role falls back to keeping the original roles.
        field_pair_count: Number of field pair slots
    """

    def __init__(self, balanced: bool = False, field_pair_count: int = len(FIELD_PAIR_POSITIONS)):
        self.balanced = balanced
        self.field_pair_count = field_pair_count

    def resolve(self,
                current_goalie_id: Optional[str],
                previous_goalie_id: Optional[str],
                previous_formation: Optional[Formation],
                profiles: Sequence[RoleProfile],
                pair_count: int) -> List[PositionPair]:
        """
        Produce exactly ``pair_count`` pairs.

        Args:
            current_goalie_id: Incoming goalie (never paired)
            previous_goalie_id: Goalie of the previous period
            previous_formation: Previous paired formation, None for period 1
            profiles: Outfield role profiles in roster order
            pair_count: Field plus substitute pairs required

        Returns:
            Pairs in creation order, padded with empty pairs when short.
            Pairs holding inactive players come last.
        """
        outfield = [p for p in profiles if p.player_id != current_goalie_id]
        pool = PlayerPool(p for p in outfield if not p.is_inactive)
        inactive = [p for p in outfield if p.is_inactive]
        pairs: List[PositionPair] = []

        handover = self._goalie_handover(current_goalie_id, previous_goalie_id,
                                         previous_formation, pool)
        if handover is not None:
            pairs.append(handover)
        pairs.extend(self._preserve_pairs(previous_formation, pool))
        pairs.extend(self._pair_required_roles(pool))
        pairs.extend(self._pair_by_preference(previous_formation, pool))
        pairs.extend(self._pair_inactive(previous_formation, pool, inactive, len(pairs)))

        if len(pairs) < pair_count:
            pairs.extend(PositionPair() for _ in range(pair_count - len(pairs)))
        elif len(pairs) > pair_count:
            logger.debug("pairs_truncated", built=len(pairs), required=pair_count)
            pairs = pairs[:pair_count]
        return pairs

    def _goalie_handover(self, current_goalie_id, previous_goalie_id,
                         previous_formation, pool: PlayerPool) -> Optional[PositionPair]:
        if previous_formation is None or not previous_goalie_id:
            return None
        if previous_goalie_id == current_goalie_id:
            return None

        ex_goalie = pool.get(previous_goalie_id)
        partner = pool.get(previous_formation.partner_of(current_goalie_id))
        if ex_goalie is None or partner is None or ex_goalie.player_id == partner.player_id:
            return None

        partner_role = previous_formation.role_of(partner.player_id)
        new_partner_role = Role.ATTACKER if partner_role is Role.DEFENDER else Role.DEFENDER
        ex_goalie_role = new_partner_role.opposite()

        if not (can_play_role(ex_goalie.required_role, ex_goalie_role)
                and can_play_role(partner.required_role, new_partner_role)):
            logger.debug("goalie_handover_skipped", ex_goalie=ex_goalie.player_id,
                         partner=partner.player_id)
            return None

        pool.take(ex_goalie.player_id, partner.player_id)
        if new_partner_role is Role.DEFENDER:
            return PositionPair(defender=partner.player_id, attacker=ex_goalie.player_id)
        return PositionPair(defender=ex_goalie.player_id, attacker=partner.player_id)

    def _preserve_pairs(self, previous_formation, pool: PlayerPool) -> List[PositionPair]:
        kept = []
        for key, pair in previous_pairs(previous_formation):
            defender = pool.get(pair.defender)
            attacker = pool.get(pair.attacker)
            if defender is None or attacker is None:
                continue

            if (can_play_role(defender.required_role, Role.ATTACKER)
                    and can_play_role(attacker.required_role, Role.DEFENDER)):
                kept.append(pair.swapped())
            elif (not self.balanced
                  and can_play_role(defender.required_role, Role.DEFENDER)
                  and can_play_role(attacker.required_role, Role.ATTACKER)):
                logger.debug("pair_roles_kept", position=key)
                kept.append(pair)
            else:
                logger.debug("pair_broken", position=key, balanced=self.balanced)
                continue
            pool.take(defender.player_id, attacker.player_id)
        return kept

    @staticmethod
    def _pair_required_roles(pool: PlayerPool) -> List[PositionPair]:
        remaining = pool.remaining()
        must_defend = [p for p in remaining if p.required_role is Role.DEFENDER]
        must_attack = [p for p in remaining if p.required_role is Role.ATTACKER]
        flexible = [p for p in remaining if p.required_role is None]

        pairs = []
        while must_defend and must_attack:
            pairs.append(PositionPair(defender=must_defend.pop().player_id,
                                      attacker=must_attack.pop().player_id))
        while must_defend and flexible:
            pairs.append(PositionPair(defender=must_defend.pop().player_id,
                                      attacker=flexible.pop().player_id))
        while must_attack and flexible:
            pairs.append(PositionPair(defender=flexible.pop().player_id,
                                      attacker=must_attack.pop().player_id))

        if must_defend or must_attack:
            logger.debug("required_roles_unmatched",
                         must_defend=[p.player_id for p in must_defend],
                         must_attack=[p.player_id for p in must_attack])
        for pair in pairs:
            pool.take(pair.defender, pair.attacker)
        return pairs

    def _pair_inactive(self, previous_formation, pool: PlayerPool,
                       inactive: Sequence[RoleProfile], active_pair_count: int) -> List[PositionPair]:
        leftover = pool.remaining()
        pairs: List[PositionPair] = []
        if leftover and (active_pair_count < self.field_pair_count or not inactive):
            # the leftover active player plays without a partner
            player_id = leftover[0].player_id
            pool.take(player_id)
            if _preferred_role(previous_formation, player_id) is Role.ATTACKER:
                pairs.append(PositionPair(attacker=player_id))
            else:
                pairs.append(PositionPair(defender=player_id))
            active_pair_count += 1

        while active_pair_count < self.field_pair_count:
            pairs.append(PositionPair())
            active_pair_count += 1

        if inactive:
            filler_pool = PlayerPool([*pool.remaining(), *inactive])
            pairs.extend(self._pair_by_preference(previous_formation, filler_pool))
            if len(filler_pool):
                logger.debug("inactive_player_unpaired",
                             players=[p.player_id for p in filler_pool.remaining()])
        return pairs

    @staticmethod
    def _pair_by_preference(previous_formation, pool: PlayerPool) -> List[PositionPair]:
        preferences: Dict[str, Optional[Role]] = {
            profile.player_id: _preferred_role(previous_formation, profile.player_id)
            for profile in pool.remaining()
        }

        remaining = [p.player_id for p in pool.remaining()]
        pairs = []
        while len(remaining) >= 2:
            first = remaining.pop(0)
            wanted = Role.ATTACKER if preferences[first] is Role.DEFENDER else Role.DEFENDER
            partner = next((pid for pid in remaining if preferences[pid] is wanted), remaining[0])
            remaining.remove(partner)
            if preferences[first] is Role.DEFENDER:
                pairs.append(PositionPair(defender=first, attacker=partner))
            else:
                pairs.append(PositionPair(defender=partner, attacker=first))

        for pair in pairs:
            pool.take(pair.defender, pair.attacker)
        return pairs


def _preferred_role(previous_formation: Optional[Formation], player_id: str) -> Optional[Role]:
    """Inverse of the previous pair role; defender without one, None in period 1."""
    if previous_formation is None:
        return None
    previous_role = previous_formation.role_of(player_id)
    return Role.ATTACKER if previous_role is Role.DEFENDER else Role.DEFENDER


def _pair_max_time(pair: PositionPair, profiles: Dict[str, RoleProfile]) -> float:
    if not pair.is_complete or pair.defender not in profiles or pair.attacker not in profiles:
        return 0
    return max(profiles[pair.defender].total_outfield_time,
               profiles[pair.attacker].total_outfield_time)


def _has_inactive(pair: PositionPair, profiles: Dict[str, RoleProfile]) -> bool:
    return any(profiles[pid].is_inactive for pid in pair.members() if pid in profiles)


def determine_substitute_pairs(pairs: Sequence[PositionPair],
                               profiles: Iterable[RoleProfile],
                               substitute_count: int = 1) -> PairSelection:
    """
    Choose substitute pairs and the first field pair to rotate off.

    Pairs holding an inactive player are benched first. The rest rank by
    the highest total outfield time of their members; incomplete pairs rank
    as zero and ties keep pair order.

    Args:
        pairs: Pairs from PairContinuityResolver.resolve
        profiles: Role profiles for the outfielders
        substitute_count: Number of substitute pair slots

    Returns:
        PairSelection with bench pairs ordered least-time first
    """
    by_id = {p.player_id: p for p in profiles}

    def rank(index: int) -> Tuple[bool, float]:
        return _has_inactive(pairs[index], by_id), _pair_max_time(pairs[index], by_id)

    ranked = sorted(range(len(pairs)), key=rank, reverse=True)
    bench = ranked[:substitute_count]
    field_indexes = [i for i in range(len(pairs)) if i not in bench]

    substitute_pairs = [pairs[i] for i in sorted(bench, key=rank)]
    field_pairs = [pairs[i] for i in field_indexes[:len(FIELD_PAIR_POSITIONS)]]
    while len(field_pairs) < len(FIELD_PAIR_POSITIONS):
        field_pairs.append(PositionPair())

    first_index = 0
    max_time = 0
    for index, pair in enumerate(field_pairs):
        pair_time = _pair_max_time(pair, by_id)
        if pair_time > max_time:
            max_time = pair_time
            first_index = index

    return PairSelection(
        field_pairs=field_pairs,
        substitute_pairs=substitute_pairs,
        first_pair_to_rotate_off=LEFT_PAIR if first_index == 0 else RIGHT_PAIR,
    )
