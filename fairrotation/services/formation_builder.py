"""
Formation builder for individual substitution mode.

Decides who starts on the field (least outfield time first), which field
position each starter takes, and the order field players and substitutes
enter the rotation queue.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..models.formation import Formation, FormationRecommendation, ModeDefinition
from ..models.player import Role
from ..utils.logging_utils import get_logger
from .role_balance import RoleProfile, calculate_role_deficit
from .rotation_queue import build_rotation_queue
from .substitute_allocator import allocate_substitute_slots

logger = get_logger(__name__)

PositionAssigner = Callable[[Sequence[RoleProfile], ModeDefinition], Dict[str, Optional[str]]]

# Fill order for the deficit-based shape
DEFICIT_ROLE_ORDER = (Role.DEFENDER, Role.ATTACKER, Role.MIDFIELDER)
ROLE_TIME_ORDER = (Role.DEFENDER, Role.MIDFIELDER, Role.ATTACKER)


def sort_by_total_time(profiles: Sequence[RoleProfile], most_first: bool = False) -> List[RoleProfile]:
    """Stable sort on total outfield time; ties keep the given order."""
    return sorted(profiles, key=lambda p: p.total_outfield_time, reverse=most_first)


def partition_players(profiles: Sequence[RoleProfile],
                      field_count: int) -> Tuple[List[RoleProfile], List[RoleProfile], List[RoleProfile]]:
    """
    Split outfielders into starters, substitutes and inactive players.

    Returns:
        Tuple of (field, substitutes, inactive). Field and substitutes are in
        ascending total time, inactive players in roster order.
    """
    active = sort_by_total_time([p for p in profiles if not p.is_inactive])
    inactive = [p for p in profiles if p.is_inactive]
    return active[:field_count], active[field_count:], inactive


def assign_two_role_positions(field_players: Sequence[RoleProfile],
                              definition: ModeDefinition) -> Dict[str, Optional[str]]:
    """
    Defender/attacker shapes.

    Players with the biggest attacker surplus (attacker minus defender
    time) defend; the rest attack.
    """
    ranked = sorted(field_players, key=lambda p: p.attacker_time - p.defender_time, reverse=True)
    defender_positions = definition.positions_for_role(Role.DEFENDER)
    attacker_positions = definition.positions_for_role(Role.ATTACKER)

    assignments: Dict[str, Optional[str]] = {}
    for index, position in enumerate(defender_positions + attacker_positions):
        assignments[position] = ranked[index].player_id if index < len(ranked) else None
    return assignments


def assign_deficit_positions(field_players: Sequence[RoleProfile],
                             definition: ModeDefinition) -> Dict[str, Optional[str]]:
    """
    Three-role shapes with one defender and one attacker.

    The defender slot goes to the biggest defender deficit, then the
    attacker slot, then midfield slots from whoever is left. Deficit ties
    keep the incoming order, which is ascending total time.
    """
    roles = definition.roles
    used = set()
    assignments: Dict[str, Optional[str]] = {}

    for role in DEFICIT_ROLE_ORDER:
        candidates = sorted(field_players, key=lambda p: -calculate_role_deficit(p, role, roles))
        for position in definition.positions_for_role(role):
            chosen = next((p for p in candidates if p.player_id not in used), None)
            if chosen is None:
                continue
            assignments[position] = chosen.player_id
            used.add(chosen.player_id)

    leftovers = [p for p in field_players if p.player_id not in used]
    for position in definition.field_positions:
        if position not in assignments:
            assignments[position] = leftovers.pop(0).player_id if leftovers else None
    return {position: assignments[position] for position in definition.field_positions}


def assign_role_time_positions(field_players: Sequence[RoleProfile],
                               definition: ModeDefinition) -> Dict[str, Optional[str]]:
    """
    Larger shapes: each role's slots go to the remaining players with the
    least time in that role, defenders first.
    """
    remaining = list(field_players)
    assignments: Dict[str, Optional[str]] = {}

    for role in ROLE_TIME_ORDER:
        for position in definition.positions_for_role(role):
            if not remaining:
                break
            remaining.sort(key=lambda p: p.role_time(role))
            assignments[position] = remaining.pop(0).player_id

    unfilled = [pos for pos in definition.field_positions if pos not in assignments]
    remaining = sort_by_total_time(remaining)
    for index, position in enumerate(unfilled):
        assignments[position] = remaining[index].player_id if index < len(remaining) else None
    return {position: assignments[position] for position in definition.field_positions}


def build_individual_recommendation(goalie_id: Optional[str],
                                    profiles: Sequence[RoleProfile],
                                    definition: ModeDefinition,
                                    assign_positions: PositionAssigner) -> FormationRecommendation:
    """
    Assemble a full individual-mode recommendation.

    Args:
        goalie_id: Incoming goalie
        profiles: Outfield role profiles in roster order (goalie excluded)
        definition: Resolved mode definition
        assign_positions: Strategy-specific field position assignment

    Returns:
        FormationRecommendation with formation, queue and next player off
    """
    field_count = definition.field_count
    field, substitutes, inactive = partition_players(profiles, field_count)
    active_count = len(field) + len(substitutes)

    if active_count <= field_count:
        logger.debug("limited_players", active=active_count, field_positions=field_count)
        positions: Dict[str, Optional[str]] = {}
        for index, position in enumerate(definition.field_positions):
            positions[position] = field[index].player_id if index < len(field) else None
        positions.update(allocate_substitute_slots(
            definition.substitute_positions, [], [p.player_id for p in inactive]))
        return FormationRecommendation(formation=Formation(goalie=goalie_id, positions=positions))

    positions = dict(assign_positions(field, definition))
    field_ordered = [p.player_id for p in sort_by_total_time(field, most_first=True)]
    substitutes_ordered = [p.player_id for p in substitutes]
    positions.update(allocate_substitute_slots(
        definition.substitute_positions, substitutes_ordered, [p.player_id for p in inactive]))

    queue, next_off = build_rotation_queue(field_ordered, substitutes_ordered)
    return FormationRecommendation(
        formation=Formation(goalie=goalie_id, positions=positions),
        rotation_queue=tuple(queue),
        next_player_to_rotate_off=next_off,
    )
