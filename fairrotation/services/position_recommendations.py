"""
Pre-match position recommendations.

Suggests first-period positions from each player's historical role share:
players furthest below the formation's target share for a role are offered
that role first. Ties are broken randomly through an injectable
``random.Random`` so tests can pin the outcome.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from ..models import Player, TeamConfig
from ..models.formation import ModeDefinition
from ..models.player import OUTFIELD_ROLES, Role
from ..utils.constants import DEFICIT_TIE_TOLERANCE
from ..utils.logging_utils import get_logger
from .mode_definitions import resolve_mode_definition

logger = get_logger(__name__)

ROLE_ASSIGNMENT_ORDER = (Role.DEFENDER, Role.MIDFIELDER, Role.ATTACKER)


@dataclass
class PlayerRoleDeficit:
    """Historical role share of one player against the formation targets."""
    player_id: str
    display_name: str
    deficits: Dict[Role, float]
    percentages: Dict[Role, float]
    has_history: bool


@dataclass(frozen=True)
class PositionRecommendation:
    player_id: str
    reason: str


@dataclass
class PositionRecommendations:
    """Recommended starting positions plus the inputs that produced them."""
    recommendations: Dict[str, PositionRecommendation] = field(default_factory=dict)
    players_considered: int = 0
    target_percentages: Dict[Role, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "recommendations": {
                position: {"playerId": rec.player_id, "reason": rec.reason}
                for position, rec in self.recommendations.items()
            },
            "metadata": {
                "playersConsidered": self.players_considered,
                "targetPercentages": {role.value: pct for role, pct in self.target_percentages.items()},
            },
        }


def calculate_target_percentages(definition: Optional[ModeDefinition]) -> Dict[Role, float]:
    """
    Share of field positions per outfield role, in percent.

    Example:
        2-2 gives defender 50, midfielder 0, attacker 50.
    """
    targets = {role: 0.0 for role in OUTFIELD_ROLES}
    if definition is None:
        return targets

    counts = {role: len(definition.positions_for_role(role)) for role in OUTFIELD_ROLES}
    total = sum(counts.values())
    if total == 0:
        return targets
    return {role: counts[role] * 100 / total for role in OUTFIELD_ROLES}


def _role_percentages(player: Player) -> Dict[Role, float]:
    total = player.stats.outfield_role_seconds()
    if total <= 0:
        return {role: 0.0 for role in OUTFIELD_ROLES}
    return {role: player.stats.role_seconds(role) * 100 / total for role in OUTFIELD_ROLES}


def calculate_percentage_deficits(players: Iterable[Player],
                                  targets: Dict[Role, float],
                                  exclude_ids: Iterable[str] = ()) -> List[PlayerRoleDeficit]:
    """
    Deficit per role: target share minus the player's historical share.

    Args:
        players: Players with historical statistics
        targets: Output of calculate_target_percentages
        exclude_ids: Goalie and substitutes, left out

    Returns:
        One entry per remaining player, in input order
    """
    excluded = set(exclude_ids)
    result = []
    for player in players:
        if player.id in excluded:
            continue
        percentages = _role_percentages(player)
        result.append(PlayerRoleDeficit(
            player_id=player.id,
            display_name=player.display_name,
            deficits={role: targets.get(role, 0.0) - percentages[role] for role in OUTFIELD_ROLES},
            percentages=percentages,
            has_history=any(pct > 0 for pct in percentages.values()),
        ))
    return result


def _deficit_groups(players: Sequence[PlayerRoleDeficit], role: Role) -> List[List[PlayerRoleDeficit]]:
    """Split players sorted by deficit into groups of equal (2-decimal) deficit."""
    groups: List[List[PlayerRoleDeficit]] = []
    current_value = None
    for player in players:
        value = round(player.deficits.get(role, 0.0), 2)
        if current_value is None or abs(value - current_value) >= DEFICIT_TIE_TOLERANCE:
            groups.append([])
        groups[-1].append(player)
        current_value = value
    return groups


def assign_positions_by_role(deficits: Sequence[PlayerRoleDeficit],
                             definition: Optional[ModeDefinition],
                             rng: Optional[random.Random] = None) -> Dict[str, str]:
    """
    Greedy assignment, role by role, highest deficit first.

    Args:
        deficits: Players with computed deficits
        definition: Mode definition providing field positions
        rng: Random source used to shuffle tied players

    Returns:
        Mapping of field position to player id
    """
    if definition is None:
        return {}
    rng = rng or random.Random()
    assignments: Dict[str, str] = {}
    assigned = set()

    for role in ROLE_ASSIGNMENT_ORDER:
        positions = definition.positions_for_role(role)
        available = [p for p in deficits if p.player_id not in assigned]
        if not positions or not available:
            continue

        ranked = sorted(available, key=lambda p: p.deficits.get(role, 0.0), reverse=True)
        open_positions = list(positions)
        for group in _deficit_groups(ranked, role):
            if not open_positions:
                break
            shuffled = list(group)
            rng.shuffle(shuffled)
            for player in shuffled[:len(open_positions)]:
                assignments[open_positions.pop(0)] = player.player_id
                assigned.add(player.player_id)
    return assignments


def calculate_position_recommendations(players: Sequence[Player],
                                       team_config: TeamConfig,
                                       goalie_id: Optional[str],
                                       substitute_ids: Iterable[str] = (),
                                       rng: Optional[random.Random] = None
                                       ) -> Optional[PositionRecommendations]:
    """
    Recommend first-period positions from historical role distribution.

    Args:
        players: Players with historical statistics
        team_config: Match configuration
        goalie_id: Goalie for the period, excluded
        substitute_ids: Players already placed on the bench, excluded
        rng: Random source for tie-breaking

    Returns:
        PositionRecommendations, or None when there is nothing to recommend
    """
    if not players:
        return None
    definition = resolve_mode_definition(team_config)
    if definition is None or definition.is_paired:
        logger.debug("position_recommendations_unavailable", config=team_config.to_dict())
        return None

    targets = calculate_target_percentages(definition)
    exclude = [pid for pid in [goalie_id, *substitute_ids] if pid]
    deficits = calculate_percentage_deficits(players, targets, exclude)
    if not deficits:
        return None

    by_id = {p.player_id: p for p in deficits}
    recommendations = {}
    for position, player_id in assign_positions_by_role(deficits, definition, rng).items():
        player = by_id[player_id]
        role = definition.position_role_map[position]
        if player.has_history:
            reason = f"{player.percentages[role]:.1f}% {role.value} time"
        else:
            reason = "No match history"
        recommendations[position] = PositionRecommendation(player_id=player_id, reason=reason)

    return PositionRecommendations(
        recommendations=recommendations,
        players_considered=len(deficits),
        target_percentages=targets,
    )
