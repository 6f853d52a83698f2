"""
Role balance helpers.

Builds per-player role profiles from cumulative statistics and derives the
two balancing signals the formation strategies use: a continuous role
deficit and a required-role flag for defender/attacker pairs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Sequence

from ..models.player import OUTFIELD_ROLES, Player, PlayerStats, Role
from ..utils.constants import REQUIRED_ATTACKER_RATIO, REQUIRED_DEFENDER_RATIO


@dataclass(frozen=True)
class RoleProfile:
    """Per-player role times used while building one recommendation."""
    player_id: str
    defender_time: float = 0
    midfielder_time: float = 0
    attacker_time: float = 0
    total_outfield_time: float = 0
    is_inactive: bool = False
    roster_index: int = 0

    def role_time(self, role: Role) -> float:
        if role is Role.DEFENDER:
            return self.defender_time
        if role is Role.MIDFIELDER:
            return self.midfielder_time
        if role is Role.ATTACKER:
            return self.attacker_time
        return 0

    @property
    def required_role(self) -> Optional[Role]:
        return required_role(self.defender_time, self.attacker_time)


def _stats_for(player: Player, stats: Optional[Mapping[str, PlayerStats]]) -> PlayerStats:
    if stats is not None and player.id in stats and stats[player.id] is not None:
        return stats[player.id]
    return player.stats


def build_role_profiles(squad: Iterable[Player],
                        stats: Optional[Mapping[str, PlayerStats]] = None,
                        goalie_id: Optional[str] = None) -> List[RoleProfile]:
    """
    Build role profiles for every squad member except the goalie.

    Args:
        squad: Players in roster order
        stats: Optional snapshot keyed by player id, overriding Player.stats
        goalie_id: Incoming goalie, excluded from the result

    Returns:
        Profiles in roster order. Missing statistics count as zero time.
    """
    profiles = []
    for index, player in enumerate(squad):
        if player.id == goalie_id:
            continue
        player_stats = _stats_for(player, stats)
        profiles.append(RoleProfile(
            player_id=player.id,
            defender_time=player_stats.time_as_defender_seconds or 0,
            midfielder_time=player_stats.time_as_midfielder_seconds or 0,
            attacker_time=player_stats.time_as_attacker_seconds or 0,
            total_outfield_time=player_stats.time_on_field_seconds or 0,
            is_inactive=bool(player_stats.is_inactive),
            roster_index=index,
        ))
    return profiles


def calculate_role_deficit(profile: RoleProfile, role: Role,
                           roles: Sequence[Role] = OUTFIELD_ROLES) -> float:
    """
    Shortfall between a player's fair share of time in ``role`` and reality.

    The fair share is the player's time summed over ``roles`` divided by the
    number of roles. Players without any time have no deficit.
    """
    if not roles:
        return 0.0
    total = sum(profile.role_time(r) for r in roles)
    if total <= 0:
        return 0.0
    return max(0.0, total / len(roles) - profile.role_time(role))


def required_role(defender_time: float, attacker_time: float) -> Optional[Role]:
    """
    Role a player must take next to correct a defender/attacker imbalance.

    Args:
        defender_time: Cumulative defender seconds
        attacker_time: Cumulative attacker seconds

    Returns:
        Role.DEFENDER, Role.ATTACKER, or None when the player is flexible
    """
    ratio = (defender_time + 1) / (attacker_time + 1)
    if ratio < REQUIRED_DEFENDER_RATIO:
        return Role.DEFENDER
    if ratio > REQUIRED_ATTACKER_RATIO:
        return Role.ATTACKER
    return None


def can_play_role(required: Optional[Role], role: Role) -> bool:
    """Flexible players (no required role) can play anything."""
    return required is None or required is role
