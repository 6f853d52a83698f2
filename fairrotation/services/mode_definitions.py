"""
Mode definition resolver.

Turns a TeamConfig into the concrete position keys and role map a
formation must use. Invalid configurations resolve to None so callers can
fall back to a goalie-only formation.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ..models.formation import ModeDefinition
from ..models.player import Role
from ..models.team_config import SubstitutionType, TeamConfig
from ..utils.constants import (
    DEFAULT_MAX_SQUAD_SIZE, FIELD_PAIR_POSITIONS, FORMAT_5V5, FORMAT_7V7,
    FORMAT_CONFIGS, FORMATION_1_2_1, FORMATION_2_2, FORMATION_2_2_2,
    FORMATION_2_3_1, GOALIE_COUNT, MAX_SQUAD_SIZE_BY_FORMAT,
    MIN_PAIRED_SQUAD_SIZE, MIN_SQUAD_SIZE, PAIRED_FORMAT, PAIRED_FORMATION,
    SUB_PAIR, SUBSTITUTE_POSITION_PREFIX
)
from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


# Field layouts per (format, formation), in position order
FIELD_LAYOUTS: Dict[Tuple[str, str], Tuple[Tuple[str, Role], ...]] = {
    (FORMAT_5V5, FORMATION_2_2): (
        ("leftDefender", Role.DEFENDER),
        ("rightDefender", Role.DEFENDER),
        ("leftAttacker", Role.ATTACKER),
        ("rightAttacker", Role.ATTACKER),
    ),
    (FORMAT_5V5, FORMATION_1_2_1): (
        ("defender", Role.DEFENDER),
        ("left", Role.MIDFIELDER),
        ("right", Role.MIDFIELDER),
        ("attacker", Role.ATTACKER),
    ),
    (FORMAT_7V7, FORMATION_2_2_2): (
        ("leftDefender", Role.DEFENDER),
        ("rightDefender", Role.DEFENDER),
        ("leftMidfielder", Role.MIDFIELDER),
        ("rightMidfielder", Role.MIDFIELDER),
        ("leftAttacker", Role.ATTACKER),
        ("rightAttacker", Role.ATTACKER),
    ),
    (FORMAT_7V7, FORMATION_2_3_1): (
        ("leftDefender", Role.DEFENDER),
        ("rightDefender", Role.DEFENDER),
        ("leftMidfielder", Role.MIDFIELDER),
        ("centerMidfielder", Role.MIDFIELDER),
        ("rightMidfielder", Role.MIDFIELDER),
        ("attacker", Role.ATTACKER),
    ),
}


def max_squad_size(format_key: str) -> int:
    """Largest squad (goalie included) allowed for a format."""
    return MAX_SQUAD_SIZE_BY_FORMAT.get(format_key, DEFAULT_MAX_SQUAD_SIZE)


def substitute_position_keys(count: int) -> List[str]:
    """Individual substitute keys: substitute_1 .. substitute_N."""
    return [f"{SUBSTITUTE_POSITION_PREFIX}{i}" for i in range(1, count + 1)]


def substitute_pair_keys(count: int) -> List[str]:
    """Substitute pair keys: subPair, subPair_2, subPair_3 ..."""
    return [SUB_PAIR if i == 1 else f"{SUB_PAIR}_{i}" for i in range(1, count + 1)]


def supports_pairs(team_config: TeamConfig) -> bool:
    """
    Check whether a configuration can use paired substitutions.

    Pairs need the 5v5 2-2 shape and an even number of outfielders with at
    least one substitute pair.
    """
    outfielders = team_config.squad_size - GOALIE_COUNT
    return (
        team_config.format == PAIRED_FORMAT
        and team_config.formation == PAIRED_FORMATION
        and team_config.squad_size >= MIN_PAIRED_SQUAD_SIZE
        and outfielders % 2 == 0
    )


def resolve_mode_definition(team_config: TeamConfig) -> Optional[ModeDefinition]:
    """
    Resolve the positions and role map for a team configuration.

    Args:
        team_config: Match configuration

    Returns:
        ModeDefinition, or None when the configuration is unknown or malformed
    """
    if not isinstance(team_config, TeamConfig):
        raise TypeError(f"Expected TeamConfig, got {type(team_config).__name__}")

    format_info = FORMAT_CONFIGS.get(team_config.format)
    if format_info is None:
        logger.warning("unknown_format", format=team_config.format)
        return None
    if team_config.formation not in format_info["formations"]:
        logger.warning("formation_not_available", format=team_config.format,
                       formation=team_config.formation)
        return None

    squad_size = team_config.squad_size
    if squad_size < MIN_SQUAD_SIZE or squad_size > max_squad_size(team_config.format):
        logger.warning("squad_size_out_of_range", squad_size=squad_size,
                       format=team_config.format)
        return None

    layout = FIELD_LAYOUTS[(team_config.format, team_config.formation)]
    role_map = {key: role for key, role in layout}

    if team_config.substitution_type is SubstitutionType.PAIRS:
        if not supports_pairs(team_config):
            logger.warning("pairs_not_supported", format=team_config.format,
                           formation=team_config.formation, squad_size=squad_size)
            return None
        sub_pairs = substitute_pair_keys((squad_size - GOALIE_COUNT - len(layout)) // 2)
        pair_roles = {key: Role.DEFENDER for key in FIELD_PAIR_POSITIONS}
        pair_roles.update({key: Role.SUBSTITUTE for key in sub_pairs})
        return ModeDefinition(
            formation=team_config.formation,
            substitution_type=SubstitutionType.PAIRS,
            field_positions=FIELD_PAIR_POSITIONS,
            substitute_positions=tuple(sub_pairs),
            position_role_map=pair_roles,
        )

    substitutes = substitute_position_keys(max(0, squad_size - GOALIE_COUNT - len(layout)))
    role_map.update({key: Role.SUBSTITUTE for key in substitutes})
    return ModeDefinition(
        formation=team_config.formation,
        substitution_type=SubstitutionType.INDIVIDUAL,
        field_positions=tuple(key for key, _ in layout),
        substitute_positions=tuple(substitutes),
        position_role_map=role_map,
    )
