"""
Models package for the Fair Rotation engine.

This package contains the core data models used throughout the engine.
"""
from .player import Player, PlayerStats, Role, OUTFIELD_ROLES
from .team_config import TeamConfig, SubstitutionType, PairedRoleStrategy
from .formation import (
    Formation, FormationRecommendation, ModeDefinition, PositionPair,
    RecommendationError
)
from .role_report import PlayerRoleSummary, RolePoints, RoleReport

__all__ = [
    "Player", "PlayerStats", "Role", "OUTFIELD_ROLES",
    "TeamConfig", "SubstitutionType", "PairedRoleStrategy",
    "Formation", "FormationRecommendation", "ModeDefinition", "PositionPair",
    "RecommendationError", "PlayerRoleSummary", "RolePoints", "RoleReport"
]
