"""
Fair Rotation

A scheduling engine for youth small-sided soccer that recommends, period
by period, who plays where, who sits out and in what order players rotate,
so playing time and roles are shared fairly across the squad.
"""
from .models import (
    Formation, FormationRecommendation, Player, PlayerStats, PositionPair,
    RecommendationError, Role, SubstitutionType, PairedRoleStrategy, TeamConfig
)
from .services import (
    FormationRequest, RotationStrategyService, RoleAnalyticsService,
    calculate_role_points, recommend_formation, resolve_mode_definition
)
from .utils import fmt_mmss, configure_logging, APP_TITLE

__version__ = "1.0.0"
__author__ = "Fair Rotation Development Team"

__all__ = [
    "Formation", "FormationRecommendation", "Player", "PlayerStats",
    "PositionPair", "RecommendationError", "Role", "SubstitutionType",
    "PairedRoleStrategy", "TeamConfig", "FormationRequest",
    "RotationStrategyService", "RoleAnalyticsService", "calculate_role_points",
    "recommend_formation", "resolve_mode_definition",
    "fmt_mmss", "configure_logging", "APP_TITLE"
]
