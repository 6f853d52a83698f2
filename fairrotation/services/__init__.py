"""
Services package for the Fair Rotation engine.

This package contains the formation strategies, the helpers they are built
from, validation and role analytics.
"""
from .mode_definitions import resolve_mode_definition, supports_pairs
from .role_balance import (
    RoleProfile, build_role_profiles, calculate_role_deficit, can_play_role,
    required_role
)
from .pair_continuity import PairContinuityResolver, PairSelection, determine_substitute_pairs
from .substitute_allocator import allocate_substitute_slots
from .rotation_queue import RotationQueue, build_paired_rotation_queue, build_rotation_queue
from .formation_validator import (
    FormationIntegrityValidator, FormationValidationService, RotationPlanValidator,
    TeamConfigError, TeamConfigValidator, ValidationResult
)
from .strategy_service import (
    FormationRequest, FormationStrategy, RotationStrategyService,
    recommend_formation, select_strategy
)
from .analytics_service import RoleAnalyticsService, RoleReportExporter, calculate_role_points
from .position_recommendations import calculate_position_recommendations

__all__ = [
    "resolve_mode_definition", "supports_pairs",
    "RoleProfile", "build_role_profiles", "calculate_role_deficit",
    "can_play_role", "required_role",
    "PairContinuityResolver", "PairSelection", "determine_substitute_pairs",
    "allocate_substitute_slots",
    "RotationQueue", "build_paired_rotation_queue", "build_rotation_queue",
    "FormationIntegrityValidator", "FormationValidationService",
    "RotationPlanValidator", "TeamConfigError", "TeamConfigValidator",
    "ValidationResult",
    "FormationRequest", "FormationStrategy", "RotationStrategyService",
    "recommend_formation", "select_strategy",
    "RoleAnalyticsService", "RoleReportExporter", "calculate_role_points",
    "calculate_position_recommendations"
]
