"""Strategy service for formation recommendations and substitution planning."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence, Tuple, Type

from ..models import Player, PlayerStats
from ..models.formation import (
    Formation, FormationRecommendation, ModeDefinition, PositionPair,
    RecommendationError
)
from ..models.team_config import SubstitutionType, TeamConfig
from ..utils.constants import (
    BALANCED_PAIR_PERIOD, FIELD_PAIR_POSITIONS, FORMATION_1_2_1, FORMATION_2_2,
    FORMATION_2_2_2, FORMATION_2_3_1
)
from ..utils.logging_utils import get_logger
from .formation_builder import (
    PositionAssigner, assign_deficit_positions, assign_role_time_positions,
    assign_two_role_positions, build_individual_recommendation
)
from .formation_validator import FormationValidationService
from .mode_definitions import resolve_mode_definition
from .pair_continuity import PairContinuityResolver, determine_substitute_pairs
from .role_balance import build_role_profiles
from .rotation_queue import build_paired_rotation_queue

logger = get_logger(__name__)


@dataclass(frozen=True)
class FormationRequest:
    """
    Everything the engine needs to recommend one period's formation.

    Attributes:
        team_config: Match configuration
        squad: Selected squad in roster order, goalie included
        current_goalie_id: Goalie for the coming period
        previous_goalie_id: Goalie of the previous period
        previous_formation: Previous period's formation, None for period 1
        period_number: 1-based period index
        stats: Optional stats snapshot keyed by player id
    """
    team_config: TeamConfig
    squad: Sequence[Player]
    current_goalie_id: Optional[str]
    previous_goalie_id: Optional[str] = None
    previous_formation: Optional[Formation] = None
    period_number: int = 1
    stats: Optional[Mapping[str, PlayerStats]] = field(default=None)

    def inactive_ids(self):
        """Ids of players flagged inactive, honouring the stats snapshot."""
        result = []
        for player in self.squad:
            player_stats = (self.stats or {}).get(player.id) or player.stats
            if player_stats.is_inactive:
                result.append(player.id)
        return result


class FormationStrategy(ABC):
    """Computes a recommendation for one formation shape."""

    name = "base"

    @abstractmethod
    def recommend(self, request: FormationRequest,
                  definition: ModeDefinition) -> FormationRecommendation:
        """Build the recommendation for ``request``."""
        pass


class IndividualFormationStrategy(FormationStrategy):
    """Individual substitutions; subclasses pick the position assigner."""

    assign_positions: PositionAssigner = staticmethod(assign_role_time_positions)

    def recommend(self, request: FormationRequest,
                  definition: ModeDefinition) -> FormationRecommendation:
        profiles = build_role_profiles(request.squad, request.stats, request.current_goalie_id)
        return build_individual_recommendation(
            request.current_goalie_id, profiles, definition, self.assign_positions)


class TwoRoleFormationStrategy(IndividualFormationStrategy):
    """Defender/attacker shapes balanced on attacker surplus."""
    name = "two_role"
    assign_positions = staticmethod(assign_two_role_positions)


class DeficitFormationStrategy(IndividualFormationStrategy):
    """Single defender and attacker with midfield, balanced on role deficit."""
    name = "deficit"
    assign_positions = staticmethod(assign_deficit_positions)


class RoleTimeFormationStrategy(IndividualFormationStrategy):
    """Larger shapes, least time in a role plays it."""
    name = "role_time"
    assign_positions = staticmethod(assign_role_time_positions)


class PairedFormationStrategy(FormationStrategy):
    """
    Defender/attacker pairs that rotate together.

    Args:
        balanced: Use strict role balancing instead of the continuity fallback
    """

    def __init__(self, balanced: bool = False):
        self.balanced = balanced
        self.name = "paired_balanced" if balanced else "paired"

    def recommend(self, request: FormationRequest,
                  definition: ModeDefinition) -> FormationRecommendation:
        profiles = build_role_profiles(request.squad, request.stats, request.current_goalie_id)
        pair_keys = list(definition.field_positions) + list(definition.substitute_positions)

        pairs = PairContinuityResolver(balanced=self.balanced).resolve(
            request.current_goalie_id,
            request.previous_goalie_id,
            request.previous_formation,
            profiles,
            len(pair_keys),
        )
        selection = determine_substitute_pairs(
            pairs, profiles, len(definition.substitute_positions))

        positions: Dict[str, PositionPair] = dict(zip(FIELD_PAIR_POSITIONS, selection.field_pairs))
        for key, pair in zip(definition.substitute_positions, selection.substitute_pairs):
            positions[key] = pair
        for key in definition.substitute_positions:
            positions.setdefault(key, PositionPair())
        formation = Formation(goalie=request.current_goalie_id, positions=positions)

        inactive = {p.player_id for p in profiles if p.is_inactive}
        active_count = len(profiles) - len(inactive)
        if active_count <= definition.field_count:
            logger.debug("limited_players", active=active_count,
                         field_players=definition.field_count)
            return FormationRecommendation(formation=formation)

        queue, next_off = build_paired_rotation_queue(
            selection.first_pair,
            selection.other_pair,
            selection.substitute_pairs,
            request.team_config.paired_role_strategy,
            exclude_ids=inactive,
        )
        return FormationRecommendation(
            formation=formation,
            rotation_queue=tuple(queue),
            next_player_to_rotate_off=next_off,
            first_pair_to_rotate_off=selection.first_pair_to_rotate_off,
        )


STRATEGY_REGISTRY: Dict[Tuple[SubstitutionType, str], Type[FormationStrategy]] = {
    (SubstitutionType.INDIVIDUAL, FORMATION_2_2): TwoRoleFormationStrategy,
    (SubstitutionType.INDIVIDUAL, FORMATION_1_2_1): DeficitFormationStrategy,
    (SubstitutionType.INDIVIDUAL, FORMATION_2_2_2): RoleTimeFormationStrategy,
    (SubstitutionType.INDIVIDUAL, FORMATION_2_3_1): RoleTimeFormationStrategy,
    (SubstitutionType.PAIRS, FORMATION_2_2): PairedFormationStrategy,
}


def select_strategy(definition: ModeDefinition, period_number: int = 1) -> Optional[FormationStrategy]:
    """
    Pick the strategy for a substitution type and formation shape.

    Paired mode switches to strict role balancing in the balanced period.

    Returns:
        Strategy instance, or None when no strategy handles the shape
    """
    strategy_cls = STRATEGY_REGISTRY.get((definition.substitution_type, definition.formation))
    if strategy_cls is None:
        return None
    if strategy_cls is PairedFormationStrategy:
        return PairedFormationStrategy(balanced=period_number == BALANCED_PAIR_PERIOD)
    return strategy_cls()


class RotationStrategyService:
    """
    Entry point for period formation recommendations.

    The service is stateless; every call builds a new recommendation from
    the request alone.
    """

    def __init__(self, validate: bool = True):
        """
        Initialize the strategy service.

        Args:
            validate: Run integrity checks on each recommendation and log failures
        """
        self.validate = validate

    def recommend_formation(self, request: FormationRequest) -> FormationRecommendation:
        """
        Recommend the formation and rotation order for the coming period.

        Args:
            request: Squad, statistics and configuration for the period

        Returns:
            FormationRecommendation; on configuration problems a goalie-only
            formation with ``error`` set
        """
        if request.current_goalie_id is None:
            logger.warning("missing_goalie", period=request.period_number)
            return FormationRecommendation.goalie_only(None, RecommendationError.MISSING_GOALIE)

        definition = resolve_mode_definition(request.team_config)
        if definition is None:
            logger.warning("mode_definition_not_found", config=request.team_config.to_dict())
            return FormationRecommendation.goalie_only(
                request.current_goalie_id, RecommendationError.UNKNOWN_CONFIGURATION)

        strategy = select_strategy(definition, request.period_number)
        if strategy is None:
            logger.warning("no_strategy_for_shape", formation=definition.formation,
                           substitution_type=definition.substitution_type.value)
            return FormationRecommendation.goalie_only(
                request.current_goalie_id, RecommendationError.UNSUPPORTED_SUBSTITUTION_TYPE)

        logger.debug("strategy_selected", strategy=strategy.name, period=request.period_number)
        recommendation = strategy.recommend(request, definition)

        if self.validate:
            result = FormationValidationService(
                request.squad, request.inactive_ids()
            ).validate_recommendation(recommendation, definition)
            if not result.is_valid:
                logger.warning("recommendation_validation_failed", strategy=strategy.name,
                               errors=result.errors)
        return recommendation


def recommend_formation(request: FormationRequest) -> FormationRecommendation:
    """Convenience wrapper around RotationStrategyService."""
    return RotationStrategyService().recommend_formation(request)
