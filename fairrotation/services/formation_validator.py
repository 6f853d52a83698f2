"""
Validation for team configurations and recommended formations.

Each rule returns a ValidationResult; FormationValidationService runs the
rules that apply to a recommendation and combines their results.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from ..models import Player
from ..models.formation import Formation, FormationRecommendation, ModeDefinition, PositionPair
from ..models.team_config import SubstitutionType, TeamConfig
from ..utils.constants import FORMAT_CONFIGS, MIN_SQUAD_SIZE
from .mode_definitions import max_squad_size, supports_pairs


class TeamConfigError(ValueError):
    """Raised when a team configuration cannot be used."""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class ValidationResult:
    """Result of a validation operation with success status and error messages."""

    def __init__(self, is_valid: bool = True, errors: Optional[List[str]] = None):
        self.is_valid = is_valid
        self.errors = errors or []

    def add_error(self, error: str) -> None:
        """Add an error message and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def combine(self, other: 'ValidationResult') -> 'ValidationResult':
        """Combine with another validation result."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors
        )


class ValidationRule(ABC):
    """Abstract base class for validation rules."""

    @abstractmethod
    def validate(self, *args, **kwargs) -> ValidationResult:
        """Perform validation and return result."""
        pass


class TeamConfigValidator(ValidationRule):
    """Validates format, squad size, formation and substitution type."""

    def validate(self, team_config: TeamConfig) -> ValidationResult:
        result = ValidationResult()

        format_info = FORMAT_CONFIGS.get(team_config.format)
        if format_info is None:
            result.add_error(f"Unknown format '{team_config.format}'")
            return result

        limit = max_squad_size(team_config.format)
        if not (MIN_SQUAD_SIZE <= team_config.squad_size <= limit):
            result.add_error(
                f"Squad size {team_config.squad_size} must be between "
                f"{MIN_SQUAD_SIZE} and {limit} for {team_config.format}"
            )

        if team_config.formation not in format_info["formations"]:
            result.add_error(
                f"Formation '{team_config.formation}' is not available for {team_config.format}"
            )

        if (team_config.substitution_type is SubstitutionType.PAIRS
                and not supports_pairs(team_config)):
            result.add_error(
                f"Pair substitutions are not supported for {team_config.format} "
                f"{team_config.formation} with {team_config.squad_size} players"
            )
        return result

    def validate_or_raise(self, team_config: TeamConfig) -> None:
        """
        Validate and raise on failure.

        Raises:
            TeamConfigError: If the configuration is not usable
        """
        result = self.validate(team_config)
        if not result.is_valid:
            raise TeamConfigError(result.errors)


class FormationIntegrityValidator(ValidationRule):
    """Checks that a formation places each squad member at most once."""

    def __init__(self, squad: Iterable[Player], inactive_ids: Optional[Iterable[str]] = None):
        self.roster: Dict[str, Player] = {p.id: p for p in squad}
        if inactive_ids is None:
            inactive_ids = [p.id for p in self.roster.values() if p.is_inactive]
        self.inactive_ids = set(inactive_ids)

    def validate(self, formation: Formation,
                 definition: Optional[ModeDefinition] = None) -> ValidationResult:
        result = ValidationResult()

        seen = set()
        for player_id in formation.player_ids():
            if player_id in seen:
                result.add_error(f"Player '{player_id}' is assigned to multiple positions")
            seen.add(player_id)
            if player_id not in self.roster:
                result.add_error(f"Player '{player_id}' is not in the squad")

        if definition is not None:
            for position in definition.field_positions:
                value = formation.get(position)
                ids = value.members() if isinstance(value, PositionPair) else [value]
                for player_id in ids:
                    if player_id in self.inactive_ids:
                        result.add_error(f"Inactive player '{player_id}' is on the field at {position}")
        return result


class RotationPlanValidator(ValidationRule):
    """Checks the rotation queue and next player off against the formation."""

    def validate(self, recommendation: FormationRecommendation,
                 definition: ModeDefinition) -> ValidationResult:
        result = ValidationResult()
        formation = recommendation.formation
        queue = list(recommendation.rotation_queue)

        if len(set(queue)) != len(queue):
            result.add_error("Rotation queue contains duplicate players")
        if formation.goalie is not None and formation.goalie in queue:
            result.add_error(f"Goalie '{formation.goalie}' is in the rotation queue")

        next_off = recommendation.next_player_to_rotate_off
        if next_off is not None:
            if formation.position_of(next_off) not in definition.field_positions:
                result.add_error(f"Next player to rotate off '{next_off}' is not on the field")
            if not queue or queue[0] != next_off:
                result.add_error(f"Next player to rotate off '{next_off}' is not at the queue front")
        elif queue:
            result.add_error("Rotation queue is set but no player is flagged to rotate off")
        return result


class FormationValidationService:
    """
    Runs the integrity and rotation rules against a recommendation.
    """

    def __init__(self, squad: Iterable[Player], inactive_ids: Optional[Iterable[str]] = None):
        self.integrity_validator = FormationIntegrityValidator(squad, inactive_ids)
        self.rotation_validator = RotationPlanValidator()

    def validate_recommendation(self, recommendation: FormationRecommendation,
                                definition: ModeDefinition) -> ValidationResult:
        """
        Validate a recommendation produced for ``definition``.

        Returns:
            ValidationResult with success status and any error messages
        """
        result = ValidationResult()
        result = result.combine(
            self.integrity_validator.validate(recommendation.formation, definition))
        result = result.combine(
            self.rotation_validator.validate(recommendation, definition))
        return result
