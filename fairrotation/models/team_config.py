"""Team configuration model for the Fair Rotation engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from ..utils.constants import FORMAT_5V5, FORMATION_2_2


class SubstitutionType(Enum):
    """How substitutes rotate: one player at a time or as defender/attacker pairs."""
    INDIVIDUAL = "individual"
    PAIRS = "pairs"


class PairedRoleStrategy(Enum):
    """Role handling for pairs during a period."""
    KEEP_THROUGHOUT_PERIOD = "keep_throughout_period"
    SWAP_EVERY_ROTATION = "swap_every_rotation"


@dataclass(frozen=True)
class TeamConfig:
    """
    Match configuration. Immutable for the duration of a match.

    Attributes:
        format: Pitch size class ("5v5", "7v7")
        squad_size: Total players including the goalie
        formation: Shape identifier ("2-2", "1-2-1", "2-2-2", "2-3-1")
        substitution_type: Individual or paired substitutions
        paired_role_strategy: Queue ordering preference for paired rotations
    """
    format: str = FORMAT_5V5
    squad_size: int = 7
    formation: str = FORMATION_2_2
    substitution_type: SubstitutionType = SubstitutionType.INDIVIDUAL
    paired_role_strategy: Optional[PairedRoleStrategy] = None

    @property
    def is_paired(self) -> bool:
        return self.substitution_type is SubstitutionType.PAIRS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "format": self.format,
            "squad_size": self.squad_size,
            "formation": self.formation,
            "substitution_type": self.substitution_type.value,
            "paired_role_strategy": (
                self.paired_role_strategy.value if self.paired_role_strategy else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TeamConfig:
        """
        Create from dictionary. Accepts snake_case or camelCase keys.

        Raises:
            ValueError: If an enum value or squad size is malformed
        """
        squad_size = data.get("squad_size", data.get("squadSize"))
        substitution_type = data.get("substitution_type", data.get("substitutionType"))
        strategy = data.get("paired_role_strategy", data.get("pairedRoleStrategy"))
        try:
            squad_size = int(squad_size)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid squad size: {squad_size!r}") from None
        if not data.get("format") or not data.get("formation"):
            raise ValueError("Team config requires both format and formation")

        return cls(
            format=data["format"],
            squad_size=squad_size,
            formation=data["formation"],
            substitution_type=SubstitutionType(substitution_type or SubstitutionType.INDIVIDUAL.value),
            paired_role_strategy=PairedRoleStrategy(strategy) if strategy else None,
        )
