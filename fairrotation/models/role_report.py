"""Dataclasses representing post-match role analytics."""

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class RolePoints:
    """Role points awarded to a player for a match."""

    goalie: float = 0.0
    defender: float = 0.0
    midfielder: float = 0.0
    attacker: float = 0.0

    @property
    def total(self) -> float:
        return self.goalie + self.defender + self.midfielder + self.attacker

    def to_dict(self) -> Dict[str, float]:
        return {
            "goalie": self.goalie,
            "defender": self.defender,
            "midfielder": self.midfielder,
            "attacker": self.attacker,
        }


@dataclass
class PlayerRoleSummary:
    """Aggregated role information for a single player."""

    player_id: str
    display_name: str
    is_inactive: bool
    outfield_seconds: int
    goalie_seconds: int
    points: RolePoints
    role_percentages: Dict[str, float]
    delta_seconds: int
    fairness: str


@dataclass
class RoleReport:
    """Snapshot of role distribution across the squad."""

    squad_size: int
    players: List[PlayerRoleSummary] = field(default_factory=list)
    average_seconds: float = 0.0
    min_seconds: int = 0
    max_seconds: int = 0
    fairness_counts: Dict[str, int] = field(default_factory=dict)
