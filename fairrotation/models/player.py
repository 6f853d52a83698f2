"""
Player model for the Fair Rotation engine.

This module contains the Player dataclass and the cumulative role-time
statistics the engine reads to balance playing time. Statistics are
accumulated elsewhere; the engine only reads them.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class Role(Enum):
    """Player roles on the pitch."""
    GOALIE = "goalie"
    DEFENDER = "defender"
    MIDFIELDER = "midfielder"
    ATTACKER = "attacker"
    SUBSTITUTE = "substitute"

    @property
    def is_outfield(self) -> bool:
        return self in OUTFIELD_ROLES

    def opposite(self) -> "Role":
        """Return the other half of a defender/attacker pair."""
        if self is Role.DEFENDER:
            return Role.ATTACKER
        if self is Role.ATTACKER:
            return Role.DEFENDER
        raise ValueError(f"Role {self.value} has no pair opposite")


OUTFIELD_ROLES = (Role.DEFENDER, Role.MIDFIELDER, Role.ATTACKER)

# Payloads from the match tracker use camelCase keys; both spellings are accepted.
_STATS_KEY_ALIASES = {
    "is_inactive": "isInactive",
    "is_captain": "isCaptain",
    "time_on_field_seconds": "timeOnFieldSeconds",
    "time_as_defender_seconds": "timeAsDefenderSeconds",
    "time_as_midfielder_seconds": "timeAsMidfielderSeconds",
    "time_as_attacker_seconds": "timeAsAttackerSeconds",
    "time_as_goalie_seconds": "timeAsGoalieSeconds",
    "periods_as_goalie": "periodsAsGoalie",
}


@dataclass(frozen=True)
class PlayerStats:
    """
    Cumulative per-player statistics.

    Attributes:
        is_inactive: Temporarily excluded from rotation but still in the squad
        is_captain: Team captain flag (display only)
        time_on_field_seconds: Total outfield seconds
        time_as_defender_seconds: Seconds spent as defender
        time_as_midfielder_seconds: Seconds spent as midfielder
        time_as_attacker_seconds: Seconds spent as attacker
        time_as_goalie_seconds: Seconds spent in goal
        periods_as_goalie: Periods played in goal (may be fractional)
    """
    is_inactive: bool = False
    is_captain: bool = False
    time_on_field_seconds: float = 0
    time_as_defender_seconds: float = 0
    time_as_midfielder_seconds: float = 0
    time_as_attacker_seconds: float = 0
    time_as_goalie_seconds: float = 0
    periods_as_goalie: float = 0

    def role_seconds(self, role: Role) -> float:
        """
        Get cumulative seconds for a single role.

        Args:
            role: Role to look up

        Returns:
            Seconds in that role; substitutes have no role time
        """
        if role is Role.DEFENDER:
            return self.time_as_defender_seconds
        if role is Role.MIDFIELDER:
            return self.time_as_midfielder_seconds
        if role is Role.ATTACKER:
            return self.time_as_attacker_seconds
        if role is Role.GOALIE:
            return self.time_as_goalie_seconds
        return 0

    def outfield_role_seconds(self) -> float:
        """Sum of defender, midfielder and attacker seconds."""
        return sum(self.role_seconds(role) for role in OUTFIELD_ROLES)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "is_inactive": self.is_inactive,
            "is_captain": self.is_captain,
            "time_on_field_seconds": self.time_on_field_seconds,
            "time_as_defender_seconds": self.time_as_defender_seconds,
            "time_as_midfielder_seconds": self.time_as_midfielder_seconds,
            "time_as_attacker_seconds": self.time_as_attacker_seconds,
            "time_as_goalie_seconds": self.time_as_goalie_seconds,
            "periods_as_goalie": self.periods_as_goalie,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PlayerStats":
        """
        Create from dictionary, accepting snake_case or camelCase keys.

        Missing values are treated as zero time.
        """
        if not data:
            return cls()

        def _get(key: str, default: Any) -> Any:
            if key in data and data[key] is not None:
                return data[key]
            alias = _STATS_KEY_ALIASES[key]
            value = data.get(alias)
            return default if value is None else value

        return cls(
            is_inactive=bool(_get("is_inactive", False)),
            is_captain=bool(_get("is_captain", False)),
            time_on_field_seconds=_get("time_on_field_seconds", 0),
            time_as_defender_seconds=_get("time_as_defender_seconds", 0),
            time_as_midfielder_seconds=_get("time_as_midfielder_seconds", 0),
            time_as_attacker_seconds=_get("time_as_attacker_seconds", 0),
            time_as_goalie_seconds=_get("time_as_goalie_seconds", 0),
            periods_as_goalie=_get("periods_as_goalie", 0),
        )


@dataclass(frozen=True)
class Player:
    """
    Represents a squad member.

    Attributes:
        id: Unique player identifier
        display_name: Name shown to the coach
        stats: Cumulative statistics (read-only to the engine)
    """
    id: str
    display_name: str = ""
    stats: PlayerStats = field(default_factory=PlayerStats)

    @property
    def is_inactive(self) -> bool:
        return self.stats.is_inactive

    def to_dict(self) -> Dict[str, Any]:
        """Convert player to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "display_name": self.display_name,
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """
        Create player from dictionary.

        Args:
            data: Dictionary representation of player

        Returns:
            Player instance

        Raises:
            ValueError: If the id is missing
        """
        player_id = data.get("id")
        if player_id is None or str(player_id) == "":
            raise ValueError("Player id is required")
        return cls(
            id=str(player_id),
            display_name=data.get("display_name") or data.get("displayName") or "",
            stats=PlayerStats.from_dict(data.get("stats")),
        )
