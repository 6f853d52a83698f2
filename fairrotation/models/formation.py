"""Formation and recommendation models for the Fair Rotation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .player import Role
from .team_config import SubstitutionType
from ..utils.constants import GOALIE_POSITION


class RecommendationError(Enum):
    """Reasons the engine could not produce a full recommendation."""
    UNKNOWN_CONFIGURATION = "unknown_configuration"
    UNSUPPORTED_SUBSTITUTION_TYPE = "unsupported_substitution_type"
    MISSING_GOALIE = "missing_goalie"


@dataclass(frozen=True)
class ModeDefinition:
    """
    Derived description of the positions a team configuration uses.

    Attributes:
        formation: Shape identifier the definition was built for
        substitution_type: Individual or paired
        field_positions: Ordered on-pitch position keys
        substitute_positions: Ordered bench keys, index 0 is next on
        position_role_map: Position key to role
    """
    formation: str
    substitution_type: SubstitutionType
    field_positions: Tuple[str, ...]
    substitute_positions: Tuple[str, ...]
    position_role_map: Mapping[str, Role]

    @property
    def is_paired(self) -> bool:
        return self.substitution_type is SubstitutionType.PAIRS

    @property
    def field_count(self) -> int:
        """Number of outfield players on the pitch."""
        if self.is_paired:
            return len(self.field_positions) * 2
        return len(self.field_positions)

    @property
    def roles(self) -> Tuple[Role, ...]:
        """Distinct field roles in defender, midfielder, attacker order."""
        present = {self.position_role_map[pos] for pos in self.field_positions}
        return tuple(role for role in (Role.DEFENDER, Role.MIDFIELDER, Role.ATTACKER) if role in present)

    def positions_for_role(self, role: Role) -> List[str]:
        """Field positions mapped to a role, in field order."""
        return [pos for pos in self.field_positions if self.position_role_map.get(pos) is role]

    def all_positions(self) -> List[str]:
        """Goalie, field and substitute keys in display order."""
        return [GOALIE_POSITION, *self.field_positions, *self.substitute_positions]


@dataclass(frozen=True)
class PositionPair:
    """A defender and attacker who rotate on and off together."""
    defender: Optional[str] = None
    attacker: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.defender is not None and self.attacker is not None

    def members(self) -> List[str]:
        """Non-empty member ids, defender first."""
        return [pid for pid in (self.defender, self.attacker) if pid is not None]

    def role_of(self, player_id: str) -> Optional[Role]:
        if player_id is None:
            return None
        if self.defender == player_id:
            return Role.DEFENDER
        if self.attacker == player_id:
            return Role.ATTACKER
        return None

    def swapped(self) -> PositionPair:
        return PositionPair(defender=self.attacker, attacker=self.defender)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"defender": self.defender, "attacker": self.attacker}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Optional[str]]]) -> PositionPair:
        if not data:
            return cls()
        return cls(defender=data.get("defender"), attacker=data.get("attacker"))


PositionValue = Union[str, PositionPair, None]


@dataclass
class Formation:
    """
    Assignment of players to position keys.

    Individual formations map keys to player ids; paired formations map
    pair keys to :class:`PositionPair` values. The goalie is kept apart.
    """
    goalie: Optional[str] = None
    positions: Dict[str, PositionValue] = field(default_factory=dict)

    def get(self, position: str) -> PositionValue:
        if position == GOALIE_POSITION:
            return self.goalie
        return self.positions.get(position)

    def __getitem__(self, position: str) -> PositionValue:
        return self.get(position)

    def pairs(self) -> Iterator[Tuple[str, PositionPair]]:
        """Iterate (key, pair) for paired positions only."""
        for key, value in self.positions.items():
            if isinstance(value, PositionPair):
                yield key, value

    def player_ids(self) -> List[str]:
        """All assigned ids, goalie first, in position order (duplicates kept)."""
        ids = [self.goalie] if self.goalie is not None else []
        for value in self.positions.values():
            if isinstance(value, PositionPair):
                ids.extend(value.members())
            elif value is not None:
                ids.append(value)
        return ids

    def position_of(self, player_id: str) -> Optional[str]:
        """Key holding the player, or None."""
        if player_id is None:
            return None
        if self.goalie == player_id:
            return GOALIE_POSITION
        for key, value in self.positions.items():
            if isinstance(value, PositionPair):
                if player_id in value.members():
                    return key
            elif value == player_id:
                return key
        return None

    def partner_of(self, player_id: str) -> Optional[str]:
        """Pair partner of a player in a paired formation."""
        for _, pair in self.pairs():
            if pair.defender == player_id:
                return pair.attacker
            if pair.attacker == player_id:
                return pair.defender
        return None

    def role_of(self, player_id: str) -> Optional[Role]:
        """Defender/attacker role a player held inside a pair."""
        for _, pair in self.pairs():
            role = pair.role_of(player_id)
            if role is not None:
                return role
        return None

    def to_dict(self) -> Dict[str, object]:
        """Flat mapping that always includes the goalie key."""
        result: Dict[str, object] = {GOALIE_POSITION: self.goalie}
        for key, value in self.positions.items():
            result[key] = value.to_dict() if isinstance(value, PositionPair) else value
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Formation:
        """
        Create from a flat mapping. Dict values become pairs.

        Args:
            data: Mapping of position key to id or {defender, attacker}
        """
        positions: Dict[str, PositionValue] = {}
        for key, value in data.items():
            if key == GOALIE_POSITION:
                continue
            if isinstance(value, Mapping):
                positions[key] = PositionPair.from_dict(value)
            else:
                positions[key] = value
        return cls(goalie=data.get(GOALIE_POSITION), positions=positions)


@dataclass(frozen=True)
class FormationRecommendation:
    """
    Engine output for one period.

    Attributes:
        formation: New position assignment (always carries the goalie)
        rotation_queue: Ids ordered by rotation priority, front rotates off first
        next_player_to_rotate_off: Front field player, or None when no rotation
        first_pair_to_rotate_off: Paired mode only, key of the first field pair off
        error: Set when only a goalie-only fallback could be produced
    """
    formation: Formation
    rotation_queue: Tuple[str, ...] = ()
    next_player_to_rotate_off: Optional[str] = None
    first_pair_to_rotate_off: Optional[str] = None
    error: Optional[RecommendationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def goalie_only(cls, goalie_id: Optional[str], error: RecommendationError) -> FormationRecommendation:
        """Minimal fallback used when no formation can be computed."""
        return cls(formation=Formation(goalie=goalie_id), error=error)

    def to_dict(self) -> Dict[str, object]:
        result: Dict[str, object] = {
            "formation": self.formation.to_dict(),
            "rotationQueue": list(self.rotation_queue),
            "nextPlayerToRotateOff": self.next_player_to_rotate_off,
        }
        if self.first_pair_to_rotate_off is not None:
            result["firstPairToRotateOff"] = self.first_pair_to_rotate_off
        if self.error is not None:
            result["error"] = self.error.value
        return result
