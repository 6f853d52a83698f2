"""Substitute slot allocation for individual substitution mode."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from ..utils.logging_utils import get_logger

logger = get_logger(__name__)


def allocate_substitute_slots(substitute_positions: Sequence[str],
                              active_ids: Sequence[str],
                              inactive_ids: Sequence[str] = ()) -> Dict[str, Optional[str]]:
    """
    Fill ordered substitute slots.

    Active substitutes take slots from the front in the order given (least
    time first). Inactive players take the deepest slots in roster order,
    so any empty slots sit between the two groups and the first slot is
    always an active player when one exists.

    Args:
        substitute_positions: Slot keys, index 0 is next on
        active_ids: Active substitutes, already ordered
        inactive_ids: Inactive outfielders in roster order

    Returns:
        Mapping of every slot key to a player id or None
    """
    slots: Dict[str, Optional[str]] = {key: None for key in substitute_positions}
    keys = list(substitute_positions)

    placed_active = list(active_ids)[:len(keys)]
    for key, player_id in zip(keys, placed_active):
        slots[key] = player_id

    free = len(keys) - len(placed_active)
    placed_inactive = list(inactive_ids)[:free]
    if placed_inactive:
        deepest = keys[len(keys) - len(placed_inactive):]
        for key, player_id in zip(deepest, placed_inactive):
            slots[key] = player_id

    dropped = len(active_ids) - len(placed_active) + len(inactive_ids) - len(placed_inactive)
    if dropped > 0:
        logger.debug("substitutes_without_slot", count=dropped, slots=len(keys))
    return slots
