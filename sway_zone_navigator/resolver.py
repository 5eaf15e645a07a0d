"""
Adjacency resolver: pick the best zone in a direction.

Algorithm:
1. Drop the zone the window currently occupies.
2. Keep zones that lie on the requested side of the reference rectangle,
   admitting zones that overlap it by at most DIRECTION_TOLERANCE.
3. Score each remaining zone by the gap along the movement axis plus half
   the offset between centers on the perpendicular axis.
4. Return the lowest score; the first zone seen wins ties.

Pure and synchronous, safe to call while holding the placement lock.
"""

import logging
from typing import Optional, Sequence

from .models import Direction, Rect, Zone

logger = logging.getLogger(__name__)

DIRECTION_TOLERANCE = 50.0
PERPENDICULAR_WEIGHT = 0.5


def is_in_direction(reference: Rect, candidate: Rect, direction: Direction) -> bool:
    """Check whether candidate lies on the requested side of reference."""
    if direction == Direction.LEFT:
        return candidate.right <= reference.left + DIRECTION_TOLERANCE
    if direction == Direction.RIGHT:
        return candidate.left >= reference.right - DIRECTION_TOLERANCE
    if direction == Direction.UP:
        return candidate.bottom <= reference.top + DIRECTION_TOLERANCE
    if direction == Direction.DOWN:
        return candidate.top >= reference.bottom - DIRECTION_TOLERANCE
    raise ValueError(f"Unknown direction: {direction!r}")


def direction_score(reference: Rect, candidate: Rect, direction: Direction) -> float:
    """
    Weighted distance from reference to candidate for a direction.

    Lower is better. Only meaningful for candidates that pass is_in_direction().
    """
    if direction == Direction.LEFT:
        gap = max(0.0, reference.left - candidate.right)
        offset = abs(candidate.center_y - reference.center_y)
    elif direction == Direction.RIGHT:
        gap = max(0.0, candidate.left - reference.right)
        offset = abs(candidate.center_y - reference.center_y)
    elif direction == Direction.UP:
        gap = max(0.0, reference.top - candidate.bottom)
        offset = abs(candidate.center_x - reference.center_x)
    elif direction == Direction.DOWN:
        gap = max(0.0, candidate.top - reference.bottom)
        offset = abs(candidate.center_x - reference.center_x)
    else:
        raise ValueError(f"Unknown direction: {direction!r}")

    return gap + offset * PERPENDICULAR_WEIGHT


def resolve_adjacent_zone(
    current_rect: Rect,
    current_zone_id: Optional[int],
    direction: Direction,
    zones: Sequence[Zone],
) -> Optional[int]:
    """
    Find the zone to move into from current_rect in the given direction.

    Args:
        current_rect: Rect of the occupied zone, or the window's own rect if unplaced
        current_zone_id: Zone to exclude from candidacy, if any
        direction: Requested direction
        zones: Candidate zones of the active layout, in iteration order

    Returns:
        Id of the best zone, or None if no zone lies in that direction
    """
    best_zone: Optional[Zone] = None
    best_score = float("inf")

    for zone in zones:
        if current_zone_id is not None and zone.id == current_zone_id:
            continue
        if not is_in_direction(current_rect, zone.rect, direction):
            continue

        score = direction_score(current_rect, zone.rect, direction)
        if score < best_score:
            best_score = score
            best_zone = zone

    if best_zone is None:
        logger.debug(
            f"No zone {direction.value} of ({current_rect.x}, {current_rect.y}, "
            f"{current_rect.width}x{current_rect.height}) among {len(zones)} zone(s)"
        )
        return None

    logger.debug(f"Resolved {direction.value} → zone {best_zone.id} (score={best_score:.1f})")
    return best_zone.id
