"""Passive window → zone association.

Windows that already sit exactly on a zone (within a few pixels per edge)
are recorded as placed so they take part in zone navigation without first
being snapped by hand.

Runs only on daemon start and after a layout change; there is no
continuous movement tracking.
"""

import logging
from typing import Iterable, Optional, Sequence

from .models import FocusedWindow, Rect, Zone
from .placement import PlacementTable

logger = logging.getLogger(__name__)

# Max difference, per origin coordinate and per dimension, for a match
ASSOCIATION_TOLERANCE = 6.0


def rect_matches(window: Rect, zone: Rect, tolerance: float = ASSOCIATION_TOLERANCE) -> bool:
    return (
        abs(window.x - zone.x) <= tolerance
        and abs(window.y - zone.y) <= tolerance
        and abs(window.width - zone.width) <= tolerance
        and abs(window.height - zone.height) <= tolerance
    )


def match_zone(
    rect: Rect,
    zones: Sequence[Zone],
    tolerance: float = ASSOCIATION_TOLERANCE,
) -> Optional[int]:
    """First zone (in layout order) whose rect matches rect, or None."""
    for zone in zones:
        if rect_matches(rect, zone.rect, tolerance):
            return zone.id
    return None


async def associate_windows(
    windows: Iterable[FocusedWindow],
    zones: Sequence[Zone],
    placements: PlacementTable,
    layout_name: Optional[str] = None,
) -> int:
    """
    Record unplaced windows that geometrically match a zone.

    Args:
        windows: Candidate windows with their current rects
        zones: Zones of the active layout
        placements: Shared placement table
        layout_name: Active layout name, stored with new placements

    Returns:
        Number of windows newly associated
    """
    if not zones:
        return 0

    associated = 0
    async with placements.transaction() as view:
        for window in windows:
            if view.is_placed(window.window_id):
                continue
            zone_id = match_zone(window.rect, zones)
            if zone_id is None:
                continue
            view.set(window.window_id, zone_id, layout_name)
            associated += 1
            logger.debug(f"Associated window {window.window_id} → zone {zone_id}")

    if associated:
        logger.info(f"Associated {associated} window(s) with layout '{layout_name}'")
    return associated
