"""
Keyboard zone navigation.

Moves the focused window into the adjacent zone of the active layout and
records the new placement. One navigate() call performs at most one
compositor move and at most one placement update.
"""

import logging
from typing import Callable, Optional

from .errors import WindowMoveError
from .models import Direction, NavigationOutcome, NavigationResult, Rect
from .placement import PlacementTable, PlacementView
from .platform import WindowPlatform
from .resolver import resolve_adjacent_zone
from .suppression import SuppressionFlag

logger = logging.getLogger(__name__)


class ZoneNavigator:
    """Orchestrates focused-window lookup, zone resolution, move and bookkeeping."""

    def __init__(
        self,
        platform: WindowPlatform,
        placements: PlacementTable,
        suppression: SuppressionFlag,
        layout_name_provider: Optional[Callable[[], Optional[str]]] = None,
    ):
        """
        Initialize zone navigator.

        Args:
            platform: Compositor operations
            placements: Shared placement table
            suppression: Shared flag raised while a move is in progress
            layout_name_provider: Returns the active layout name, recorded with placements
        """
        self.platform = platform
        self.placements = placements
        self.suppression = suppression
        self.layout_name_provider = layout_name_provider

    def _layout_name(self) -> Optional[str]:
        return self.layout_name_provider() if self.layout_name_provider else None

    async def navigate(self, direction: Direction) -> NavigationResult:
        """
        Move the focused window one zone in direction.

        Returns:
            NavigationResult; outcome is MOVED, NO_FOCUSED_WINDOW, NO_TARGET
            or MOVE_FAILED. Unexpected errors propagate.
        """
        direction = Direction(direction)
        logger.debug(f"navigate({direction.value})")

        with self.suppression.raised():
            focused = await self.platform.get_focused_window()
            if focused is None:
                logger.debug("No focused window for zone navigation")
                return NavigationResult(
                    outcome=NavigationOutcome.NO_FOCUSED_WINDOW, direction=direction
                )

            window_id = focused.window_id
            zones = await self.platform.active_layout_zones()
            zones_by_id = {zone.id: zone for zone in zones}

            async with self.placements.transaction() as view:
                current_zone_id = view.get(window_id)
                if current_zone_id is not None and current_zone_id in zones_by_id:
                    reference = zones_by_id[current_zone_id].rect
                else:
                    if current_zone_id is not None:
                        logger.debug(
                            f"Window {window_id} placed in zone {current_zone_id} "
                            f"which is not in the active layout, using window rect"
                        )
                    current_zone_id = None
                    reference = focused.rect

                target_zone_id = resolve_adjacent_zone(reference, current_zone_id, direction, zones)
                if target_zone_id is None:
                    logger.debug(f"No adjacent zone {direction.value} of window {window_id}")
                    return NavigationResult(
                        outcome=NavigationOutcome.NO_TARGET,
                        direction=direction,
                        window_id=window_id,
                        from_zone=current_zone_id,
                    )

                logger.info(
                    f"Moving window {window_id} {direction.value}: "
                    f"zone {current_zone_id if current_zone_id is not None else 'none'} → {target_zone_id}"
                )
                try:
                    await self._move_and_record(
                        view, window_id, target_zone_id, zones_by_id[target_zone_id].rect
                    )
                except WindowMoveError as e:
                    logger.error(f"Zone navigation failed: {e.message}")
                    return NavigationResult(
                        outcome=NavigationOutcome.MOVE_FAILED,
                        direction=direction,
                        window_id=window_id,
                        from_zone=current_zone_id,
                        to_zone=target_zone_id,
                        error=e.message,
                    )

            return NavigationResult(
                outcome=NavigationOutcome.MOVED,
                direction=direction,
                window_id=window_id,
                from_zone=current_zone_id,
                to_zone=target_zone_id,
            )

    async def snap_to_zone(self, window_id: int, zone_id: int) -> bool:
        """
        Snap a window into a zone of the active layout.

        Used by snapping paths other than directional navigation.

        Returns:
            True if the window was moved and recorded, False if the zone does not exist

        Raises:
            WindowMoveError: If the compositor rejected the move
        """
        zones = await self.platform.active_layout_zones()
        target = next((zone for zone in zones if zone.id == zone_id), None)
        if target is None:
            logger.warning(f"Zone {zone_id} is not part of the active layout")
            return False

        async with self.placements.transaction() as view:
            await self._move_and_record(view, window_id, zone_id, target.rect)
        return True

    async def _move_and_record(
        self,
        view: PlacementView,
        window_id: int,
        zone_id: int,
        rect: Rect,
    ) -> None:
        # A failed move raises before set(), leaving the table untouched
        await self.platform.move_window(window_id, rect)
        view.set(window_id, zone_id, self._layout_name())
