"""Placement table: which window is snapped into which zone.

Process-wide, async-safe map of window id → zone id. Every snapping path
(keyboard navigation, association, close/un-snap handling) goes through one
PlacementTable instance so a window never maps to more than one zone.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional

from .models import PlacementEntry

logger = logging.getLogger(__name__)


class PlacementView:
    """Synchronous access to the table while its lock is held.

    Obtained from PlacementTable.transaction(); invalid once the block exits.
    """

    def __init__(self, entries: Dict[int, PlacementEntry]) -> None:
        self._entries = entries
        self._open = True

    def _check_open(self) -> None:
        if not self._open:
            raise RuntimeError("PlacementView used outside its transaction")

    def close(self) -> None:
        self._open = False

    def get_entry(self, window_id: int) -> Optional[PlacementEntry]:
        self._check_open()
        return self._entries.get(window_id)

    def get(self, window_id: int) -> Optional[int]:
        entry = self.get_entry(window_id)
        return entry.zone_id if entry is not None else None

    def is_placed(self, window_id: int, layout_name: Optional[str] = None) -> bool:
        entry = self.get_entry(window_id)
        if entry is None:
            return False
        return layout_name is None or entry.layout_name == layout_name

    def set(self, window_id: int, zone_id: int, layout_name: Optional[str] = None) -> None:
        self._check_open()
        previous = self._entries.get(window_id)
        self._entries[window_id] = PlacementEntry(
            window_id=window_id, zone_id=zone_id, layout_name=layout_name
        )
        if previous is None:
            logger.info(f"Placed window {window_id} in zone {zone_id} (layout={layout_name})")
        elif previous.zone_id != zone_id or previous.layout_name != layout_name:
            logger.info(
                f"Moved window {window_id}: zone {previous.zone_id} → {zone_id} "
                f"(layout={layout_name})"
            )

    def remove(self, window_id: int) -> None:
        self._check_open()
        entry = self._entries.pop(window_id, None)
        if entry is None:
            logger.debug(f"Window {window_id} was not placed, nothing to remove")
        else:
            logger.info(f"Unplaced window {window_id} (was zone {entry.zone_id})")


class PlacementTable:
    """Async-safe window → zone map."""

    def __init__(self) -> None:
        """Initialize an empty table."""
        self._entries: Dict[int, PlacementEntry] = {}
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[PlacementView]:
        """
        Hold the table lock for a read-modify-write sequence.

        Yields:
            PlacementView with synchronous get/set/remove
        """
        async with self._lock:
            view = PlacementView(self._entries)
            try:
                yield view
            finally:
                view.close()

    async def get(self, window_id: int) -> Optional[int]:
        """Zone currently holding window_id, or None if unplaced."""
        async with self.transaction() as view:
            return view.get(window_id)

    async def get_entry(self, window_id: int) -> Optional[PlacementEntry]:
        async with self.transaction() as view:
            return view.get_entry(window_id)

    async def set(self, window_id: int, zone_id: int, layout_name: Optional[str] = None) -> None:
        """Record window_id in zone_id, replacing any prior entry."""
        async with self.transaction() as view:
            view.set(window_id, zone_id, layout_name)

    async def remove(self, window_id: int) -> None:
        """Forget window_id. No-op if it was not placed."""
        async with self.transaction() as view:
            view.remove(window_id)

    async def is_placed(self, window_id: int, layout_name: Optional[str] = None) -> bool:
        """
        Check whether window_id is placed.

        Args:
            window_id: Sway container ID
            layout_name: If given, only count placements recorded under this layout
        """
        async with self.transaction() as view:
            return view.is_placed(window_id, layout_name)

    async def windows_in_layout(self, layout_name: str) -> List[int]:
        async with self._lock:
            return [
                entry.window_id
                for entry in self._entries.values()
                if entry.layout_name == layout_name
            ]

    async def remove_layout(self, layout_name: str) -> int:
        """
        Drop every placement recorded under layout_name.

        Returns:
            Number of entries removed
        """
        async with self._lock:
            stale = [wid for wid, entry in self._entries.items() if entry.layout_name == layout_name]
            for window_id in stale:
                del self._entries[window_id]
            if stale:
                logger.info(f"Dropped {len(stale)} placement(s) of layout '{layout_name}'")
            return len(stale)

    async def snapshot(self) -> List[PlacementEntry]:
        async with self._lock:
            return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
