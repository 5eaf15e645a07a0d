"""Pytest configuration and fixtures for Sway Zone Navigator tests."""

import sys
from pathlib import Path
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

# Make the package importable without installing it
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from sway_zone_navigator.errors import WindowMoveError
from sway_zone_navigator.models import FocusedWindow, Rect, Zone
from sway_zone_navigator.placement import PlacementTable
from sway_zone_navigator.platform import WindowPlatform
from sway_zone_navigator.suppression import SuppressionFlag


def make_zone(zone_id: int, x: float, y: float, width: float, height: float) -> Zone:
    return Zone(id=zone_id, rect=Rect(x=x, y=y, width=width, height=height))


class FakePlatform(WindowPlatform):
    """In-memory compositor: one focused window, fixed zones, recorded moves."""

    def __init__(self, zones: List[Zone], focused: Optional[FocusedWindow] = None):
        self.zones = zones
        self.focused = focused
        self.moves = []
        self.fail_moves = False
        self.on_move = None

    async def get_focused_window(self) -> Optional[FocusedWindow]:
        return self.focused

    async def active_layout_zones(self) -> List[Zone]:
        return list(self.zones)

    async def move_window(self, window_id: int, target: Rect) -> None:
        if self.on_move is not None:
            self.on_move(window_id, target)
        if self.fail_moves:
            raise WindowMoveError(window_id, "window vanished")
        self.moves.append((window_id, target))
        if self.focused is not None and self.focused.window_id == window_id:
            self.focused = FocusedWindow(window_id=window_id, rect=target)


@pytest.fixture
def halves() -> List[Zone]:
    """Two side-by-side zones: A (id 1) on the left, B (id 2) on the right."""
    return [
        make_zone(1, 0, 0, 400, 800),
        make_zone(2, 400, 0, 400, 800),
    ]


@pytest.fixture
def grid() -> List[Zone]:
    """2x2 grid on a 1000x1000 area, ids 1-4 in reading order."""
    return [
        make_zone(1, 0, 0, 500, 500),
        make_zone(2, 500, 0, 500, 500),
        make_zone(3, 0, 500, 500, 500),
        make_zone(4, 500, 500, 500, 500),
    ]


@pytest.fixture
def placements() -> PlacementTable:
    return PlacementTable()


@pytest.fixture
def suppression() -> SuppressionFlag:
    return SuppressionFlag()


@pytest.fixture
def mock_i3ipc_connection():
    """Mock async i3ipc connection.

    Returns:
        AsyncMock: Mocked i3ipc.aio.Connection instance
    """
    connection = AsyncMock()
    connection.get_tree = AsyncMock(return_value=MagicMock())
    connection.command = AsyncMock(return_value=[MagicMock(success=True, error=None)])
    connection.on = MagicMock()
    return connection


def make_con(con_id: int, con_type: str, x: int, y: int, width: int, height: int, nodes=None):
    """Build a MagicMock shaped like an i3ipc Con."""
    con = MagicMock()
    con.id = con_id
    con.type = con_type
    con.rect = MagicMock(x=x, y=y, width=width, height=height)
    con.nodes = nodes or []
    return con
