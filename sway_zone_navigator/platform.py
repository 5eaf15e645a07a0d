"""
Platform layer: everything the navigator needs from the compositor.

WindowPlatform is the narrow interface the navigation core consumes;
SwayPlatform implements it on top of the async i3ipc connection.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from i3ipc.aio import Connection

from .errors import SwayIPCError, WindowMoveError
from .models import FocusedWindow, LayoutConfig, Rect, Zone

logger = logging.getLogger(__name__)

# Container types that are actual windows (not workspaces, outputs or root)
WINDOW_CON_TYPES = ("con", "floating_con")


class WindowPlatform(ABC):
    """Compositor operations consumed by ZoneNavigator."""

    @abstractmethod
    async def get_focused_window(self) -> Optional[FocusedWindow]:
        """Focused window and its rect, or None if nothing is focused."""

    @abstractmethod
    async def active_layout_zones(self) -> List[Zone]:
        """Zones of the active layout in screen coordinates."""

    @abstractmethod
    async def move_window(self, window_id: int, target: Rect) -> None:
        """
        Move and resize a window.

        Raises:
            WindowMoveError: If the compositor rejected the move
        """


def _rect_from_con(con) -> Rect:
    return Rect(x=con.rect.x, y=con.rect.y, width=con.rect.width, height=con.rect.height)


def _is_window(con) -> bool:
    return con is not None and con.type in WINDOW_CON_TYPES and not con.nodes


class SwayPlatform(WindowPlatform):
    """WindowPlatform backed by Sway IPC."""

    def __init__(
        self,
        connection: Connection,
        layout_provider: Callable[[], Optional[LayoutConfig]],
    ):
        """
        Initialize Sway platform.

        Args:
            connection: Connected async i3ipc Connection
            layout_provider: Returns the currently active layout (or None)
        """
        self.sway = connection
        self.layout_provider = layout_provider

    async def _get_focused_con(self):
        try:
            tree = await self.sway.get_tree()
        except Exception as e:
            raise SwayIPCError("get_tree", str(e))
        return tree.find_focused()

    async def get_focused_window(self) -> Optional[FocusedWindow]:
        focused = await self._get_focused_con()
        if not _is_window(focused):
            logger.debug("Focused container is not a window")
            return None
        return FocusedWindow(window_id=focused.id, rect=_rect_from_con(focused))

    async def active_layout_zones(self) -> List[Zone]:
        layout = self.layout_provider()
        if layout is None:
            logger.debug("No active layout configured")
            return []

        focused = await self._get_focused_con()
        workspace = focused.workspace() if focused is not None else None
        if workspace is None:
            logger.debug("No focused workspace, cannot project zones")
            return []

        return layout.project(_rect_from_con(workspace))

    async def list_windows(self) -> List[FocusedWindow]:
        """All windows on the focused workspace."""
        focused = await self._get_focused_con()
        workspace = focused.workspace() if focused is not None else None
        if workspace is None:
            return []

        return [
            FocusedWindow(window_id=con.id, rect=_rect_from_con(con))
            for con in workspace.descendants()
            if _is_window(con)
        ]

    async def move_window(self, window_id: int, target: Rect) -> None:
        command = (
            f"[con_id={window_id}] floating enable, "
            f"move absolute position {round(target.x)} {round(target.y)}, "
            f"resize set {round(target.width)} {round(target.height)}"
        )
        logger.debug(f"Sway command: {command}")

        try:
            replies = await self.sway.command(command)
        except Exception as e:
            raise WindowMoveError(window_id, str(e))

        for reply in replies or []:
            if not reply.success:
                raise WindowMoveError(window_id, reply.error or "command rejected")
