"""
Sway Zone Navigator Daemon

Listens for Sway binding events and moves the focused window between the
zones of the active layout. Bind keys in the Sway config with:

    bindsym $mod+Ctrl+Left  nop zone-navigate left
    bindsym $mod+Ctrl+Right nop zone-navigate right
    bindsym $mod+Ctrl+Up    nop zone-navigate up
    bindsym $mod+Ctrl+Down  nop zone-navigate down
"""
# Module can be run with: python -m sway_zone_navigator

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from i3ipc import Event
from i3ipc.aio import Connection

from .association import associate_windows
from .config import LayoutFileWatcher, LayoutLoader, NavigatorSettings
from .errors import ErrorCode, LayoutLoadError, ZoneNavigatorError
from .models import Direction, LayoutConfig, LayoutsFile
from .navigation import ZoneNavigator
from .placement import PlacementTable
from .platform import SwayPlatform
from .suppression import SuppressionFlag

logger = logging.getLogger(__name__)


def parse_binding_command(command: str, prefix: str = "zone-navigate") -> Optional[Direction]:
    """
    Extract a direction from a binding command like "nop zone-navigate left".

    Returns:
        Direction, or None if the command is not a zone navigation binding
    """
    parts = command.split()
    if len(parts) < 2 or parts[0] != "nop" or parts[1] != prefix:
        return None
    if len(parts) != 3:
        logger.warning(f"Malformed zone navigation binding: {command!r}")
        return None
    try:
        return Direction(parts[2].lower())
    except ValueError:
        logger.warning(f"Unknown zone navigation direction in binding: {command!r}")
        return None


class ZoneNavigatorDaemon:
    """Main daemon for keyboard zone navigation."""

    def __init__(self, settings: Optional[NavigatorSettings] = None):
        """
        Initialize zone navigator daemon.

        Args:
            settings: Daemon settings (defaults if None)
        """
        self.settings = settings or NavigatorSettings()
        self.sway: Optional[Connection] = None
        self.running = False

        self.loader = LayoutLoader(self.settings.layouts_file)
        self.layouts = LayoutsFile()

        # Shared state, created once for the daemon's lifetime
        self.placements = PlacementTable()
        self.suppression = SuppressionFlag()

        self.platform: Optional[SwayPlatform] = None
        self.navigator: Optional[ZoneNavigator] = None
        self.file_watcher: Optional[LayoutFileWatcher] = None

    def current_layout(self) -> Optional[LayoutConfig]:
        return self.layouts.current_layout()

    def current_layout_name(self) -> Optional[str]:
        layout = self.current_layout()
        return layout.name if layout else None

    def attach(self, connection: Connection) -> None:
        """Build the platform and navigator on top of a connected Sway IPC connection."""
        self.sway = connection
        self.platform = SwayPlatform(connection, self.current_layout)
        self.navigator = ZoneNavigator(
            self.platform,
            self.placements,
            self.suppression,
            layout_name_provider=self.current_layout_name,
        )

    async def connect(self) -> Connection:
        """
        Open the Sway IPC connection.

        Raises:
            ZoneNavigatorError: SWAY_NOT_RUNNING if the IPC socket cannot be reached
        """
        try:
            connection = await Connection(auto_reconnect=True).connect()
        except Exception as e:
            raise ZoneNavigatorError(
                ErrorCode.SWAY_NOT_RUNNING,
                f"Cannot connect to Sway IPC: {e}",
                suggestion="Start the daemon from inside a Sway session (SWAYSOCK must be set)",
            )
        logger.info("Connected to Sway IPC")
        return connection

    async def start(self):
        """Start the daemon."""
        logger.info("Starting Sway Zone Navigator Daemon")

        try:
            self.layouts = self.loader.load()

            self.attach(await self.connect())

            if self.settings.auto_associate:
                await self.associate_existing_windows()

            if self.settings.watch_config:
                self.file_watcher = LayoutFileWatcher(
                    self.settings.layouts_file, self.reload_layouts
                )
                self.file_watcher.start()

            self._subscribe_events()

            self.running = True
            logger.info("Daemon started successfully")

            await self._run_event_loop()

        except Exception as e:
            logger.error(f"Failed to start daemon: {e}")
            raise

    async def stop(self):
        """Stop the daemon."""
        logger.info("Stopping daemon...")
        self.running = False

        if self.file_watcher:
            self.file_watcher.stop()

        if self.sway:
            self.sway.main_quit()

        logger.info("Daemon stopped")

    async def reload_layouts(self) -> bool:
        """
        Reload layouts.json, keeping the previous layouts if the new file is invalid.

        Returns:
            True if layouts were replaced
        """
        previous_name = self.current_layout_name()
        try:
            self.layouts = self.loader.load()
        except LayoutLoadError as e:
            logger.error(f"Keeping previous layouts: {e.message}")
            return False

        new_name = self.current_layout_name()
        if previous_name is not None and previous_name != new_name:
            logger.info(f"Active layout changed: {previous_name} → {new_name}")
            await self.placements.remove_layout(previous_name)

        if self.settings.auto_associate and self.platform is not None:
            await self.associate_existing_windows()
        return True

    async def associate_existing_windows(self) -> int:
        """Record already-aligned windows on the focused workspace as placed."""
        if self.platform is None:
            raise ZoneNavigatorError(
                ErrorCode.DAEMON_NOT_INITIALIZED, "Daemon is not connected to Sway"
            )
        try:
            zones = await self.platform.active_layout_zones()
            windows = await self.platform.list_windows()
        except ZoneNavigatorError as e:
            logger.error(f"Window association skipped: {e.message}")
            return 0
        return await associate_windows(windows, zones, self.placements, self.current_layout_name())

    def _subscribe_events(self):
        """Subscribe to Sway events."""
        self.sway.on(Event.BINDING, self._on_binding)
        self.sway.on(Event.WINDOW_CLOSE, self._on_window_close)
        self.sway.on(Event.WINDOW_FLOATING, self._on_window_floating)

        logger.info("Subscribed to Sway events")

    async def _on_binding(self, sway, event):
        """Handle binding events carrying a zone navigation command."""
        try:
            command = event.binding.command if hasattr(event, 'binding') else ""
            direction = parse_binding_command(command, self.settings.binding_prefix)
            if direction is None:
                return

            result = await self.navigator.navigate(direction)
            logger.debug(f"Navigation result: {result.model_dump(mode='json')}")

        except Exception as e:
            logger.error(f"Error handling binding event: {e}", exc_info=True)

    async def _on_window_close(self, sway, event):
        """Handle window::close - forget the window's placement."""
        try:
            await self.placements.remove(event.container.id)
        except Exception as e:
            logger.error(f"Error handling window::close event: {e}")

    async def _on_window_floating(self, sway, event):
        """Handle window::floating - a window returned to tiling is no longer snapped."""
        try:
            container = event.container
            if container.type == "con":
                await self.placements.remove(container.id)
        except Exception as e:
            logger.error(f"Error handling window::floating event: {e}")

    async def _run_event_loop(self):
        """Run main event loop."""
        try:
            await self.sway.main()
        except asyncio.CancelledError:
            logger.info("Event loop cancelled")


def parse_args(argv: Optional[List[str]] = None) -> NavigatorSettings:
    """Build settings from command line arguments."""
    parser = argparse.ArgumentParser(
        prog="sway-zone-navigator",
        description="Move Sway windows between layout zones with the keyboard",
    )
    parser.add_argument("--config-dir", type=Path, help="Configuration directory")
    parser.add_argument("--layouts-file", type=Path, help="Layouts JSON file")
    parser.add_argument("--binding-prefix", help="nop command prefix (default: zone-navigate)")
    parser.add_argument("--log-level", default="INFO", help="Log level (default: INFO)")
    parser.add_argument("--no-watch", action="store_true", help="Do not reload layouts on change")
    parser.add_argument("--no-associate", action="store_true", help="Skip passive window association")
    args = parser.parse_args(argv)

    values = {
        "log_level": args.log_level,
        "watch_config": not args.no_watch,
        "auto_associate": not args.no_associate,
    }
    if args.config_dir is not None:
        values["config_dir"] = args.config_dir
    if args.layouts_file is not None:
        values["layouts_file"] = args.layouts_file
    if args.binding_prefix:
        values["binding_prefix"] = args.binding_prefix
    return NavigatorSettings(**values)


async def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    settings = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    daemon = ZoneNavigatorDaemon(settings)

    # Setup signal handlers
    loop = asyncio.get_running_loop()

    def signal_handler():
        logger.info("Received shutdown signal")
        asyncio.create_task(daemon.stop())

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    try:
        await daemon.start()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


def run():
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
