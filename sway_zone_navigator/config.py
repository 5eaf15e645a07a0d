"""
Configuration for Sway Zone Navigator.

Handles daemon settings, loading layouts.json, and watching it for changes.

layouts.json format:
    {
      "active_layout": "halves",
      "layouts": [
        {"name": "halves", "zones": [
          {"id": 1, "x_percentage": 0, "y_percentage": 0,
           "width_percentage": 0.5, "height_percentage": 1},
          ...
        ]}
      ]
    }
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .errors import LayoutLoadError
from .models import LayoutsFile

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "sway-zone-navigator"
LAYOUTS_FILENAME = "layouts.json"


class NavigatorSettings(BaseModel):
    """Daemon settings (command line overrides defaults)."""

    config_dir: Path = Field(default=DEFAULT_CONFIG_DIR, description="Configuration directory")
    layouts_file: Optional[Path] = Field(None, description="Layouts file (defaults to <config_dir>/layouts.json)")
    binding_prefix: str = Field("zone-navigate", min_length=1, description="nop command prefix for bindings")
    auto_associate: bool = Field(True, description="Associate already-aligned windows on start and reload")
    watch_config: bool = Field(True, description="Reload layouts when the file changes")
    log_level: str = Field("INFO", description="Root log level")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @model_validator(mode='after')
    def default_layouts_file(self):
        if self.layouts_file is None:
            self.layouts_file = self.config_dir / LAYOUTS_FILENAME
        return self


class LayoutLoader:
    """Loads and validates layouts.json."""

    def __init__(self, path: Path):
        """
        Initialize layout loader.

        Args:
            path: Path to layouts.json
        """
        self.path = path

    def load(self) -> LayoutsFile:
        """
        Load layouts from disk.

        Returns:
            Parsed LayoutsFile (empty if the file does not exist)

        Raises:
            LayoutLoadError: If the file is unreadable, not JSON, or fails validation
        """
        if not self.path.exists():
            logger.warning(f"Layouts file does not exist: {self.path}")
            return LayoutsFile()

        try:
            with open(self.path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise LayoutLoadError(str(self.path), f"invalid JSON at line {e.lineno}: {e.msg}")
        except OSError as e:
            raise LayoutLoadError(str(self.path), str(e))

        try:
            layouts = LayoutsFile.model_validate(data)
        except ValidationError as e:
            raise LayoutLoadError(str(self.path), str(e))

        logger.info(
            f"Loaded {len(layouts.layouts)} layout(s) from {self.path} "
            f"(active={layouts.active_layout})"
        )
        return layouts


class LayoutFileHandler(FileSystemEventHandler):
    """Debounces file system events for the layouts file."""

    def __init__(
        self,
        path: Path,
        callback: Callable[[], Awaitable[None]],
        loop: asyncio.AbstractEventLoop,
        debounce_ms: int = 300,
    ):
        """
        Initialize file handler.

        Args:
            path: Layouts file to react to
            callback: Async function to call after changes settle
            loop: Event loop the callback runs on
            debounce_ms: Debounce delay in milliseconds
        """
        super().__init__()
        self.path = path
        self.callback = callback
        self.loop = loop
        self.debounce_ms = debounce_ms
        self.debounce_task: Optional[asyncio.Task] = None

    def _is_layouts_file(self, event: FileSystemEvent) -> bool:
        if event.is_directory:
            return False
        paths = [event.src_path, getattr(event, "dest_path", "")]
        return any(p and Path(p).name == self.path.name for p in paths)

    def on_modified(self, event: FileSystemEvent):
        if self._is_layouts_file(event):
            self.loop.call_soon_threadsafe(self._schedule)

    # Editors often save by writing a temp file and renaming it into place
    on_created = on_modified
    on_moved = on_modified

    def _schedule(self) -> None:
        if self.debounce_task:
            self.debounce_task.cancel()
        self.debounce_task = self.loop.create_task(self._debounced_reload())

    async def _debounced_reload(self):
        try:
            await asyncio.sleep(self.debounce_ms / 1000.0)
            logger.info(f"Layouts file changed: {self.path}")
            await self.callback()
        except asyncio.CancelledError:
            # Superseded by a newer event
            pass
        except Exception as e:
            logger.error(f"Error in debounced layout reload: {e}")


class LayoutFileWatcher:
    """Watches layouts.json and triggers reloads."""

    def __init__(
        self,
        path: Path,
        reload_callback: Callable[[], Awaitable[None]],
        debounce_ms: int = 300,
    ):
        self.path = path
        self.reload_callback = reload_callback
        self.debounce_ms = debounce_ms

        self.observer: Optional[Observer] = None
        self.handler: Optional[LayoutFileHandler] = None
        self.running = False

    def start(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        """Start watching (call from the event loop thread)."""
        if self.running:
            logger.warning("Layout file watcher already running")
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.handler = LayoutFileHandler(
            path=self.path,
            callback=self.reload_callback,
            loop=loop or asyncio.get_running_loop(),
            debounce_ms=self.debounce_ms,
        )

        self.observer = Observer()
        self.observer.schedule(self.handler, path=str(self.path.parent), recursive=False)
        self.observer.start()
        self.running = True

        logger.info(f"Watching {self.path} for layout changes")

    def stop(self):
        if not self.running:
            return

        if self.observer:
            self.observer.stop()
            self.observer.join()

        self.running = False
        logger.info("Layout file watcher stopped")
