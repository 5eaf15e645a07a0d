"""
Pydantic data models for zone navigation.

Defines geometry (Rect, Zone), persisted layout configuration (ZoneConfig,
LayoutConfig, LayoutsFile), and navigation results.

Coordinates follow Sway's convention: origin at the top-left, Y grows
downward. "Up" therefore means smaller Y values.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Slack for floating-point sums of zone percentages (0.1 + 0.2 + ...)
_PERCENTAGE_EPSILON = 1e-6


# Enumerations

class Direction(str, Enum):
    """Cardinal navigation directions."""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class NavigationOutcome(str, Enum):
    """Result kind of a single navigate() call."""
    MOVED = "moved"
    NO_FOCUSED_WINDOW = "no_focused_window"
    NO_TARGET = "no_target"
    MOVE_FAILED = "move_failed"


# Geometry

class Rect(BaseModel):
    """Axis-aligned rectangle in screen coordinates."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., description="Left edge")
    y: float = Field(..., description="Top edge")
    width: float = Field(..., ge=0, description="Width")
    height: float = Field(..., ge=0, description="Height")

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


class Zone(BaseModel):
    """A concrete zone of the active layout, in screen coordinates."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Zone number, unique within its layout")
    rect: Rect = Field(..., description="Zone rectangle")

    @field_validator('rect')
    @classmethod
    def validate_rect(cls, v: Rect) -> Rect:
        """Zones are never degenerate."""
        if v.width <= 0 or v.height <= 0:
            raise ValueError("zone width and height must be positive")
        return v


# Layout configuration

class ZoneConfig(BaseModel):
    """Persisted zone, expressed as fractions of an output's usable area."""

    id: int = Field(..., ge=0, description="Zone number")
    x_percentage: float = Field(..., ge=0, le=1)
    y_percentage: float = Field(..., ge=0, le=1)
    width_percentage: float = Field(..., gt=0, le=1)
    height_percentage: float = Field(..., gt=0, le=1)

    @model_validator(mode='after')
    def validate_bounds(self):
        """Zone must fit inside the area it is projected onto."""
        if self.x_percentage + self.width_percentage > 1 + _PERCENTAGE_EPSILON:
            raise ValueError(f"zone {self.id} extends past the right edge")
        if self.y_percentage + self.height_percentage > 1 + _PERCENTAGE_EPSILON:
            raise ValueError(f"zone {self.id} extends past the bottom edge")
        return self

    def project(self, area: Rect) -> Zone:
        """Map this zone onto a concrete area (usually a workspace rect)."""
        return Zone(
            id=self.id,
            rect=Rect(
                x=area.x + area.width * self.x_percentage,
                y=area.y + area.height * self.y_percentage,
                width=area.width * self.width_percentage,
                height=area.height * self.height_percentage,
            ),
        )


class LayoutConfig(BaseModel):
    """Named collection of zones."""

    name: str = Field(..., min_length=1, description="Layout name")
    zones: List[ZoneConfig] = Field(default_factory=list)

    @field_validator('zones')
    @classmethod
    def validate_unique_ids(cls, v: List[ZoneConfig]) -> List[ZoneConfig]:
        ids = [z.id for z in v]
        duplicates = {i for i in ids if ids.count(i) > 1}
        if duplicates:
            raise ValueError(f"Duplicate zone ids in layout: {sorted(duplicates)}")
        return v

    def project(self, area: Rect) -> List[Zone]:
        """Project every zone onto area, preserving declaration order."""
        return [zone.project(area) for zone in self.zones]


class LayoutsFile(BaseModel):
    """Top-level contents of layouts.json."""

    active_layout: Optional[str] = Field(None, description="Name of the active layout")
    layouts: List[LayoutConfig] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_layouts(self):
        names = [layout.name for layout in self.layouts]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(f"Duplicate layout names: {sorted(duplicates)}")
        if self.active_layout is not None and self.active_layout not in names:
            raise ValueError(f"Active layout '{self.active_layout}' is not defined")
        return self

    def get_layout(self, name: str) -> Optional[LayoutConfig]:
        for layout in self.layouts:
            if layout.name == name:
                return layout
        return None

    def current_layout(self) -> Optional[LayoutConfig]:
        """Active layout, falling back to the first declared one."""
        if self.active_layout is not None:
            return self.get_layout(self.active_layout)
        return self.layouts[0] if self.layouts else None


# Runtime records

class FocusedWindow(BaseModel):
    """A window as reported by the compositor."""

    window_id: int = Field(..., description="Sway container ID")
    rect: Rect = Field(..., description="On-screen rectangle")


class PlacementEntry(BaseModel):
    """A window snapped into a zone."""

    model_config = ConfigDict(frozen=True)

    window_id: int
    zone_id: int
    layout_name: Optional[str] = None


class NavigationResult(BaseModel):
    """Outcome of a navigate() call."""

    outcome: NavigationOutcome
    direction: Direction
    window_id: Optional[int] = None
    from_zone: Optional[int] = None
    to_zone: Optional[int] = None
    error: Optional[str] = None

    @property
    def moved(self) -> bool:
        return self.outcome == NavigationOutcome.MOVED
