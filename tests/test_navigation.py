"""
Tests for ZoneNavigator.navigate() and snap_to_zone().

Tests cover:
- End-to-end move between two zones
- Unplaced windows using their own rect as reference
- No-op outcomes (no focused window, no target)
- Failed moves leaving the placement table untouched
- Suppression flag raised during and cleared after every call
"""

from unittest.mock import AsyncMock

import pytest

from sway_zone_navigator.errors import SwayIPCError, WindowMoveError
from sway_zone_navigator.models import Direction, FocusedWindow, NavigationOutcome, Rect
from sway_zone_navigator.navigation import ZoneNavigator

from conftest import FakePlatform

WINDOW = 101


@pytest.fixture
def platform(halves):
    return FakePlatform(
        zones=halves,
        focused=FocusedWindow(window_id=WINDOW, rect=Rect(x=0, y=0, width=400, height=800)),
    )


@pytest.fixture
def navigator(platform, placements, suppression):
    return ZoneNavigator(platform, placements, suppression, layout_name_provider=lambda: "halves")


@pytest.mark.asyncio
async def test_end_to_end_right_then_no_target(navigator, platform, placements):
    await placements.set(WINDOW, 1)

    result = await navigator.navigate(Direction.RIGHT)

    assert result.outcome == NavigationOutcome.MOVED
    assert result.moved
    assert (result.from_zone, result.to_zone) == (1, 2)
    assert platform.moves == [(WINDOW, Rect(x=400, y=0, width=400, height=800))]
    assert await placements.get(WINDOW) == 2

    result = await navigator.navigate(Direction.RIGHT)

    assert result.outcome == NavigationOutcome.NO_TARGET
    assert not result.moved
    assert result.from_zone == 2
    assert len(platform.moves) == 1
    assert await placements.get(WINDOW) == 2


@pytest.mark.asyncio
async def test_records_layout_name(navigator, placements):
    await placements.set(WINDOW, 1)
    await navigator.navigate(Direction.RIGHT)

    assert await placements.is_placed(WINDOW, "halves")


@pytest.mark.asyncio
async def test_unplaced_window_uses_own_rect(navigator, platform, placements):
    # Window sits in the middle of the screen, not snapped
    platform.focused = FocusedWindow(window_id=WINDOW, rect=Rect(x=300, y=100, width=200, height=200))

    result = await navigator.navigate(Direction.LEFT)

    # Zone 1 right edge (400) <= window left (300) + 50 is false, so nothing qualifies
    assert result.outcome == NavigationOutcome.NO_TARGET
    assert result.from_zone is None

    platform.focused = FocusedWindow(window_id=WINDOW, rect=Rect(x=420, y=100, width=200, height=200))
    result = await navigator.navigate(Direction.LEFT)

    assert result.outcome == NavigationOutcome.MOVED
    assert result.to_zone == 1
    assert await placements.get(WINDOW) == 1


@pytest.mark.asyncio
async def test_unplaced_window_can_target_overlapping_zone(navigator, platform, placements):
    # An unplaced window exactly covering zone 1 still gets zone 2 to the right
    result = await navigator.navigate(Direction.RIGHT)

    assert result.to_zone == 2
    assert await placements.get(WINDOW) == 2


@pytest.mark.asyncio
async def test_stale_zone_treated_as_unplaced(navigator, platform, placements):
    # Placement recorded for a zone that no longer exists in the layout
    await placements.set(WINDOW, 99)

    result = await navigator.navigate(Direction.RIGHT)

    assert result.outcome == NavigationOutcome.MOVED
    assert result.from_zone is None
    assert await placements.get(WINDOW) == 2


@pytest.mark.asyncio
async def test_no_focused_window(navigator, platform, placements):
    platform.focused = None

    result = await navigator.navigate(Direction.LEFT)

    assert result.outcome == NavigationOutcome.NO_FOCUSED_WINDOW
    assert result.window_id is None
    assert platform.moves == []


@pytest.mark.asyncio
async def test_empty_layout(navigator, platform):
    platform.zones = []

    result = await navigator.navigate(Direction.RIGHT)

    assert result.outcome == NavigationOutcome.NO_TARGET


@pytest.mark.asyncio
async def test_failed_move_does_not_update_table(navigator, platform, placements):
    await placements.set(WINDOW, 1)
    platform.fail_moves = True

    result = await navigator.navigate(Direction.RIGHT)

    assert result.outcome == NavigationOutcome.MOVE_FAILED
    assert result.to_zone == 2
    assert "window vanished" in result.error
    assert await placements.get(WINDOW) == 1


@pytest.mark.asyncio
async def test_failed_move_of_unplaced_window_leaves_it_unplaced(navigator, platform, placements):
    platform.fail_moves = True

    result = await navigator.navigate(Direction.RIGHT)

    assert result.outcome == NavigationOutcome.MOVE_FAILED
    assert await placements.is_placed(WINDOW) is False


@pytest.mark.asyncio
async def test_accepts_direction_string(navigator, placements):
    await placements.set(WINDOW, 1)

    result = await navigator.navigate("right")

    assert result.direction == Direction.RIGHT
    assert result.moved


class TestSuppression:

    @pytest.mark.asyncio
    async def test_raised_during_move(self, navigator, platform, suppression, placements):
        seen = []
        platform.on_move = lambda window_id, rect: seen.append(suppression.active)
        await placements.set(WINDOW, 1)

        await navigator.navigate(Direction.RIGHT)

        assert seen == [True]
        assert suppression.active is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("setup", ["no_window", "no_target", "move_failed"])
    async def test_cleared_on_early_exit(self, navigator, platform, suppression, placements, setup):
        if setup == "no_window":
            platform.focused = None
        elif setup == "no_target":
            await placements.set(WINDOW, 2)
        else:
            platform.fail_moves = True

        await navigator.navigate(Direction.RIGHT)

        assert suppression.active is False

    @pytest.mark.asyncio
    async def test_cleared_on_unexpected_error(self, navigator, platform, suppression):
        platform.get_focused_window = AsyncMock(side_effect=SwayIPCError("get_tree", "socket closed"))

        with pytest.raises(SwayIPCError):
            await navigator.navigate(Direction.RIGHT)

        assert suppression.active is False

    def test_flag_context_manager(self, suppression):
        with pytest.raises(ValueError):
            with suppression.raised():
                assert suppression.active
                raise ValueError("boom")
        assert suppression.active is False


class TestSnapToZone:

    @pytest.mark.asyncio
    async def test_snap_records_placement(self, navigator, platform, placements):
        assert await navigator.snap_to_zone(202, 2) is True

        assert platform.moves == [(202, Rect(x=400, y=0, width=400, height=800))]
        assert await placements.get(202) == 2

    @pytest.mark.asyncio
    async def test_snap_unknown_zone(self, navigator, platform, placements):
        assert await navigator.snap_to_zone(202, 9) is False
        assert platform.moves == []
        assert await placements.is_placed(202) is False

    @pytest.mark.asyncio
    async def test_snap_failure_raises_and_keeps_table(self, navigator, platform, placements):
        await placements.set(202, 1)
        platform.fail_moves = True

        with pytest.raises(WindowMoveError):
            await navigator.snap_to_zone(202, 2)

        assert await placements.get(202) == 1


@pytest.mark.asyncio
async def test_vertical_navigation_in_grid(grid, placements, suppression):
    platform = FakePlatform(
        zones=grid,
        focused=FocusedWindow(window_id=WINDOW, rect=grid[0].rect),
    )
    navigator = ZoneNavigator(platform, placements, suppression)
    await placements.set(WINDOW, 1)

    assert (await navigator.navigate(Direction.DOWN)).to_zone == 3
    assert (await navigator.navigate(Direction.RIGHT)).to_zone == 4
    assert (await navigator.navigate(Direction.UP)).to_zone == 2
    assert (await navigator.navigate(Direction.UP)).outcome == NavigationOutcome.NO_TARGET
    assert await placements.get(WINDOW) == 2
    entry = await placements.get_entry(WINDOW)
    assert entry.layout_name is None
