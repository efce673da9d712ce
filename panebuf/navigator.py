"""Directional pane navigation by hit-testing a probe point.

The probe lands just past the active pane's edge in the requested direction
and wraps around the frame edges, so moving right from the rightmost pane
selects the leftmost one.
"""
from __future__ import annotations

from .host import BoundingBox, HostAdapter

PROBE_OFFSET_PX = 25
WRAP_MARGIN_PX = 25

LEFT = (-1, 0)
RIGHT = (1, 0)
UP = (0, -1)
DOWN = (0, 1)


def _check_step(value: int, axis: str) -> None:
    if value not in (-1, 0, 1):
        raise ValueError(f"{axis} must be -1, 0 or 1, got {value!r}")


def _wrap(value: int, limit: int) -> int:
    if value > limit:
        return WRAP_MARGIN_PX
    if value < 0:
        return limit - WRAP_MARGIN_PX
    return value


def probe_point(
    box: BoundingBox,
    cursor: tuple[int, int],
    frame_size: tuple[int, int],
    dx: int,
    dy: int,
) -> tuple[int, int]:
    """Return the frame pixel to hit-test when moving by ``(dx, dy)``.

    ``cursor`` is the cursor's pixel offset inside the pane; it only decides
    the coordinate on the axis that is not being moved along.
    """

    _check_step(dx, "dx")
    _check_step(dy, "dy")
    x = box.left + cursor[0]
    y = box.top + cursor[1]

    if dx > 0:
        x = box.right + PROBE_OFFSET_PX
    elif dx < 0:
        x = box.left - PROBE_OFFSET_PX

    if dy > 0:
        y = box.bottom + PROBE_OFFSET_PX
    elif dy < 0:
        y = box.top - PROBE_OFFSET_PX

    width, height = frame_size
    return _wrap(x, width), _wrap(y, height)


class PaneNavigator:
    def __init__(self, adapter: HostAdapter) -> None:
        self.adapter = adapter

    def switch_direction(self, dx: int, dy: int) -> bool:
        """Activate the pane found in direction ``(dx, dy)``.

        Returns ``False`` without touching the host when no pane occupies the
        probe point.
        """

        pane = self.adapter.active_pane()
        x, y = probe_point(
            self.adapter.pane_box(pane),
            self.adapter.cursor_offset(pane),
            self.adapter.frame_size(),
            dx,
            dy,
        )
        target = self.adapter.pane_at(x, y)
        if target is None:
            return False
        self.adapter.set_active_pane(target)
        return True

    def left(self) -> bool:
        return self.switch_direction(*LEFT)

    def right(self) -> bool:
        return self.switch_direction(*RIGHT)

    def up(self) -> bool:
        return self.switch_direction(*UP)

    def down(self) -> bool:
        return self.switch_direction(*DOWN)
