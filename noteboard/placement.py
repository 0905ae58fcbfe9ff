"""
Placement search and reposition transform.

Placement search
----------------
Scan candidate origins on a fixed-step grid inside a section's placement
bounds, row-major (top-to-bottom, then left-to-right), and take the first
origin where the candidate overlaps nothing already placed. When the grid
is exhausted the candidate's own position is clamped into the bounds and
returned as-is: overlap is an accepted degraded outcome, never an error.

The result depends only on grid order and the order of `occupied`, so the
same inputs always give the same placement.

Reposition
----------
When a section changes shape, items keep their relative position: convert
the item origin to the old section's local frame and back out through the
new section's frame, then clamp.
"""

from dataclasses import dataclass
from typing import Iterator, Sequence
import logging
import math

from .geometry import (
    DEFAULT_MARGINS,
    Area,
    Margins,
    clamp_to_bounds,
    from_local_fraction,
    overlaps,
    placement_bounds,
    to_local_fraction,
)
from .types import Item, Position, Rect

logger = logging.getLogger("noteboard.placement")

DEFAULT_GRID_STEP = 20


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of a placement search."""

    position: Position
    exhausted: bool = False


def _grid_positions(span: float, step: float) -> Iterator[float]:
    """Offsets 0, step, 2*step, ... up to and including span."""
    if span < 0:
        return
    # index-based so long scans do not accumulate float error
    count = int(math.floor(span / step + 1e-9)) + 1
    for i in range(count):
        yield i * step


def search_placement(
    candidate: Rect,
    area: Area,
    occupied: Sequence[Rect],
    margins: Margins = DEFAULT_MARGINS,
    step: float = DEFAULT_GRID_STEP,
) -> PlacementResult:
    """Find the first grid origin where candidate overlaps nothing in occupied.

    Args:
        candidate: Rectangle to place. Only its size drives the scan; its
            position is the fallback hint when no free slot exists.
        area: Section (or rectangle) to place into.
        occupied: Rectangles already in the section, tested in order.
        margins: Inset of the placement bounds.
        step: Grid step in pixels.

    Returns:
        PlacementResult with exhausted=True when the fallback was used.
    """
    bounds = placement_bounds(area, margins)

    for dy in _grid_positions(bounds.height - candidate.height, step):
        y = bounds.top + dy
        for dx in _grid_positions(bounds.width - candidate.width, step):
            x = bounds.left + dx
            trial = candidate.move_to(x, y)
            if not any(overlaps(trial, other) for other in occupied):
                return PlacementResult(position=Position(x=x, y=y))

    fallback = clamp_to_bounds(candidate, area, margins)
    logger.debug(
        f"No free slot for {candidate.width}x{candidate.height} in "
        f"{len(occupied)}-item area, falling back to ({fallback.x}, {fallback.y})"
    )
    return PlacementResult(position=fallback, exhausted=True)


def find_placement(
    candidate: Rect,
    area: Area,
    occupied: Sequence[Rect],
    margins: Margins = DEFAULT_MARGINS,
    step: float = DEFAULT_GRID_STEP,
) -> Position:
    """Position for candidate inside area; see search_placement."""
    return search_placement(candidate, area, occupied, margins, step).position


def reposition(
    item: Item,
    old_area: Area,
    new_area: Area,
    margins: Margins = DEFAULT_MARGINS,
) -> Position:
    """Map item's position from old_area's geometry to new_area's.

    Identical geometry returns the position unchanged.
    """
    if (old_area.x, old_area.y, old_area.width, old_area.height) == (
        new_area.x,
        new_area.y,
        new_area.width,
        new_area.height,
    ):
        return item.position

    fraction = to_local_fraction(item.rect, old_area, margins)
    target = from_local_fraction(fraction, new_area, margins)
    return clamp_to_bounds(item.rect.move_to(target.x, target.y), new_area, margins)
