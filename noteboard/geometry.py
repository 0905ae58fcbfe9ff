"""
Pure geometry functions for sections and items.

Nothing here knows about transitions or board state; these are the
primitives the layout calculator, placement search and reposition
transform are built from.

Coordinate frames:
- canvas frame: absolute pixels, origin at the canvas top-left
- local frame: fractions (0..1) of a section's placement sub-rectangle,
  i.e. the section minus its margins. Converting canvas -> local in one
  section and local -> canvas in another is how items keep their relative
  position when sections change shape.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

from .types import Position, Rect, Section

# A section or a bare rectangle; both expose x/y/width/height.
Area = Union[Section, Rect]


@dataclass(frozen=True)
class Margins:
    """Inset of the placement sub-rectangle inside a section.

    The top inset is larger to keep the section title strip clear.
    """

    left: float = 10
    top: float = 40
    right: float = 10
    bottom: float = 10

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom


DEFAULT_MARGINS = Margins()


def overlaps(a: Rect, b: Rect) -> bool:
    """Check if two rectangles share any area.

    Rectangles that only touch along an edge do NOT overlap.
    """
    return not (
        a.right <= b.left or b.right <= a.left or a.bottom <= b.top or b.bottom <= a.top
    )


def contains(area: Area, x: float, y: float) -> bool:
    """Half-open containment: a point on a shared edge belongs to one section only."""
    return area.x <= x < area.x + area.width and area.y <= y < area.y + area.height


def section_for_position(
    sections: Iterable[Section], x: float, y: float
) -> Optional[Section]:
    """Return the first section containing (x, y), or None."""
    for section in sections:
        if contains(section, x, y):
            return section
    return None


def placement_bounds(area: Area, margins: Margins = DEFAULT_MARGINS) -> Rect:
    """The area where items may be positioned. Extent is floored at zero."""
    return Rect(
        x=area.x + margins.left,
        y=area.y + margins.top,
        width=max(0.0, area.width - margins.horizontal),
        height=max(0.0, area.height - margins.vertical),
    )


def _clamp(value: float, low: float, high: float) -> float:
    # low wins when the range is inverted (item larger than the bounds)
    return max(low, min(value, high))


def clamp_to_bounds(
    rect: Rect, area: Area, margins: Margins = DEFAULT_MARGINS
) -> Position:
    """Clamp rect's origin so the rect stays inside the placement bounds."""
    bounds = placement_bounds(area, margins)
    return Position(
        x=_clamp(rect.x, bounds.left, bounds.right - rect.width),
        y=_clamp(rect.y, bounds.top, bounds.bottom - rect.height),
    )


def _fraction(offset: float, extent: float) -> float:
    if extent <= 0:
        return 0.0
    return _clamp(offset / extent, 0.0, 1.0)


def to_local_fraction(
    rect: Rect, area: Area, margins: Margins = DEFAULT_MARGINS
) -> Tuple[float, float]:
    """Fractional offset of rect's origin inside the placement bounds of area."""
    bounds = placement_bounds(area, margins)
    return (
        _fraction(rect.x - bounds.left, bounds.width),
        _fraction(rect.y - bounds.top, bounds.height),
    )


def from_local_fraction(
    fraction: Tuple[float, float], area: Area, margins: Margins = DEFAULT_MARGINS
) -> Position:
    """Inverse of to_local_fraction. The result is not clamped."""
    bounds = placement_bounds(area, margins)
    fx, fy = fraction
    return Position(
        x=bounds.left + fx * bounds.width,
        y=bounds.top + fy * bounds.height,
    )


def is_degenerate(area: Area, margins: Margins = DEFAULT_MARGINS) -> bool:
    """True when the placement bounds have no extent on some axis."""
    return area.width <= margins.horizontal or area.height <= margins.vertical
