"""
Viewport projection for the zoomed single-section view.

When a section is zoomed, it fills the viewport and its items are scaled
uniformly (by the smaller of the two axis ratios, so nothing is stretched)
relative to the section origin. The engine only emits rectangles; drawing
them is up to the caller.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .types import BoardState, Rect, Size


@dataclass(frozen=True)
class ZoomedView:
    """Rectangles for a zoomed section, in viewport pixels."""

    section_id: int
    scale: float
    section_rect: Rect
    item_rects: Dict[str, Rect]


def project_zoomed(state: BoardState, viewport: Size) -> Optional[ZoomedView]:
    """Project the focused section into the viewport.

    Returns None unless an existing section with positive extent is zoomed.
    """
    focus = state.focus
    if not focus.zoomed or focus.focused_section_id is None:
        return None
    section = state.layout.section_by_id(focus.focused_section_id)
    if section is None or section.width <= 0 or section.height <= 0:
        return None

    scale = min(viewport.width / section.width, viewport.height / section.height)
    item_rects = {
        item.id: Rect(
            x=(item.x - section.x) * scale,
            y=(item.y - section.y) * scale,
            width=item.width * scale,
            height=item.height * scale,
        )
        for item in state.layout.items_in_section(section.id)
    }
    return ZoomedView(
        section_id=section.id,
        scale=scale,
        section_rect=Rect(
            x=0, y=0, width=section.width * scale, height=section.height * scale
        ),
        item_rects=item_rects,
    )
