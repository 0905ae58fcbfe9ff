"""
Section layout calculator.

Partitions a canvas into 1-4 sections using fixed schemes. The calculator
is stateless: it always returns default names, and callers carry custom
names forward by id (carry_forward_names).

Section deletion is split into two independent steps:
1. drop_section: filter the section out
2. renumber_sections: restore the dense 1..N id sequence, returning the
   old -> new id map used to remap items
"""

from typing import Dict, List, Sequence, Tuple
import logging

from .types import Section

logger = logging.getLogger("noteboard.sections")

# (column, row, columns, rows) per section, ids assigned left-to-right, top-to-bottom
_SCHEMES: Dict[int, List[Tuple[int, int, int, int]]] = {
    1: [(0, 0, 1, 1)],
    2: [(0, 0, 2, 1), (1, 0, 2, 1)],
    3: [(0, 0, 3, 1), (1, 0, 3, 1), (2, 0, 3, 1)],
    4: [(0, 0, 2, 2), (1, 0, 2, 2), (0, 1, 2, 2), (1, 1, 2, 2)],
}


def default_section_name(section_id: int) -> str:
    return f"Section {section_id}"


def compute_layout(
    count: int, canvas_width: float, canvas_height: float
) -> Tuple[Section, ...]:
    """Compute section rectangles for `count` sections on the given canvas.

    Counts outside 1-4 fall back to the single-section scheme.
    """
    scheme = _SCHEMES.get(count)
    if scheme is None:
        logger.warning(
            f"No layout scheme for {count} sections, using a single section"
        )
        scheme = _SCHEMES[1]

    sections = []
    for index, (col, row, cols, rows) in enumerate(scheme):
        width = canvas_width / cols
        height = canvas_height / rows
        section_id = index + 1
        sections.append(
            Section(
                id=section_id,
                name=default_section_name(section_id),
                x=col * width,
                y=row * height,
                width=width,
                height=height,
            )
        )
    return tuple(sections)


def carry_forward_names(
    new_sections: Sequence[Section], old_sections: Sequence[Section]
) -> Tuple[Section, ...]:
    """Copy names from old_sections onto new_sections, matching by id."""
    names = {s.id: s.name for s in old_sections}
    return tuple(
        s.with_name(names[s.id]) if s.id in names else s for s in new_sections
    )


def drop_section(sections: Sequence[Section], section_id: int) -> Tuple[Section, ...]:
    """Remove the section with the given id, keeping the order of the rest."""
    return tuple(s for s in sections if s.id != section_id)


def renumber_sections(
    sections: Sequence[Section],
) -> Tuple[Tuple[Section, ...], Dict[int, int]]:
    """Assign dense ids 1..N in order.

    Returns the renumbered sections and a map of old id -> new id.
    Geometry and names are untouched.
    """
    renumbered = []
    id_map: Dict[int, int] = {}
    for index, section in enumerate(sections):
        new_id = index + 1
        id_map[section.id] = new_id
        renumbered.append(section.with_id(new_id))
    return tuple(renumbered), id_map
