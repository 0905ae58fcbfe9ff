"""
Board state machine.

Every transition is a pure function ``f(state, ...) -> BoardState``. A
transition that cannot apply (unknown id, section count out of range)
returns the *same* state object and records a REJECT event in the op log;
nothing here raises for bad references.

Structural transitions follow one pattern:
1. compute new section rectangles (sections.compute_layout)
2. carry section names forward by id
3. reposition every item from its old section geometry to the geometry
   of its (possibly renumbered) section in the new layout

BoardSession wraps the pure transitions with the per-session context:
the current state, the AddSection debounce and a transition counter.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import inspect
import logging
import time
import uuid as uuid_module
import zlib

from .config import DEFAULT_CONFIG, MAX_SECTIONS, MAX_ZOOM, MIN_ZOOM, EngineConfig
from .geometry import is_degenerate, overlaps, section_for_position
from .oplog import OpEvent, OpLog
from .placement import reposition, search_placement
from .sections import (
    carry_forward_names,
    compute_layout,
    drop_section,
    renumber_sections,
)
from .types import (
    BoardLayoutState,
    BoardState,
    FocusState,
    Item,
    Rect,
    Section,
    Size,
)

logger = logging.getLogger("noteboard.board")

# Slack for float comparisons in invariant checks
_EPSILON = 1e-6


def _reject(oplog: Optional[OpLog], op: str, reason: str, **context: Any) -> None:
    logger.info(f"Rejected {op}: {reason} {context}")
    if oplog is not None:
        oplog.reject(op, reason, **context)


def new_item_id() -> str:
    """Random short opaque id."""
    return uuid_module.uuid4().hex[:8]


def color_for_id(item_id: str, palette: Sequence[str]) -> str:
    """Stable palette pick from the item id. Placement never looks at this."""
    return palette[zlib.crc32(item_id.encode("utf-8")) % len(palette)]


def new_board(width: float, height: float) -> BoardState:
    """A single-section board with no items."""
    return BoardState(
        layout=BoardLayoutState(
            sections=compute_layout(1, width, height),
            items=(),
            canvas_size=Size(width=width, height=height),
        )
    )


def _focus_follows(focus: FocusState, section_id: int) -> FocusState:
    if focus.focused_section_id == section_id:
        return focus
    return FocusState(focused_section_id=section_id, zoomed=focus.zoomed)


def _reposition_items(
    items: Sequence[Item],
    old_sections: Sequence[Section],
    new_sections: Sequence[Section],
    config: EngineConfig,
    oplog: Optional[OpLog],
    id_map: Optional[Dict[int, int]] = None,
) -> Tuple[Item, ...]:
    """Move each item from its old section geometry into its new section.

    item.section_id refers to old_sections; id_map translates it into the
    numbering of new_sections (identity when omitted).
    """
    old_by_id = {s.id: s for s in old_sections}
    new_by_id = {s.id: s for s in new_sections}

    result = []
    for item in items:
        new_id = id_map.get(item.section_id, item.section_id) if id_map else item.section_id
        old_section = old_by_id.get(item.section_id)
        new_section = new_by_id.get(new_id)
        if old_section is None or new_section is None:
            result.append(item)
            continue

        position = reposition(item, old_section, new_section, config.margins)
        moved = item.with_position(position).with_section(new_id)
        degenerate = is_degenerate(old_section, config.margins)
        if oplog is not None and (moved != item or degenerate):
            oplog.item_reposition(
                item.id, new_id, position.x, position.y, degenerate=degenerate
            )
        result.append(moved)
    return tuple(result)


# =============================================================================
# Structural transitions
# =============================================================================


def add_section(
    state: BoardState,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    """Add one section and reflow the layout. No-op at MAX_SECTIONS."""
    layout = state.layout
    if layout.section_count >= MAX_SECTIONS:
        _reject(oplog, "add_section", "max_sections", count=layout.section_count)
        return state

    new_count = layout.section_count + 1
    canvas = layout.canvas_size
    new_sections = carry_forward_names(
        compute_layout(new_count, canvas.width, canvas.height), layout.sections
    )

    if oplog is not None:
        oplog.section_add(new_count)
    items = _reposition_items(
        layout.items, layout.sections, new_sections, config, oplog
    )

    logger.info(
        f"Added section: {layout.section_count} -> {new_count} sections, "
        f"{len(items)} items reflowed"
    )
    return state.with_layout(replace(layout, sections=new_sections, items=items))


def delete_section(
    state: BoardState,
    section_id: int,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    """Delete a section and its items, renumber the rest and reflow.

    No-op when only one section is left or the id is unknown.
    """
    layout = state.layout
    if layout.section_count <= 1:
        _reject(oplog, "delete_section", "last_section", section=section_id)
        return state
    if layout.section_by_id(section_id) is None:
        _reject(oplog, "delete_section", "invalid_reference", section=section_id)
        return state

    # Step 1: filter
    remaining = drop_section(layout.sections, section_id)
    dropped = layout.items_in_section(section_id)
    survivors = tuple(item for item in layout.items if item.section_id != section_id)

    # Step 2: renumber-and-remap
    renumbered, id_map = renumber_sections(remaining)

    canvas = layout.canvas_size
    new_sections = carry_forward_names(
        compute_layout(len(renumbered), canvas.width, canvas.height), renumbered
    )

    if oplog is not None:
        oplog.section_delete(section_id, len(new_sections), len(dropped))
        for item in dropped:
            oplog.item_drop(item.id, section_id)

    # Old geometry is looked up in the old numbering
    items = _reposition_items(
        survivors, remaining, new_sections, config, oplog, id_map=id_map
    )

    focus = state.focus
    if focus.focused_section_id == section_id:
        focus = FocusState()
    elif focus.focused_section_id in id_map:
        focus = replace(focus, focused_section_id=id_map[focus.focused_section_id])

    dropped_ids = {item.id for item in dropped}
    view = replace(
        state.view,
        selected_section_id=None,
        selected_item_id=(
            None
            if state.view.selected_item_id in dropped_ids
            else state.view.selected_item_id
        ),
    )

    logger.info(
        f"Deleted section {section_id}: {layout.section_count} -> "
        f"{len(new_sections)} sections, dropped {len(dropped)} items"
    )
    return BoardState(
        layout=replace(layout, sections=new_sections, items=items),
        focus=focus,
        view=view,
    )


def resize_canvas(
    state: BoardState,
    width: float,
    height: float,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    """Recompute the layout for a new canvas size; count and ownership unchanged."""
    if width <= 0 or height <= 0:
        _reject(oplog, "resize_canvas", "invalid_size", w=width, h=height)
        return state

    layout = state.layout
    new_sections = carry_forward_names(
        compute_layout(layout.section_count, width, height), layout.sections
    )
    if oplog is not None:
        oplog.canvas_resize(width, height)
    items = _reposition_items(
        layout.items, layout.sections, new_sections, config, oplog
    )

    logger.debug(f"Canvas resized to {width}x{height}")
    return state.with_layout(
        replace(
            layout,
            sections=new_sections,
            items=items,
            canvas_size=Size(width=width, height=height),
        )
    )


# =============================================================================
# Item transitions
# =============================================================================


def create_item(
    state: BoardState,
    x: float,
    y: float,
    item_id: Optional[str] = None,
    width: Optional[float] = None,
    height: Optional[float] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    """Create an item near (x, y).

    Target section: the focused section, else the one containing (x, y),
    else the first. (x, y) is only a hint; the placement search decides.
    The new item is selected and focus follows it.
    """
    layout = state.layout

    if item_id is None:
        item_id = new_item_id()
        while layout.item_by_id(item_id) is not None:
            item_id = new_item_id()
    elif layout.item_by_id(item_id) is not None:
        _reject(oplog, "create_item", "duplicate_item", item=item_id)
        return state

    target = layout.section_by_id(state.focus.focused_section_id)
    if target is None:
        target = section_for_position(layout.sections, x, y) or layout.sections[0]

    w = max(config.min_item_width, width if width is not None else config.default_item_width)
    h = max(
        config.min_item_height,
        height if height is not None else config.default_item_height,
    )

    occupied = [item.rect for item in layout.items_in_section(target.id)]
    result = search_placement(
        Rect(x=x, y=y, width=w, height=h),
        target,
        occupied,
        config.margins,
        config.grid_step,
    )

    item = Item(
        id=item_id,
        x=result.position.x,
        y=result.position.y,
        width=w,
        height=h,
        section_id=target.id,
        color=color_for_id(item_id, config.palette),
    )

    if oplog is not None:
        oplog.item_create(item.id, target.id)
        oplog.item_place(item.id, target.id, item.x, item.y, overlap=result.exhausted)
    logger.debug(f"Created item {item.id} in section {target.id} at ({item.x}, {item.y})")

    focus = _focus_follows(state.focus, target.id)
    if oplog is not None and focus != state.focus:
        oplog.focus(target.id)

    return BoardState(
        layout=layout.with_items(layout.items + (item,)),
        focus=focus,
        view=replace(state.view, selected_item_id=item.id),
    )


def reassign_item(
    state: BoardState,
    item_id: str,
    section_id: int,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    """Move an item into another section at a fresh non-overlapping slot.

    Focus follows the item into its new section.
    """
    layout = state.layout
    item = layout.item_by_id(item_id)
    target = layout.section_by_id(section_id)
    if item is None or target is None:
        _reject(
            oplog, "reassign_item", "invalid_reference", item=item_id, section=section_id
        )
        return state

    occupied = [
        other.rect
        for other in layout.items
        if other.section_id == section_id and other.id != item_id
    ]
    result = search_placement(
        item.rect, target, occupied, config.margins, config.grid_step
    )
    moved = item.with_section(section_id).with_position(result.position)

    focus = _focus_follows(state.focus, section_id)
    if oplog is not None:
        oplog.item_reassign(item_id, item.section_id, section_id)
        oplog.item_place(
            item_id, section_id, moved.x, moved.y, overlap=result.exhausted
        )
        if focus != state.focus:
            oplog.focus(section_id)
    logger.info(f"Reassigned item {item_id}: section {item.section_id} -> {section_id}")
    return BoardState(
        layout=layout.replace_item(moved), focus=focus, view=state.view
    )


def move_item(
    state: BoardState,
    item_id: str,
    x: float,
    y: float,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    """Drag an item to (x, y).

    Dropping it inside another section hands it to that section (no
    placement search, the drop position is kept) and focus follows.
    """
    layout = state.layout
    item = layout.item_by_id(item_id)
    if item is None:
        _reject(oplog, "move_item", "invalid_reference", item=item_id)
        return state

    moved = replace(item, x=x, y=y)
    if oplog is not None:
        oplog.item_move(item_id, x, y)

    focus = state.focus
    drop_target = section_for_position(layout.sections, x, y)
    if drop_target is not None and drop_target.id != item.section_id:
        moved = moved.with_section(drop_target.id)
        focus = _focus_follows(focus, drop_target.id)
        if oplog is not None:
            oplog.item_reassign(item_id, item.section_id, drop_target.id)
            oplog.focus(drop_target.id)
        logger.info(
            f"Item {item_id} dropped into section {drop_target.id} "
            f"(was {item.section_id})"
        )

    return BoardState(
        layout=layout.replace_item(moved), focus=focus, view=state.view
    )


def resize_item(
    state: BoardState,
    item_id: str,
    width: float,
    height: float,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    """Resize an item, never below the configured minimum size."""
    layout = state.layout
    item = layout.item_by_id(item_id)
    if item is None:
        _reject(oplog, "resize_item", "invalid_reference", item=item_id)
        return state

    w = max(config.min_item_width, width)
    h = max(config.min_item_height, height)
    if oplog is not None:
        oplog.item_resize(item_id, w, h)
    return state.with_layout(layout.replace_item(item.with_size(w, h)))


def edit_item(
    state: BoardState,
    item_id: str,
    text: Optional[str] = None,
    color: Optional[str] = None,
    font_size: Optional[int] = None,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    """Change content fields. Geometry is untouched."""
    layout = state.layout
    item = layout.item_by_id(item_id)
    if item is None:
        _reject(oplog, "edit_item", "invalid_reference", item=item_id)
        return state
    if font_size is not None and font_size <= 0:
        _reject(oplog, "edit_item", "invalid_value", item=item_id, font_size=font_size)
        return state

    changes: Dict[str, Any] = {}
    if text is not None:
        changes["text"] = text
    if color is not None:
        changes["color"] = color
    if font_size is not None:
        changes["font_size"] = font_size
    if not changes:
        return state

    if oplog is not None:
        oplog.item_edit(item_id, list(changes))
    return state.with_layout(layout.replace_item(replace(item, **changes)))


def delete_item(
    state: BoardState,
    item_id: str,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    layout = state.layout
    if layout.item_by_id(item_id) is None:
        _reject(oplog, "delete_item", "invalid_reference", item=item_id)
        return state

    if oplog is not None:
        oplog.item_delete(item_id)
    view = state.view
    if view.selected_item_id == item_id:
        view = replace(view, selected_item_id=None)
    return BoardState(
        layout=layout.with_items(tuple(i for i in layout.items if i.id != item_id)),
        focus=state.focus,
        view=view,
    )


def rename_section(
    state: BoardState,
    section_id: int,
    name: str,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    layout = state.layout
    if layout.section_by_id(section_id) is None:
        _reject(oplog, "rename_section", "invalid_reference", section=section_id)
        return state

    if oplog is not None:
        oplog.section_rename(section_id, name)
    sections = tuple(
        s.with_name(name) if s.id == section_id else s for s in layout.sections
    )
    return state.with_layout(replace(layout, sections=sections))


# =============================================================================
# Selection, focus and zoom (view state only)
# =============================================================================


def select_item(
    state: BoardState,
    item_id: Optional[str],
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    """Select an item; focus follows it into its section.

    Deselecting (None) never changes focus.
    """
    if item_id is None:
        return state.with_view(replace(state.view, selected_item_id=None))

    item = state.layout.item_by_id(item_id)
    if item is None:
        _reject(oplog, "select_item", "invalid_reference", item=item_id)
        return state

    focus = _focus_follows(state.focus, item.section_id)
    if oplog is not None and focus != state.focus:
        oplog.focus(item.section_id)
    return BoardState(
        layout=state.layout,
        focus=focus,
        view=replace(state.view, selected_item_id=item_id),
    )


def select_section(
    state: BoardState,
    section_id: Optional[int],
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    if section_id is not None and state.layout.section_by_id(section_id) is None:
        _reject(oplog, "select_section", "invalid_reference", section=section_id)
        return state
    return state.with_view(replace(state.view, selected_section_id=section_id))


def focus_section(
    state: BoardState,
    section_id: Optional[int],
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    """Focus a section, or clear focus (and zoom) with None."""
    if section_id is None:
        focus = FocusState()
    elif state.layout.section_by_id(section_id) is None:
        _reject(oplog, "focus_section", "invalid_reference", section=section_id)
        return state
    else:
        focus = FocusState(focused_section_id=section_id, zoomed=state.focus.zoomed)

    if oplog is not None:
        oplog.focus(section_id)
    return state.with_focus(focus)


def zoom_to_section(
    state: BoardState,
    section_id: int,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    if state.layout.section_by_id(section_id) is None:
        _reject(oplog, "zoom_to_section", "invalid_reference", section=section_id)
        return state
    if oplog is not None:
        oplog.zoom(section_id, True)
    return state.with_focus(FocusState(focused_section_id=section_id, zoomed=True))


def zoom_out(
    state: BoardState,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    """Back to the all-sections view; clears focus."""
    if oplog is not None:
        oplog.zoom(None, False)
    return state.with_focus(FocusState())


def set_zoom(
    state: BoardState,
    zoom: float,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    """Canvas zoom factor, clamped to [MIN_ZOOM, MAX_ZOOM]."""
    clamped = max(MIN_ZOOM, min(MAX_ZOOM, zoom))
    return state.with_view(replace(state.view, zoom=clamped))


def set_pan(
    state: BoardState,
    pan_x: float,
    pan_y: float,
    config: EngineConfig = DEFAULT_CONFIG,
    oplog: Optional[OpLog] = None,
) -> BoardState:
    return state.with_view(replace(state.view, pan_x=pan_x, pan_y=pan_y))


# =============================================================================
# Invariants
# =============================================================================


def check_board_invariants(
    state: BoardState,
    diagnostics: Optional[List[Dict[str, Any]]] = None,
) -> None:
    """
    Verify the board invariants hold.

    Violations are appended to diagnostics if provided.
    """

    def _add_diagnostic(kind: str, body: str) -> None:
        if diagnostics is not None:
            diagnostics.append({"kind": kind, "severity": "error", "body": body})

    layout = state.layout
    sections = layout.sections
    canvas = layout.canvas_size

    if not 1 <= len(sections) <= MAX_SECTIONS:
        _add_diagnostic(
            "board.section_count", f"Board has {len(sections)} sections"
        )

    ids = [s.id for s in sections]
    if ids != list(range(1, len(sections) + 1)):
        _add_diagnostic("board.section_ids", f"Section ids are not dense: {ids}")

    for s in sections:
        if (
            s.x < -_EPSILON
            or s.y < -_EPSILON
            or s.x + s.width > canvas.width + _EPSILON
            or s.y + s.height > canvas.height + _EPSILON
        ):
            _add_diagnostic(
                "board.section_bounds",
                f"Section {s.id} ({s.x}, {s.y}, {s.width}x{s.height}) "
                f"leaves the {canvas.width}x{canvas.height} canvas",
            )

    for i, a in enumerate(sections):
        for b in sections[i + 1 :]:
            # shrink slightly so float seams do not count as overlap
            ra = Rect(a.x + _EPSILON, a.y + _EPSILON, a.width - 2 * _EPSILON, a.height - 2 * _EPSILON)
            if overlaps(ra, b.rect):
                _add_diagnostic(
                    "board.section_overlap", f"Sections {a.id} and {b.id} overlap"
                )

    covered = sum(s.rect.area for s in sections)
    canvas_area = canvas.width * canvas.height
    if abs(covered - canvas_area) > _EPSILON * max(1.0, canvas_area):
        _add_diagnostic(
            "board.section_coverage",
            f"Sections cover {covered} of {canvas_area} canvas area",
        )

    known = set(ids)
    seen_items = set()
    for item in layout.items:
        if item.section_id not in known:
            _add_diagnostic(
                "board.dangling_item",
                f"Item {item.id} references missing section {item.section_id}",
            )
        if item.id in seen_items:
            _add_diagnostic("board.duplicate_item", f"Item id {item.id} is not unique")
        seen_items.add(item.id)

    focus = state.focus
    if focus.zoomed and focus.focused_section_id is None:
        _add_diagnostic("board.focus", "Zoomed without a focused section")
    if focus.focused_section_id is not None and focus.focused_section_id not in known:
        _add_diagnostic(
            "board.focus",
            f"Focused section {focus.focused_section_id} does not exist",
        )


# =============================================================================
# Session context
# =============================================================================


@dataclass
class TransitionResult:
    """Result of a session transition."""

    state: BoardState
    applied: bool
    transition: str
    reason: str = ""
    events: List[OpEvent] = field(default_factory=list)


class BoardSession:
    """Owns the current BoardState of one editing session.

    Each transition swaps the whole state. AddSection calls arriving within
    config.debounce_seconds of the last applied AddSection are dropped, so a
    burst of key presses cannot add two sections for one user action.
    """

    def __init__(
        self,
        state: BoardState,
        config: EngineConfig = DEFAULT_CONFIG,
        clock: Callable[[], float] = time.monotonic,
        oplog: Optional[OpLog] = None,
    ):
        self.state = state
        self.config = config
        self.clock = clock
        self.oplog = oplog
        self.transition_count = 0
        self.last_add_section_at: Optional[float] = None

    @classmethod
    def new(cls, width: float, height: float, **kwargs) -> "BoardSession":
        return cls(new_board(width, height), **kwargs)

    def _record(self, events: List[OpEvent]) -> None:
        if self.oplog is not None:
            self.oplog.events.extend(events)

    def _apply(self, name: str, transition: Callable[..., BoardState], *args, **kwargs) -> TransitionResult:
        local = OpLog()
        new_state = transition(
            self.state, *args, config=self.config, oplog=local, **kwargs
        )
        self._record(local.events)

        applied = new_state is not self.state
        reason = ""
        if applied:
            self.state = new_state
            self.transition_count += 1
        else:
            rejects = [e for e in local.events if e.kind == "REJECT"]
            if rejects:
                reason = rejects[-1].fields.get("reason", "")
        return TransitionResult(
            state=self.state,
            applied=applied,
            transition=name,
            reason=reason,
            events=local.events,
        )

    def add_section(self) -> TransitionResult:
        now = self.clock()
        if (
            self.last_add_section_at is not None
            and now - self.last_add_section_at < self.config.debounce_seconds
        ):
            logger.info("Section creation already in progress, skipping")
            event = OpEvent(
                kind="REJECT", fields={"op": "add_section", "reason": "debounced"}
            )
            self._record([event])
            return TransitionResult(
                state=self.state,
                applied=False,
                transition="add_section",
                reason="debounced",
                events=[event],
            )

        result = self._apply("add_section", add_section)
        if result.applied:
            self.last_add_section_at = now
        return result

    def delete_section(self, section_id: int) -> TransitionResult:
        return self._apply("delete_section", delete_section, section_id)

    def resize_canvas(self, width: float, height: float) -> TransitionResult:
        return self._apply("resize_canvas", resize_canvas, width, height)

    def create_item(
        self,
        x: float,
        y: float,
        item_id: Optional[str] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> TransitionResult:
        return self._apply(
            "create_item", create_item, x, y, item_id=item_id, width=width, height=height
        )

    def reassign_item(self, item_id: str, section_id: int) -> TransitionResult:
        return self._apply("reassign_item", reassign_item, item_id, section_id)

    def move_item(self, item_id: str, x: float, y: float) -> TransitionResult:
        return self._apply("move_item", move_item, item_id, x, y)

    def resize_item(self, item_id: str, width: float, height: float) -> TransitionResult:
        return self._apply("resize_item", resize_item, item_id, width, height)

    def edit_item(
        self,
        item_id: str,
        text: Optional[str] = None,
        color: Optional[str] = None,
        font_size: Optional[int] = None,
    ) -> TransitionResult:
        return self._apply(
            "edit_item", edit_item, item_id, text=text, color=color, font_size=font_size
        )

    def delete_item(self, item_id: str) -> TransitionResult:
        return self._apply("delete_item", delete_item, item_id)

    def rename_section(self, section_id: int, name: str) -> TransitionResult:
        return self._apply("rename_section", rename_section, section_id, name)

    def select_item(self, item_id: Optional[str]) -> TransitionResult:
        return self._apply("select_item", select_item, item_id)

    def select_section(self, section_id: Optional[int]) -> TransitionResult:
        return self._apply("select_section", select_section, section_id)

    def focus_section(self, section_id: Optional[int]) -> TransitionResult:
        return self._apply("focus_section", focus_section, section_id)

    def zoom_to_section(self, section_id: int) -> TransitionResult:
        return self._apply("zoom_to_section", zoom_to_section, section_id)

    def zoom_out(self) -> TransitionResult:
        return self._apply("zoom_out", zoom_out)

    def set_zoom(self, zoom: float) -> TransitionResult:
        return self._apply("set_zoom", set_zoom, zoom)

    def set_pan(self, pan_x: float, pan_y: float) -> TransitionResult:
        return self._apply("set_pan", set_pan, pan_x, pan_y)

    def apply_request(self, request: Dict[str, Any]) -> TransitionResult:
        """Dispatch a decoded request such as ``{"op": "create_item", "x": 5, "y": 5}``.

        Raises ValueError for unknown ops or bad arguments; these come from
        the caller's input decoding, not from board state.
        """
        if not isinstance(request, dict) or "op" not in request:
            raise ValueError(f"Request must be an object with an 'op' key: {request!r}")
        op = request["op"]
        if not isinstance(op, str) or op not in _SESSION_OPS:
            raise ValueError(f"Unknown op {op!r}; expected one of {sorted(_SESSION_OPS)}")
        kwargs = {k: v for k, v in request.items() if k != "op"}
        method = getattr(self, op)
        try:
            inspect.signature(method).bind(**kwargs)
        except TypeError as e:
            raise ValueError(f"Bad arguments for {op}: {e}") from None
        return method(**kwargs)


_SESSION_OPS = frozenset(
    {
        "add_section",
        "delete_section",
        "resize_canvas",
        "create_item",
        "reassign_item",
        "move_item",
        "resize_item",
        "edit_item",
        "delete_item",
        "rename_section",
        "select_item",
        "select_section",
        "focus_section",
        "zoom_to_section",
        "zoom_out",
        "set_zoom",
        "set_pan",
    }
)
