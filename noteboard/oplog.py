"""
Board operation log for debugging and testing.

Records every action a transition takes, one structured OpEvent per action,
each serialized as a single human-readable line:

    SECTION_ADD count=2
    ITEM_REPOSITION item=a1b2 section=1 x=250.0 y=40.0
    REJECT op=delete_section reason=invalid_reference section=7

Rejections, exhausted placements and degenerate repositions double as
diagnostics (see OpLog.to_diagnostics).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal

from .changeset import format_line, parse_line


OpKind = Literal[
    "SECTION_ADD",
    "SECTION_DELETE",
    "SECTION_RENAME",
    "CANVAS_RESIZE",
    "ITEM_CREATE",
    "ITEM_PLACE",
    "ITEM_MOVE",
    "ITEM_RESIZE",
    "ITEM_EDIT",
    "ITEM_REASSIGN",
    "ITEM_REPOSITION",
    "ITEM_DELETE",
    "ITEM_DROP",
    "FOCUS",
    "ZOOM",
    "REJECT",
]


@dataclass(frozen=True)
class OpEvent:
    """A single structured operation event."""

    kind: OpKind
    fields: Dict[str, Any] = field(default_factory=dict)

    def to_line(self) -> str:
        return format_line(self.kind, self.fields)

    @classmethod
    def from_line(cls, line: str) -> "OpEvent":
        kind, fields = parse_line(line)
        return cls(kind=kind, fields=fields)


@dataclass
class OpLog:
    """Accumulates board operations for debugging and testing."""

    events: List[OpEvent] = field(default_factory=list)

    def emit(self, event: OpEvent) -> None:
        self.events.append(event)

    # =========================================================================
    # Section structure
    # =========================================================================

    def section_add(self, count: int) -> None:
        self.emit(OpEvent(kind="SECTION_ADD", fields={"count": count}))

    def section_delete(self, section_id: int, count: int, dropped_items: int) -> None:
        self.emit(
            OpEvent(
                kind="SECTION_DELETE",
                fields={"section": section_id, "count": count, "dropped": dropped_items},
            )
        )

    def section_rename(self, section_id: int, name: str) -> None:
        self.emit(
            OpEvent(kind="SECTION_RENAME", fields={"section": section_id, "name": name})
        )

    def canvas_resize(self, width: float, height: float) -> None:
        self.emit(OpEvent(kind="CANVAS_RESIZE", fields={"w": width, "h": height}))

    # =========================================================================
    # Items
    # =========================================================================

    def item_create(self, item_id: str, section_id: int) -> None:
        self.emit(
            OpEvent(kind="ITEM_CREATE", fields={"item": item_id, "section": section_id})
        )

    def item_place(
        self, item_id: str, section_id: int, x: float, y: float, overlap: bool = False
    ) -> None:
        fields: Dict[str, Any] = {"item": item_id, "section": section_id, "x": x, "y": y}
        if overlap:
            fields["overlap"] = True
        self.emit(OpEvent(kind="ITEM_PLACE", fields=fields))

    def item_move(self, item_id: str, x: float, y: float) -> None:
        self.emit(OpEvent(kind="ITEM_MOVE", fields={"item": item_id, "x": x, "y": y}))

    def item_resize(self, item_id: str, width: float, height: float) -> None:
        self.emit(
            OpEvent(kind="ITEM_RESIZE", fields={"item": item_id, "w": width, "h": height})
        )

    def item_edit(self, item_id: str, changed: List[str]) -> None:
        self.emit(
            OpEvent(kind="ITEM_EDIT", fields={"item": item_id, "fields": sorted(changed)})
        )

    def item_reassign(self, item_id: str, old_section: int, new_section: int) -> None:
        self.emit(
            OpEvent(
                kind="ITEM_REASSIGN",
                fields={"item": item_id, "from": old_section, "to": new_section},
            )
        )

    def item_reposition(
        self,
        item_id: str,
        section_id: int,
        x: float,
        y: float,
        degenerate: bool = False,
    ) -> None:
        fields: Dict[str, Any] = {"item": item_id, "section": section_id, "x": x, "y": y}
        if degenerate:
            fields["degenerate"] = True
        self.emit(OpEvent(kind="ITEM_REPOSITION", fields=fields))

    def item_delete(self, item_id: str) -> None:
        self.emit(OpEvent(kind="ITEM_DELETE", fields={"item": item_id}))

    def item_drop(self, item_id: str, section_id: int) -> None:
        """Item removed together with its section."""
        self.emit(
            OpEvent(kind="ITEM_DROP", fields={"item": item_id, "section": section_id})
        )

    # =========================================================================
    # View state
    # =========================================================================

    def focus(self, section_id: Any) -> None:
        self.emit(OpEvent(kind="FOCUS", fields={"section": section_id}))

    def zoom(self, section_id: Any, zoomed: bool) -> None:
        self.emit(OpEvent(kind="ZOOM", fields={"section": section_id, "zoomed": zoomed}))

    # =========================================================================
    # Rejections
    # =========================================================================

    def reject(self, op: str, reason: str, **context: Any) -> None:
        fields: Dict[str, Any] = {"op": op, "reason": reason}
        fields.update(context)
        self.emit(OpEvent(kind="REJECT", fields=fields))

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_plaintext(self) -> str:
        """Serialize to plaintext - one line per event."""
        if not self.events:
            return ""
        return "\n".join(event.to_line() for event in self.events) + "\n"

    def log_to(self, logger) -> None:
        """Log all events as INFO-level messages."""
        for event in self.events:
            logger.info(f"OPLOG {event.to_line()}")

    def to_diagnostics(self) -> List[Dict[str, Any]]:
        """Diagnostics for rejected transitions and degraded outcomes."""
        diagnostics: List[Dict[str, Any]] = []
        for event in self.events:
            if event.kind == "REJECT":
                kind = f"board.{event.fields.get('reason', 'rejected')}"
            elif event.kind == "ITEM_PLACE" and event.fields.get("overlap"):
                kind = "board.bounds_exhausted"
            elif event.kind == "ITEM_REPOSITION" and event.fields.get("degenerate"):
                kind = "board.degenerate_geometry"
            else:
                continue
            diagnostics.append(
                {"kind": kind, "severity": "warning", "body": event.to_line()}
            )
        return diagnostics

    @classmethod
    def from_plaintext(cls, text: str) -> "OpLog":
        """Parse plaintext back to OpLog."""
        events: List[OpEvent] = []
        for line in text.strip().split("\n"):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            events.append(OpEvent.from_line(line))
        return cls(events=events)
