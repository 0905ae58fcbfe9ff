"""
Line serialization and changesets for board layouts.

This module contains:
1. The line format shared with the op log: ``KIND key=value key=value``
2. serialize_layout: one line per section and item, for snapshots and logs
3. BoardChangeset: what changed between two layouts (items added, removed,
   moved or reassigned; sections added, removed or renamed)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Set, Tuple

from .types import BoardLayoutState, Item, Position, Section


# =============================================================================
# Line format
# =============================================================================

_BARE_UNSAFE = set(' =",[]\\')


def format_value(value: Any) -> str:
    """Format a value for a key=value field."""
    if value is None:
        return "none"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(format_value(v) for v in value) + "]"
    text = str(value)
    if not text or any(c in _BARE_UNSAFE for c in text) or text in ("true", "false", "none"):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    if _looks_numeric(text):
        return f'"{text}"'
    return text


def _looks_numeric(text: str) -> bool:
    try:
        float(text)
    except ValueError:
        return False
    return True


def _split(text: str, sep: str) -> List[str]:
    """Split on sep outside quotes and brackets."""
    parts: List[str] = []
    current: List[str] = []
    in_quotes = False
    depth = 0
    escape = False

    for c in text:
        if escape:
            current.append(c)
            escape = False
            continue
        if c == "\\" and in_quotes:
            current.append(c)
            escape = True
        elif c == '"':
            in_quotes = not in_quotes
            current.append(c)
        elif c == "[" and not in_quotes:
            depth += 1
            current.append(c)
        elif c == "]" and not in_quotes:
            depth -= 1
            current.append(c)
        elif c == sep and not in_quotes and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(c)

    if in_quotes or depth != 0:
        raise ValueError(f"Unbalanced quotes or brackets: {text!r}")
    parts.append("".join(current))
    return parts


def parse_value(text: str) -> Any:
    """Parse a value written by format_value."""
    text = text.strip()
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        inner = text[1:-1]
        out: List[str] = []
        escape = False
        for c in inner:
            if escape:
                out.append(c)
                escape = False
            elif c == "\\":
                escape = True
            else:
                out.append(c)
        return "".join(out)
    if text.startswith("[") and text.endswith("]"):
        inner = text[1:-1]
        if not inner.strip():
            return []
        return [parse_value(part) for part in _split(inner, ",")]
    if text == "true":
        return True
    if text == "false":
        return False
    if text == "none":
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return text


def format_line(kind: str, fields: Dict[str, Any]) -> str:
    """Format a single line: KIND key=value key=value ..."""
    parts = [kind]
    for key, value in fields.items():
        parts.append(f"{key}={format_value(value)}")
    return " ".join(parts)


def parse_line(line: str) -> Tuple[str, Dict[str, Any]]:
    """Parse a single line into a (kind, fields) tuple."""
    line = line.strip()
    if not line or line.startswith("#"):
        raise ValueError(f"Cannot parse empty or comment line: {line!r}")

    tokens = [t for t in _split(line, " ") if t]
    kind = tokens[0]
    fields: Dict[str, Any] = {}
    for token in tokens[1:]:
        if "=" not in token:
            raise ValueError(f"Invalid field (no '='): {token!r}")
        key, value = token.split("=", 1)
        fields[key] = parse_value(value)
    return kind, fields


# =============================================================================
# Layout serialization
# =============================================================================


def _serialize_section(section: Section) -> str:
    return format_line(
        "SEC",
        {
            "id": section.id,
            "name": section.name,
            "x": section.x,
            "y": section.y,
            "w": section.width,
            "h": section.height,
        },
    )


def _serialize_item(item: Item) -> str:
    return format_line(
        "ITEM",
        {
            "id": item.id,
            "section": item.section_id,
            "x": item.x,
            "y": item.y,
            "w": item.width,
            "h": item.height,
        },
    )


def serialize_layout(layout: BoardLayoutState) -> List[str]:
    """Serialize a layout to lines: canvas, then sections, then items by id."""
    lines = [
        format_line(
            "CANVAS", {"w": layout.canvas_size.width, "h": layout.canvas_size.height}
        )
    ]
    lines.extend(_serialize_section(s) for s in layout.sections)
    lines.extend(_serialize_item(i) for i in sorted(layout.items, key=lambda i: i.id))
    return lines


# =============================================================================
# BoardChangeset
# =============================================================================


ChangeKind = Literal["add", "remove", "move", "reassign"]


@dataclass(frozen=True)
class ItemChange:
    """A single item change for reporting/iteration."""

    kind: ChangeKind
    item_id: str


@dataclass
class BoardChangeset:
    """Difference between two layouts, keyed by item and section id."""

    old: BoardLayoutState
    new: BoardLayoutState

    added_items: Set[str] = field(default_factory=set)
    removed_items: Set[str] = field(default_factory=set)
    moved_items: Dict[str, Tuple[Position, Position]] = field(default_factory=dict)
    reassigned_items: Dict[str, Tuple[int, int]] = field(default_factory=dict)
    renamed_sections: Dict[int, Tuple[str, str]] = field(default_factory=dict)

    @property
    def section_count_change(self) -> Tuple[int, int]:
        return (self.old.section_count, self.new.section_count)

    @property
    def canvas_resized(self) -> bool:
        return self.old.canvas_size != self.new.canvas_size

    @property
    def is_empty(self) -> bool:
        return (
            not self.added_items
            and not self.removed_items
            and not self.moved_items
            and not self.reassigned_items
            and not self.renamed_sections
            and self.old.section_count == self.new.section_count
            and not self.canvas_resized
        )

    @property
    def item_changes(self) -> List[ItemChange]:
        changes: List[ItemChange] = []
        for item_id in sorted(self.added_items):
            changes.append(ItemChange(kind="add", item_id=item_id))
        for item_id in sorted(self.removed_items):
            changes.append(ItemChange(kind="remove", item_id=item_id))
        for item_id in sorted(self.reassigned_items):
            changes.append(ItemChange(kind="reassign", item_id=item_id))
        for item_id in sorted(self.moved_items):
            changes.append(ItemChange(kind="move", item_id=item_id))
        return changes

    def to_plaintext(self) -> str:
        """One line per change."""
        lines: List[str] = []

        if self.canvas_resized:
            lines.append(
                format_line(
                    "CANVAS",
                    {
                        "w": self.new.canvas_size.width,
                        "h": self.new.canvas_size.height,
                    },
                )
            )
        old_count, new_count = self.section_count_change
        if old_count != new_count:
            lines.append(format_line("SECTIONS", {"from": old_count, "to": new_count}))
        for section_id in sorted(self.renamed_sections):
            old_name, new_name = self.renamed_sections[section_id]
            lines.append(
                format_line(
                    "SEC_RENAME", {"id": section_id, "from": old_name, "to": new_name}
                )
            )

        for change in self.item_changes:
            if change.kind == "add":
                item = self.new.item_by_id(change.item_id)
                lines.append(
                    format_line(
                        "ITEM_ADD",
                        {
                            "id": item.id,
                            "section": item.section_id,
                            "x": item.x,
                            "y": item.y,
                        },
                    )
                )
            elif change.kind == "remove":
                lines.append(format_line("ITEM_REMOVE", {"id": change.item_id}))
            elif change.kind == "reassign":
                old_section, new_section = self.reassigned_items[change.item_id]
                lines.append(
                    format_line(
                        "ITEM_SECTION",
                        {"id": change.item_id, "from": old_section, "to": new_section},
                    )
                )
            else:
                before, after = self.moved_items[change.item_id]
                lines.append(
                    format_line(
                        "ITEM_MOVE",
                        {
                            "id": change.item_id,
                            "x1": before.x,
                            "y1": before.y,
                            "x2": after.x,
                            "y2": after.y,
                        },
                    )
                )

        if not lines:
            return ""
        return "\n".join(lines) + "\n"

    def to_diagnostics(self) -> List[Dict[str, Any]]:
        """Info-level diagnostics for removed items (they are gone for good)."""
        return [
            {
                "kind": "board.item_removed",
                "severity": "info",
                "body": f"Item {item_id} was removed",
            }
            for item_id in sorted(self.removed_items)
        ]


def build_changeset(
    old: BoardLayoutState, new: BoardLayoutState
) -> BoardChangeset:
    """Compare two layouts.

    Section identity is by id; after a deletion the renumbered sections
    are compared against whatever had that id before.
    """
    old_items = {item.id: item for item in old.items}
    new_items = {item.id: item for item in new.items}

    moved: Dict[str, Tuple[Position, Position]] = {}
    reassigned: Dict[str, Tuple[int, int]] = {}
    for item_id in old_items.keys() & new_items.keys():
        before = old_items[item_id]
        after = new_items[item_id]
        if before.position != after.position:
            moved[item_id] = (before.position, after.position)
        if before.section_id != after.section_id:
            reassigned[item_id] = (before.section_id, after.section_id)

    renamed: Dict[int, Tuple[str, str]] = {}
    for section in new.sections:
        previous: Optional[Section] = old.section_by_id(section.id)
        if previous is not None and previous.name != section.name:
            renamed[section.id] = (previous.name, section.name)

    return BoardChangeset(
        old=old,
        new=new,
        added_items=set(new_items) - set(old_items),
        removed_items=set(old_items) - set(new_items),
        moved_items=moved,
        reassigned_items=reassigned,
        renamed_sections=renamed,
    )


def log_layout_state(prefix: str, layout: BoardLayoutState, logger: Any) -> None:
    """Log a layout at INFO level, one line per section/item."""
    for line in serialize_layout(layout):
        logger.info(f"{prefix} {line}")


def log_changeset(changeset: BoardChangeset, logger: Any) -> None:
    """Log changeset as INFO-level messages."""
    text = changeset.to_plaintext()
    if text.strip():
        for line in text.strip().split("\n"):
            logger.info(f"CHANGESET {line}")
