"""
Snapshot boundary: BoardLayoutState <-> plain JSON.

The serialized shape is exactly the layout data model (canvas size,
sections, items) with no derived fields. Focus, zoom and selection are view
state and are never written.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging

from .config import MAX_SECTIONS
from .types import BoardLayoutState, Item, Section, Size

logger = logging.getLogger("noteboard.snapshot")


def _section_to_dict(section: Section) -> Dict[str, Any]:
    return {
        "id": section.id,
        "name": section.name,
        "x": section.x,
        "y": section.y,
        "width": section.width,
        "height": section.height,
    }


def _item_to_dict(item: Item) -> Dict[str, Any]:
    return {
        "id": item.id,
        "x": item.x,
        "y": item.y,
        "width": item.width,
        "height": item.height,
        "sectionId": item.section_id,
        "text": item.text,
        "color": item.color,
        "fontSize": item.font_size,
    }


def layout_to_dict(layout: BoardLayoutState) -> Dict[str, Any]:
    return {
        "canvasSize": {
            "width": layout.canvas_size.width,
            "height": layout.canvas_size.height,
        },
        "sections": [_section_to_dict(s) for s in layout.sections],
        "items": [_item_to_dict(i) for i in layout.items],
    }


def _require(data: Dict[str, Any], key: str, context: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"{context} must be an object, got {type(data).__name__}")
    if key not in data:
        raise ValueError(f"{context} is missing '{key}'")
    return data[key]


def _number(data: Dict[str, Any], key: str, context: str) -> float:
    value = _require(data, key, context)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{context}.{key} must be a number, got {value!r}")
    return value


def _integer(data: Dict[str, Any], key: str, context: str) -> int:
    value = _number(data, key, context)
    if not float(value).is_integer():
        raise ValueError(f"{context}.{key} must be an integer, got {value!r}")
    return int(value)


def _string(
    data: Dict[str, Any], key: str, context: str, default: Optional[str] = None
) -> str:
    if default is not None and isinstance(data, dict) and key not in data:
        return default
    value = _require(data, key, context)
    if not isinstance(value, str):
        raise ValueError(f"{context}.{key} must be a string, got {value!r}")
    return value


def _font_size(data: Dict[str, Any], context: str) -> int:
    if "fontSize" not in data:
        return Item.font_size
    value = _integer(data, "fontSize", context)
    if value <= 0:
        raise ValueError(f"{context}.fontSize must be positive, got {value}")
    return value


def layout_from_dict(data: Dict[str, Any]) -> BoardLayoutState:
    """Rebuild a layout. Raises ValueError on malformed input."""
    canvas = _require(data, "canvasSize", "board")
    canvas_size = Size(
        width=_number(canvas, "width", "canvasSize"),
        height=_number(canvas, "height", "canvasSize"),
    )

    raw_sections = _require(data, "sections", "board")
    if not isinstance(raw_sections, list) or not 1 <= len(raw_sections) <= MAX_SECTIONS:
        raise ValueError(
            f"board.sections must be a list of 1-{MAX_SECTIONS} sections"
        )
    sections: List[Section] = []
    for index, raw in enumerate(raw_sections):
        context = f"sections[{index}]"
        sections.append(
            Section(
                id=_integer(raw, "id", context),
                name=_string(raw, "name", context),
                x=_number(raw, "x", context),
                y=_number(raw, "y", context),
                width=_number(raw, "width", context),
                height=_number(raw, "height", context),
            )
        )

    raw_items = data.get("items", []) if isinstance(data, dict) else []
    if not isinstance(raw_items, list):
        raise ValueError("board.items must be a list")
    items: List[Item] = []
    for index, raw in enumerate(raw_items):
        context = f"items[{index}]"
        items.append(
            Item(
                id=_string(raw, "id", context),
                x=_number(raw, "x", context),
                y=_number(raw, "y", context),
                width=_number(raw, "width", context),
                height=_number(raw, "height", context),
                section_id=_integer(raw, "sectionId", context),
                text=_string(raw, "text", context, default=Item.text),
                color=_string(raw, "color", context, default=Item.color),
                font_size=_font_size(raw, context),
            )
        )

    return BoardLayoutState(
        sections=tuple(sections), items=tuple(items), canvas_size=canvas_size
    )


def write_snapshot(path: Union[str, Path], layout: BoardLayoutState) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(layout_to_dict(layout), f, indent=2)
    logger.info(
        f"Saved board snapshot to {path} "
        f"({layout.section_count} sections, {len(layout.items)} items)"
    )


def read_snapshot(path: Union[str, Path]) -> BoardLayoutState:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from None
    return layout_from_dict(data)
