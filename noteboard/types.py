"""
Core data types for the note-board layout engine.

Every type here is immutable. Transitions never mutate a value in place;
they build a new one and the caller swaps the whole BoardState.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple


@dataclass(frozen=True)
class Position:
    """2D position in canvas pixels."""

    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle: top-left corner plus extent."""

    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center(self) -> Position:
        return Position(x=self.x + self.width / 2, y=self.y + self.height / 2)

    def move_to(self, x: float, y: float) -> "Rect":
        return Rect(x=x, y=y, width=self.width, height=self.height)


@dataclass(frozen=True)
class Section:
    """One region of the canvas partition.

    Sections are only ever produced by the layout calculator; ids are a
    dense 1..N sequence.
    """

    id: int
    name: str
    x: float
    y: float
    width: float
    height: float

    @property
    def rect(self) -> Rect:
        return Rect(x=self.x, y=self.y, width=self.width, height=self.height)

    def with_name(self, name: str) -> "Section":
        return replace(self, name=name)

    def with_id(self, section_id: int) -> "Section":
        return replace(self, id=section_id)


DEFAULT_ITEM_TEXT = "Double-click to edit"
DEFAULT_FONT_SIZE = 14


@dataclass(frozen=True)
class Item:
    """A post-it: a rectangle owned by exactly one section."""

    id: str
    x: float
    y: float
    width: float
    height: float
    section_id: int
    text: str = DEFAULT_ITEM_TEXT
    color: str = "#FFE066"
    font_size: int = DEFAULT_FONT_SIZE

    @property
    def rect(self) -> Rect:
        return Rect(x=self.x, y=self.y, width=self.width, height=self.height)

    @property
    def position(self) -> Position:
        return Position(x=self.x, y=self.y)

    def with_position(self, position: Position) -> "Item":
        return replace(self, x=position.x, y=position.y)

    def with_section(self, section_id: int) -> "Item":
        return replace(self, section_id=section_id)

    def with_size(self, width: float, height: float) -> "Item":
        return replace(self, width=width, height=height)


@dataclass(frozen=True)
class BoardLayoutState:
    """Sections, items and the canvas they are laid out on."""

    sections: Tuple[Section, ...]
    items: Tuple[Item, ...] = ()
    canvas_size: Size = field(default_factory=lambda: Size(width=0, height=0))

    @property
    def section_count(self) -> int:
        return len(self.sections)

    def section_by_id(self, section_id: Optional[int]) -> Optional[Section]:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def item_by_id(self, item_id: Optional[str]) -> Optional[Item]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def items_in_section(self, section_id: int) -> Tuple[Item, ...]:
        return tuple(item for item in self.items if item.section_id == section_id)

    def with_items(self, items: Tuple[Item, ...]) -> "BoardLayoutState":
        return replace(self, items=tuple(items))

    def replace_item(self, updated: Item) -> "BoardLayoutState":
        return self.with_items(
            tuple(updated if item.id == updated.id else item for item in self.items)
        )


@dataclass(frozen=True)
class FocusState:
    """Which section is active. zoomed=True implies a focused section."""

    focused_section_id: Optional[int] = None
    zoomed: bool = False


@dataclass(frozen=True)
class CanvasView:
    """Pan/zoom and selection of the editor canvas. Never persisted."""

    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0
    selected_item_id: Optional[str] = None
    selected_section_id: Optional[int] = None


@dataclass(frozen=True)
class BoardState:
    """Everything a transition consumes and produces."""

    layout: BoardLayoutState
    focus: FocusState = field(default_factory=FocusState)
    view: CanvasView = field(default_factory=CanvasView)

    def with_layout(self, layout: BoardLayoutState) -> "BoardState":
        return replace(self, layout=layout)

    def with_focus(self, focus: FocusState) -> "BoardState":
        return replace(self, focus=focus)

    def with_view(self, view: CanvasView) -> "BoardState":
        return replace(self, view=view)
