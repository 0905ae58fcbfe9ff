"""Board layout and placement engine for a sectioned note board."""

from .board import BoardSession, TransitionResult, new_board
from .types import BoardLayoutState, BoardState, FocusState, Item, Section

__all__ = [
    "BoardSession",
    "TransitionResult",
    "new_board",
    "BoardLayoutState",
    "BoardState",
    "FocusState",
    "Item",
    "Section",
]
