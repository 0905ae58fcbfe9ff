"""Directional navigation between items (nearest item up/down/left/right)."""

from typing import Literal, Optional, Sequence

from .types import Item

Direction = Literal["up", "down", "left", "right"]

# Centers closer than this along the travel axis are not "in that direction"
DIRECTION_THRESHOLD = 20
# Weight of the off-axis offset when ranking candidates
OFF_AXIS_WEIGHT = 0.3


def _score(current: Item, candidate: Item, direction: Direction) -> Optional[float]:
    cur = current.rect.center
    other = candidate.rect.center

    if direction in ("up", "down"):
        along = cur.y - other.y if direction == "up" else other.y - cur.y
        across = abs(cur.x - other.x)
    else:
        along = cur.x - other.x if direction == "left" else other.x - cur.x
        across = abs(cur.y - other.y)

    if along <= DIRECTION_THRESHOLD:
        return None
    return along + across * OFF_AXIS_WEIGHT


def find_neighbor(
    items: Sequence[Item], current_id: str, direction: Direction
) -> Optional[str]:
    """Id of the nearest item in `direction` from the current item, or None.

    Ties keep the earliest item in `items`.
    """
    current = next((i for i in items if i.id == current_id), None)
    if current is None:
        return None

    best_id: Optional[str] = None
    best_score = float("inf")
    for candidate in items:
        if candidate.id == current_id:
            continue
        score = _score(current, candidate, direction)
        if score is not None and score < best_score:
            best_score = score
            best_id = candidate.id
    return best_id
