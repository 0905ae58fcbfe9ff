"""
Property-based tests for the placement search and reposition transform.

Invariants tested:
1. A non-exhausted placement overlaps nothing already placed
2. Placements stay inside the placement bounds
3. The search is deterministic
4. Reposition with identical geometry is the identity
5. Reposition A -> B -> A returns to the start for items that fit both
6. Degenerate sections never divide by zero
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from ..geometry import from_local_fraction, overlaps, placement_bounds
from ..placement import find_placement, reposition, search_placement
from ..sections import compute_layout
from ..types import Item, Rect, Section
from .strategies import item_heights, item_in_section_strategy, item_widths, section_strategy


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def make_item(x, y, width=200, height=150, section_id=1, item_id="a") -> Item:
    return Item(id=item_id, x=x, y=y, width=width, height=height, section_id=section_id)


def place_all(sizes, area):
    """Place rectangles one after another, like repeated item creation."""
    placed = []
    results = []
    for width, height in sizes:
        result = search_placement(Rect(0, 0, width, height), area, placed)
        results.append(result)
        placed.append(Rect(result.position.x, result.position.y, width, height))
    return placed, results


# ═══════════════════════════════════════════════════════════════════════════════
# Placement search
# ═══════════════════════════════════════════════════════════════════════════════


class TestSearchPlacement:
    def test_empty_section_gets_top_left(self):
        (section,) = compute_layout(1, 1000, 800)
        pos = find_placement(Rect(500, 400, 200, 150), section, [])
        assert (pos.x, pos.y) == (10, 40)

    def test_second_item_goes_right_of_first(self):
        (section,) = compute_layout(1, 1000, 800)
        pos = find_placement(Rect(0, 0, 200, 150), section, [Rect(10, 40, 200, 150)])
        assert (pos.x, pos.y) == (210, 40)

    def test_row_full_wraps_to_next_row(self):
        section = Section(id=1, name="S", x=0, y=0, width=420, height=800)
        occupied = [Rect(10, 40, 200, 150), Rect(210, 40, 200, 150)]
        pos = find_placement(Rect(0, 0, 200, 150), section, occupied)
        assert (pos.x, pos.y) == (10, 200)

    def test_custom_grid_step(self):
        (section,) = compute_layout(1, 1000, 800)
        pos = find_placement(
            Rect(0, 0, 200, 150), section, [Rect(10, 40, 205, 150)], step=50
        )
        assert (pos.x, pos.y) == (260, 40)

    def test_exhausted_falls_back_to_clamped_hint(self):
        area = Rect(0, 0, 320, 250)
        result = search_placement(
            Rect(1000, 1000, 200, 150), area, [placement_bounds(area)]
        )
        assert result.exhausted
        assert (result.position.x, result.position.y) == (110, 90)

    def test_oversized_candidate_pins_to_top_left(self):
        area = Rect(0, 0, 150, 150)
        result = search_placement(Rect(50, 50, 200, 150), area, [])
        assert result.exhausted
        assert (result.position.x, result.position.y) == (10, 40)

    def test_degenerate_area_does_not_raise(self):
        result = search_placement(Rect(0, 0, 100, 80), Rect(0, 0, 10, 10), [])
        assert result.exhausted

    @given(
        sizes=st.lists(st.tuples(item_widths, item_heights), min_size=1, max_size=12)
    )
    @settings(max_examples=100, deadline=None)
    def test_placements_never_overlap(self, sizes):
        (section,) = compute_layout(1, 1600, 1200)
        placed, results = place_all(sizes, section)

        for i, (rect, result) in enumerate(zip(placed, results)):
            if result.exhausted:
                continue
            for other in placed[:i]:
                assert not overlaps(rect, other)

    @given(
        sizes=st.lists(st.tuples(item_widths, item_heights), min_size=1, max_size=12)
    )
    @settings(max_examples=100, deadline=None)
    def test_placements_stay_in_bounds(self, sizes):
        (section,) = compute_layout(1, 1600, 1200)
        bounds = placement_bounds(section)
        placed, _ = place_all(sizes, section)
        for rect in placed:
            assert rect.left >= bounds.left
            assert rect.top >= bounds.top
            assert rect.right <= bounds.right
            assert rect.bottom <= bounds.bottom

    @given(
        sizes=st.lists(st.tuples(item_widths, item_heights), min_size=1, max_size=8)
    )
    @settings(max_examples=50, deadline=None)
    def test_deterministic(self, sizes):
        (section,) = compute_layout(1, 1200, 900)
        first, _ = place_all(sizes, section)
        second, _ = place_all(sizes, section)
        assert first == second


# ═══════════════════════════════════════════════════════════════════════════════
# Reposition
# ═══════════════════════════════════════════════════════════════════════════════


class TestReposition:
    @given(data=st.data(), section=section_strategy(min_width=1, min_height=1))
    def test_identical_geometry_is_identity(self, data, section):
        item = data.draw(item_in_section_strategy(section))
        assert reposition(item, section, section) == item.position

    def test_identity_keeps_item_hanging_off_the_edge(self):
        (section,) = compute_layout(1, 1000, 800)
        item = make_item(900, 700)
        assert reposition(item, section, section) == item.position

    def test_one_to_two_sections_halves_x(self):
        (whole,) = compute_layout(1, 1000, 800)
        left, _ = compute_layout(2, 1000, 800)
        pos = reposition(make_item(500, 100), whole, left)
        assert pos.x == pytest.approx(250)
        assert pos.y == pytest.approx(100)

    def test_result_is_clamped_into_new_section(self):
        (whole,) = compute_layout(1, 1000, 800)
        left, _ = compute_layout(2, 1000, 800)
        pos = reposition(make_item(780, 600), whole, left)
        assert pos.x <= 490 - 200
        assert pos.y <= 790 - 150

    def test_move_between_columns_keeps_relative_offset(self):
        left, right = compute_layout(2, 1000, 800)
        pos = reposition(make_item(130, 100), left, right)
        assert pos.x == pytest.approx(630)
        assert pos.y == pytest.approx(100)

    def test_degenerate_old_section_lands_top_left(self):
        tiny = Section(id=1, name="S", x=0, y=0, width=15, height=30)
        (whole,) = compute_layout(1, 1000, 800)
        pos = reposition(make_item(5, 5), tiny, whole)
        assert (pos.x, pos.y) == (10, 40)

    @given(
        fx=st.floats(min_value=0, max_value=1 - 200 / 480),
        fy=st.floats(min_value=0, max_value=1 - 150 / 750),
    )
    @settings(max_examples=200)
    def test_round_trip_for_items_that_fit_both(self, fx, fy):
        left, _ = compute_layout(2, 1000, 800)
        (whole,) = compute_layout(1, 1000, 800)
        start = from_local_fraction((fx, fy), left)
        item = make_item(start.x, start.y)

        there = item.with_position(reposition(item, left, whole))
        back = reposition(there, whole, left)

        assert back.x == pytest.approx(start.x, abs=1e-6)
        assert back.y == pytest.approx(start.y, abs=1e-6)
