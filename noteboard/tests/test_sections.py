"""
Property-based tests for the section layout calculator.

Invariants tested:
1. Sections tile the canvas: no overlap, full coverage, nothing outside
2. Ids are the dense sequence 1..N
3. Unsupported counts fall back to a single section
4. Names survive recomputation when carried forward by id
"""

import logging

import pytest
from hypothesis import given, settings

from ..geometry import overlaps
from ..sections import (
    carry_forward_names,
    compute_layout,
    default_section_name,
    drop_section,
    renumber_sections,
)
from ..types import Rect
from .strategies import canvas_heights, canvas_widths, section_counts

# Column splits of odd widths leave float seams
EPS = 1e-6


# ═══════════════════════════════════════════════════════════════════════════════
# Tiling
# ═══════════════════════════════════════════════════════════════════════════════


class TestTiling:
    @given(count=section_counts, width=canvas_widths, height=canvas_heights)
    @settings(max_examples=200)
    def test_sections_tile_canvas(self, count, width, height):
        sections = compute_layout(count, width, height)

        assert len(sections) == count
        assert sum(s.width * s.height for s in sections) == pytest.approx(width * height)
        for s in sections:
            assert s.x >= 0 and s.y >= 0
            assert s.x + s.width <= width + EPS
            assert s.y + s.height <= height + EPS
        for i, a in enumerate(sections):
            for b in sections[i + 1 :]:
                shrunk = Rect(a.x + EPS, a.y + EPS, a.width - 2 * EPS, a.height - 2 * EPS)
                assert not overlaps(shrunk, b.rect)

    @given(count=section_counts, width=canvas_widths, height=canvas_heights)
    def test_ids_are_dense(self, count, width, height):
        sections = compute_layout(count, width, height)
        assert [s.id for s in sections] == list(range(1, count + 1))

    @given(count=section_counts, width=canvas_widths, height=canvas_heights)
    def test_default_names(self, count, width, height):
        for s in compute_layout(count, width, height):
            assert s.name == default_section_name(s.id)

    def test_deterministic(self):
        assert compute_layout(3, 1200, 800) == compute_layout(3, 1200, 800)


class TestSchemes:
    def test_single(self):
        (s,) = compute_layout(1, 1000, 800)
        assert (s.x, s.y, s.width, s.height) == (0, 0, 1000, 800)

    def test_two_columns(self):
        left, right = compute_layout(2, 1000, 800)
        assert (left.x, left.width, left.height) == (0, 500, 800)
        assert (right.x, right.y, right.width) == (500, 0, 500)

    def test_three_columns(self):
        sections = compute_layout(3, 900, 600)
        assert [s.x for s in sections] == [0, 300, 600]
        assert all(s.width == 300 and s.height == 600 for s in sections)

    def test_grid_ids_run_left_to_right_then_down(self):
        sections = compute_layout(4, 1000, 800)
        assert [(s.id, s.x, s.y) for s in sections] == [
            (1, 0, 0),
            (2, 500, 0),
            (3, 0, 400),
            (4, 500, 400),
        ]
        assert all((s.width, s.height) == (500, 400) for s in sections)

    @pytest.mark.parametrize("count", [0, 5, -1])
    def test_unsupported_count_falls_back(self, count, caplog):
        with caplog.at_level(logging.WARNING, logger="noteboard.sections"):
            sections = compute_layout(count, 1000, 800)
        assert len(sections) == 1
        assert sections[0].width == 1000
        assert "No layout scheme" in caplog.text


# ═══════════════════════════════════════════════════════════════════════════════
# Names, drop and renumber
# ═══════════════════════════════════════════════════════════════════════════════


class TestNames:
    def test_carry_forward_matches_by_id(self):
        old = compute_layout(2, 1000, 800)
        old = (old[0].with_name("Backlog"), old[1])
        new = carry_forward_names(compute_layout(3, 1000, 800), old)
        assert [s.name for s in new] == ["Backlog", "Section 2", "Section 3"]

    def test_carry_forward_keeps_new_geometry(self):
        old = (compute_layout(1, 1000, 800)[0].with_name("Todo"),)
        new = carry_forward_names(compute_layout(2, 1000, 800), old)
        assert new[0].width == 500
        assert new[0].name == "Todo"


class TestDropAndRenumber:
    def test_drop_keeps_order(self):
        sections = compute_layout(3, 900, 600)
        assert [s.id for s in drop_section(sections, 2)] == [1, 3]

    def test_drop_unknown_is_identity(self):
        sections = compute_layout(3, 900, 600)
        assert drop_section(sections, 9) == sections

    def test_renumber_restores_dense_ids(self):
        sections = drop_section(compute_layout(3, 900, 600), 2)
        renumbered, id_map = renumber_sections(sections)
        assert [s.id for s in renumbered] == [1, 2]
        assert id_map == {1: 1, 3: 2}

    def test_renumber_keeps_names_and_geometry(self):
        sections = compute_layout(4, 1000, 800)
        named = tuple(s.with_name(f"S{s.id}") for s in sections)
        renumbered, _ = renumber_sections(drop_section(named, 1))
        assert [s.name for s in renumbered] == ["S2", "S3", "S4"]
        assert renumbered[0].x == 500
