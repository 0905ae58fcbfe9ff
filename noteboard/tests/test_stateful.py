"""
Stateful property-based tests for board transitions using Hypothesis.

Uses RuleBasedStateMachine to simulate realistic editing sessions and
verify the board invariants hold after every action.

Operations simulated:
- add_section / delete_section / resize_canvas
- create_item / move_item / reassign_item / delete_item
- focus, zoom and zoom out

Run with: pytest -v test_stateful.py
"""

from hypothesis import note, settings
from hypothesis import strategies as st
from hypothesis.stateful import RuleBasedStateMachine, initialize, invariant, rule

from ..board import BoardSession, check_board_invariants
from ..config import MAX_SECTIONS
from ..oplog import OpLog
from ..types import BoardState
from .strategies import canvas_heights, canvas_widths


class ManualClock:
    """Each reading is a second after the last, so AddSection is never debounced."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


section_ids = st.integers(min_value=0, max_value=MAX_SECTIONS + 1)
points = st.integers(min_value=-100, max_value=4_100)


class BoardSessionMachine(RuleBasedStateMachine):
    """Drive a BoardSession and mirror the expected item ownership."""

    @initialize(width=canvas_widths, height=canvas_heights)
    def setup(self, width, height):
        self.oplog = OpLog()
        self.session = BoardSession.new(
            width, height, clock=ManualClock(), oplog=self.oplog
        )
        self.next_id = 0
        self.expected_items = set()

    @property
    def state(self) -> BoardState:
        return self.session.state

    # ── structure ─────────────────────────────────────────────────────────────

    @rule()
    def add_section(self):
        before = self.state.layout.section_count
        result = self.session.add_section()
        if before < MAX_SECTIONS:
            assert result.applied
            assert self.state.layout.section_count == before + 1
        else:
            assert result.reason == "max_sections"

    @rule(section_id=section_ids)
    def delete_section(self, section_id):
        layout = self.state.layout
        doomed = {i.id for i in layout.items_in_section(section_id)}
        result = self.session.delete_section(section_id)
        note(f"delete_section({section_id}) -> {result.reason or 'applied'}")
        if result.applied:
            self.expected_items -= doomed
            assert self.state.layout.section_count == layout.section_count - 1

    @rule(width=canvas_widths, height=canvas_heights)
    def resize_canvas(self, width, height):
        before = self.state.layout.section_count
        self.session.resize_canvas(width, height)
        assert self.state.layout.section_count == before

    # ── items ─────────────────────────────────────────────────────────────────

    @rule(x=points, y=points)
    def create_item(self, x, y):
        item_id = f"n{self.next_id}"
        self.next_id += 1
        result = self.session.create_item(x, y, item_id=item_id)
        assert result.applied
        self.expected_items.add(item_id)

    @rule(data=st.data(), x=points, y=points)
    def move_item(self, data, x, y):
        if not self.expected_items:
            return
        item_id = data.draw(st.sampled_from(sorted(self.expected_items)))
        self.session.move_item(item_id, x, y)
        item = self.state.layout.item_by_id(item_id)
        assert (item.x, item.y) == (x, y)

    @rule(data=st.data(), section_id=section_ids)
    def reassign_item(self, data, section_id):
        if not self.expected_items:
            return
        item_id = data.draw(st.sampled_from(sorted(self.expected_items)))
        result = self.session.reassign_item(item_id, section_id)
        if result.applied:
            assert self.state.layout.item_by_id(item_id).section_id == section_id

    @rule(data=st.data())
    def delete_item(self, data):
        if not self.expected_items:
            return
        item_id = data.draw(st.sampled_from(sorted(self.expected_items)))
        assert self.session.delete_item(item_id).applied
        self.expected_items.discard(item_id)

    # ── view ──────────────────────────────────────────────────────────────────

    @rule(section_id=section_ids)
    def zoom_to_section(self, section_id):
        self.session.zoom_to_section(section_id)

    @rule()
    def zoom_out(self):
        self.session.zoom_out()
        assert self.state.focus.focused_section_id is None

    # ── invariants ────────────────────────────────────────────────────────────

    @invariant()
    def board_is_valid(self):
        diagnostics = []
        check_board_invariants(self.state, diagnostics)
        assert diagnostics == [], diagnostics

    @invariant()
    def items_match_expected(self):
        assert {i.id for i in self.state.layout.items} == self.expected_items

    @invariant()
    def selection_points_at_existing_item(self):
        selected = self.state.view.selected_item_id
        assert selected is None or self.state.layout.item_by_id(selected) is not None


BoardSessionMachine.TestCase.settings = settings(
    max_examples=50,
    stateful_step_count=25,
    deadline=None,
)
TestBoardSession = BoardSessionMachine.TestCase
