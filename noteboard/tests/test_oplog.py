"""Tests for the operation log."""

import logging

from ..board import add_section, create_item, delete_section, new_board
from ..oplog import OpEvent, OpLog


def test_event_line():
    event = OpEvent(kind="SECTION_DELETE", fields={"section": 2, "count": 2, "dropped": 1})
    assert event.to_line() == "SECTION_DELETE section=2 count=2 dropped=1"
    assert OpEvent.from_line(event.to_line()) == event


def test_plaintext_round_trip():
    oplog = OpLog()
    oplog.section_add(2)
    oplog.section_rename(1, "To do")
    oplog.item_place("a", 1, 10.0, 40.0, overlap=True)
    oplog.zoom(None, False)
    oplog.reject("delete_section", "last_section", section=1)

    parsed = OpLog.from_plaintext(oplog.to_plaintext())
    assert parsed.events == oplog.events


def test_from_plaintext_skips_comments():
    text = "# header\nFOCUS section=2\n\nZOOM section=2 zoomed=true\n"
    oplog = OpLog.from_plaintext(text)
    assert [e.kind for e in oplog.events] == ["FOCUS", "ZOOM"]
    assert oplog.events[1].fields["zoomed"] is True


def test_empty_plaintext():
    assert OpLog().to_plaintext() == ""


def test_recorded_by_transitions():
    oplog = OpLog()
    state = create_item(new_board(1000, 800), 500, 100, item_id="a", oplog=oplog)
    state = add_section(state, oplog=oplog)
    delete_section(state, 2, oplog=oplog)

    lines = oplog.to_plaintext().splitlines()
    assert lines[0] == "ITEM_CREATE item=a section=1"
    assert "SECTION_ADD count=2" in lines
    assert "SECTION_DELETE section=2 count=1 dropped=0" in lines


def test_diagnostics():
    oplog = OpLog()
    oplog.item_place("a", 1, 0, 0)
    oplog.item_place("b", 1, 0, 0, overlap=True)
    oplog.item_reposition("c", 1, 10, 40, degenerate=True)
    oplog.reject("add_section", "max_sections", count=4)

    diagnostics = oplog.to_diagnostics()
    assert [d["kind"] for d in diagnostics] == [
        "board.bounds_exhausted",
        "board.degenerate_geometry",
        "board.max_sections",
    ]
    assert all(d["severity"] == "warning" for d in diagnostics)


def test_log_to(caplog):
    oplog = OpLog()
    oplog.item_delete("a")
    logger = logging.getLogger("noteboard.test")
    with caplog.at_level(logging.INFO, logger="noteboard.test"):
        oplog.log_to(logger)
    assert "OPLOG ITEM_DELETE item=a" in caplog.text
