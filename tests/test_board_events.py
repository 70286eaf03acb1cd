"""Tests for drag event parsing (board/events.py)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from kanban_sync.board.events import DragEndEvent, DragStartEvent, DropTarget


class TestDropTarget:
    def test_from_payload_with_container_hint(self) -> None:
        target = DropTarget.from_payload(
            {"id": "2", "data": {"current": {"sortable": {"containerId": "B"}}}}
        )

        assert target == DropTarget(id="2", container_id="B")

    def test_from_payload_without_data(self) -> None:
        target = DropTarget.from_payload({"id": "TODO"})

        assert target is not None
        assert target.id == "TODO"
        assert target.container_id is None

    def test_malformed_data_is_ignored(self) -> None:
        target = DropTarget.from_payload({"id": "2", "data": {"current": None}})

        assert target.container_id is None

    def test_empty_payload_means_no_target(self) -> None:
        assert DropTarget.from_payload(None) is None
        assert DropTarget.from_payload({}) is None

    def test_numeric_ids_become_strings(self) -> None:
        target = DropTarget.from_payload({"id": 7, "data": {"current": {"sortable": {"containerId": 3}}}})

        assert target.id == "7"
        assert target.container_id == "3"

    def test_missing_id_raises(self) -> None:
        with pytest.raises(ValidationError):
            DropTarget.from_payload({"data": {}})

    def test_non_dict_payload_raises(self) -> None:
        with pytest.raises(ValidationError):
            DropTarget.from_payload("TODO")


class TestDragEvents:
    def test_drag_start_from_payload(self) -> None:
        assert DragStartEvent.from_payload({"active": {"id": 1}}).active_id == "1"

    def test_drag_end_from_payload(self) -> None:
        event = DragEndEvent.from_payload(
            {
                "active": {"id": "1"},
                "over": {"id": "2", "data": {"current": {"sortable": {"containerId": "B"}}}},
            }
        )

        assert event.active_id == "1"
        assert event.over == DropTarget(id="2", container_id="B")

    def test_drag_end_with_null_over(self) -> None:
        event = DragEndEvent.from_payload({"active": {"id": "1"}, "over": None})

        assert event.over is None

    def test_missing_active_raises(self) -> None:
        with pytest.raises(ValidationError):
            DragEndEvent.from_payload({"over": {"id": "2"}})

    def test_bare_over_id_raises(self) -> None:
        with pytest.raises(ValidationError):
            DragEndEvent.from_payload({"active": {"id": "1"}, "over": "2"})

    def test_events_are_frozen(self) -> None:
        event = DragStartEvent(active_id="1")

        with pytest.raises(ValidationError):
            event.active_id = "2"
