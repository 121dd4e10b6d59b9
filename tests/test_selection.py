"""Tests for the bulk selection controller."""

from wedding_planner.models import Person
from wedding_planner.selection import SelectionController


class TestSelectionController:
    """Selection mode and the selected set."""

    def test_starts_inactive(self):
        selection = SelectionController()
        assert not selection.active
        assert selection.is_empty

    def test_enter_with_seed(self):
        selection = SelectionController()
        selection.enter("p1")
        assert selection.active
        assert selection.selected_ids == {"p1"}

    def test_enter_resets_previous_selection(self):
        selection = SelectionController()
        selection.enter("p1")
        selection.toggle("p2")
        selection.enter()
        assert selection.active
        assert selection.count == 0

    def test_toggle_twice_restores(self):
        selection = SelectionController()
        selection.enter()
        assert selection.toggle("p1") is True
        assert selection.is_selected("p1")
        assert selection.toggle("p1") is False
        assert not selection.is_selected("p1")

    def test_exit_clears(self):
        selection = SelectionController()
        selection.enter("p1")
        selection.exit()
        assert not selection.active
        assert selection.is_empty

    def test_selected_in_keeps_collection_order(self):
        people = [Person(id=f"p{i}", name=f"K{i}") for i in range(4)]
        selection = SelectionController()
        selection.enter("p3")
        selection.toggle("p0")
        selection.toggle("gone")
        assert [p.id for p in selection.selected_in(people)] == ["p0", "p3"]
