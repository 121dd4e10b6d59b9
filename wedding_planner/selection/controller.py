"""
Bulk Selection Controller

While selection mode is active, a tap on a row toggles its membership
in the selected set instead of running the row's default action.
Ids that no longer exist in the collection are left in the set; they
simply match nothing.
"""

from typing import Iterable, Optional, TypeVar

from wedding_planner.models.expense import Expense
from wedding_planner.models.person import Person


EntityT = TypeVar("EntityT", Person, Expense)


class SelectionController:
    """Selection mode flag plus the set of selected ids."""

    def __init__(self):
        self._active = False
        self._selected: set[str] = set()

    @property
    def active(self) -> bool:
        return self._active

    @property
    def selected_ids(self) -> frozenset[str]:
        return frozenset(self._selected)

    @property
    def count(self) -> int:
        return len(self._selected)

    @property
    def is_empty(self) -> bool:
        return not self._selected

    def enter(self, seed_id: Optional[str] = None) -> None:
        """
        Switch to selection mode with an empty set.

        `seed_id` pre-selects the row a long press started on.
        """
        self._active = True
        self._selected = set()
        if seed_id is not None:
            self._selected.add(seed_id)

    def toggle(self, entity_id: str) -> bool:
        """Flip membership of an id. Returns True if it is now selected."""
        if entity_id in self._selected:
            self._selected.discard(entity_id)
            return False
        self._selected.add(entity_id)
        return True

    def exit(self) -> None:
        self._active = False
        self._selected = set()

    def is_selected(self, entity_id: str) -> bool:
        return entity_id in self._selected

    def selected_in(self, entities: Iterable[EntityT]) -> list[EntityT]:
        """Selected entities, in collection order."""
        return [e for e in entities if e.id in self._selected]
