"""
List Views

Pure functions that turn a full collection into what the screen shows.
They never mutate their input and are cheap enough to call on every
render.
"""

from decimal import Decimal
from typing import Iterable, Optional, Union

from pydantic import BaseModel, Field

from wedding_planner.models.expense import (
    Expense,
    ExpenseCategory,
    ExpenseStatusFilter,
    category_display_name,
)
from wedding_planner.models.person import (
    Contact,
    Person,
    PersonStatusFilter,
    Side,
)


ALL_CATEGORIES = "all"


def _normalize_query(query: Optional[str]) -> str:
    """Lower-cased query, or '' when there is nothing to search for."""
    if not query or not query.strip():
        return ""
    return query.strip().lower()


# =============================================================================
# EXPENSES
# =============================================================================

def filter_expenses(
    expenses: Iterable[Expense],
    status: Union[ExpenseStatusFilter, str] = ExpenseStatusFilter.ALL,
    category: Optional[Union[ExpenseCategory, str]] = None,
    query: Optional[str] = None,
) -> list[Expense]:
    """
    Filter and sort expenses.

    Args:
        expenses: The full collection
        status: all / paid / unpaid
        category: A category, or None / "all" for every category
        query: Free text matched against title, notes and category name

    Returns:
        Matching expenses, newest first
    """
    status = ExpenseStatusFilter(status)
    result = list(expenses)

    if status == ExpenseStatusFilter.PAID:
        result = [e for e in result if e.paid]
    elif status == ExpenseStatusFilter.UNPAID:
        result = [e for e in result if not e.paid]

    if category is not None and category != ALL_CATEGORIES:
        wanted = ExpenseCategory(category)
        result = [e for e in result if e.category == wanted]

    q = _normalize_query(query)
    if q:
        result = [
            e for e in result
            if q in e.title.lower()
            or q in e.notes.lower()
            or q in category_display_name(e.category).lower()
        ]

    return sorted(result, key=lambda e: e.date, reverse=True)


class ExpenseStats(BaseModel):
    """Totals shown in the expense page header."""

    total: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")
    unpaid: Decimal = Decimal("0")
    count: int = 0
    by_category: dict[str, Decimal] = Field(default_factory=dict)


def expense_stats(expenses: Iterable[Expense]) -> ExpenseStats:
    stats = ExpenseStats()
    for expense in expenses:
        stats.total += expense.amount
        if expense.paid:
            stats.paid += expense.amount
        else:
            stats.unpaid += expense.amount
        stats.count += 1
        key = expense.category.value
        stats.by_category[key] = stats.by_category.get(key, Decimal("0")) + expense.amount
    return stats


# =============================================================================
# PEOPLE
# =============================================================================

_SIDE_FILTERS = {
    PersonStatusFilter.BRIDE: Side.BRIDE,
    PersonStatusFilter.GROOM: Side.GROOM,
    PersonStatusFilter.SHARED: Side.SHARED,
}


def filter_people(
    people: Iterable[Person],
    status: Union[PersonStatusFilter, str] = PersonStatusFilter.ALL,
    query: Optional[str] = None,
) -> list[Person]:
    """
    Filter people, keeping insertion order.

    The query matches name, notes and phone number.
    """
    status = PersonStatusFilter(status)
    result = list(people)

    if status == PersonStatusFilter.NOT_INVITED:
        result = [p for p in result if not p.invited]
    elif status == PersonStatusFilter.INVITED:
        result = [p for p in result if p.invited]
    elif status in _SIDE_FILTERS:
        side = _SIDE_FILTERS[status]
        result = [p for p in result if p.side == side]

    q = _normalize_query(query)
    if q:
        result = [
            p for p in result
            if q in p.name.lower()
            or q in p.notes.lower()
            or q in p.phone.lower()
        ]

    return result


class PeopleStats(BaseModel):
    """Counters shown in the guest list header."""

    total: int = 0
    invited: int = 0
    not_invited: int = 0
    by_side: dict[str, int] = Field(
        default_factory=lambda: {side.value: 0 for side in Side}
    )


def people_stats(people: Iterable[Person]) -> PeopleStats:
    stats = PeopleStats()
    for person in people:
        stats.total += 1
        if person.invited:
            stats.invited += 1
        else:
            stats.not_invited += 1
        stats.by_side[person.side.value] += 1
    return stats


# =============================================================================
# CONTACTS
# =============================================================================

def filter_contacts(
    contacts: Iterable[Contact],
    query: Optional[str] = None,
) -> list[Contact]:
    """Contact picker search: case-insensitive match on the name."""
    q = _normalize_query(query)
    if not q:
        return list(contacts)
    return [c for c in contacts if q in c.name.lower()]
