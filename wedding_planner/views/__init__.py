"""Derived list views: filtering, search, sorting and header stats."""

from wedding_planner.views.filters import (
    ALL_CATEGORIES,
    ExpenseStats,
    PeopleStats,
    expense_stats,
    filter_contacts,
    filter_expenses,
    filter_people,
    people_stats,
)

__all__ = [
    "ALL_CATEGORIES",
    "ExpenseStats",
    "PeopleStats",
    "expense_stats",
    "filter_contacts",
    "filter_expenses",
    "filter_people",
    "people_stats",
]
