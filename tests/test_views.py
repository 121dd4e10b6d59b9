"""Tests for list filtering, search and header stats."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from wedding_planner.models import (
    Contact,
    Expense,
    ExpenseCategory,
    ExpenseStatusFilter,
    Person,
    PersonStatusFilter,
    Side,
)
from wedding_planner.views import (
    ALL_CATEGORIES,
    expense_stats,
    filter_contacts,
    filter_expenses,
    filter_people,
    people_stats,
)


NOW = datetime(2025, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def expenses():
    return [
        Expense(id="e1", title="Salon", amount=Decimal("25000"), category=ExpenseCategory.VENUE,
                date=NOW - timedelta(days=3), paid=True),
        Expense(id="e2", title="Fotoğrafçı", amount=Decimal("1500.50"),
                category=ExpenseCategory.PHOTOGRAPHY, date=NOW, notes="düğün albümü"),
        Expense(id="e3", title="Gelinlik", amount=Decimal("8000"), category=ExpenseCategory.ATTIRE,
                date=NOW - timedelta(days=1)),
    ]


@pytest.fixture
def people():
    return [
        Person(id="p1", name="Ayşe Yılmaz", phone="0555 111 22 33", side=Side.BRIDE, invited=True),
        Person(id="p2", name="Mehmet Demir", side=Side.GROOM, notes="Ankara"),
        Person(id="p3", name="Zeynep Kaya", phone="0532 999 88 77"),
    ]


class TestFilterExpenses:
    """Expense list filtering."""

    def test_newest_first(self, expenses):
        assert [e.id for e in filter_expenses(expenses)] == ["e2", "e3", "e1"]

    def test_paid_and_unpaid(self, expenses):
        assert [e.id for e in filter_expenses(expenses, ExpenseStatusFilter.PAID)] == ["e1"]
        assert [e.id for e in filter_expenses(expenses, "unpaid")] == ["e2", "e3"]

    def test_category(self, expenses):
        assert [e.id for e in filter_expenses(expenses, category="dress")] == ["e3"]
        assert len(filter_expenses(expenses, category=ALL_CATEGORIES)) == 3

    def test_query_matches_title_notes_and_category_name(self, expenses):
        assert [e.id for e in filter_expenses(expenses, query="  SALON ")] == ["e1"]
        assert [e.id for e in filter_expenses(expenses, query="albüm")] == ["e2"]
        assert [e.id for e in filter_expenses(expenses, query="mekan")] == ["e1"]

    def test_blank_query_matches_everything(self, expenses):
        assert len(filter_expenses(expenses, query="   ")) == 3

    def test_does_not_mutate_input(self, expenses):
        original = list(expenses)
        filter_expenses(expenses, "paid")
        assert expenses == original


class TestExpenseStats:
    """Expense header totals."""

    def test_totals(self, expenses):
        stats = expense_stats(expenses)
        assert stats.total == Decimal("34500.50")
        assert stats.paid == Decimal("25000")
        assert stats.unpaid == Decimal("9500.50")
        assert stats.count == 3
        assert stats.by_category["photo"] == Decimal("1500.50")

    def test_empty(self):
        stats = expense_stats([])
        assert stats.total == 0
        assert stats.count == 0


class TestFilterPeople:
    """Guest list filtering keeps insertion order."""

    def test_all(self, people):
        assert [p.id for p in filter_people(people)] == ["p1", "p2", "p3"]

    def test_invited(self, people):
        assert [p.id for p in filter_people(people, PersonStatusFilter.INVITED)] == ["p1"]
        assert [p.id for p in filter_people(people, "not_invited")] == ["p2", "p3"]

    def test_side(self, people):
        assert [p.id for p in filter_people(people, PersonStatusFilter.GROOM)] == ["p2"]
        assert [p.id for p in filter_people(people, "ortak")] == ["p3"]

    def test_query(self, people):
        assert [p.id for p in filter_people(people, query="zeynep")] == ["p3"]
        assert [p.id for p in filter_people(people, query="ankara")] == ["p2"]
        assert [p.id for p in filter_people(people, query="0555")] == ["p1"]


class TestPeopleStats:
    def test_counts(self, people):
        stats = people_stats(people)
        assert stats.total == 3
        assert stats.invited == 1
        assert stats.not_invited == 2
        assert stats.by_side == {"gelin": 1, "damat": 1, "ortak": 1}


class TestFilterContacts:
    def test_name_search(self):
        contacts = [Contact(id="c1", name="Ali Veli"), Contact(id="c2", name="Ayşe")]
        assert [c.id for c in filter_contacts(contacts, "VELI")] == ["c1"]
        assert len(filter_contacts(contacts, "")) == 2
