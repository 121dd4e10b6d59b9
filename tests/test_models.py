"""
Tests for Wedding Planner models

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for list services (with in-memory storage)
3. No real app launches in tests (use the recording dispatcher)
"""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import ValidationError

from wedding_planner.models import (
    Contact,
    ContactPhoneNumber,
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    OperationResult,
    Person,
    PersonDraft,
    Side,
    ValidationIssue,
    ValidationResult,
    category_display_name,
)
from wedding_planner.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestPersonModel:
    """Tests for the Person model."""

    def test_person_defaults(self):
        """A new person is shared-side, not invited, with a generated id."""
        person = Person(name="Ayşe")
        assert person.id
        assert person.phone == ""
        assert person.invited is False
        assert person.side == Side.SHARED
        assert person.notes == ""

    def test_ids_are_unique(self):
        ids = {Person(name="x").id for _ in range(200)}
        assert len(ids) == 200

    def test_person_strips_whitespace(self):
        person = Person(name="  Mehmet  ")
        assert person.name == "Mehmet"

    def test_person_requires_name(self):
        with pytest.raises(ValidationError):
            Person(name="   ")

    def test_person_rejects_unknown_side(self):
        with pytest.raises(ValidationError):
            Person(name="Ali", side="kuzen")

    def test_person_is_frozen(self):
        person = Person(name="Ali")
        with pytest.raises(ValidationError):
            person.invited = True

    def test_null_text_fields_become_empty(self):
        """Older blobs store a missing phone as null."""
        person = Person.model_validate({"id": "p1", "name": "Ali", "phone": None, "notes": None})
        assert person.phone == ""
        assert person.notes == ""

    def test_json_field_order(self):
        person = Person(id="p1", name="Ali", phone="555", side=Side.BRIDE)
        assert list(person.model_dump(mode="json")) == [
            "id", "name", "phone", "invited", "side", "notes",
        ]
        assert person.model_dump(mode="json")["side"] == "gelin"

    def test_has_phone(self):
        assert Person(name="A", phone="0555").has_phone
        assert not Person(name="A", phone="").has_phone
        assert not Person(name="A", phone="yok").has_phone
        assert not Person(name="A", phone="+ -").has_phone


class TestExpenseModel:
    """Tests for the Expense model."""

    def test_expense_creation(self):
        expense = Expense(title="Salon", amount=Decimal("25000"), category=ExpenseCategory.VENUE)
        assert expense.paid is False
        assert expense.date.tzinfo is not None
        assert expense.category_name == "Mekan"

    def test_expense_rejects_zero_amount(self):
        with pytest.raises(ValidationError):
            Expense(title="Salon", amount=Decimal("0"))

    def test_expense_rejects_negative_amount(self):
        with pytest.raises(ValidationError):
            Expense(title="Salon", amount=Decimal("-10"))

    def test_expense_rejects_unknown_category(self):
        with pytest.raises(ValidationError):
            Expense(title="Salon", amount=Decimal("10"), category="cake")

    def test_naive_date_is_utc(self):
        expense = Expense(title="x", amount=Decimal("1"), date=datetime(2025, 6, 1, 12, 0))
        assert expense.date.tzinfo == timezone.utc

    def test_amount_is_json_number(self):
        expense = Expense(title="Fotoğraf", amount=Decimal("1500.50"))
        dumped = expense.model_dump(mode="json")
        assert dumped["amount"] == 1500.5
        assert isinstance(dumped["amount"], float)

    def test_expense_rejects_amount_above_cap(self):
        with pytest.raises(ValidationError):
            Expense(title="Salon", amount=Decimal("1000000000000"))

    def test_float_amount_reads_as_written(self):
        expense = Expense.model_validate({"title": "x", "amount": 0.1})
        assert expense.amount == Decimal("0.1")

    def test_category_values(self):
        """Stored category identifiers."""
        assert [c.value for c in ExpenseCategory] == [
            "venue", "food", "dress", "photo", "music",
            "flowers", "invitation", "transport", "other",
        ]

    def test_category_display_names(self):
        assert category_display_name(ExpenseCategory.PHOTOGRAPHY) == "Fotoğraf"
        assert category_display_name("dress") == "Kıyafet"
        assert category_display_name("unknown") == "Diğer"


class TestDrafts:
    """Drafts accept anything; validation happens later."""

    def test_person_draft_accepts_empty_name(self):
        draft = PersonDraft(name="")
        assert draft.name == ""

    def test_expense_draft_keeps_amount_text(self):
        draft = ExpenseDraft(title="Foto", amount=" 1.500,50 ")
        assert draft.amount == "1.500,50"

    def test_expense_draft_converts_numbers(self):
        assert ExpenseDraft(title="x", amount=250).amount == "250"
        assert ExpenseDraft(title="x", amount=None).amount == ""


class TestContact:
    """Tests for device contacts."""

    def test_primary_phone_is_first_number(self):
        contact = Contact(
            name="Ali",
            phone_numbers=[
                ContactPhoneNumber(number="0555 111 22 33", label="mobile"),
                ContactPhoneNumber(number="0212 000 00 00", label="home"),
            ],
        )
        assert contact.primary_phone == "0555 111 22 33"

    def test_primary_phone_empty_without_numbers(self):
        assert Contact(name="Ali").primary_phone == ""


class TestResults:
    """Tests for validation and operation results."""

    def test_validation_result_has_errors(self):
        result = ValidationResult(issues=[
            ValidationIssue(field="name", issue_type="missing", message="Lütfen isim giriniz"),
        ])
        assert result.has_errors
        assert not result.is_valid
        assert result.error_count == 1
        assert result.first_error.field == "name"

    def test_validation_result_warnings_only(self):
        result = ValidationResult(issues=[
            ValidationIssue(field="phone", issue_type="format", message="?", severity="warning"),
        ])
        assert not result.has_errors
        assert result.is_valid
        assert result.first_error is None

    def test_operation_result_defaults(self):
        result = OperationResult(ok=True)
        assert result.notice is None
        assert result.affected_ids == []
        assert result.requires_confirmation is False


class TestAuditModels:
    """Tests for audit models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.ENTITY_CREATED,
            description="Created person",
        )
        assert event.event_id is not None
        assert event.severity == AuditSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        event = AuditEventBuilder.entity_deleted("person", "p1")
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "entity_deleted"
        assert log_dict["entity_type"] == "person"
        assert log_dict["entity_id"] == "p1"

    def test_save_failed_is_error(self):
        event = AuditEventBuilder.save_failed("wedding_people", "disk full")
        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"

    def test_bulk_deleted_records_ids(self):
        event = AuditEventBuilder.bulk_deleted("expense", ["e1", "e2"])
        assert event.event_type == AuditEventType.BULK_DELETED
        assert event.is_user_action
