"""
Data Models Package

This package contains all Pydantic models used by the Wedding Planner.
Everything read from or written to storage goes through these schemas.
"""

from wedding_planner.models.person import (
    Contact,
    ContactPhoneNumber,
    Person,
    PersonDraft,
    PersonStatusFilter,
    Side,
    new_entity_id,
)
from wedding_planner.models.expense import (
    CATEGORY_DISPLAY_NAMES,
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    ExpenseStatusFilter,
    category_display_name,
)
from wedding_planner.models.results import (
    Notice,
    NoticeLevel,
    OperationResult,
    ValidationIssue,
    ValidationResult,
)
from wedding_planner.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Guest list models
    "Contact",
    "ContactPhoneNumber",
    "Person",
    "PersonDraft",
    "PersonStatusFilter",
    "Side",
    "new_entity_id",
    # Expense models
    "CATEGORY_DISPLAY_NAMES",
    "Expense",
    "ExpenseCategory",
    "ExpenseDraft",
    "ExpenseStatusFilter",
    "category_display_name",
    # Results
    "Notice",
    "NoticeLevel",
    "OperationResult",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
