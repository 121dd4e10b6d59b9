"""
Expense Models

Expenses carry a positive decimal amount, a closed category and the
moment they were recorded.

DESIGN DECISION: Amounts are Decimal in memory and plain JSON numbers
on disk, so the stored blob stays readable by any JSON consumer.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

from wedding_planner.models.person import new_entity_id


# Amounts are stored as JSON numbers; these bounds keep them exact as doubles
MAX_AMOUNT = Decimal("999999999999.99")
AMOUNT_DECIMAL_PLACES = 2


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    The values are the identifiers stored on disk.
    """
    VENUE = "venue"
    FOOD = "food"
    ATTIRE = "dress"
    PHOTOGRAPHY = "photo"
    MUSIC = "music"
    FLOWERS = "flowers"
    INVITATIONS = "invitation"
    TRANSPORT = "transport"
    OTHER = "other"


class ExpenseStatusFilter(str, Enum):
    """Payment status filter offered on the expense list."""
    ALL = "all"
    PAID = "paid"
    UNPAID = "unpaid"


CATEGORY_DISPLAY_NAMES: dict[ExpenseCategory, str] = {
    ExpenseCategory.VENUE: "Mekan",
    ExpenseCategory.FOOD: "Yemek",
    ExpenseCategory.ATTIRE: "Kıyafet",
    ExpenseCategory.PHOTOGRAPHY: "Fotoğraf",
    ExpenseCategory.MUSIC: "Müzik",
    ExpenseCategory.FLOWERS: "Çiçek",
    ExpenseCategory.INVITATIONS: "Davetiye",
    ExpenseCategory.TRANSPORT: "Ulaşım",
    ExpenseCategory.OTHER: "Diğer",
}


def category_display_name(category: Union[ExpenseCategory, str]) -> str:
    """Resolve a category id to its display name, falling back to 'other'."""
    try:
        return CATEGORY_DISPLAY_NAMES[ExpenseCategory(category)]
    except ValueError:
        return CATEGORY_DISPLAY_NAMES[ExpenseCategory.OTHER]


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class Expense(BaseModel):
    """
    A single wedding expense.

    `date` is set once at creation and never changes afterwards.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_entity_id,
        min_length=1,
        description="Opaque unique id"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="What the money is for (required)"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        le=MAX_AMOUNT,
        description="Positive amount in TRY"
    )
    category: ExpenseCategory = Field(
        default=ExpenseCategory.OTHER,
        description="Expense category"
    )
    date: datetime = Field(
        default_factory=utc_now,
        description="When the expense was recorded (UTC)"
    )
    notes: str = Field(
        default="",
        description="Free-text notes"
    )
    paid: bool = Field(
        default=False,
        description="Has the expense been paid?"
    )

    @field_validator("notes", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("amount", mode="before")
    @classmethod
    def float_via_repr(cls, v: Any) -> Any:
        """JSON numbers arrive as floats; 1500.5 must read back as 1500.5."""
        if isinstance(v, float):
            return Decimal(repr(v))
        return v

    @field_validator("date")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are treated as UTC so they sort with aware ones."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_serializer("amount", when_used="json")
    def amount_as_number(self, value: Decimal) -> float:
        return float(value)

    @property
    def category_name(self) -> str:
        return category_display_name(self.category)


class ExpenseDraft(BaseModel):
    """
    Raw form input for creating or editing an expense.

    `amount` is kept as typed by the user (e.g. "1.500,50"); the
    validator turns it into a Decimal.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = ""
    amount: str = ""
    category: ExpenseCategory = ExpenseCategory.OTHER
    notes: str = ""

    @field_validator("title", "notes", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("amount", mode="before")
    @classmethod
    def amount_as_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
            return str(v)
        return v
