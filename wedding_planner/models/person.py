"""
Guest List Models

These models describe the people on the invitation list and the
device contacts they can be imported from.

DESIGN DECISION: Entities are frozen. A change to a person is always
expressed as a new object replacing the old one in the collection,
so nobody can mutate the backing list behind the repository's back.
"""

import re
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def new_entity_id() -> str:
    """Generate a collision-resistant entity id."""
    return uuid4().hex


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Side(str, Enum):
    """Which family a guest belongs to."""
    BRIDE = "gelin"
    GROOM = "damat"
    SHARED = "ortak"


class PersonStatusFilter(str, Enum):
    """
    Status filter offered on the guest list.

    The side values double as filters so that a single selector
    covers both the invitation state and the family.
    """
    ALL = "all"
    NOT_INVITED = "not_invited"
    INVITED = "invited"
    BRIDE = "gelin"
    GROOM = "damat"
    SHARED = "ortak"


# =============================================================================
# CORE PERSON MODEL
# =============================================================================

class Person(BaseModel):
    """
    A person on the invitation list.

    Field order matches the persisted JSON layout.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        default_factory=new_entity_id,
        min_length=1,
        description="Opaque unique id"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name (required)"
    )
    phone: str = Field(
        default="",
        description="Free-form phone number, empty when unknown"
    )
    invited: bool = Field(
        default=False,
        description="Has the invitation been delivered?"
    )
    side: Side = Field(
        default=Side.SHARED,
        description="Bride side, groom side or shared"
    )
    notes: str = Field(
        default="",
        description="Free-text notes"
    )

    @field_validator("phone", "notes", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        """Older blobs store missing optional text as null."""
        return "" if v is None else v

    @property
    def has_phone(self) -> bool:
        """Free-form phones like "yok" do not count; at least one digit is needed."""
        return bool(re.search(r"\d", self.phone))


class PersonDraft(BaseModel):
    """
    Raw form input for creating or editing a person.

    Nothing is enforced here; the validator reports problems
    so the UI can show a specific message.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = ""
    phone: str = ""
    side: Side = Side.SHARED
    notes: str = ""

    @field_validator("name", "phone", "notes", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


# =============================================================================
# DEVICE CONTACTS
# =============================================================================

class ContactPhoneNumber(BaseModel):
    """One phone number attached to a device contact."""

    number: Optional[str] = None
    label: Optional[str] = None


class Contact(BaseModel):
    """A read-only record from the device address book."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(default_factory=new_entity_id)
    name: str = ""
    phone_numbers: list[ContactPhoneNumber] = Field(default_factory=list)

    @property
    def primary_phone(self) -> str:
        """First phone number, or empty string when the contact has none."""
        for phone in self.phone_numbers:
            if phone.number and phone.number.strip():
                return phone.number.strip()
        return ""
