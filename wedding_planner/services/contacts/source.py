"""
Device Contacts Source

Contacts are read-only and need the user's permission. A source that
cannot be read raises ContactsSourceError; a refused permission is
reported by request_permission() returning False.
"""

import csv
import io
from abc import ABC, abstractmethod
from typing import Iterable

from wedding_planner.models.person import Contact, ContactPhoneNumber


class ContactsSourceError(Exception):
    """The contacts could not be read."""
    pass


class ContactsSource(ABC):
    """Abstract address book."""

    @abstractmethod
    async def request_permission(self) -> bool:
        """Ask for read access. Returns True if granted."""
        pass

    @abstractmethod
    async def get_contacts(self) -> list[Contact]:
        """
        Read every contact.

        Raises:
            ContactsSourceError: If the address book cannot be read
        """
        pass


class StaticContactsSource(ContactsSource):
    """Contacts held in memory, e.g. parsed from an uploaded export."""

    def __init__(
        self,
        contacts: Iterable[Contact] = (),
        permission_granted: bool = True,
    ):
        self._contacts = list(contacts)
        self._permission_granted = permission_granted

    async def request_permission(self) -> bool:
        return self._permission_granted

    async def get_contacts(self) -> list[Contact]:
        return list(self._contacts)


_NAME_COLUMNS = ("name", "full name", "display name", "ad", "ad soyad", "isim")
_PHONE_MARKERS = ("phone", "mobile", "telefon", "tel")


def contacts_from_csv(text: str) -> list[Contact]:
    """
    Build contacts from an exported CSV address book.

    The first column whose header looks like a name is the name; every
    column whose header mentions a phone is a phone number, in order.
    Cells holding several numbers separated by ' ::: ' (Google export)
    are split.

    Raises:
        ContactsSourceError: If no name column is found
    """
    reader = csv.DictReader(io.StringIO(text))
    headers = reader.fieldnames or []

    name_column = next(
        (h for h in headers if h and h.strip().lower() in _NAME_COLUMNS),
        None,
    )
    if name_column is None:
        raise ContactsSourceError("CSV has no name column")

    phone_columns = [
        h for h in headers
        if h and h != name_column
        and any(marker in h.lower() for marker in _PHONE_MARKERS)
        and "type" not in h.lower()
        and "label" not in h.lower()
    ]

    contacts = []
    for row_number, row in enumerate(reader, start=1):
        numbers = []
        for column in phone_columns:
            for number in (row.get(column) or "").split(":::"):
                if number.strip():
                    numbers.append(ContactPhoneNumber(number=number.strip(), label=column))
        contacts.append(Contact(
            id=f"csv-{row_number}",
            name=(row.get(name_column) or "").strip(),
            phone_numbers=numbers,
        ))
    return contacts
