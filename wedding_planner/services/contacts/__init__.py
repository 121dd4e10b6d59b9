"""Read-only device contacts used to fill the guest list."""

from wedding_planner.services.contacts.source import (
    ContactsSource,
    ContactsSourceError,
    StaticContactsSource,
    contacts_from_csv,
)

__all__ = [
    "ContactsSource",
    "ContactsSourceError",
    "StaticContactsSource",
    "contacts_from_csv",
]
