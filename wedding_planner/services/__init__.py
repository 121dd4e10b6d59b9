"""Services package."""

from wedding_planner.services.contacts import (
    ContactsSource,
    ContactsSourceError,
    StaticContactsSource,
    contacts_from_csv,
)
from wedding_planner.services.messaging import (
    MessagingError,
    MessagingService,
    MessagingUnavailableError,
    RecordingDispatcher,
    UrlDispatcher,
    WebbrowserDispatcher,
)
from wedding_planner.services.storage import (
    AuditStorageInterface,
    InMemoryKeyValueStore,
    InvalidKeyError,
    JsonFileKeyValueStore,
    KeyValueAuditStorage,
    KeyValueReadError,
    KeyValueStore,
    KeyValueWriteError,
    StorageError,
)

__all__ = [
    # Contacts
    "ContactsSource",
    "ContactsSourceError",
    "StaticContactsSource",
    "contacts_from_csv",
    # Messaging
    "MessagingError",
    "MessagingService",
    "MessagingUnavailableError",
    "RecordingDispatcher",
    "UrlDispatcher",
    "WebbrowserDispatcher",
    # Storage
    "AuditStorageInterface",
    "InMemoryKeyValueStore",
    "InvalidKeyError",
    "JsonFileKeyValueStore",
    "KeyValueAuditStorage",
    "KeyValueReadError",
    "KeyValueStore",
    "KeyValueWriteError",
    "StorageError",
]
