"""
Storage Services Package

Provides the abstract key-value interface and its implementations.
Lists live on local disk by default, but the backend is swappable.
"""

from wedding_planner.services.storage.interface import (
    AuditStorageInterface,
    InvalidKeyError,
    KeyValueReadError,
    KeyValueStore,
    KeyValueWriteError,
    StorageError,
    validate_key,
)
from wedding_planner.services.storage.file_store import JsonFileKeyValueStore
from wedding_planner.services.storage.memory import InMemoryKeyValueStore
from wedding_planner.services.storage.audit_storage import KeyValueAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStore",
    "validate_key",
    # Exceptions
    "InvalidKeyError",
    "KeyValueReadError",
    "KeyValueWriteError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueAuditStorage",
]
