"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the lists on local disk today
2. Use in-memory storage for testing
3. Keep list logic decoupled from where the bytes live

The interface is intentionally tiny: a flat key-value area holding
strings. Each collection owns one key and rewrites it whole.
"""

import re
from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from wedding_planner.models.audit import AuditEvent


KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class InvalidKeyError(StorageError):
    """The key cannot be used as a storage slot name."""
    pass


class KeyValueReadError(StorageError):
    """A stored value could not be read."""
    pass


class KeyValueWriteError(StorageError):
    """A value could not be written."""
    pass


def validate_key(key: str) -> str:
    """Reject keys that could escape the storage area."""
    if not key or not KEY_PATTERN.match(key) or key in {".", ".."}:
        raise InvalidKeyError(f"Invalid storage key: {key!r}")
    return key


class KeyValueStore(ABC):
    """
    Abstract interface for the persistent key-value area.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read the raw value stored under a key.

        Args:
            key: Storage slot name

        Returns:
            The stored string, or None when the key is absent

        Raises:
            KeyValueReadError: If the value exists but cannot be read
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """
        Overwrite the value stored under a key.

        Args:
            key: Storage slot name
            value: Full new value

        Raises:
            KeyValueWriteError: If the write fails
        """
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get all events for a correlation ID in chronological order."""
        pass

    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """Get all events for a specific entity in chronological order."""
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get the most recent audit events (newest first)."""
        pass
