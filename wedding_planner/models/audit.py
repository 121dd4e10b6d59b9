"""
Audit Models for Wedding Planner

Every change to a list, and every failure on the way to disk,
is recorded as an audit event. This provides:
1. A diagnostic channel for swallowed persistence errors
2. A short history the couple can look at
3. Debugging information when a stored blob goes bad

DESIGN DECISION: Audit logs are append-only. We never edit events.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Persistence
    COLLECTION_LOADED = "collection_loaded"
    LOAD_FAILED = "load_failed"
    RECORDS_QUARANTINED = "records_quarantined"
    SAVE_FAILED = "save_failed"

    # Entity changes
    ENTITY_CREATED = "entity_created"
    ENTITY_UPDATED = "entity_updated"
    ENTITY_DELETED = "entity_deleted"
    FLAG_TOGGLED = "flag_toggled"
    BULK_DELETED = "bulk_deleted"

    # Contacts
    CONTACTS_IMPORTED = "contacts_imported"
    CONTACTS_PERMISSION_DENIED = "contacts_permission_denied"

    # Messaging
    MESSAGE_DISPATCHED = "message_dispatched"
    MESSAGING_UNAVAILABLE = "messaging_unavailable"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'person', 'expense', 'message')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entity_created("person", person.id, person.name)
        event = AuditEventBuilder.save_failed("wedding_people", str(exc))
    """

    @staticmethod
    def collection_loaded(
        collection: str,
        count: int,
        quarantined: int = 0,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_LOADED,
            entity_type="collection",
            entity_id=collection,
            description=f"Loaded {count} records from {collection}",
            details={
                "count": count,
                "quarantined": quarantined,
            },
        )

    @staticmethod
    def load_failed(collection: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="collection",
            entity_id=collection,
            description=f"Could not load {collection}",
            error_message=error_message,
        )

    @staticmethod
    def records_quarantined(
        collection: str,
        indexes: list[int],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORDS_QUARANTINED,
            severity=AuditSeverity.WARNING,
            entity_type="collection",
            entity_id=collection,
            description=f"{len(indexes)} malformed records set aside from {collection}",
            details={"indexes": indexes},
        )

    @staticmethod
    def save_failed(collection: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="collection",
            entity_id=collection,
            description=f"Could not save {collection}",
            error_message=error_message,
        )

    @staticmethod
    def entity_created(entity_type: str, entity_id: str, label: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_CREATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} added: {label}",
            is_user_action=True,
        )

    @staticmethod
    def entity_updated(entity_type: str, entity_id: str, label: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_UPDATED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} edited: {label}",
            is_user_action=True,
        )

    @staticmethod
    def entity_deleted(
        entity_type: str,
        entity_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_DELETED,
            correlation_id=correlation_id,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{entity_type.capitalize()} deleted",
            is_user_action=True,
        )

    @staticmethod
    def flag_toggled(
        entity_type: str,
        entity_id: str,
        flag: str,
        value: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FLAG_TOGGLED,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{flag} set to {value}",
            details={"flag": flag, "value": value},
            is_user_action=True,
        )

    @staticmethod
    def bulk_deleted(
        entity_type: str,
        entity_ids: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BULK_DELETED,
            correlation_id=correlation_id,
            entity_type=entity_type,
            description=f"{len(entity_ids)} {entity_type} records deleted",
            details={"ids": entity_ids},
            is_user_action=True,
        )

    @staticmethod
    def contacts_imported(count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONTACTS_IMPORTED,
            entity_type="person",
            description=f"{count} contacts imported",
            details={"count": count},
            is_user_action=True,
        )

    @staticmethod
    def contacts_permission_denied() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONTACTS_PERMISSION_DENIED,
            severity=AuditSeverity.WARNING,
            entity_type="contact",
            description="Contacts permission was refused",
        )

    @staticmethod
    def message_dispatched(
        channel: str,
        recipient_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MESSAGE_DISPATCHED,
            correlation_id=correlation_id,
            entity_type="message",
            description=f"{channel} message handed over for {recipient_count} recipients",
            details={"channel": channel, "recipients": recipient_count},
            is_user_action=True,
        )

    @staticmethod
    def messaging_unavailable(
        channel: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MESSAGING_UNAVAILABLE,
            correlation_id=correlation_id,
            severity=AuditSeverity.WARNING,
            entity_type="message",
            description=f"{channel} is not available on this device",
            details={"channel": channel},
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
        )
