"""
Key-Value Audit Storage

Audit events are kept as a JSON array under their own key, capped to
the most recent N events. Like every other slot, it is rewritten whole.
"""

import asyncio
import json
from typing import Optional
from uuid import UUID

import structlog
from pydantic import ValidationError

from wedding_planner.models.audit import AuditEvent
from wedding_planner.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStore,
    StorageError,
)


logger = structlog.get_logger(__name__)


class KeyValueAuditStorage(AuditStorageInterface):
    """
    Audit log stored in a key-value slot.

    Events beyond `max_events` are dropped oldest first.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = "wedding_audit",
        max_events: int = 500,
    ):
        self._store = store
        self._key = key
        self._max_events = max_events
        self._lock = asyncio.Lock()

    async def _read_events(self) -> list[AuditEvent]:
        raw = await self._store.get_item(self._key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Audit log is not valid JSON: {e}")
        if not isinstance(data, list):
            raise StorageError("Audit log is not a JSON array")

        events = []
        for record in data:
            try:
                events.append(AuditEvent.model_validate(record))
            except ValidationError:
                continue  # Skip malformed events
        return events

    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        async with self._lock:
            try:
                events = await self._read_events()
                events.append(event)
                events = events[-self._max_events:]
                payload = json.dumps(
                    [e.model_dump(mode="json") for e in events],
                    ensure_ascii=False,
                    separators=(",", ":"),
                )
                await self._store.set_item(self._key, payload)
                return True
            except StorageError as e:
                # Audit logging should not break the main flow
                logger.warning(
                    "audit_append_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get events by correlation ID."""
        events = [
            e for e in await self._read_events()
            if e.correlation_id == correlation_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """Get events by entity."""
        events = [
            e for e in await self._read_events()
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
        event_type: Optional[str] = None,
    ) -> list[AuditEvent]:
        """Get recent events, newest first."""
        events = await self._read_events()
        if event_type:
            events = [e for e in events if e.event_type.value == event_type]
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
