"""
Audit Logger

DESIGN DECISION: Every change to a list is logged, and so is every
persistence failure the user is never shown. This provides:
1. A diagnostic channel for swallowed storage errors
2. A short history of who was added, paid or deleted
3. Debugging capability when a stored blob turns out malformed

The audit logger:
- Is async to match the storage calls it sits next to
- Gracefully handles failures (doesn't crash the app if logging fails)
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from wedding_planner.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from wedding_planner.services.storage import AuditStorageInterface


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structlog on top of the standard library logger.

    Safe to call more than once; the last call wins.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(log_level)
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The audit storage slot (for the history view), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("wedding_planner.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_collection_loaded(
        self,
        collection: str,
        count: int,
        quarantined: int = 0,
    ) -> None:
        await self.log(AuditEventBuilder.collection_loaded(collection, count, quarantined))

    async def log_load_failed(self, collection: str, error_message: str) -> None:
        await self.log(AuditEventBuilder.load_failed(collection, error_message))

    async def log_records_quarantined(self, collection: str, indexes: list[int]) -> None:
        await self.log(AuditEventBuilder.records_quarantined(collection, indexes))

    async def log_save_failed(self, collection: str, error_message: str) -> None:
        await self.log(AuditEventBuilder.save_failed(collection, error_message))

    async def log_entity_created(self, entity_type: str, entity_id: str, label: str) -> None:
        await self.log(AuditEventBuilder.entity_created(entity_type, entity_id, label))

    async def log_entity_updated(self, entity_type: str, entity_id: str, label: str) -> None:
        await self.log(AuditEventBuilder.entity_updated(entity_type, entity_id, label))

    async def log_entity_deleted(
        self,
        entity_type: str,
        entity_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.entity_deleted(entity_type, entity_id, correlation_id))

    async def log_flag_toggled(
        self,
        entity_type: str,
        entity_id: str,
        flag: str,
        value: bool,
    ) -> None:
        await self.log(AuditEventBuilder.flag_toggled(entity_type, entity_id, flag, value))

    async def log_bulk_deleted(
        self,
        entity_type: str,
        entity_ids: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.bulk_deleted(entity_type, entity_ids, correlation_id))

    async def log_contacts_imported(self, count: int) -> None:
        await self.log(AuditEventBuilder.contacts_imported(count))

    async def log_contacts_permission_denied(self) -> None:
        await self.log(AuditEventBuilder.contacts_permission_denied())

    async def log_message_dispatched(
        self,
        channel: str,
        recipient_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(
            AuditEventBuilder.message_dispatched(channel, recipient_count, correlation_id)
        )

    async def log_messaging_unavailable(
        self,
        channel: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(
            AuditEventBuilder.messaging_unavailable(channel, error_message, correlation_id)
        )

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.
    """
    return uuid4()
