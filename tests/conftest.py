"""
Shared fixtures for Wedding Planner tests.

Nothing here touches the network or the real data directory; the file
store always points at pytest's tmp_path.
"""

from typing import Optional

import pytest
import pytest_asyncio

from wedding_planner.audit import AuditLogger
from wedding_planner.planner import ExpenseListService, GuestListService
from wedding_planner.repository import expense_repository, people_repository
from wedding_planner.services.messaging import MessagingService, RecordingDispatcher
from wedding_planner.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueAuditStorage,
    KeyValueReadError,
    KeyValueWriteError,
)


class FlakyStore(InMemoryKeyValueStore):
    """In-memory store whose reads or writes can be switched to fail."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        super().__init__(initial)
        self.fail_reads = False
        self.fail_writes = False
        self.write_count = 0

    async def get_item(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise KeyValueReadError(f"cannot read {key}")
        return await super().get_item(key)

    async def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise KeyValueWriteError(f"cannot write {key}")
        self.write_count += 1
        await super().set_item(key, value)


@pytest.fixture
def make_store():
    """Factory for stores pre-seeded with raw blobs."""
    return FlakyStore


@pytest.fixture
def memory_store() -> FlakyStore:
    return FlakyStore()


@pytest.fixture
def file_store(tmp_path) -> JsonFileKeyValueStore:
    return JsonFileKeyValueStore(tmp_path / "data", fsync=False)


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def audit_logger(memory_store) -> AuditLogger:
    return AuditLogger(KeyValueAuditStorage(memory_store))


@pytest_asyncio.fixture
async def guest_list(memory_store, dispatcher, audit_logger) -> GuestListService:
    service = GuestListService(
        repository=people_repository(memory_store, audit_logger=audit_logger),
        messaging=MessagingService(dispatcher=dispatcher, country_code="90"),
        audit_logger=audit_logger,
    )
    await service.load()
    return service


@pytest_asyncio.fixture
async def expense_list(memory_store, audit_logger) -> ExpenseListService:
    service = ExpenseListService(
        repository=expense_repository(memory_store, audit_logger=audit_logger),
        audit_logger=audit_logger,
    )
    await service.load()
    return service
