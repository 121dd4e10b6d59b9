"""
Collection Repository

One repository owns one collection slot. It holds the authoritative
in-memory list and is the only thing allowed to write the slot.

DESIGN DECISIONS:
1. Whole-array persistence. Every save serializes the full list and
   overwrites the slot; there are no partial writes.
2. Schema-validated loads. Records that fail validation are set aside
   (quarantined) instead of leaking malformed entities downstream.
3. Result-returning saves. A failed write is logged and reported in the
   result; the in-memory list is only replaced when the write succeeded,
   unless the caller explicitly asks otherwise.
4. One writer at a time. Saves on a collection are serialized by a FIFO
   lock, so the last save issued is the one that persists.

State machine: UNLOADED -> LOADING -> LOADED. Mutations are only
accepted in LOADED.
"""

import asyncio
import json
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Optional, Sequence, TypeVar

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from wedding_planner.audit import AuditLogger
from wedding_planner.models.expense import Expense
from wedding_planner.models.person import Person
from wedding_planner.services.storage import KeyValueStore, StorageError


logger = structlog.get_logger(__name__)

EntityT = TypeVar("EntityT", Person, Expense)


def _record_fingerprint(record: dict) -> str:
    return json.dumps(
        [record.get("index"), record.get("raw")],
        sort_keys=True,
        ensure_ascii=False,
    )


class RepositoryError(Exception):
    """Base exception for repository misuse."""
    pass


class CollectionNotLoadedError(RepositoryError):
    """A mutation was attempted before the collection finished loading."""
    pass


class CollectionState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"


class QuarantinedRecord(BaseModel):
    """A stored record that failed schema validation."""

    index: int = Field(..., ge=0, description="Position in the stored array")
    raw: Any = Field(..., description="The record exactly as stored")
    errors: list[str] = Field(default_factory=list)


class LoadResult(BaseModel):
    """Outcome of reading a collection slot."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    items: tuple[Any, ...] = ()
    quarantined: list[QuarantinedRecord] = Field(default_factory=list)
    error: Optional[str] = None


class SaveResult(BaseModel):
    """
    Outcome of writing a collection slot.

    `committed` tells whether the in-memory list now reflects the
    entities that were passed in.
    """

    success: bool
    committed: bool
    item_count: int = 0
    error: Optional[str] = None


class CollectionRepository(Generic[EntityT]):
    """
    Repository for one entity collection stored under one key.

    `items` is an immutable snapshot; change the collection through
    `save` or `mutate`.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        model: type[EntityT],
        entity_type: str,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._key = key
        self._model = model
        self._entity_type = entity_type
        self._audit_logger = audit_logger

        self._items: tuple[EntityT, ...] = ()
        self._quarantined: tuple[QuarantinedRecord, ...] = ()
        self._state = CollectionState.UNLOADED
        self._write_lock = asyncio.Lock()

    @property
    def key(self) -> str:
        return self._key

    @property
    def quarantine_key(self) -> str:
        return f"{self._key}.quarantine"

    @property
    def entity_type(self) -> str:
        return self._entity_type

    @property
    def state(self) -> CollectionState:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state == CollectionState.LOADED

    @property
    def items(self) -> tuple[EntityT, ...]:
        return self._items

    @property
    def quarantined(self) -> tuple[QuarantinedRecord, ...]:
        return self._quarantined

    def get(self, entity_id: str) -> Optional[EntityT]:
        for item in self._items:
            if item.id == entity_id:
                return item
        return None

    def ids(self) -> set[str]:
        return {item.id for item in self._items}

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def serialize(self, entities: Iterable[EntityT]) -> str:
        """Compact, stable JSON for a whole collection."""
        return json.dumps(
            [entity.model_dump(mode="json") for entity in entities],
            ensure_ascii=False,
            separators=(",", ":"),
        )

    def deserialize(
        self,
        raw: str,
    ) -> tuple[tuple[EntityT, ...], list[QuarantinedRecord]]:
        """
        Parse a stored blob.

        Raises:
            ValueError: If the blob is not a JSON array
        """
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"{self._key} does not hold a JSON array")

        items = []
        quarantined = []
        for index, record in enumerate(data):
            try:
                items.append(self._model.model_validate(record))
            except ValidationError as e:
                quarantined.append(QuarantinedRecord(
                    index=index,
                    raw=record,
                    errors=[f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
                ))
        return tuple(items), quarantined

    def _coerce(self, entities: Iterable[Any]) -> tuple[EntityT, ...]:
        return tuple(
            entity if isinstance(entity, self._model) else self._model.model_validate(entity)
            for entity in entities
        )

    # =========================================================================
    # LOAD
    # =========================================================================

    async def load(self) -> LoadResult:
        """
        Read the slot into memory.

        An absent slot is an empty collection. A read or parse failure is
        logged and leaves the in-memory list unchanged; the collection
        still becomes usable.
        """
        self._state = CollectionState.LOADING
        try:
            raw = await self._store.get_item(self._key)
            if raw is None:
                items, quarantined = (), []
            else:
                items, quarantined = self.deserialize(raw)
        except (StorageError, ValueError) as e:
            logger.error(
                "collection_load_failed",
                collection=self._key,
                error=str(e),
            )
            if self._audit_logger:
                await self._audit_logger.log_load_failed(self._key, str(e))
            self._state = CollectionState.LOADED
            return LoadResult(success=False, items=self._items, error=str(e))

        self._items = items
        self._quarantined = tuple(quarantined)
        self._state = CollectionState.LOADED

        if quarantined:
            await self._set_aside(quarantined)

        logger.info(
            "collection_loaded",
            collection=self._key,
            count=len(items),
            quarantined=len(quarantined),
        )
        if self._audit_logger:
            await self._audit_logger.log_collection_loaded(
                self._key, len(items), len(quarantined)
            )

        return LoadResult(success=True, items=items, quarantined=quarantined)

    async def _set_aside(self, quarantined: list[QuarantinedRecord]) -> None:
        """Append malformed records to the quarantine slot."""
        indexes = [q.index for q in quarantined]
        logger.warning(
            "records_quarantined",
            collection=self._key,
            indexes=indexes,
        )
        if self._audit_logger:
            await self._audit_logger.log_records_quarantined(self._key, indexes)

        try:
            existing = await self._store.get_item(self.quarantine_key)
            records = json.loads(existing) if existing else []
            if not isinstance(records, list):
                records = []
            # The main slot keeps bad records until the next save; each load sees them again
            seen = {_record_fingerprint(r) for r in records if isinstance(r, dict)}
            fresh = [
                record for record in (q.model_dump(mode="json") for q in quarantined)
                if _record_fingerprint(record) not in seen
            ]
            if not fresh:
                return
            records.extend(fresh)
            await self._store.set_item(
                self.quarantine_key,
                json.dumps(records, ensure_ascii=False, separators=(",", ":")),
            )
        except (StorageError, ValueError) as e:
            logger.error(
                "quarantine_write_failed",
                collection=self._key,
                error=str(e),
            )
            if self._audit_logger:
                await self._audit_logger.log_error(
                    "quarantine_write_failed",
                    str(e),
                    details={"collection": self._key, "indexes": indexes},
                )

    # =========================================================================
    # SAVE / MUTATE
    # =========================================================================

    def _require_loaded(self) -> None:
        if self._state != CollectionState.LOADED:
            raise CollectionNotLoadedError(
                f"{self._key} is {self._state.value}; load it before changing it"
            )

    async def save(
        self,
        entities: Sequence[EntityT],
        commit_on_failure: bool = False,
    ) -> SaveResult:
        """
        Overwrite the slot with the given entities.

        Args:
            entities: The complete new collection
            commit_on_failure: Replace the in-memory list even if the
                write fails

        Raises:
            CollectionNotLoadedError: If called before load()
        """
        self._require_loaded()
        async with self._write_lock:
            return await self._write(list(entities), commit_on_failure)

    async def mutate(
        self,
        change: Callable[[list[EntityT]], Iterable[EntityT]],
        commit_on_failure: bool = False,
    ) -> SaveResult:
        """
        Apply `change` to a copy of the current list and save the result.

        The current list is read after the write lock is acquired, so
        concurrent mutations compose instead of overwriting each other.
        """
        self._require_loaded()
        async with self._write_lock:
            return await self._write(list(change(list(self._items))), commit_on_failure)

    async def _write(
        self,
        entities: list[Any],
        commit_on_failure: bool,
    ) -> SaveResult:
        """
        Validate and persist. Entities that fail validation are a failed
        save too (pydantic's ValidationError is a ValueError); nothing is
        committed then, whatever `commit_on_failure` says.
        """
        snapshot: Optional[tuple[EntityT, ...]] = None
        try:
            snapshot = self._coerce(entities)
            payload = self.serialize(snapshot)
            await self._store.set_item(self._key, payload)
        except (StorageError, TypeError, ValueError) as e:
            logger.error(
                "collection_save_failed",
                collection=self._key,
                error=str(e),
                item_count=len(entities),
            )
            if self._audit_logger:
                await self._audit_logger.log_save_failed(self._key, str(e))
            committed = commit_on_failure and snapshot is not None
            if committed:
                self._items = snapshot
            return SaveResult(
                success=False,
                committed=committed,
                item_count=len(entities),
                error=str(e),
            )

        self._items = snapshot
        return SaveResult(success=True, committed=True, item_count=len(snapshot))


def people_repository(
    store: KeyValueStore,
    key: str = "wedding_people",
    audit_logger: Optional[AuditLogger] = None,
) -> CollectionRepository[Person]:
    return CollectionRepository(store, key, Person, "person", audit_logger)


def expense_repository(
    store: KeyValueStore,
    key: str = "wedding_expenses",
    audit_logger: Optional[AuditLogger] = None,
) -> CollectionRepository[Expense]:
    return CollectionRepository(store, key, Expense, "expense", audit_logger)
