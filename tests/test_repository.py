"""
Tests for the collection repository.

Covers the load state machine, quarantine of malformed records, failed
writes and write ordering.
"""

import asyncio
import json
from decimal import Decimal

import pytest

from wedding_planner.models import Expense, Person
from wedding_planner.repository import (
    CollectionNotLoadedError,
    CollectionState,
    expense_repository,
    people_repository,
)


class TestLoad:
    """Loading a collection slot."""

    @pytest.mark.asyncio
    async def test_absent_slot_is_empty(self, memory_store):
        repo = people_repository(memory_store)
        assert repo.state == CollectionState.UNLOADED

        result = await repo.load()

        assert result.success
        assert repo.items == ()
        assert repo.state == CollectionState.LOADED

    @pytest.mark.asyncio
    async def test_loads_stored_people(self, make_store):
        blob = json.dumps([
            {"id": "p1", "name": "Ayşe", "phone": "0555", "invited": True, "side": "gelin", "notes": ""},
            {"id": "p2", "name": "Mehmet", "phone": "", "invited": False, "side": "damat", "notes": ""},
        ])
        repo = people_repository(make_store({"wedding_people": blob}))

        await repo.load()

        assert [p.name for p in repo.items] == ["Ayşe", "Mehmet"]
        assert repo.get("p1").invited is True

    @pytest.mark.asyncio
    async def test_malformed_records_are_quarantined(self, make_store):
        blob = json.dumps([
            {"id": "p1", "name": "Ayşe"},
            {"id": "p2", "name": ""},
            {"id": "p3", "name": "Ali", "side": "kuzen"},
            "not a record",
        ])
        store = make_store({"wedding_people": blob})
        repo = people_repository(store)

        result = await repo.load()

        assert result.success
        assert [p.id for p in repo.items] == ["p1"]
        assert [q.index for q in repo.quarantined] == [1, 2, 3]
        set_aside = json.loads(await store.get_item("wedding_people.quarantine"))
        assert [r["index"] for r in set_aside] == [1, 2, 3]
        assert set_aside[2]["raw"] == "not a record"

    @pytest.mark.asyncio
    async def test_reloading_does_not_duplicate_quarantine(self, make_store):
        """Bad records stay in the main slot until a save, so each load sees them."""
        blob = json.dumps([{"id": "p1", "name": "Ayşe"}, {"id": "p2", "name": ""}])
        store = make_store({"wedding_people": blob})

        await people_repository(store).load()
        await people_repository(store).load()

        set_aside = json.loads(await store.get_item("wedding_people.quarantine"))
        assert [r["index"] for r in set_aside] == [1]

    @pytest.mark.asyncio
    async def test_non_array_blob_fails_but_becomes_usable(self, make_store):
        repo = people_repository(make_store({"wedding_people": '{"oops": true}'}))

        result = await repo.load()

        assert not result.success
        assert result.error
        assert repo.is_loaded
        assert repo.items == ()

    @pytest.mark.asyncio
    async def test_read_error_fails_but_becomes_usable(self, memory_store):
        memory_store.fail_reads = True
        repo = expense_repository(memory_store)

        result = await repo.load()

        assert not result.success
        assert repo.is_loaded

    @pytest.mark.asyncio
    async def test_invalid_json_fails(self, make_store):
        repo = expense_repository(make_store({"wedding_expenses": "[{broken"}))
        result = await repo.load()
        assert not result.success


class TestSave:
    """Writing a collection slot."""

    @pytest.mark.asyncio
    async def test_save_before_load_raises(self, memory_store):
        repo = people_repository(memory_store)
        with pytest.raises(CollectionNotLoadedError):
            await repo.save([Person(name="Ali")])
        with pytest.raises(CollectionNotLoadedError):
            await repo.mutate(lambda items: items)

    @pytest.mark.asyncio
    async def test_save_writes_whole_array(self, memory_store):
        repo = people_repository(memory_store)
        await repo.load()

        result = await repo.save([Person(id="p1", name="Ayşe"), Person(id="p2", name="Ali")])

        assert result.success and result.committed
        stored = json.loads(await memory_store.get_item("wedding_people"))
        assert [r["id"] for r in stored] == ["p1", "p2"]

    @pytest.mark.asyncio
    async def test_failed_save_keeps_memory(self, memory_store):
        repo = people_repository(memory_store)
        await repo.load()
        await repo.save([Person(id="p1", name="Ayşe")])

        memory_store.fail_writes = True
        result = await repo.save([])

        assert not result.success
        assert not result.committed
        assert [p.id for p in repo.items] == ["p1"]

    @pytest.mark.asyncio
    async def test_failed_save_can_commit_anyway(self, memory_store):
        repo = people_repository(memory_store)
        await repo.load()

        memory_store.fail_writes = True
        result = await repo.save([Person(id="p1", name="Ayşe")], commit_on_failure=True)

        assert not result.success
        assert result.committed
        assert [p.id for p in repo.items] == ["p1"]

    @pytest.mark.asyncio
    async def test_invalid_entity_is_a_failed_save(self, memory_store):
        repo = people_repository(memory_store)
        await repo.load()
        await repo.save([Person(id="p1", name="Ayşe")])

        result = await repo.save([{"id": "x", "name": ""}])

        assert not result.success
        assert not result.committed
        assert result.error
        assert [p.id for p in repo.items] == ["p1"]
        stored = json.loads(await memory_store.get_item("wedding_people"))
        assert [r["id"] for r in stored] == ["p1"]

    @pytest.mark.asyncio
    async def test_round_trip_is_byte_stable(self, make_store):
        store = make_store()
        repo = expense_repository(store)
        await repo.load()
        await repo.save([
            Expense(id="e1", title="Fotoğraf", amount=Decimal("1500.50"), category="photo"),
            Expense(id="e2", title="Salon", amount=Decimal("25000"), category="venue", paid=True),
        ])
        first = await store.get_item("wedding_expenses")

        reloaded = expense_repository(make_store({"wedding_expenses": first}))
        await reloaded.load()
        assert reloaded.serialize(reloaded.items) == first
        assert "Fotoğraf" in first

    @pytest.mark.asyncio
    async def test_last_write_wins(self, memory_store):
        repo = people_repository(memory_store)
        await repo.load()

        await asyncio.gather(
            repo.save([Person(id="a", name="A")]),
            repo.save([Person(id="b", name="B")]),
        )

        stored = json.loads(await memory_store.get_item("wedding_people"))
        assert [r["id"] for r in stored] == ["b"]
        assert [p.id for p in repo.items] == ["b"]

    @pytest.mark.asyncio
    async def test_concurrent_mutations_compose(self, memory_store):
        repo = people_repository(memory_store)
        await repo.load()

        await asyncio.gather(*(
            repo.mutate(lambda items, i=i: items + [Person(id=f"p{i}", name=f"Kişi {i}")])
            for i in range(5)
        ))

        assert len(repo.items) == 5
        stored = json.loads(await memory_store.get_item("wedding_people"))
        assert len(stored) == 5
