"""Document store over SQLite (aiosqlite), same engine/session helpers as production."""

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from intellipark.config import Settings
from intellipark.infrastructure.db.document_store_sql import DocumentStoreSQL
from intellipark.infrastructure.db.engine import build_engine, build_sessionmaker
from intellipark.infrastructure.db.retry import is_deadlock_error, retry_on_deadlock
from intellipark.infrastructure.db.tables import metadata


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    settings = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'documents.db'}")
    engine = build_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield DocumentStoreSQL(build_sessionmaker(engine))

    await engine.dispose()


@pytest.mark.asyncio
async def test_set_and_get(sql_store):
    await sql_store.set("01", {"status": "Available", "reserved": False})
    assert await sql_store.get("01") == {"status": "Available", "reserved": False}
    assert await sql_store.get("02") is None


@pytest.mark.asyncio
async def test_update_merges_fields(sql_store):
    await sql_store.set("01", {"status": "Available", "plate": ""})
    await sql_store.update("01", {"status": "Reserved", "plate": "ABC123"})
    await sql_store.update("01", {"paymentStatus": "Paid"})

    assert await sql_store.get("01") == {
        "status": "Reserved",
        "plate": "ABC123",
        "paymentStatus": "Paid",
    }


@pytest.mark.asyncio
async def test_update_creates_missing_document(sql_store):
    await sql_store.update("tickets/T-1", {"used": True})
    assert await sql_store.get("tickets/T-1") == {"used": True}


@pytest.mark.asyncio
async def test_parent_path_assembles_children(sql_store):
    await sql_store.set("reservations/01", {"plate": "ABC123", "status": "Paid"})
    await sql_store.set("reservations/02", {"plate": "XYZ789", "status": "Pending"})

    assert await sql_store.get("reservations") == {
        "01": {"plate": "ABC123", "status": "Paid"},
        "02": {"plate": "XYZ789", "status": "Pending"},
    }


@pytest.mark.asyncio
async def test_child_path_reads_into_ancestor_document(sql_store):
    await sql_store.set("tickets", {"T-9": {"slot": "03", "used": False}})
    assert await sql_store.get("tickets/T-9") == {"slot": "03", "used": False}
    assert await sql_store.get("tickets/T-9/slot") == "03"
    assert await sql_store.get("tickets/T-10") is None


@pytest.mark.asyncio
async def test_update_merges_into_ancestor_document(sql_store):
    await sql_store.set(
        "tickets",
        {"T1": {"slot": "01", "plate": "ABC123", "type": "walkin", "used": False}},
    )
    await sql_store.update("tickets/T1", {"used": True, "usedAt": "2025-03-01T09:00:00Z"})

    expected = {
        "slot": "01",
        "plate": "ABC123",
        "type": "walkin",
        "used": True,
        "usedAt": "2025-03-01T09:00:00Z",
    }
    assert await sql_store.get("tickets/T1") == expected
    assert (await sql_store.get("tickets"))["T1"] == expected


@pytest.mark.asyncio
async def test_set_and_remove_inside_ancestor_document(sql_store):
    await sql_store.set("tickets", {"T1": {"used": False}})
    await sql_store.set("tickets/T2", {"used": True})
    assert await sql_store.get("tickets") == {"T1": {"used": False}, "T2": {"used": True}}

    await sql_store.remove("tickets/T1")
    assert await sql_store.get("tickets") == {"T2": {"used": True}}
    assert await sql_store.get("tickets/T1") is None


@pytest.mark.asyncio
async def test_update_on_parent_folds_child_rows(sql_store):
    await sql_store.set("reservations/01", {"plate": "ABC123", "status": "Paid"})
    await sql_store.update("reservations", {"02": {"plate": "XYZ789", "status": "Pending"}})

    assert await sql_store.get("reservations/01") == {"plate": "ABC123", "status": "Paid"}
    assert await sql_store.get("reservations/02") == {"plate": "XYZ789", "status": "Pending"}


@pytest.mark.asyncio
async def test_remove_deletes_subtree(sql_store):
    await sql_store.set("walk-in-bookings/WALKIN_01_1", {"status": "Pending"})
    await sql_store.set("walk-in-bookings/WALKIN_01_2", {"status": "Paid"})
    await sql_store.remove("walk-in-bookings")

    assert await sql_store.get("walk-in-bookings") is None
    assert await sql_store.get("walk-in-bookings/WALKIN_01_2") is None


@pytest.mark.asyncio
async def test_set_none_deletes(sql_store):
    await sql_store.set("reservations/01", {"status": "Pending"})
    await sql_store.set("reservations/01", None)
    assert await sql_store.get("reservations/01") is None


@pytest.mark.asyncio
async def test_like_wildcards_are_literal(sql_store):
    await sql_store.set("slot_a/1", {"slot": "01"})
    await sql_store.set("slotxa/1", {"slot": "02"})
    await sql_store.remove("slot_a")

    assert await sql_store.get("slot_a/1") is None
    assert await sql_store.get("slotxa/1") == {"slot": "02"}


@pytest.mark.asyncio
async def test_ping(sql_store):
    await sql_store.ping()


def test_deadlock_detection():
    deadlock = OperationalError("UPDATE documents", {}, Exception("(1213, 'Deadlock found')"))
    other = OperationalError("UPDATE documents", {}, Exception("(1146, 'Table missing')"))
    assert is_deadlock_error(deadlock)
    assert not is_deadlock_error(other)
    assert not is_deadlock_error(ValueError("1213"))


@pytest.mark.asyncio
async def test_retry_on_deadlock_recovers():
    attempts = []

    async def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise OperationalError("UPDATE documents", {}, Exception("(1205, 'Lock wait timeout')"))
        return "ok"

    assert await retry_on_deadlock(flaky, max_attempts=3, base_delay=0) == "ok"
    assert len(attempts) == 3


@pytest.mark.asyncio
async def test_retry_gives_up_on_other_errors():
    attempts = []

    async def broken():
        attempts.append(1)
        raise OperationalError("SELECT 1", {}, Exception("(2003, 'Cannot connect')"))

    with pytest.raises(OperationalError):
        await retry_on_deadlock(broken, max_attempts=3, base_delay=0)
    assert len(attempts) == 1
