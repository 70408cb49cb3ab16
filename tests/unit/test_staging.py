import pytest

from intellipark.domain.entities.pending_booking import BookingType, PendingBooking
from intellipark.infrastructure.in_memory import InMemoryDocumentStore, InMemoryPendingBookingStore
from intellipark.infrastructure.staging import DocumentPendingBookingStore

WALK_IN = PendingBooking(
    slot="04",
    email="kiosk@example.com",
    plate="JKL246",
    vehicle="Motorcycle",
    amount=30,
    timestamp="2025-03-01T08:00:00.000Z",
    type=BookingType.WALK_IN,
)

WEBSITE = PendingBooking(
    slot="05",
    email="web@example.com",
    plate="MNO135",
    vehicle="Sedan",
    amount=50,
    timestamp="2025-03-01T08:00:00.000Z",
    type=BookingType.WEBSITE,
    name="Rosa Santos",
    time="17:00",
)


def test_walk_in_document_omits_name_and_time():
    document = WALK_IN.to_document()
    assert document["type"] == "walk-in"
    assert "name" not in document
    assert "time" not in document


def test_document_round_trip_keeps_website_fields():
    assert PendingBooking.from_document(WEBSITE.to_document()) == WEBSITE


@pytest.mark.asyncio
async def test_durable_staging_survives_a_new_instance():
    store = InMemoryDocumentStore()
    await DocumentPendingBookingStore(store).put("WEBSITE_05_1", WEBSITE)

    # a second process sharing the document store sees the staged booking
    restored = await DocumentPendingBookingStore(store).get("WEBSITE_05_1")
    assert restored == WEBSITE
    assert (await store.get("pending-bookings/WEBSITE_05_1"))["status"] == "Pending"


@pytest.mark.asyncio
async def test_durable_staging_remove_and_missing():
    store = InMemoryDocumentStore()
    staging = DocumentPendingBookingStore(store)
    await staging.put("WALKIN_04_1", WALK_IN)
    await staging.remove("WALKIN_04_1")

    assert await staging.get("WALKIN_04_1") is None
    assert await staging.get("") is None


@pytest.mark.asyncio
async def test_malformed_staged_document_is_ignored():
    store = InMemoryDocumentStore({"pending-bookings": {"BROKEN": {"slot": "01"}}})
    assert await DocumentPendingBookingStore(store).get("BROKEN") is None


@pytest.mark.asyncio
async def test_in_memory_staging():
    staging = InMemoryPendingBookingStore()
    await staging.put("WALKIN_04_1", WALK_IN)
    assert len(staging) == 1
    assert await staging.get("WALKIN_04_1") is WALK_IN
    await staging.remove("WALKIN_04_1")
    await staging.remove("WALKIN_04_1")
    assert len(staging) == 0
