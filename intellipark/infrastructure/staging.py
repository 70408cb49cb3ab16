"""Durable staging table kept in the document store."""

import logging

from intellipark.application.interfaces.document_store import DocumentStore
from intellipark.application.interfaces.pending_booking_store import PendingBookingStore
from intellipark.domain.entities.pending_booking import PendingBooking

logger = logging.getLogger(__name__)

PENDING_BOOKINGS_NAMESPACE = "pending-bookings"
STAGED_STATUS = "Pending"


class DocumentPendingBookingStore(PendingBookingStore):
    """
    Stage booking payloads under ``pending-bookings/{externalId}``.

    Any process sharing the document store can complete a webhook for an
    invoice created by another, and a restart no longer orphans Pending
    reservations.
    """

    def __init__(self, store: DocumentStore, namespace: str = PENDING_BOOKINGS_NAMESPACE) -> None:
        self._store = store
        self._namespace = namespace

    def _path(self, external_id: str) -> str:
        return f"{self._namespace}/{external_id}"

    async def put(self, external_id: str, booking: PendingBooking) -> None:
        document = booking.to_document()
        document["status"] = STAGED_STATUS
        await self._store.set(self._path(external_id), document)

    async def get(self, external_id: str) -> PendingBooking | None:
        if not external_id:
            return None
        document = await self._store.get(self._path(external_id))
        if not isinstance(document, dict):
            return None
        try:
            return PendingBooking.from_document(document)
        except (KeyError, ValueError):
            logger.warning(
                "Discarding malformed staged booking",
                extra={"external_id": external_id},
            )
            return None

    async def remove(self, external_id: str) -> None:
        await self._store.remove(self._path(external_id))
