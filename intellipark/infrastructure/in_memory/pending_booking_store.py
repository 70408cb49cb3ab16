from intellipark.application.interfaces.pending_booking_store import PendingBookingStore
from intellipark.domain.entities.pending_booking import PendingBooking


class InMemoryPendingBookingStore(PendingBookingStore):
    """Process-local staging table; lost on restart."""

    def __init__(self) -> None:
        self._bookings: dict[str, PendingBooking] = {}

    async def put(self, external_id: str, booking: PendingBooking) -> None:
        self._bookings[external_id] = booking

    async def get(self, external_id: str) -> PendingBooking | None:
        return self._bookings.get(external_id)

    async def remove(self, external_id: str) -> None:
        self._bookings.pop(external_id, None)

    def __len__(self) -> int:
        return len(self._bookings)
