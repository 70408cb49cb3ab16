from intellipark.domain.entities.pending_booking import PendingBooking


class PendingBookingStore:
    """Staging table from invoice correlation id to the booking that produced it."""

    async def put(self, external_id: str, booking: PendingBooking) -> None:
        raise NotImplementedError

    async def get(self, external_id: str) -> PendingBooking | None:
        raise NotImplementedError

    async def remove(self, external_id: str) -> None:
        raise NotImplementedError
