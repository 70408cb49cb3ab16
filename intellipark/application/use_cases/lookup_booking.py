from intellipark.api.schemas.parking import BookingResponse
from intellipark.application.interfaces.document_store import DocumentStore
from intellipark.application.paths import reservation_path, walk_in_booking_path
from intellipark.domain.errors import BookingNotFoundError

WALK_IN_MARKER = "WALKIN"


class LookupBookingUseCase:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def execute(self, external_id: str) -> BookingResponse:
        if WALK_IN_MARKER in external_id:
            path = walk_in_booking_path(external_id)
        else:
            path = reservation_path(external_id)

        booking = await self._store.get(path)
        if not isinstance(booking, dict) or not booking:
            raise BookingNotFoundError(external_id)
        return BookingResponse(booking=booking)
