import logging

from intellipark.api.schemas.parking import VerifyExitResponse
from intellipark.application.interfaces.document_store import DocumentStore
from intellipark.application.paths import RESERVATIONS_ROOT
from intellipark.domain.entities.reservation import ReservationStatus
from intellipark.domain.errors import ReservationNotFoundError, ValidationError


class VerifyExitByPlateUseCase:
    """Find the paid reservation held by a plate. Read-only."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._logger = logging.getLogger(__name__)

    async def execute(self, plate: str | None) -> VerifyExitResponse:
        if not plate:
            raise ValidationError("plate", "Missing plate parameter")

        reservations = await self._store.get(RESERVATIONS_ROOT)
        if not isinstance(reservations, dict) or not reservations:
            raise ReservationNotFoundError("No active reservations found")

        # sorted so a duplicated plate always resolves to the same slot
        for slot in sorted(reservations):
            reservation = reservations[slot]
            if (
                isinstance(reservation, dict)
                and reservation.get("plate") == plate
                and reservation.get("status") == ReservationStatus.PAID.value
            ):
                self._logger.info("Reservation verified for exit", extra={"slot": slot, "plate": plate})
                return VerifyExitResponse(slot=slot, reservation=reservation)

        raise ReservationNotFoundError("No active reservation found for this plate number")
