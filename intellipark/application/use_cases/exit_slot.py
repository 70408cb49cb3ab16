import logging

from intellipark.api.schemas.parking import ExitRequest, ExitResponse
from intellipark.application.interfaces.clock import Clock
from intellipark.application.interfaces.document_store import DocumentStore
from intellipark.application.paths import reservation_path, ticket_path
from intellipark.application.validation import validate_slot
from intellipark.domain.entities.reservation import ReservationStatus
from intellipark.domain.entities.slot import empty_slot_fields
from intellipark.domain.entities.ticket import Ticket
from intellipark.domain.errors import (
    PlateMismatchError,
    ReservationNotFoundError,
    TicketNotFoundError,
    TicketRejectedError,
    ValidationError,
)
from intellipark.domain.value_objects.stay_duration import StayDuration, parse_timestamp
from intellipark.infrastructure.locks import SlotLockRegistry


class ExitSlotUseCase:
    """Free a slot when its vehicle leaves, optionally gated by a scanned ticket."""

    def __init__(self, store: DocumentStore, clock: Clock, slot_locks: SlotLockRegistry) -> None:
        self._store = store
        self._clock = clock
        self._slot_locks = slot_locks
        self._logger = logging.getLogger(__name__)

    async def execute(self, request: ExitRequest) -> ExitResponse:
        slot, plate = request.slot, request.plate
        if not slot or not plate:
            raise ValidationError("slot", "Missing slot or plate")
        validate_slot(slot)

        exit_time = request.exit_time or self._clock.iso_now()
        try:
            parse_timestamp(exit_time)
        except ValueError as exc:
            raise ValidationError("exitTime", "Invalid exitTime") from exc

        async with self._slot_locks.hold(slot):
            if request.ticket_id:
                await self._authorize_ticket(request.ticket_id, slot, plate)

            reservation = await self._store.get(reservation_path(slot))
            if not isinstance(reservation, dict):
                self._logger.warning("No reservation for slot", extra={"slot": slot})
                raise ReservationNotFoundError()

            if reservation.get("plate") != plate:
                self._logger.warning(
                    "Plate mismatch at exit",
                    extra={"slot": slot, "expected_plate": reservation.get("plate"), "plate": plate},
                )
                raise PlateMismatchError(reservation.get("plate"), plate)

            entry_time = reservation.get("timestamp") or exit_time
            if parse_timestamp(exit_time) < parse_timestamp(entry_time):
                raise ValidationError("exitTime", "exitTime is earlier than the reservation time")
            duration = StayDuration.between(entry_time, exit_time)

            await self._store.update(
                reservation_path(slot),
                {"exitTime": exit_time, "status": ReservationStatus.COMPLETED.value},
            )
            await self._store.update(slot, empty_slot_fields())
            if request.ticket_id:
                await self._store.update(
                    ticket_path(request.ticket_id), {"used": True, "usedAt": exit_time}
                )

        self._logger.info(
            "Exit recorded",
            extra={"slot": slot, "plate": plate, "duration": str(duration), "ticket_id": request.ticket_id},
        )
        return ExitResponse(
            exit_time=exit_time,
            duration=str(duration),
            slot=slot,
            plate=plate,
        )

    async def _authorize_ticket(self, ticket_id: str, slot: str, plate: str) -> None:
        document = await self._store.get(ticket_path(ticket_id))
        if not isinstance(document, dict):
            self._logger.warning("Invalid ticket", extra={"ticket_id": ticket_id})
            raise TicketNotFoundError(ticket_id)

        ticket = Ticket.from_document(ticket_id, document)
        try:
            ticket.authorize_exit(slot, plate)
        except TicketRejectedError:
            self._logger.warning(
                "Ticket rejected at exit",
                extra={"ticket_id": ticket_id, "ticket_type": ticket.type and ticket.type.value},
            )
            raise
