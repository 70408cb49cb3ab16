import logging
import secrets
from typing import Any
from urllib.parse import urlencode

from intellipark.api.schemas.parking import CreateInvoiceRequest, CreateInvoiceResponse
from intellipark.application.interfaces.clock import Clock
from intellipark.application.interfaces.document_store import DocumentStore
from intellipark.application.interfaces.payment_gateway import InvoiceRequest, PaymentGateway
from intellipark.application.interfaces.pending_booking_store import PendingBookingStore
from intellipark.application.paths import reservation_path, walk_in_booking_path
from intellipark.application.validation import validate_booking_request
from intellipark.config import Settings
from intellipark.domain.entities.pending_booking import BookingType, PendingBooking
from intellipark.domain.entities.reservation import Reservation, ReservationStatus
from intellipark.domain.entities.slot import SlotStatus, empty_slot_fields
from intellipark.domain.errors import PaymentGatewayError, SlotUnavailableError
from intellipark.domain.value_objects.tariff import Tariff
from intellipark.infrastructure.locks import SlotLockRegistry

WALK_IN_PREFIX = "WALKIN"
WEBSITE_PREFIX = "WEBSITE"


class CreateInvoiceUseCase:
    def __init__(
        self,
        store: DocumentStore,
        pending_bookings: PendingBookingStore,
        payment_gateway: PaymentGateway,
        clock: Clock,
        slot_locks: SlotLockRegistry,
        settings: Settings,
    ) -> None:
        self._store = store
        self._pending_bookings = pending_bookings
        self._payment_gateway = payment_gateway
        self._clock = clock
        self._slot_locks = slot_locks
        self._settings = settings
        self._tariff = Tariff(
            motorcycle_rate=settings.motorcycle_rate,
            standard_rate=settings.standard_rate,
        )
        self._logger = logging.getLogger(__name__)

    async def execute(self, request: CreateInvoiceRequest) -> CreateInvoiceResponse:
        validate_booking_request(request, self._tariff)
        slot = request.slot

        async with self._slot_locks.hold(slot):
            previous_slot, previous_reservation = await self._ensure_available(request)

            timestamp = self._clock.iso_now()
            external_id = self._new_external_id(request)
            booking = PendingBooking(
                slot=slot,
                email=request.email,
                plate=request.plate,
                vehicle=request.vehicle,
                amount=request.amount,
                timestamp=timestamp,
                type=BookingType.WALK_IN if request.is_walk_in else BookingType.WEBSITE,
                name=None if request.is_walk_in else request.name,
                time=None if request.is_walk_in else request.time,
            )

            await self._pending_bookings.put(external_id, booking)
            reservation = Reservation.from_pending(external_id, booking)
            await self._store.set(reservation_path(slot), reservation.to_document())
            await self._store.update(slot, self._slot_fields(booking))
            if booking.is_walk_in:
                await self._store.set(
                    walk_in_booking_path(external_id),
                    {**booking.to_document(), "externalId": external_id, "status": "Pending"},
                )
            self._logger.info(
                "Slot reserved pending payment",
                extra={"slot": slot, "external_id": external_id, "booking_type": booking.type.value},
            )

            try:
                invoice = await self._payment_gateway.create_invoice(
                    self._invoice_request(external_id, booking)
                )
            except PaymentGatewayError as exc:
                self._logger.error(
                    "Invoice creation rejected, rolling back reservation",
                    extra={"slot": slot, "external_id": external_id, "details": exc.details},
                )
                await self._rollback(external_id, booking, previous_slot, previous_reservation)
                raise

        self._logger.info(
            "Invoice created",
            extra={"slot": slot, "external_id": external_id, "invoice_id": invoice.get("id")},
        )
        return CreateInvoiceResponse(
            invoice_url=invoice.get("invoice_url"),
            external_id=external_id,
            amount=request.amount,
            vehicle=request.vehicle,
            invoice=invoice,
        )

    async def _ensure_available(
        self, request: CreateInvoiceRequest
    ) -> tuple[dict[str, Any] | None, dict[str, Any] | None]:
        """
        Check the slot can take this booking; return the slot and reservation
        documents as they stand before any write, for rollback.
        """
        slot = request.slot
        slot_document = await self._store.get(slot)
        if not isinstance(slot_document, dict):
            slot_document = None
        slot_status = slot_document.get("status") if slot_document else None

        if not request.is_walk_in:
            if slot_status != SlotStatus.AVAILABLE.value:
                self._logger.warning(
                    "Slot not available for website booking",
                    extra={"slot": slot, "slot_status": slot_status},
                )
                raise SlotUnavailableError(slot, f"Slot {slot} is no longer available")
        elif slot_document is None:
            raise SlotUnavailableError(slot, f"Slot {slot} does not exist")
        elif slot_status == SlotStatus.OCCUPIED.value:
            self._logger.warning("Slot occupied", extra={"slot": slot})
            raise SlotUnavailableError(slot, f"Slot {slot} is currently occupied")

        reservation = await self._store.get(reservation_path(slot))
        if not isinstance(reservation, dict):
            reservation = None
        reservation_status = reservation.get("status") if reservation else None

        if reservation_status == ReservationStatus.PAID.value:
            self._logger.warning("Slot has a paid reservation", extra={"slot": slot})
            raise SlotUnavailableError(slot, f"Slot {slot} is already reserved and paid")

        if (
            request.is_walk_in
            and slot_status == SlotStatus.RESERVED.value
            and reservation_status == ReservationStatus.PENDING.value
        ):
            stale_id = reservation.get("externalId")
            self._logger.warning(
                "Walk-in overriding pending reservation",
                extra={"slot": slot, "stale_external_id": stale_id},
            )
            await self._store.remove(reservation_path(slot))
            if stale_id:
                # a late PAID callback for the stale invoice must not claim the slot
                await self._pending_bookings.remove(stale_id)
            reservation = None

        return slot_document, reservation

    def _new_external_id(self, request: CreateInvoiceRequest) -> str:
        prefix = WALK_IN_PREFIX if request.is_walk_in else WEBSITE_PREFIX
        return f"{prefix}_{request.slot}_{self._clock.millis()}{secrets.token_hex(2)}"

    def _slot_fields(self, booking: PendingBooking) -> dict[str, Any]:
        display_name = f"Walk-in {booking.plate}" if booking.is_walk_in else booking.name
        return {
            "status": SlotStatus.RESERVED.value,
            "reserved": True,
            "reservedBy": display_name,
            "reservationType": "Kiosk" if booking.is_walk_in else "Website",
            "vehicleType": booking.vehicle,
            "name": display_name,
            "email": booking.email,
            "plate": booking.plate,
            "vehicle": booking.vehicle,
            "time": booking.time,
            "bookedAt": booking.timestamp,
            "amount": booking.amount,
            "paymentStatus": ReservationStatus.PENDING.value,
        }

    def _invoice_request(self, external_id: str, booking: PendingBooking) -> InvoiceRequest:
        kiosk = self._settings.kiosk_base_url.rstrip("/")
        website = self._settings.website_base_url.rstrip("/")
        if booking.is_walk_in:
            description = f"Walk-in Parking ({booking.vehicle}) - {booking.slot}"
            success_query = {"slot": booking.slot, "plate": booking.plate, "vehicle": booking.vehicle}
            success_url = f"{kiosk}/payment-success.html?{urlencode(success_query)}"
            failure_url = f"{kiosk}/payment-failed.html"
        else:
            description = f"Website Reservation ({booking.vehicle}) - {booking.slot}"
            success_query = {
                "slot": booking.slot,
                "name": booking.name,
                "plate": booking.plate,
                "vehicle": booking.vehicle,
                "time": booking.time,
                "timestamp": booking.timestamp,
                "email": booking.email,
            }
            success_url = f"{website}/confirmation.html?{urlencode(success_query)}"
            failure_url = f"{website}/payment-failed.html?{urlencode({'slot': booking.slot})}"

        return InvoiceRequest(
            external_id=external_id,
            amount=booking.amount,
            currency=self._settings.invoice_currency,
            description=description,
            payer_email=booking.email,
            success_redirect_url=success_url,
            failure_redirect_url=failure_url,
            invoice_duration=self._settings.invoice_duration_seconds,
        )

    async def _rollback(
        self,
        external_id: str,
        booking: PendingBooking,
        previous_slot: dict[str, Any] | None,
        previous_reservation: dict[str, Any] | None,
    ) -> None:
        slot = booking.slot
        await self._pending_bookings.remove(external_id)

        if previous_reservation is not None:
            await self._store.set(reservation_path(slot), previous_reservation)
        else:
            await self._store.remove(reservation_path(slot))

        if booking.is_walk_in:
            await self._store.remove(walk_in_booking_path(external_id))

        if previous_slot is not None and previous_slot.get("status") == SlotStatus.AVAILABLE.value:
            await self._store.set(slot, previous_slot)
        else:
            await self._store.update(slot, empty_slot_fields())

        self._logger.info("Rolled back reservation", extra={"slot": slot, "external_id": external_id})
