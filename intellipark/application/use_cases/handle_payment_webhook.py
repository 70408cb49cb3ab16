import logging

from intellipark.api.schemas.parking import XenditWebhookEvent
from intellipark.application.interfaces.clock import Clock
from intellipark.application.interfaces.document_store import DocumentStore
from intellipark.application.interfaces.pending_booking_store import PendingBookingStore
from intellipark.application.paths import reservation_path, walk_in_booking_path
from intellipark.domain.entities.pending_booking import PendingBooking
from intellipark.domain.entities.reservation import ReservationStatus
from intellipark.domain.entities.slot import SlotStatus, empty_slot_fields
from intellipark.infrastructure.locks import SlotLockRegistry

STATUS_PAID = "PAID"
STATUS_EXPIRED = "EXPIRED"
STATUS_FAILED = "FAILED"

CANCEL_REASONS = {
    STATUS_EXPIRED: "Payment timeout",
    STATUS_FAILED: "Payment failed",
}


class HandlePaymentWebhookUseCase:
    """
    Reconcile an invoice callback with the reservation it paid for.

    Delivery is at-least-once and may be out of order. The staged booking is
    the completion marker: once it has been removed, replays are no-ops.
    """

    def __init__(
        self,
        store: DocumentStore,
        pending_bookings: PendingBookingStore,
        clock: Clock,
        slot_locks: SlotLockRegistry,
    ) -> None:
        self._store = store
        self._pending_bookings = pending_bookings
        self._clock = clock
        self._slot_locks = slot_locks
        self._logger = logging.getLogger(__name__)

    async def execute(self, event: XenditWebhookEvent) -> None:
        if event.status == STATUS_PAID:
            await self._confirm_payment(event)
        elif event.status in CANCEL_REASONS:
            await self._release_unpaid(event)
        else:
            self._logger.info(
                "Xendit webhook ignored",
                extra={"external_id": event.external_id, "invoice_status": event.status},
            )

    async def _staged(self, external_id: str | None) -> PendingBooking | None:
        if not external_id:
            return None
        return await self._pending_bookings.get(external_id)

    async def _owns_slot(self, external_id: str, booking: PendingBooking) -> bool:
        reservation = await self._store.get(reservation_path(booking.slot))
        if isinstance(reservation, dict) and reservation.get("externalId") == external_id:
            return True
        self._logger.warning(
            "Staged booking no longer matches the slot reservation, discarding",
            extra={"external_id": external_id, "slot": booking.slot},
        )
        await self._pending_bookings.remove(external_id)
        return False

    async def _confirm_payment(self, event: XenditWebhookEvent) -> None:
        external_id = event.external_id
        booking = await self._staged(external_id)
        if booking is None:
            self._logger.warning(
                "No pending reservation found for paid invoice",
                extra={"external_id": external_id},
            )
            return

        async with self._slot_locks.hold(booking.slot):
            # a concurrent duplicate may have finished while we waited
            if await self._staged(external_id) is None:
                return
            if not await self._owns_slot(external_id, booking):
                return

            payment_time = self._clock.iso_now()
            amount = event.amount if event.amount is not None else booking.amount
            await self._store.update(
                reservation_path(booking.slot),
                {
                    "status": ReservationStatus.PAID.value,
                    "amount": amount,
                    "invoiceId": event.id,
                    "paymentTime": payment_time,
                    "paymentConfirmed": True,
                },
            )
            await self._store.update(
                booking.slot,
                {
                    "status": SlotStatus.RESERVED.value,
                    "reserved": True,
                    "paymentStatus": ReservationStatus.PAID.value,
                },
            )
            if booking.is_walk_in:
                snapshot_path = walk_in_booking_path(external_id)
                if await self._store.get(snapshot_path) is not None:
                    await self._store.update(
                        snapshot_path,
                        {
                            "status": ReservationStatus.PAID.value,
                            "invoiceId": event.id,
                            "paymentTime": payment_time,
                        },
                    )
            await self._pending_bookings.remove(external_id)

        self._logger.info(
            "Payment confirmed",
            extra={
                "external_id": external_id,
                "slot": booking.slot,
                "booking_type": booking.type.value,
                "invoice_id": event.id,
            },
        )

    async def _release_unpaid(self, event: XenditWebhookEvent) -> None:
        external_id = event.external_id
        booking = await self._staged(external_id)
        if booking is None:
            return
        if booking.is_walk_in:
            # walk-in slots are released by the kiosk, not by the callback
            self._logger.info(
                "Unpaid walk-in invoice left in place",
                extra={"external_id": external_id, "invoice_status": event.status},
            )
            return

        async with self._slot_locks.hold(booking.slot):
            if await self._staged(external_id) is None:
                return
            if not await self._owns_slot(external_id, booking):
                return

            await self._store.update(
                reservation_path(booking.slot),
                {
                    "status": ReservationStatus.CANCELLED.value,
                    "cancelReason": CANCEL_REASONS[event.status],
                },
            )
            await self._store.update(booking.slot, empty_slot_fields())
            await self._pending_bookings.remove(external_id)

        self._logger.warning(
            "Released slot after unpaid invoice",
            extra={"external_id": external_id, "slot": booking.slot, "invoice_status": event.status},
        )
