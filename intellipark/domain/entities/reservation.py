"""Reservation entity - one active reservation per slot."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from intellipark.domain.entities.pending_booking import PendingBooking


class ReservationStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"


@dataclass
class Reservation:
    """
    A requester bound to a slot, stored at ``reservations/{slot}``.

    Created Pending at invoice time, then moved to Paid by the payment
    webhook, to Cancelled on invoice expiry/failure, or to Completed on exit.
    """

    slot: str
    email: str
    plate: str
    vehicle: str
    amount: int | float
    timestamp: str
    external_id: str
    status: ReservationStatus = ReservationStatus.PENDING
    walk_in: bool = False
    name: str | None = None
    booking_time: str | None = None
    exit_time: str | None = None

    @property
    def reserved_via(self) -> str:
        return "Kiosk" if self.walk_in else "Website"

    @classmethod
    def from_pending(cls, external_id: str, booking: PendingBooking) -> "Reservation":
        return cls(
            slot=booking.slot,
            email=booking.email,
            plate=booking.plate,
            vehicle=booking.vehicle,
            amount=booking.amount,
            timestamp=booking.timestamp,
            external_id=external_id,
            walk_in=booking.is_walk_in,
            name=booking.name,
            booking_time=booking.time,
        )

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "email": self.email,
            "plate": self.plate,
            "vehicle": self.vehicle,
            "slot": self.slot,
            "status": self.status.value,
            "amount": self.amount,
            "timestamp": self.timestamp,
            "reservedVia": self.reserved_via,
            "exitTime": self.exit_time,
            "externalId": self.external_id,
        }
        if self.walk_in:
            document["type"] = "walk-in"
        else:
            document["name"] = self.name
            document["bookingTime"] = self.booking_time
            document["invoiceCreated"] = self.timestamp
        return document
