"""Entities of the parking domain."""

from intellipark.domain.entities.pending_booking import BookingType, PendingBooking
from intellipark.domain.entities.reservation import Reservation, ReservationStatus
from intellipark.domain.entities.slot import SlotStatus, empty_slot_fields
from intellipark.domain.entities.ticket import Ticket, TicketType

__all__ = [
    "BookingType",
    "PendingBooking",
    "Reservation",
    "ReservationStatus",
    "SlotStatus",
    "empty_slot_fields",
    "Ticket",
    "TicketType",
]
