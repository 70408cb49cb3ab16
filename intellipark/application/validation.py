"""Ordered validation of booking intake requests."""

import re

from intellipark.api.schemas.parking import CreateInvoiceRequest
from intellipark.domain.errors import MissingFieldError, TariffMismatchError, ValidationError
from intellipark.domain.value_objects.tariff import Tariff

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PLATE_PATTERN = re.compile(r"[A-Za-z]{3}[0-9]{3}")
SLOT_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

# top-level collections sharing the key space with slot documents
RESERVED_SLOT_NAMES = frozenset({"reservations", "tickets", "pending-bookings", "walk-in-bookings"})

ALWAYS_REQUIRED = ("slot", "email", "plate", "vehicle", "amount")
WEBSITE_REQUIRED = ("time", "name")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(email))


def is_valid_plate(plate: str) -> bool:
    return bool(PLATE_PATTERN.fullmatch(plate))


def is_valid_slot(slot: str) -> bool:
    return bool(SLOT_PATTERN.fullmatch(slot)) and slot.lower() not in RESERVED_SLOT_NAMES


def validate_slot(slot: str) -> None:
    """Slot codes are used as store keys; only a single plain segment is accepted."""
    if not is_valid_slot(slot):
        raise ValidationError("slot", "Invalid slot")


def validate_booking_request(request: CreateInvoiceRequest, tariff: Tariff) -> None:
    """
    Reject a booking request before any state is written.

    Checks run in a fixed order and the first failure wins: field presence,
    slot code, tariff, email shape, plate shape. Slot availability is checked
    separately against the store.
    """
    required = ALWAYS_REQUIRED if request.is_walk_in else ALWAYS_REQUIRED + WEBSITE_REQUIRED
    for field in required:
        if not getattr(request, field):
            raise MissingFieldError(field)

    validate_slot(request.slot)

    if not tariff.accepts(request.vehicle, request.amount):
        raise TariffMismatchError(request.vehicle, tariff.amount_for(request.vehicle))

    if not is_valid_email(request.email):
        raise ValidationError("email", "Invalid email format")

    if not is_valid_plate(request.plate):
        raise ValidationError(
            "plate", "Plate number must be in format ABC123 (3 letters + 3 digits)"
        )
