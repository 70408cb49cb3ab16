"""Domain exceptions for the parking reservation lifecycle."""

from typing import Any


class DomainError(Exception):
    """Base class for every domain error."""

    status_code: int = 400

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: Any = None,
        status_code: int | None = None,
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


# === Request errors ===


class MissingFieldError(DomainError):
    """A required request field is absent or empty."""

    def __init__(self, field: str):
        super().__init__(message=f"Missing {field} parameter", code="MISSING_FIELD")
        self.field = field


class ValidationError(DomainError):
    """A request field is present but malformed."""

    def __init__(self, field: str, message: str):
        super().__init__(message=message, code="VALIDATION_ERROR")
        self.field = field


class TariffMismatchError(DomainError):
    """The submitted amount differs from the vehicle class tariff."""

    def __init__(self, vehicle: str, expected_amount: int):
        super().__init__(
            message=f"Invalid amount for {vehicle}. Expected ₱{expected_amount}",
            code="TARIFF_MISMATCH",
        )
        self.vehicle = vehicle
        self.expected_amount = expected_amount


# === Slot and reservation conflicts ===


class SlotUnavailableError(DomainError):
    """The slot cannot take a new booking."""

    def __init__(self, slot: str, reason: str):
        super().__init__(message=reason, code="SLOT_UNAVAILABLE")
        self.slot = slot


class ReservationNotFoundError(DomainError):
    status_code = 404

    def __init__(self, message: str = "No reservation found"):
        super().__init__(message=message, code="RESERVATION_NOT_FOUND")


class PlateMismatchError(DomainError):
    status_code = 403

    def __init__(self, expected: str | None, actual: str):
        super().__init__(message="Plate mismatch", code="PLATE_MISMATCH")
        self.expected = expected
        self.actual = actual


class BookingNotFoundError(DomainError):
    status_code = 404

    def __init__(self, external_id: str):
        super().__init__(message="Booking not found", code="BOOKING_NOT_FOUND")
        self.external_id = external_id


# === Tickets ===


class TicketNotFoundError(DomainError):
    status_code = 404

    def __init__(self, ticket_id: str):
        super().__init__(message="Invalid ticket", code="TICKET_NOT_FOUND")
        self.ticket_id = ticket_id


class TicketRejectedError(DomainError):
    """The ticket exists but may not open the exit gate."""

    status_code = 403

    def __init__(self, ticket_id: str, message: str):
        super().__init__(message=message, code="TICKET_REJECTED")
        self.ticket_id = ticket_id


# === Payment gateway ===


class PaymentGatewayError(DomainError):
    """The payment gateway refused to create the invoice."""

    def __init__(self, details: Any):
        super().__init__(message="Xendit API error", code="PAYMENT_GATEWAY_ERROR", details=details)


class WebhookAuthenticationError(DomainError):
    status_code = 403

    def __init__(self) -> None:
        super().__init__(message="Invalid callback token", code="WEBHOOK_UNAUTHORIZED")
