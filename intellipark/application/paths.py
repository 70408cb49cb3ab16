"""Key paths of the documents kept in the store."""


def reservation_path(slot: str) -> str:
    return f"reservations/{slot}"


def ticket_path(ticket_id: str) -> str:
    return f"tickets/{ticket_id}"


def walk_in_booking_path(external_id: str) -> str:
    return f"walk-in-bookings/{external_id}"


RESERVATIONS_ROOT = "reservations"
