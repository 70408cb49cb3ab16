"""Exit-gate ticket, consumable once."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from intellipark.domain.errors import TicketRejectedError


class TicketType(str, Enum):
    WALKIN = "walkin"
    RESERVATION = "reservation"


@dataclass
class Ticket:
    ticket_id: str
    slot: str | None
    plate: str | None
    type: TicketType | None = None
    used: bool = False
    entry_verified: bool = False
    status: str | None = None

    @classmethod
    def from_document(cls, ticket_id: str, document: dict[str, Any]) -> "Ticket":
        raw_type = document.get("type")
        try:
            ticket_type = TicketType(raw_type) if raw_type else None
        except ValueError:
            ticket_type = None
        return cls(
            ticket_id=ticket_id,
            slot=document.get("slot"),
            plate=document.get("plate"),
            type=ticket_type,
            used=bool(document.get("used")),
            entry_verified=bool(document.get("entryVerified")),
            status=document.get("status"),
        )

    @property
    def is_paid(self) -> bool:
        return self.status == "Paid"

    def infer_type(self) -> TicketType | None:
        """
        Classify a ticket created without an explicit type.

        Paid without an entrance check reads as a walk-in ticket; an
        entrance-verified ticket reads as a reservation ticket.
        """
        if self.type is not None:
            return self.type
        if self.is_paid and not self.entry_verified:
            return TicketType.WALKIN
        if self.entry_verified:
            return TicketType.RESERVATION
        return None

    def authorize_exit(self, slot: str, plate: str) -> None:
        """Raise TicketRejectedError unless this ticket may open the gate."""
        if self.used:
            raise TicketRejectedError(self.ticket_id, "Ticket already used")

        if self.type == TicketType.WALKIN:
            if not self.is_paid:
                raise TicketRejectedError(self.ticket_id, "Payment required")
        elif self.type == TicketType.RESERVATION:
            if not self.entry_verified:
                raise TicketRejectedError(self.ticket_id, "Please check in at entrance first")
        elif self.infer_type() is None:
            raise TicketRejectedError(self.ticket_id, "Ticket not verified")

        if self.slot != slot or self.plate != plate:
            raise TicketRejectedError(self.ticket_id, "Ticket data mismatch")
