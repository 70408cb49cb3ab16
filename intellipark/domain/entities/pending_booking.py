"""Staged booking payload awaiting payment confirmation."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class BookingType(str, Enum):
    WALK_IN = "walk-in"
    WEBSITE = "website-booking"


@dataclass
class PendingBooking:
    """
    Everything needed to materialise a reservation once its invoice is paid.

    Keyed by the invoice correlation id (``externalId``) in the staging table.
    """

    slot: str
    email: str
    plate: str
    vehicle: str
    amount: int | float
    timestamp: str
    type: BookingType
    name: str | None = None
    time: str | None = None

    @property
    def is_walk_in(self) -> bool:
        return self.type == BookingType.WALK_IN

    def to_document(self) -> dict[str, Any]:
        document = asdict(self)
        document["type"] = self.type.value
        if self.is_walk_in:
            document.pop("name")
            document.pop("time")
        return document

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "PendingBooking":
        return cls(
            slot=document["slot"],
            email=document["email"],
            plate=document["plate"],
            vehicle=document["vehicle"],
            amount=document["amount"],
            timestamp=document["timestamp"],
            type=BookingType(document["type"]),
            name=document.get("name"),
            time=document.get("time"),
        )
