from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt

WALK_IN = "walk-in"


class CreateInvoiceRequest(BaseModel):
    """
    Booking intake from the kiosk or the website.

    Every field is optional at the schema level; presence is checked by the
    booking validator so each missing field gets its own message.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: str | None = None
    plate: str | None = None
    vehicle: str | None = None
    time: str | None = None
    slot: str | None = None
    type: str | None = None
    # JSON numbers only; "50" is not a tariff amount
    amount: StrictInt | StrictFloat | None = None

    @property
    def is_walk_in(self) -> bool:
        return self.type == WALK_IN


class CreateInvoiceResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    invoice_url: str | None = Field(alias="invoiceUrl")
    external_id: str = Field(alias="externalId")
    amount: int | float
    vehicle: str
    invoice: dict[str, Any]


class XenditWebhookEvent(BaseModel):
    """Invoice callback; only the consumed fields are declared."""

    model_config = ConfigDict(extra="allow")

    external_id: str | None = None
    status: str | None = None
    amount: int | float | None = None
    id: str | None = None


class ExitRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    slot: str | None = None
    plate: str | None = None
    exit_time: str | None = Field(default=None, alias="exitTime")
    ticket_id: str | None = Field(default=None, alias="ticketId")


class ExitResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Gate opened"
    exit_time: str = Field(alias="exitTime")
    duration: str
    slot: str
    plate: str


class VerifyExitRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    plate: str | None = None


class VerifyExitResponse(BaseModel):
    success: bool = True
    slot: str
    reservation: dict[str, Any]
    message: str = "Reservation verified"


class BookingResponse(BaseModel):
    success: bool = True
    booking: dict[str, Any]


class ErrorResponse(BaseModel):
    error: str
    details: Any = None
