from intellipark.api.schemas.parking import (
    BookingResponse,
    CreateInvoiceRequest,
    CreateInvoiceResponse,
    ErrorResponse,
    ExitRequest,
    ExitResponse,
    VerifyExitRequest,
    VerifyExitResponse,
    XenditWebhookEvent,
)

__all__ = [
    "BookingResponse",
    "CreateInvoiceRequest",
    "CreateInvoiceResponse",
    "ErrorResponse",
    "ExitRequest",
    "ExitResponse",
    "VerifyExitRequest",
    "VerifyExitResponse",
    "XenditWebhookEvent",
]
