from typing import Any
from uuid import uuid4

from intellipark.application.interfaces.payment_gateway import InvoiceRequest, PaymentGateway
from intellipark.domain.errors import PaymentGatewayError


class StubPaymentGateway(PaymentGateway):
    """
    Gateway double that issues invoices without any network call.

    Set ``fail_with`` to a gateway error message to simulate a rejected
    invoice; every request is recorded in ``requests``.
    """

    def __init__(self, fail_with: str | None = None) -> None:
        self.fail_with = fail_with
        self.requests: list[InvoiceRequest] = []

    async def create_invoice(self, request: InvoiceRequest) -> dict[str, Any]:
        self.requests.append(request)
        if self.fail_with:
            raise PaymentGatewayError(self.fail_with)
        invoice_id = uuid4().hex[:24]
        return {
            "id": invoice_id,
            "external_id": request.external_id,
            "status": "PENDING",
            "amount": request.amount,
            "currency": request.currency,
            "description": request.description,
            "payer_email": request.payer_email,
            "invoice_url": f"https://checkout-staging.xendit.co/web/{invoice_id}",
        }
