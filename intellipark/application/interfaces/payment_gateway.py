from dataclasses import dataclass
from typing import Any


@dataclass
class InvoiceRequest:
    external_id: str
    amount: int | float
    currency: str
    description: str
    payer_email: str
    success_redirect_url: str
    failure_redirect_url: str
    invoice_duration: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "external_id": self.external_id,
            "amount": self.amount,
            "currency": self.currency,
            "description": self.description,
            "payer_email": self.payer_email,
            "success_redirect_url": self.success_redirect_url,
            "failure_redirect_url": self.failure_redirect_url,
            "invoice_duration": self.invoice_duration,
        }


class PaymentGateway:
    async def create_invoice(self, request: InvoiceRequest) -> dict[str, Any]:
        """
        Create a hosted invoice and return the gateway's invoice document.

        Raises:
            PaymentGatewayError: When the gateway rejects the request.
        """
        raise NotImplementedError
