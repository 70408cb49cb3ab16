import asyncio
import json
import logging
from typing import Any

import httpx

from intellipark.application.interfaces.payment_gateway import InvoiceRequest, PaymentGateway
from intellipark.domain.errors import PaymentGatewayError
from intellipark.infrastructure.circuit_breaker import CircuitBreakerError, xendit_breaker

logger = logging.getLogger(__name__)

INVOICES_PATH = "/v2/invoices"


class XenditGateway(PaymentGateway):
    def __init__(
        self,
        secret_key: str | None,
        base_url: str = "https://api.xendit.co",
        timeout_seconds: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Xendit invoice client.

        Args:
            secret_key: Xendit secret API key, sent as the basic-auth username.
            base_url: API root, overridable for sandboxes and tests.
            timeout_seconds: Per-request timeout.
            transport: Optional httpx transport (tests use ``httpx.MockTransport``).
        """
        self._secret_key = secret_key or ""
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._transport = transport

    def _post(self, payload: dict[str, Any]) -> httpx.Response:
        with httpx.Client(
            base_url=self._base_url,
            auth=(self._secret_key, ""),
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            response = client.post(INVOICES_PATH, json=payload)
        # Only server-side failures count against the breaker
        if response.status_code >= 500:
            response.raise_for_status()
        return response

    async def create_invoice(self, request: InvoiceRequest) -> dict[str, Any]:
        """
        Create a hosted invoice, protected by the circuit breaker.

        Raises:
            PaymentGatewayError: Xendit answered with an ``error_code``.
            CircuitBreakerError: Too many recent transport failures.
            httpx.HTTPError: Network failure or 5xx answer.
        """
        payload = request.to_payload()
        try:
            response = await asyncio.to_thread(xendit_breaker.call, self._post, payload)
        except CircuitBreakerError:
            logger.error(
                "Xendit circuit breaker is open - service unavailable",
                extra={"external_id": request.external_id},
            )
            raise
        except httpx.HTTPError as exc:
            logger.error(
                "Xendit HTTP error",
                exc_info=exc,
                extra={"external_id": request.external_id},
            )
            raise

        try:
            invoice = response.json()
        except json.JSONDecodeError:
            invoice = {"error_code": "INVALID_RESPONSE", "message": response.text}

        if not isinstance(invoice, dict):
            invoice = {"error_code": "INVALID_RESPONSE", "message": str(invoice)}

        if invoice.get("error_code") or response.status_code >= 400:
            logger.error(
                "Xendit rejected invoice",
                extra={
                    "external_id": request.external_id,
                    "error_code": invoice.get("error_code"),
                    "http_status": response.status_code,
                },
            )
            raise PaymentGatewayError(
                invoice.get("message") or invoice.get("error_code") or response.text
            )

        logger.info(
            "Xendit invoice created",
            extra={"external_id": request.external_id, "invoice_id": invoice.get("id")},
        )
        return invoice
