"""Ports of the application layer."""

from intellipark.application.interfaces.clock import Clock, FakeClock, SystemClock
from intellipark.application.interfaces.document_store import DocumentStore, split_path
from intellipark.application.interfaces.payment_gateway import InvoiceRequest, PaymentGateway
from intellipark.application.interfaces.pending_booking_store import PendingBookingStore

__all__ = [
    # Stores
    "DocumentStore",
    "PendingBookingStore",
    "split_path",
    # Gateways
    "PaymentGateway",
    "InvoiceRequest",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
]
