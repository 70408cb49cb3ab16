from intellipark.infrastructure.in_memory.document_store import InMemoryDocumentStore
from intellipark.infrastructure.in_memory.payment_gateway import StubPaymentGateway
from intellipark.infrastructure.in_memory.pending_booking_store import InMemoryPendingBookingStore

__all__ = [
    "InMemoryDocumentStore",
    "InMemoryPendingBookingStore",
    "StubPaymentGateway",
]
