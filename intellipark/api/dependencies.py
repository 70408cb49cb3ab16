import logging
from functools import lru_cache
from typing import Any

from fastapi import Depends

from intellipark.application.interfaces.clock import Clock, SystemClock
from intellipark.application.interfaces.document_store import DocumentStore
from intellipark.application.interfaces.payment_gateway import PaymentGateway
from intellipark.application.interfaces.pending_booking_store import PendingBookingStore
from intellipark.application.use_cases.create_invoice import CreateInvoiceUseCase
from intellipark.application.use_cases.exit_slot import ExitSlotUseCase
from intellipark.application.use_cases.handle_payment_webhook import HandlePaymentWebhookUseCase
from intellipark.application.use_cases.lookup_booking import LookupBookingUseCase
from intellipark.application.use_cases.verify_exit import VerifyExitByPlateUseCase
from intellipark.config import Settings, get_settings
from intellipark.domain.entities.slot import initial_slots
from intellipark.infrastructure.db.document_store_sql import DocumentStoreSQL
from intellipark.infrastructure.db.engine import build_engine, build_sessionmaker
from intellipark.infrastructure.gateways.xendit_gateway import XenditGateway
from intellipark.infrastructure.in_memory.document_store import InMemoryDocumentStore
from intellipark.infrastructure.in_memory.payment_gateway import StubPaymentGateway
from intellipark.infrastructure.in_memory.pending_booking_store import InMemoryPendingBookingStore
from intellipark.infrastructure.locks import SlotLockRegistry
from intellipark.infrastructure.staging import DocumentPendingBookingStore

logger = logging.getLogger(__name__)


def _payment_gateway(settings: Settings) -> PaymentGateway:
    if settings.xendit_secret_key:
        return XenditGateway(
            secret_key=settings.xendit_secret_key,
            base_url=settings.xendit_base_url,
            timeout_seconds=settings.xendit_timeout_seconds,
        )
    logger.warning("XENDIT_SECRET_KEY not set, invoices are issued by the stub gateway")
    return StubPaymentGateway()


def _pending_bookings(settings: Settings, store: DocumentStore) -> PendingBookingStore:
    if settings.durable_pending_bookings:
        return DocumentPendingBookingStore(store)
    return InMemoryPendingBookingStore()


def build_bundle(
    settings: Settings,
    store: DocumentStore,
    payment_gateway: PaymentGateway | None = None,
    pending_bookings: PendingBookingStore | None = None,
    clock: Clock | None = None,
) -> dict[str, Any]:
    """Assemble the process-wide collaborators shared by every request."""
    return {
        "settings": settings,
        "store": store,
        "pending_bookings": pending_bookings or _pending_bookings(settings, store),
        "payment_gateway": payment_gateway or _payment_gateway(settings),
        "clock": clock or SystemClock(),
        "slot_locks": SlotLockRegistry(),
    }


@lru_cache(maxsize=1)
def _in_memory_bundle() -> dict[str, Any]:
    settings = get_settings()
    store = InMemoryDocumentStore(initial_slots(settings.slot_count))
    return build_bundle(settings, store)


@lru_cache(maxsize=1)
def _sql_bundle() -> dict[str, Any]:
    settings = get_settings()
    engine = build_engine(settings)
    store = DocumentStoreSQL(build_sessionmaker(engine))
    bundle = build_bundle(settings, store)
    bundle["engine"] = engine
    return bundle


def get_bundle(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    if settings.use_in_memory:
        return _in_memory_bundle()
    return _sql_bundle()


def build_use_cases(bundle: dict[str, Any]) -> dict[str, Any]:
    store = bundle["store"]
    return {
        "create_invoice": CreateInvoiceUseCase(
            store=store,
            pending_bookings=bundle["pending_bookings"],
            payment_gateway=bundle["payment_gateway"],
            clock=bundle["clock"],
            slot_locks=bundle["slot_locks"],
            settings=bundle["settings"],
        ),
        "handle_webhook": HandlePaymentWebhookUseCase(
            store=store,
            pending_bookings=bundle["pending_bookings"],
            clock=bundle["clock"],
            slot_locks=bundle["slot_locks"],
        ),
        "exit_slot": ExitSlotUseCase(
            store=store,
            clock=bundle["clock"],
            slot_locks=bundle["slot_locks"],
        ),
        "verify_exit": VerifyExitByPlateUseCase(store=store),
        "lookup_booking": LookupBookingUseCase(store=store),
    }


def get_use_cases(bundle: dict[str, Any] = Depends(get_bundle)) -> dict[str, Any]:
    return build_use_cases(bundle)
