"""
Pytest configuration and shared fixtures.

Every test gets a fresh in-memory bundle (document store seeded with three
empty slots, stub payment gateway, fixed clock) wired into the app through
``app.dependency_overrides``.
"""

from datetime import datetime, timezone
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient

from intellipark.api.dependencies import build_bundle, get_bundle
from intellipark.application.interfaces.clock import FakeClock
from intellipark.config import Settings, get_settings
from intellipark.domain.entities.slot import initial_slots
from intellipark.infrastructure.circuit_breaker import xendit_breaker
from intellipark.infrastructure.in_memory import InMemoryDocumentStore, StubPaymentGateway
from intellipark.main import app

START = datetime(2025, 3, 1, 8, 0, 0, tzinfo=timezone.utc)


def read_path(store: InMemoryDocumentStore, path: str) -> Any:
    """Synchronous peek into the in-memory store for assertions."""
    node: Any = store.root
    for segment in path.strip("/").split("/"):
        if not isinstance(node, dict):
            return None
        node = node.get(segment)
    return node


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================

@pytest.fixture
def settings() -> Settings:
    return Settings(
        use_in_memory=True,
        durable_pending_bookings=True,
        xendit_callback_token=None,
        XENDIT_SECRET_KEY=None,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(START)


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(initial_slots(3))


@pytest.fixture
def gateway() -> StubPaymentGateway:
    return StubPaymentGateway()


@pytest.fixture
def bundle(settings, store, gateway, clock) -> dict[str, Any]:
    return build_bundle(settings, store, payment_gateway=gateway, clock=clock)


@pytest.fixture
def client(bundle, settings) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_bundle] = lambda: bundle
    app.dependency_overrides[get_settings] = lambda: settings

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# PAYLOADS
# ============================================================================

@pytest.fixture
def walk_in_payload() -> dict[str, Any]:
    return {
        "type": "walk-in",
        "slot": "01",
        "email": "driver@example.com",
        "plate": "ABC123",
        "vehicle": "Sedan",
        "amount": 50,
    }


@pytest.fixture
def website_payload() -> dict[str, Any]:
    return {
        "slot": "02",
        "name": "Juan Dela Cruz",
        "email": "juan@example.com",
        "plate": "XYZ789",
        "vehicle": "Motorcycle",
        "amount": 30,
        "time": "14:30",
    }


# ============================================================================
# HOOKS
# ============================================================================

@pytest.fixture(autouse=True)
def reset_circuit_breakers():
    """Breaker state is module-global; keep tests independent."""
    xendit_breaker.close()
    yield
    xendit_breaker.close()
