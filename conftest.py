"""Shared fixtures for the hotel back office test suite"""
import pytest
from datetime import date
from decimal import Decimal
from fastapi.testclient import TestClient

from application.billing import BillingEngine, ResidencyReconciler, ReconciliationService
from application.locks import KeyedLocks
from application.reports import OccupancyReportBuilder
from application.services import (
    RoomService, GuestService, EmployeeService, CleaningScheduleService,
    InvoiceService, AccountService
)
from config import Settings
from domain.clock import FixedClock
from domain.entities import Room, Guest
from domain.enums import RoomCategory
from infrastructure.repositories.in_memory_repositories import InMemoryEntityStore
from main import create_app


# ============================================================================
# DOMAIN FIXTURES
# ============================================================================

@pytest.fixture
def clock():
    return FixedClock(date(2024, 1, 5))


@pytest.fixture
def sample_room():
    return Room(
        room_id=1,
        room_number=101,
        floor=1,
        category=RoomCategory.DOUBLE,
        price_per_day=Decimal("3500.00"),
        phone_number="+1-555-0101"
    )


@pytest.fixture
def sample_guest():
    return Guest(
        guest_id=1,
        passport_number="AB123456",
        full_name="Alice Moreau",
        city="Lyon",
        check_in_date=date(2024, 1, 1),
        days_reserved=10,
        room_id=1
    )


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================

@pytest.fixture
def store():
    return InMemoryEntityStore()


@pytest.fixture
def locks():
    return KeyedLocks()


@pytest.fixture
def room_service(store):
    return RoomService(store)


@pytest.fixture
def guest_service(store, locks):
    return GuestService(store, locks)


@pytest.fixture
def employee_service(store):
    return EmployeeService(store)


@pytest.fixture
def schedule_service(store):
    return CleaningScheduleService(store)


@pytest.fixture
def invoice_service(store):
    return InvoiceService(store)


@pytest.fixture
def account_service(store):
    return AccountService(store)


@pytest.fixture
def reconciler(store, clock):
    return ResidencyReconciler(store, clock)


@pytest.fixture
def billing_engine(store, clock, locks):
    return BillingEngine(store, clock, locks)


@pytest.fixture
def reconciliation_service(reconciler, billing_engine):
    return ReconciliationService(reconciler, billing_engine)


@pytest.fixture
def report_builder(store, clock):
    return OccupancyReportBuilder(store, clock)


@pytest.fixture
async def double_room(room_service):
    return await room_service.create_room(
        room_number=101,
        floor=1,
        category=RoomCategory.DOUBLE,
        price_per_day=Decimal("3500.00"),
        phone_number="+1-555-0101"
    )


# ============================================================================
# API FIXTURES
# ============================================================================

@pytest.fixture
def test_settings():
    return Settings(STORAGE_BACKEND="memory", ADMIN_USERNAME="admin", ADMIN_PASSWORD="admin123")


@pytest.fixture
def app(test_settings, store, clock):
    return create_app(settings=test_settings, store=store, clock=clock)


@pytest.fixture
def client(app):
    """FastAPI test client; entering the context runs the startup hooks"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Bearer headers for the seeded admin"""
    response = client.post("/token", data={"username": "admin", "password": "admin123"})
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}
