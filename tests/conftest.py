"""
Pytest configuration and shared fixtures.

Este módulo provee fixtures reutilizables para:
- Repositorios in-memory con una propiedad sembrada
- Base de datos SQLite in-memory (aiosqlite) para pruebas transaccionales
- Cliente HTTP de prueba (FastAPI TestClient) cableado al bundle in-memory
- Constructores de payloads de webhook firmados
"""

import json
from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from typing import AsyncGenerator, Callable, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.dependencies import build_use_cases, get_use_cases
from app.application.dtos.reservation_dto import BookingRequest
from app.application.interfaces.clock import FakeClock
from app.application.interfaces.id_generator import FakeIdGenerator
from app.config import Settings
from app.domain.entities.property import BusinessUnit, RoomType
from app.infrastructure.db.tables import business_units, metadata, room_types
from app.infrastructure.gateways.paymongo_signature import build_signature_header
from app.infrastructure.in_memory import (
    InMemoryCheckoutSessionRepo,
    InMemoryGuestRepo,
    InMemoryPaymentRepo,
    InMemoryPaymongoGateway,
    InMemoryPropertyRepo,
    InMemoryReservationRepo,
    InMemoryTransactionManager,
    InMemoryWebhookEventRepo,
)
from app.main import app

BUSINESS_UNIT_ID = "0b6f4f7e-3c55-4d7a-9d0e-5b1d6f0c1a01"
ROOM_TYPE_ID = "6a1e2c3d-4b5f-4a6b-8c7d-9e0f1a2b3c01"
OTHER_BUSINESS_UNIT_ID = "0b6f4f7e-3c55-4d7a-9d0e-5b1d6f0c1a02"
WEBHOOK_SECRET = "whsk_test_secret"
FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_business_unit(**overrides) -> BusinessUnit:
    values = dict(
        id=BUSINESS_UNIT_ID,
        name="Casa Lagoon Resort",
        city="Coron",
        country="Philippines",
        primary_currency="PHP",
        is_active=True,
    )
    values.update(overrides)
    return BusinessUnit(**values)


def make_room_type(**overrides) -> RoomType:
    values = dict(
        id=ROOM_TYPE_ID,
        business_unit_id=BUSINESS_UNIT_ID,
        name="Garden Villa",
        base_rate=Decimal("5000.00"),
        max_occupancy=3,
        max_adults=2,
        max_children=2,
        is_active=True,
    )
    values.update(overrides)
    return RoomType(**values)


# ============================================================================
# FIXTURES DE DOMINIO
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(FIXED_NOW)


@pytest.fixture
def id_generator() -> FakeIdGenerator:
    return FakeIdGenerator()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        use_in_memory=True,
        paymongo_webhook_secret=WEBHOOK_SECRET,
        app_base_url="https://booking.example.com",
        paymongo_payment_method_types=["card", "gcash"],
    )


@pytest.fixture
def booking_request() -> Callable[..., BookingRequest]:
    """Solicitud del escenario base: 2 adultos, 3 noches, 15000 + 1800 + 750 = 17550."""

    def _build(**overrides) -> BookingRequest:
        values = dict(
            business_unit_id=BUSINESS_UNIT_ID,
            room_type_id=ROOM_TYPE_ID,
            first_name="Maria",
            last_name="Santos",
            email="maria@example.com",
            phone="+639171234567",
            check_in_date=date(2026, 4, 10),
            check_out_date=date(2026, 4, 13),
            adults=2,
            children=0,
            nights=3,
            subtotal=Decimal("15000.00"),
            taxes=Decimal("1800.00"),
            service_fee=Decimal("750.00"),
            total_amount=Decimal("17550.00"),
        )
        values.update(overrides)
        return BookingRequest(**values)

    return _build


@pytest.fixture
def booking_payload() -> Callable[..., dict]:
    """El mismo escenario como cuerpo JSON camelCase del endpoint."""

    def _build(**overrides) -> dict:
        payload = {
            "businessUnitId": BUSINESS_UNIT_ID,
            "roomTypeId": ROOM_TYPE_ID,
            "firstName": "Maria",
            "lastName": "Santos",
            "email": "maria@example.com",
            "phone": "+639171234567",
            "checkInDate": "2026-04-10T00:00:00.000Z",
            "checkOutDate": "2026-04-13T00:00:00.000Z",
            "adults": 2,
            "children": 0,
            "nights": 3,
            "subtotal": 15000,
            "taxes": 1800,
            "serviceFee": 750,
            "totalAmount": 17550,
        }
        payload.update(overrides)
        return payload

    return _build


# ============================================================================
# FIXTURES IN-MEMORY
# ============================================================================


@pytest.fixture
def memory() -> SimpleNamespace:
    property_repo = InMemoryPropertyRepo()
    property_repo.add_business_unit(make_business_unit())
    property_repo.add_room_type(make_room_type())
    return SimpleNamespace(
        property_repo=property_repo,
        guest_repo=InMemoryGuestRepo(),
        reservation_repo=InMemoryReservationRepo(),
        payment_repo=InMemoryPaymentRepo(),
        checkout_session_repo=InMemoryCheckoutSessionRepo(),
        webhook_event_repo=InMemoryWebhookEventRepo(),
        payment_gateway=InMemoryPaymongoGateway(),
        tx_manager=InMemoryTransactionManager(),
    )


@pytest.fixture
def use_cases(settings, memory, id_generator, clock) -> dict:
    return build_use_cases(
        settings,
        **vars(memory),
        id_generator=id_generator,
        clock=clock,
    )


# ============================================================================
# FIXTURES DE BASE DE DATOS
# ============================================================================


@pytest_asyncio.fixture
async def sql_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
        await conn.execute(
            insert(business_units).values(
                id=BUSINESS_UNIT_ID,
                name="Casa Lagoon Resort",
                city="Coron",
                country="Philippines",
                primary_currency="PHP",
                is_active=True,
            )
        )
        await conn.execute(
            insert(room_types).values(
                id=ROOM_TYPE_ID,
                business_unit_id=BUSINESS_UNIT_ID,
                name="Garden Villa",
                base_rate=Decimal("5000.00"),
                max_occupancy=3,
                max_adults=2,
                max_children=2,
                is_active=True,
            )
        )

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def sql_session(sql_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(sql_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def sql_session_factory(sql_engine):
    """Sesiones independientes para verificar lo que realmente quedó confirmado."""
    return async_sessionmaker(sql_engine, expire_on_commit=False)


# ============================================================================
# FIXTURES DE CLIENTE HTTP
# ============================================================================


@pytest.fixture
def client(use_cases) -> Generator[TestClient, None, None]:
    """FastAPI TestClient usando los mismos use cases in-memory que el test."""
    app.dependency_overrides[get_use_cases] = lambda: use_cases

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# FIXTURES DE WEBHOOKS
# ============================================================================


@pytest.fixture
def signed() -> Callable[..., tuple[bytes, dict]]:
    """Serializa un evento y devuelve (body, headers) con la firma de PayMongo."""

    def _sign(event: dict, secret: str = WEBHOOK_SECRET, livemode: bool = False):
        body = json.dumps(event).encode()
        header = build_signature_header(body, secret, timestamp=1767225600, livemode=livemode)
        return body, {"Paymongo-Signature": header, "Content-Type": "application/json"}

    return _sign


def make_event(event_id: str, event_type: str, resource: dict, livemode: bool = False) -> dict:
    return {
        "data": {
            "id": event_id,
            "type": "event",
            "attributes": {
                "type": event_type,
                "livemode": livemode,
                "data": resource,
                "created_at": 1767225600,
            },
        }
    }


@pytest.fixture
def checkout_paid_event() -> Callable[..., dict]:
    def _build(
        reservation_id: str,
        session_id: str,
        intent_id: str | None = "pi_test_001",
        event_id: str = "evt_paid_001",
        amount: int = 1755000,
        source: dict | None = None,
    ) -> dict:
        source = source or {
            "id": "card_abc123",
            "type": "card",
            "brand": "visa",
            "last4": "4242",
            "country": "PH",
            "exp_month": 12,
            "exp_year": 2030,
        }
        payment = {
            "id": "pay_test_001",
            "type": "payment",
            "attributes": {
                "amount": amount,
                "currency": "PHP",
                "fee": 6143,
                "status": "paid",
                "source": source,
                "billing": {"name": "Maria Santos", "email": "maria@example.com"},
            },
        }
        resource = {
            "id": session_id,
            "type": "checkout_session",
            "attributes": {
                "checkout_url": f"https://checkout.paymongo.com/{session_id}",
                "client_key": f"{session_id}_client_key",
                "line_items": [
                    {
                        "amount": amount,
                        "currency": "PHP",
                        "name": "Booking",
                        "quantity": 1,
                    }
                ],
                "metadata": {"reservation_id": reservation_id},
                "payments": [payment],
                "payment_intent": (
                    {
                        "id": intent_id,
                        "type": "payment_intent",
                        "attributes": {
                            "amount": amount,
                            "status": "succeeded",
                            "payment_method": {"id": "pm_test_001"},
                            "payments": [payment],
                        },
                    }
                    if intent_id
                    else None
                ),
                "status": "active",
            },
        }
        return make_event(event_id, "checkout_session.payment.paid", resource)

    return _build


@pytest.fixture
def checkout_failed_event() -> Callable[..., dict]:
    def _build(
        reservation_id: str,
        session_id: str,
        event_id: str = "evt_failed_001",
        failure_detail: str | None = "Card was declined",
    ) -> dict:
        intent_attributes = {"status": "awaiting_payment_method"}
        if failure_detail:
            intent_attributes["last_payment_error"] = {
                "code": "card_declined",
                "detail": failure_detail,
            }
        resource = {
            "id": session_id,
            "type": "checkout_session",
            "attributes": {
                "metadata": {"reservation_id": reservation_id},
                "payment_intent": {
                    "id": "pi_test_001",
                    "type": "payment_intent",
                    "attributes": intent_attributes,
                },
            },
        }
        return make_event(event_id, "checkout_session.payment.failed", resource)

    return _build

