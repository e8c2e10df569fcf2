"""
Flujo completo contra SQLite (aiosqlite) con el SQLAlchemyTransactionManager.

Verifica lo que realmente quedó confirmado leyendo desde una sesión
independiente: atomicidad de la creación, rollback ante colisiones y
reconciliación vía webhook.
"""

import pytest
from sqlalchemy import func, select

from app.api.dependencies import build_use_cases
from app.application.dtos.webhook_dto import WebhookDelivery
from app.domain.errors import PaymentGatewayError, ReservationCreationFailedError
from app.infrastructure.db.repositories.checkout_session_repo_sql import CheckoutSessionRepoSQL
from app.infrastructure.db.repositories.guest_repo_sql import GuestRepoSQL
from app.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from app.infrastructure.db.repositories.property_repo_sql import PropertyRepoSQL
from app.infrastructure.db.repositories.reservation_repo_sql import ReservationRepoSQL
from app.infrastructure.db.repositories.webhook_event_repo_sql import WebhookEventRepoSQL
from app.infrastructure.db.seed import seed_demo_data
from app.infrastructure.db.tables import (
    checkout_sessions,
    guests,
    payment_line_items,
    payments,
    provider_cards,
    provider_payments,
    reservation_rooms,
    reservations,
    webhook_events,
)
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from app.infrastructure.demo_catalog import DEMO_BUSINESS_UNIT_ID, DEMO_ROOM_TYPE_ID
from app.infrastructure.in_memory import InMemoryPaymongoGateway


@pytest.fixture
def gateway():
    return InMemoryPaymongoGateway()


@pytest.fixture
def sql_use_cases(settings, sql_session, gateway, id_generator, clock):
    return build_use_cases(
        settings,
        property_repo=PropertyRepoSQL(sql_session),
        guest_repo=GuestRepoSQL(sql_session),
        reservation_repo=ReservationRepoSQL(sql_session),
        payment_repo=PaymentRepoSQL(sql_session),
        checkout_session_repo=CheckoutSessionRepoSQL(sql_session),
        webhook_event_repo=WebhookEventRepoSQL(sql_session),
        payment_gateway=gateway,
        tx_manager=SQLAlchemyTransactionManager(sql_session),
        id_generator=id_generator,
        clock=clock,
    )


@pytest.fixture
def count_rows(sql_session_factory):
    async def _count(table, *where):
        async with sql_session_factory() as session:
            stmt = select(func.count()).select_from(table)
            if where:
                stmt = stmt.where(*where)
            return (await session.execute(stmt)).scalar_one()

    return _count


@pytest.fixture
def fetch_row(sql_session_factory):
    async def _fetch(table, *where):
        async with sql_session_factory() as session:
            result = await session.execute(select(table).where(*where))
            return result.mappings().one()

    return _fetch


async def test_booking_commits_every_row(sql_use_cases, booking_request, count_rows, fetch_row):
    result = await sql_use_cases["create_reservation_with_payment"].execute(booking_request())

    assert await count_rows(guests) == 1
    assert await count_rows(reservations) == 1
    assert await count_rows(reservation_rooms) == 1
    assert await count_rows(payments) == 1
    assert await count_rows(payment_line_items) == 3
    assert await count_rows(checkout_sessions) == 1

    row = await fetch_row(reservations, reservations.c.id == result.reservation_id)
    assert row["status"] == "PENDING"
    assert row["payment_status"] == "PENDING"
    assert row["confirmation_number"] == result.confirmation_number
    assert row["payment_provider"] == "PAYMONGO"
    assert row["payment_intent_id"].startswith("pi_")

    session_row = await fetch_row(
        checkout_sessions, checkout_sessions.c.session_id == result.payment_session_id
    )
    assert session_row["status"] == "active"
    assert session_row["url"] == result.checkout_url


async def test_collision_rolls_back_and_retries(
    sql_use_cases, booking_request, id_generator, count_rows
):
    first = await sql_use_cases["create_reservation_with_payment"].execute(booking_request())
    id_generator.set_next_confirmation_numbers(first.confirmation_number)

    second = await sql_use_cases["create_reservation_with_payment"].execute(
        booking_request(email="other@example.com")
    )

    assert second.confirmation_number != first.confirmation_number
    assert await count_rows(reservations) == 2
    assert await count_rows(guests) == 2


async def test_exhausted_collisions_leave_no_partial_rows(
    sql_use_cases, booking_request, id_generator, count_rows
):
    first = await sql_use_cases["create_reservation_with_payment"].execute(booking_request())
    id_generator.set_next_confirmation_numbers(*[first.confirmation_number] * 3)

    with pytest.raises(ReservationCreationFailedError):
        await sql_use_cases["create_reservation_with_payment"].execute(
            booking_request(email="other@example.com")
        )

    assert await count_rows(reservations) == 1
    assert await count_rows(reservation_rooms) == 1
    assert await count_rows(guests) == 1


async def test_exhausted_collisions_roll_back_repeat_guest_update(
    sql_use_cases, booking_request, id_generator, fetch_row, count_rows
):
    first = await sql_use_cases["create_reservation_with_payment"].execute(booking_request())
    id_generator.set_next_confirmation_numbers(*[first.confirmation_number] * 3)

    with pytest.raises(ReservationCreationFailedError):
        await sql_use_cases["create_reservation_with_payment"].execute(
            booking_request(first_name="Mary", last_name="Santos-Reyes", phone="+639998887777")
        )

    assert await count_rows(guests) == 1
    assert await count_rows(reservations) == 1
    guest = await fetch_row(guests, guests.c.email == "maria@example.com")
    assert guest["first_name"] == "Maria"
    assert guest["last_name"] == "Santos"
    assert guest["phone"] == "+639171234567"


async def test_gateway_failure_keeps_pending_reservation_without_payment(
    sql_use_cases, booking_request, gateway, count_rows
):
    gateway.fail_with = PaymentGatewayError("upstream 502", http_status=502)

    with pytest.raises(PaymentGatewayError):
        await sql_use_cases["create_reservation_with_payment"].execute(booking_request())

    assert await count_rows(reservations, reservations.c.status == "PENDING") == 1
    assert await count_rows(payments) == 0
    assert await count_rows(checkout_sessions) == 0


async def test_repeat_guest_is_updated_in_place(sql_use_cases, booking_request, fetch_row, count_rows):
    await sql_use_cases["create_reservation_with_payment"].execute(booking_request())
    await sql_use_cases["create_reservation_with_payment"].execute(
        booking_request(last_name="Santos-Reyes", phone="+639998887777")
    )

    assert await count_rows(guests) == 1
    guest = await fetch_row(guests, guests.c.email == "maria@example.com")
    assert guest["last_name"] == "Santos-Reyes"
    assert guest["phone"] == "+639998887777"


async def test_paid_webhook_confirms_reservation(
    sql_use_cases, booking_request, signed, checkout_paid_event, fetch_row, count_rows
):
    booked = await sql_use_cases["create_reservation_with_payment"].execute(booking_request())
    body, headers = signed(checkout_paid_event(booked.reservation_id, booked.payment_session_id))

    ack = await sql_use_cases["handle_webhook"].execute(
        WebhookDelivery(raw_body=body, signature=headers["Paymongo-Signature"], headers=headers)
    )

    assert ack.processed is True
    reservation = await fetch_row(reservations, reservations.c.id == booked.reservation_id)
    assert reservation["status"] == "CONFIRMED"
    assert reservation["payment_status"] == "PAID"
    assert reservation["paid_at"] is not None

    payment = await fetch_row(payments, payments.c.reservation_id == booked.reservation_id)
    assert payment["status"] == "SUCCEEDED"
    assert payment["method"] == "CARD"

    assert await count_rows(provider_payments) == 1
    card = await fetch_row(provider_cards, provider_cards.c.last4 == "4242")
    assert card["brand"] == "visa"

    event = await fetch_row(webhook_events, webhook_events.c.event_id == "evt_paid_001")
    assert event["status"] == "processed"
    assert event["retry_count"] == 0

    # Redelivery is acknowledged without touching anything
    again = await sql_use_cases["handle_webhook"].execute(
        WebhookDelivery(raw_body=body, signature=headers["Paymongo-Signature"])
    )
    assert again.processed is True
    assert await count_rows(provider_payments) == 1
    assert await count_rows(webhook_events) == 1


async def test_second_paid_event_with_new_id_converges(
    sql_use_cases, booking_request, signed, checkout_paid_event, fetch_row, count_rows, clock
):
    booked = await sql_use_cases["create_reservation_with_payment"].execute(booking_request())

    async def deliver(event_id):
        body, headers = signed(
            checkout_paid_event(
                booked.reservation_id, booked.payment_session_id, event_id=event_id
            )
        )
        return await sql_use_cases["handle_webhook"].execute(
            WebhookDelivery(raw_body=body, signature=headers["Paymongo-Signature"])
        )

    assert (await deliver("evt_paid_001")).processed is True
    first = await fetch_row(reservations, reservations.c.id == booked.reservation_id)
    clock.advance(minutes=5)
    assert (await deliver("evt_paid_002")).processed is True

    assert await count_rows(webhook_events) == 2
    assert await count_rows(payments) == 1
    assert await count_rows(provider_payments) == 1
    assert await count_rows(provider_cards) == 1
    assert await count_rows(checkout_sessions) == 1
    payment = await fetch_row(payments, payments.c.reservation_id == booked.reservation_id)
    assert payment["status"] == "SUCCEEDED"
    reservation = await fetch_row(reservations, reservations.c.id == booked.reservation_id)
    assert reservation["paid_at"] == first["paid_at"]


async def test_handler_failure_is_recorded_and_rolled_back(
    sql_use_cases, booking_request, signed, checkout_failed_event, fetch_row
):
    booked = await sql_use_cases["create_reservation_with_payment"].execute(booking_request())
    body, headers = signed(checkout_failed_event(booked.reservation_id, "cs_not_ours"))

    ack = await sql_use_cases["handle_webhook"].execute(
        WebhookDelivery(raw_body=body, signature=headers["Paymongo-Signature"])
    )

    assert ack.received is True
    assert ack.processed is False
    event = await fetch_row(webhook_events, webhook_events.c.event_id == "evt_failed_001")
    assert event["status"] == "failed"
    assert "Payment not found" in event["error"]

    reservation = await fetch_row(reservations, reservations.c.id == booked.reservation_id)
    assert reservation["status"] == "PENDING"


async def test_demo_seed_is_idempotent(sql_engine, sql_session):
    async with sql_engine.begin() as conn:
        assert await seed_demo_data(conn) is True
    async with sql_engine.begin() as conn:
        assert await seed_demo_data(conn) is False

    room_type = await PropertyRepoSQL(sql_session).get_room_type(DEMO_ROOM_TYPE_ID)
    assert room_type.business_unit_id == DEMO_BUSINESS_UNIT_ID
    assert room_type.max_children == 1
