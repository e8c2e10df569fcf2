from decimal import Decimal

import pytest

from app.domain.entities.checkout_session import CheckoutSessionStatus
from app.domain.entities.payment import LineItemType, PaymentStatus
from app.domain.errors import (
    PaymentGatewayError,
    ReservationAlreadyPaidError,
    ReservationCreationFailedError,
    ReservationNotFoundError,
)


async def _book(use_cases, booking_request, **overrides):
    return await use_cases["create_reservation_with_payment"].execute(booking_request(**overrides))


async def test_happy_path_creates_payment_session_and_line_items(
    use_cases, memory, booking_request, clock
):
    result = await _book(use_cases, booking_request)

    reservation = await memory.reservation_repo.get_by_id(result.reservation_id)
    payments = await memory.payment_repo.list_by_reservation(reservation.id)
    assert len(payments) == 1
    payment = payments[0]
    assert payment.status == PaymentStatus.PENDING
    assert payment.amount == Decimal("17550.00")
    assert payment.provider_payment_id == result.payment_session_id
    assert payment.provider_payment_intent_id.startswith("pi_")
    assert payment.room_total == Decimal("15000.00")
    assert payment.taxes_total == Decimal("1800.00")
    assert payment.fees_total == Decimal("750.00")
    assert payment.guest_name == "Maria Santos"
    assert payment.is_deposit_payment is True

    checkout_session = await memory.checkout_session_repo.get_by_session_id(
        result.payment_session_id
    )
    assert checkout_session.url == result.checkout_url != ""
    assert checkout_session.status == CheckoutSessionStatus.ACTIVE
    assert checkout_session.expires_at == clock.now().replace(day=2)
    assert checkout_session.success_url == (
        f"https://booking.example.com/booking/success?reservation_id={reservation.id}"
    )

    items = await memory.payment_repo.list_line_items(payment.id)
    assert [item.item_type for item in items] == [
        LineItemType.ROOM,
        LineItemType.TAX,
        LineItemType.FEE,
    ]
    room_item = items[0]
    assert room_item.item_name == "Garden Villa - 3 nights"
    assert room_item.description == "Room booking for 2 adults"
    assert room_item.unit_price == Decimal("5000.00")
    assert room_item.quantity == 3

    assert reservation.payment_provider == "PAYMONGO"
    assert reservation.payment_intent_id == payment.provider_payment_intent_id


async def test_gateway_request_carries_line_item_and_metadata(use_cases, memory, booking_request):
    result = await _book(use_cases, booking_request)

    request = memory.payment_gateway.requests[-1]
    assert request.reference_number == result.confirmation_number
    assert request.payment_method_types == ["card", "gcash"]
    assert request.billing.email == "maria@example.com"
    assert request.description == f"Reservation {result.confirmation_number} - Casa Lagoon Resort"

    [line_item] = request.line_items
    assert line_item.amount == 1755000
    assert line_item.currency == "PHP"
    assert line_item.quantity == 1
    assert line_item.name == f"Booking Ref. ({result.confirmation_number})"
    assert line_item.description == "Casa Lagoon Resort - 3 nights"

    assert request.metadata == {
        "reservation_id": result.reservation_id,
        "confirmation_number": result.confirmation_number,
        "business_unit_id": "0b6f4f7e-3c55-4d7a-9d0e-5b1d6f0c1a01",
        "guest_id": request.metadata["guest_id"],
        "guest_name": "Maria Santos",
        "check_in": "2026-04-10",
        "check_out": "2026-04-13",
        "adults": "2",
        "children": "0",
        "nights": "3",
        "room_type_id": "6a1e2c3d-4b5f-4a6b-8c7d-9e0f1a2b3c01",
    }


async def test_zero_taxes_and_fees_produce_only_room_line_item(
    use_cases, memory, booking_request
):
    result = await _book(
        use_cases,
        booking_request,
        taxes=Decimal("0"),
        service_fee=Decimal("0"),
        total_amount=Decimal("15000.00"),
    )
    [payment] = await memory.payment_repo.list_by_reservation(result.reservation_id)
    items = await memory.payment_repo.list_line_items(payment.id)
    assert [item.item_type for item in items] == [LineItemType.ROOM]


async def test_open_session_is_reused_instead_of_creating_another(
    use_cases, memory, booking_request
):
    result = await _book(use_cases, booking_request)

    view = await use_cases["initiate_payment_session"].execute(result.reservation_id)

    assert view.reused is True
    assert view.session_id == result.payment_session_id
    assert len(memory.payment_gateway.requests) == 1
    assert len(await memory.payment_repo.list_by_reservation(result.reservation_id)) == 1


async def test_expired_session_gets_a_new_attempt(use_cases, memory, booking_request, clock):
    result = await _book(use_cases, booking_request)
    clock.advance(hours=25)

    view = await use_cases["initiate_payment_session"].execute(result.reservation_id)

    assert view.reused is False
    assert view.session_id != result.payment_session_id
    assert len(await memory.payment_repo.list_by_reservation(result.reservation_id)) == 2


async def test_paid_reservation_cannot_open_a_new_session(use_cases, memory, booking_request, clock):
    result = await _book(use_cases, booking_request)
    reservation = await memory.reservation_repo.get_by_id(result.reservation_id)
    reservation.mark_as_paid(clock.now())
    await memory.reservation_repo.save_status(reservation)

    with pytest.raises(ReservationAlreadyPaidError) as exc_info:
        await use_cases["initiate_payment_session"].execute(result.reservation_id)
    assert exc_info.value.http_status == 409


async def test_unknown_reservation(use_cases):
    with pytest.raises(ReservationNotFoundError):
        await use_cases["initiate_payment_session"].execute("missing")


async def test_gateway_failure_leaves_reservation_pending_without_payment(
    use_cases, memory, booking_request
):
    memory.payment_gateway.fail_with = PaymentGatewayError("upstream 502", http_status=502)

    with pytest.raises(PaymentGatewayError):
        await _book(use_cases, booking_request)

    [reservation] = memory.reservation_repo.reservations.values()
    assert reservation.status.value == "PENDING"
    assert reservation.payment_intent_id is None
    assert await memory.payment_repo.list_by_reservation(reservation.id) == []

    # The session can be retried once the gateway recovers
    memory.payment_gateway.fail_with = None
    view = await use_cases["initiate_payment_session"].execute(reservation.id)
    assert view.checkout_url


async def test_confirmation_collision_is_retried_with_a_fresh_number(
    use_cases, memory, booking_request, id_generator
):
    first = await _book(use_cases, booking_request)
    id_generator.set_next_confirmation_numbers(first.confirmation_number)

    second = await _book(use_cases, booking_request, email="other@example.com")

    assert second.confirmation_number != first.confirmation_number
    assert len(memory.reservation_repo.reservations) == 2


async def test_persistent_collisions_give_up_after_configured_attempts(
    use_cases, booking_request, id_generator
):
    first = await _book(use_cases, booking_request)
    id_generator.set_next_confirmation_numbers(*[first.confirmation_number] * 3)

    with pytest.raises(ReservationCreationFailedError):
        await _book(use_cases, booking_request)
