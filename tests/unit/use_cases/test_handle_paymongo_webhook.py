import json

import pytest

from app.api.dependencies import build_use_cases
from app.application.dtos.webhook_dto import WebhookDelivery
from app.domain.entities.payment import PaymentMethod, PaymentStatus
from app.domain.entities.reservation import ReservationPaymentStatus, ReservationStatus
from app.domain.entities.webhook_event import WebhookEventStatus
from app.domain.errors import (
    InvalidSignatureError,
    MalformedEventError,
    WebhookConfigurationError,
)
from conftest import make_event


@pytest.fixture
async def booked(use_cases, booking_request):
    return await use_cases["create_reservation_with_payment"].execute(booking_request())


@pytest.fixture
def deliver(use_cases, signed):
    async def _deliver(event: dict, **sign_kwargs):
        body, headers = signed(event, **sign_kwargs)
        return await use_cases["handle_webhook"].execute(
            WebhookDelivery(
                raw_body=body,
                signature=headers["Paymongo-Signature"],
                headers=headers,
                ip_address="203.0.113.9",
            )
        )

    return _deliver


async def _payment_of(memory, reservation_id):
    [payment] = await memory.payment_repo.list_by_reservation(reservation_id)
    return payment


# === Ingreso ===


async def test_missing_secret_is_a_configuration_error(settings, memory, signed):
    use_cases = build_use_cases(
        settings.model_copy(update={"paymongo_webhook_secret": None}), **vars(memory)
    )
    body, headers = signed(make_event("evt_1", "payment.paid", {"id": "pay_1", "type": "payment"}))

    with pytest.raises(WebhookConfigurationError):
        await use_cases["handle_webhook"].execute(
            WebhookDelivery(raw_body=body, signature=headers["Paymongo-Signature"])
        )


async def test_missing_signature_is_a_configuration_error(use_cases):
    with pytest.raises(WebhookConfigurationError):
        await use_cases["handle_webhook"].execute(WebhookDelivery(raw_body=b"{}", signature=None))


async def test_bad_signature_stores_nothing(deliver, memory, booked, checkout_paid_event):
    event = checkout_paid_event(booked.reservation_id, booked.payment_session_id)

    with pytest.raises(InvalidSignatureError):
        await deliver(event, secret="whsk_someone_else")

    assert memory.webhook_event_repo.events == {}
    payment = await _payment_of(memory, booked.reservation_id)
    assert payment.status == PaymentStatus.PENDING


async def test_tampered_body_is_rejected(use_cases, signed, booked, checkout_paid_event):
    body, headers = signed(checkout_paid_event(booked.reservation_id, booked.payment_session_id))
    tampered = body.replace(b"1755000", b"100")

    with pytest.raises(InvalidSignatureError):
        await use_cases["handle_webhook"].execute(
            WebhookDelivery(raw_body=tampered, signature=headers["Paymongo-Signature"])
        )


async def test_malformed_envelope_is_rejected_before_storing(deliver, memory):
    with pytest.raises(MalformedEventError):
        await deliver({"data": {"id": "evt_bad"}})

    assert memory.webhook_event_repo.events == {}


# === checkout_session.payment.paid ===


async def test_checkout_paid_confirms_reservation(deliver, memory, booked, checkout_paid_event, clock):
    ack = await deliver(checkout_paid_event(booked.reservation_id, booked.payment_session_id))

    assert ack.received is True
    assert ack.processed is True
    assert ack.error is None

    reservation = await memory.reservation_repo.get_by_id(booked.reservation_id)
    assert reservation.status == ReservationStatus.CONFIRMED
    assert reservation.payment_status == ReservationPaymentStatus.PAID
    assert reservation.paid_at == clock.now()

    payment = await _payment_of(memory, booked.reservation_id)
    assert payment.status == PaymentStatus.SUCCEEDED
    assert payment.method == PaymentMethod.CARD
    assert payment.processed_at == clock.now()
    assert payment.provider_metadata["webhook_event_id"]

    provider_payment = await memory.payment_repo.get_provider_payment(payment.id)
    assert provider_payment.checkout_session_id == booked.payment_session_id
    assert provider_payment.payment_method_type == "card"
    assert str(provider_payment.processing_fee) == "61.43"

    card = await memory.payment_repo.get_provider_card(provider_payment.id)
    assert (card.brand, card.last4, card.exp_month, card.exp_year) == ("visa", "4242", 12, 2030)

    stored = memory.webhook_event_repo.events["evt_paid_001"]
    assert stored.status == WebhookEventStatus.PROCESSED
    assert stored.ip_address == "203.0.113.9"
    assert stored.resource_id == booked.payment_session_id
    assert stored.data["data"]["id"] == "evt_paid_001"

    checkout_session = await memory.checkout_session_repo.get_by_session_id(
        booked.payment_session_id
    )
    assert checkout_session.status.value == "paid"


async def test_e_wallet_payment_records_no_card(deliver, memory, booked, checkout_paid_event):
    await deliver(
        checkout_paid_event(
            booked.reservation_id,
            booked.payment_session_id,
            source={"id": "src_gcash_1", "type": "gcash"},
        )
    )

    payment = await _payment_of(memory, booked.reservation_id)
    assert payment.method == PaymentMethod.E_WALLET
    provider_payment = await memory.payment_repo.get_provider_payment(payment.id)
    assert await memory.payment_repo.get_provider_card(provider_payment.id) is None


async def test_duplicate_delivery_has_no_further_effect(
    deliver, memory, booked, checkout_paid_event, clock
):
    event = checkout_paid_event(booked.reservation_id, booked.payment_session_id)
    await deliver(event)
    first_paid_at = (await memory.reservation_repo.get_by_id(booked.reservation_id)).paid_at

    clock.advance(minutes=5)
    ack = await deliver(event)

    assert ack.received is True
    assert ack.processed is True
    assert len(memory.webhook_event_repo.events) == 1
    assert memory.webhook_event_repo.events["evt_paid_001"].retry_count == 0
    reservation = await memory.reservation_repo.get_by_id(booked.reservation_id)
    assert reservation.paid_at == first_paid_at


async def test_second_paid_event_with_new_id_converges(
    deliver, memory, booked, checkout_paid_event, clock
):
    await deliver(checkout_paid_event(booked.reservation_id, booked.payment_session_id))
    first_paid_at = (await memory.reservation_repo.get_by_id(booked.reservation_id)).paid_at
    first_payment = await _payment_of(memory, booked.reservation_id)
    first_provider_payment = await memory.payment_repo.get_provider_payment(first_payment.id)
    first_card = await memory.payment_repo.get_provider_card(first_provider_payment.id)

    clock.advance(minutes=5)
    ack = await deliver(
        checkout_paid_event(
            booked.reservation_id, booked.payment_session_id, event_id="evt_paid_002"
        )
    )

    assert ack.processed is True
    assert len(memory.webhook_event_repo.events) == 2
    payment = await _payment_of(memory, booked.reservation_id)
    assert payment.id == first_payment.id
    assert payment.status == PaymentStatus.SUCCEEDED
    provider_payment = await memory.payment_repo.get_provider_payment(payment.id)
    assert provider_payment.id == first_provider_payment.id
    card = await memory.payment_repo.get_provider_card(provider_payment.id)
    assert card.id == first_card.id
    assert list(memory.checkout_session_repo.sessions) == [booked.payment_session_id]
    reservation = await memory.reservation_repo.get_by_id(booked.reservation_id)
    assert reservation.paid_at == first_paid_at


async def test_paid_event_for_unknown_session_creates_the_payment(
    deliver, memory, booked, checkout_paid_event
):
    ack = await deliver(
        checkout_paid_event(booked.reservation_id, "cs_created_elsewhere", intent_id="pi_elsewhere")
    )

    assert ack.processed is True
    payments = await memory.payment_repo.list_by_reservation(booked.reservation_id)
    assert len(payments) == 2
    created = payments[0]
    assert created.provider_payment_id == "pi_elsewhere"
    assert created.status == PaymentStatus.SUCCEEDED
    assert str(created.amount) == "17550"


async def test_paid_event_without_reservation_metadata_is_acked_with_error(
    deliver, memory, booked, checkout_paid_event
):
    event = checkout_paid_event(booked.reservation_id, booked.payment_session_id)
    event["data"]["attributes"]["data"]["attributes"]["metadata"] = {}

    ack = await deliver(event)

    assert ack.received is True
    assert ack.processed is False
    assert "reservation_id" in ack.error
    stored = memory.webhook_event_repo.events["evt_paid_001"]
    assert stored.status == WebhookEventStatus.FAILED
    assert stored.error == ack.error

    payment = await _payment_of(memory, booked.reservation_id)
    assert payment.status == PaymentStatus.PENDING


async def test_failed_event_is_retried_on_redelivery(deliver, memory, booked, checkout_paid_event):
    broken = checkout_paid_event(booked.reservation_id, booked.payment_session_id)
    broken["data"]["attributes"]["data"]["attributes"]["metadata"] = {}
    await deliver(broken)

    ack = await deliver(checkout_paid_event(booked.reservation_id, booked.payment_session_id))

    assert ack.processed is True
    stored = memory.webhook_event_repo.events["evt_paid_001"]
    assert stored.status == WebhookEventStatus.PROCESSED
    assert stored.retry_count == 1
    assert stored.error is None


# === checkout_session.payment.failed ===


async def test_checkout_failed_cancels_reservation(deliver, memory, booked, checkout_failed_event):
    ack = await deliver(checkout_failed_event(booked.reservation_id, booked.payment_session_id))

    assert ack.processed is True
    payment = await _payment_of(memory, booked.reservation_id)
    assert payment.status == PaymentStatus.FAILED
    assert payment.failure_code == "payment_failed"
    assert payment.failure_message == "Card was declined"

    reservation = await memory.reservation_repo.get_by_id(booked.reservation_id)
    assert reservation.status == ReservationStatus.CANCELLED
    assert reservation.payment_status == ReservationPaymentStatus.FAILED
    assert reservation.cancellation_reason == "Payment failed: Card was declined"


async def test_failure_without_detail_uses_unknown_reason(
    deliver, memory, booked, checkout_failed_event
):
    await deliver(
        checkout_failed_event(booked.reservation_id, booked.payment_session_id, failure_detail=None)
    )

    reservation = await memory.reservation_repo.get_by_id(booked.reservation_id)
    assert reservation.cancellation_reason == "Payment failed: Unknown reason"


async def test_failure_after_success_does_not_downgrade(
    deliver, memory, booked, checkout_paid_event, checkout_failed_event
):
    await deliver(checkout_paid_event(booked.reservation_id, booked.payment_session_id))
    ack = await deliver(checkout_failed_event(booked.reservation_id, booked.payment_session_id))

    assert ack.processed is True
    payment = await _payment_of(memory, booked.reservation_id)
    assert payment.status == PaymentStatus.SUCCEEDED
    reservation = await memory.reservation_repo.get_by_id(booked.reservation_id)
    assert reservation.status == ReservationStatus.CONFIRMED
    assert reservation.payment_status == ReservationPaymentStatus.PAID


async def test_success_after_failure_confirms(
    deliver, memory, booked, checkout_paid_event, checkout_failed_event
):
    await deliver(checkout_failed_event(booked.reservation_id, booked.payment_session_id))
    await deliver(checkout_paid_event(booked.reservation_id, booked.payment_session_id))

    reservation = await memory.reservation_repo.get_by_id(booked.reservation_id)
    assert reservation.status == ReservationStatus.CONFIRMED
    assert reservation.payment_status == ReservationPaymentStatus.PAID


async def test_failed_event_for_unknown_session_is_acked_with_error(
    deliver, memory, booked, checkout_failed_event
):
    ack = await deliver(checkout_failed_event(booked.reservation_id, "cs_unknown"))

    assert ack.processed is False
    assert "Payment not found" in ack.error
    assert memory.webhook_event_repo.events["evt_failed_001"].status == WebhookEventStatus.FAILED


# === payment.* / payment_intent.* ===


async def test_payment_paid_event_matches_by_intent(deliver, memory, booked):
    payment = await _payment_of(memory, booked.reservation_id)
    event = make_event(
        "evt_pay_paid",
        "payment.paid",
        {
            "id": "pay_standalone",
            "type": "payment",
            "attributes": {
                "payment_intent_id": payment.provider_payment_intent_id,
                "source": {"id": "src_1", "type": "paymaya"},
            },
        },
    )

    ack = await deliver(event)

    assert ack.processed is True
    payment = await _payment_of(memory, booked.reservation_id)
    assert payment.status == PaymentStatus.SUCCEEDED
    assert payment.method == PaymentMethod.E_WALLET
    reservation = await memory.reservation_repo.get_by_id(booked.reservation_id)
    assert reservation.is_paid


async def test_payment_intent_failed_event(deliver, memory, booked):
    payment = await _payment_of(memory, booked.reservation_id)
    event = make_event(
        "evt_pi_failed",
        "payment_intent.payment_failed",
        {
            "id": payment.provider_payment_intent_id,
            "type": "payment_intent",
            "attributes": {"last_payment_error": {"detail": "Insufficient funds"}},
        },
    )

    await deliver(event)

    payment = await _payment_of(memory, booked.reservation_id)
    assert payment.status == PaymentStatus.FAILED
    assert payment.failure_code == "payment_intent_failed"
    assert payment.failure_message == "Insufficient funds"


async def test_unhandled_event_type_is_ignored(deliver, memory):
    ack = await deliver(make_event("evt_refund", "payment.refunded", {"id": "pay_x", "type": "payment"}))

    assert ack.received is True
    assert ack.processed is False
    assert ack.error is None
    assert memory.webhook_event_repo.events["evt_refund"].status == WebhookEventStatus.IGNORED


async def test_headers_are_stored_with_the_event(deliver, memory):
    await deliver(make_event("evt_hdr", "payment.refunded", {"id": "pay_x", "type": "payment"}))

    stored = memory.webhook_event_repo.events["evt_hdr"]
    assert "Paymongo-Signature" in stored.headers
    assert json.dumps(stored.data)
