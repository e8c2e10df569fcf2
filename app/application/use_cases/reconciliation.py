"""Reconciliation of PayMongo payment outcomes into payments and reservations.

Handlers run inside the transaction the webhook receiver opens for them.
They must converge to the same end state when an event is redelivered or
arrives out of order, so every write is an update or an upsert keyed by a
stable identifier and a failure never downgrades a successful payment.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from app.application.dtos.webhook_dto import PaymongoEvent
from app.application.interfaces.checkout_session_repo import CheckoutSessionRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.guest_repo import GuestRepo
from app.application.interfaces.id_generator import IdGenerator
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.reservation_repo import ReservationRepo
from app.domain.constants import (
    EVENT_CHECKOUT_SESSION_FAILED,
    EVENT_CHECKOUT_SESSION_PAID,
    EVENT_PAYMENT_FAILED,
    EVENT_PAYMENT_INTENT_FAILED,
    EVENT_PAYMENT_INTENT_SUCCEEDED,
    EVENT_PAYMENT_PAID,
    FAILURE_CODE_PAYMENT_FAILED,
    FAILURE_CODE_PAYMENT_INTENT_FAILED,
    UNKNOWN_FAILURE_REASON,
)
from app.domain.entities.checkout_session import CheckoutSession, CheckoutSessionStatus
from app.domain.entities.payment import Payment, PaymentMethod, PaymentProvider, PaymentStatus
from app.domain.entities.provider_payment import ProviderCard, ProviderPayment
from app.domain.entities.reservation import Reservation
from app.domain.errors import ReconciliationFailedError

_METHOD_BY_SOURCE_TYPE = {
    "card": PaymentMethod.CARD,
    "gcash": PaymentMethod.E_WALLET,
    "paymaya": PaymentMethod.E_WALLET,
    "grab_pay": PaymentMethod.E_WALLET,
    "dob": PaymentMethod.BANK_TRANSFER,
    "dob_ubp": PaymentMethod.BANK_TRANSFER,
    "qrph": PaymentMethod.QR_CODE,
    "billease": PaymentMethod.BUY_NOW_PAY_LATER,
}


def payment_method_for_source(source_type: str | None) -> PaymentMethod | None:
    """Maps a PayMongo source/payment-method type to the stored method family."""
    if not source_type:
        return None
    if source_type.startswith("brankas_"):
        return PaymentMethod.BANK_TRANSFER
    return _METHOD_BY_SOURCE_TYPE.get(source_type)


def total_from_line_items(line_items: list[dict[str, Any]]) -> int:
    """Charged total in centavos."""
    return sum(int(item.get("amount", 0)) * int(item.get("quantity", 1)) for item in line_items)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _first_payment(*containers: dict[str, Any]) -> dict[str, Any]:
    for container in containers:
        payments = container.get("payments")
        if isinstance(payments, list) and payments:
            return _as_dict(payments[0])
    return {}


def _failure_message(intent_attributes: dict[str, Any], default: str) -> str:
    last_error = intent_attributes.get("last_payment_error")
    if not last_error:
        return default
    if isinstance(last_error, str):
        return last_error
    error = _as_dict(last_error)
    return error.get("detail") or error.get("failed_message") or "Payment failed"


def _from_centavos(value: Any) -> Decimal | None:
    if value is None:
        return None
    return Decimal(int(value)) / 100


Handler = Callable[[PaymongoEvent, str], Awaitable[None]]


class PaymentReconciler:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        guest_repo: GuestRepo,
        payment_repo: PaymentRepo,
        checkout_session_repo: CheckoutSessionRepo,
        id_generator: IdGenerator,
        clock: Clock,
        session_ttl_hours: int = 24,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._guest_repo = guest_repo
        self._payment_repo = payment_repo
        self._checkout_session_repo = checkout_session_repo
        self._id_generator = id_generator
        self._clock = clock
        self._session_ttl = timedelta(hours=session_ttl_hours)
        self._logger = logging.getLogger(__name__)
        self._handlers: dict[str, Handler] = {
            EVENT_CHECKOUT_SESSION_PAID: self.handle_checkout_session_paid,
            EVENT_CHECKOUT_SESSION_FAILED: self.handle_checkout_session_failed,
            EVENT_PAYMENT_PAID: self.handle_payment_succeeded,
            EVENT_PAYMENT_INTENT_SUCCEEDED: self.handle_payment_succeeded,
            EVENT_PAYMENT_FAILED: self.handle_payment_failed,
            EVENT_PAYMENT_INTENT_FAILED: self.handle_payment_failed,
        }

    async def handle(self, event: PaymongoEvent, webhook_event_id: str) -> bool:
        """Runs the handler for the event type. Returns False when the type is not handled."""
        handler = self._handlers.get(event.event_type)
        if handler is None:
            self._logger.info(
                "Unhandled webhook event type",
                extra={"event_id": event.event_id, "event_type": event.event_type},
            )
            return False
        await handler(event, webhook_event_id)
        return True

    # === Checkout session ===

    async def handle_checkout_session_paid(
        self, event: PaymongoEvent, webhook_event_id: str
    ) -> None:
        now = self._clock.now()
        session_id = event.resource.id
        attributes = event.resource.attributes
        reservation = await self._reservation_from_metadata(attributes)

        intent = _as_dict(attributes.get("payment_intent"))
        intent_id = intent.get("id")
        intent_attributes = _as_dict(intent.get("attributes"))
        line_items = [_as_dict(item) for item in attributes.get("line_items") or []]
        currency = (
            (line_items[0].get("currency") or reservation.currency).upper()
            if line_items
            else reservation.currency
        )

        provider_ids = [pid for pid in (intent_id, session_id) if pid]
        payment = await self._payment_repo.find_by_provider_ids(*provider_ids)
        if payment is None:
            payment = await self._create_payment_from_session(
                reservation, session_id, intent_id, line_items, currency, attributes
            )

        payment.status = PaymentStatus.SUCCEEDED
        payment.processed_at = payment.processed_at or now
        payment.captured_at = payment.captured_at or now
        payment.updated_at = now
        if intent_id and not payment.provider_payment_intent_id:
            payment.provider_payment_intent_id = intent_id
        payment.provider_metadata = {
            **payment.provider_metadata,
            "webhook_event_id": webhook_event_id,
            "processed_at": now.isoformat(),
        }

        details = _first_payment(intent_attributes, attributes)
        if details:
            await self._record_provider_details(
                payment,
                details,
                intent_id=intent_id,
                intent_attributes=intent_attributes,
                checkout_session_id=session_id,
                client_key=attributes.get("client_key"),
            )

        await self._payment_repo.update(payment)

        guest = await self._guest_repo.get_by_id(reservation.guest_id)
        await self._checkout_session_repo.upsert(
            CheckoutSession(
                id=self._id_generator.generate_uuid(),
                payment_id=payment.id,
                session_id=session_id,
                url=attributes.get("checkout_url") or "",
                currency=currency,
                line_items=line_items,
                success_url=attributes.get("success_url") or "",
                cancel_url=attributes.get("cancel_url") or "",
                customer_email=guest.email if guest else None,
                billing_details=_as_dict(attributes.get("billing")),
                status=CheckoutSessionStatus.PAID,
                expires_at=now + self._session_ttl,
                session_metadata=_as_dict(attributes.get("metadata")),
                created_at=now,
                updated_at=now,
            )
        )

        reservation.mark_as_paid(now)
        await self._reservation_repo.save_status(reservation)
        self._logger.info(
            "Payment confirmed for reservation",
            extra={
                "event_id": event.event_id,
                "reservation_id": reservation.id,
                "payment_id": payment.id,
                "session_id": session_id,
            },
        )

    async def handle_checkout_session_failed(
        self, event: PaymongoEvent, webhook_event_id: str
    ) -> None:
        now = self._clock.now()
        session_id = event.resource.id
        attributes = event.resource.attributes
        reservation = await self._reservation_from_metadata(attributes)

        intent = _as_dict(attributes.get("payment_intent"))
        failure_message = _failure_message(
            _as_dict(intent.get("attributes")), UNKNOWN_FAILURE_REASON
        )

        payment = await self._payment_repo.find_for_reservation(reservation.id, session_id)
        if payment is None:
            raise ReconciliationFailedError(
                f"Payment not found for reservation {reservation.id} and session {session_id}"
            )
        self._fail_payment(payment, FAILURE_CODE_PAYMENT_FAILED, failure_message, now)
        await self._payment_repo.update(payment)

        await self._fail_reservation(reservation, f"Payment failed: {failure_message}", now)
        self._logger.warning(
            "Reservation payment failed",
            extra={
                "event_id": event.event_id,
                "reservation_id": reservation.id,
                "session_id": session_id,
                "failure_message": failure_message,
            },
        )

    # === Payment / payment intent ===

    async def handle_payment_succeeded(
        self, event: PaymongoEvent, webhook_event_id: str
    ) -> None:
        now = self._clock.now()
        attributes = event.resource.attributes
        payment = await self._payment_for_resource(event)

        payment.status = PaymentStatus.SUCCEEDED
        payment.processed_at = payment.processed_at or now
        payment.captured_at = payment.captured_at or now
        payment.updated_at = now
        method = payment_method_for_source(_as_dict(attributes.get("source")).get("type"))
        if method:
            payment.method = method
        await self._payment_repo.update(payment)

        reservation = await self._reservation_repo.get_by_id(payment.reservation_id)
        if reservation is None:
            raise ReconciliationFailedError(f"Reservation not found: {payment.reservation_id}")
        reservation.mark_as_paid(now)
        await self._reservation_repo.save_status(reservation)
        self._logger.info(
            "Payment intent reconciled as paid",
            extra={
                "event_id": event.event_id,
                "reservation_id": reservation.id,
                "payment_id": payment.id,
            },
        )

    async def handle_payment_failed(self, event: PaymongoEvent, webhook_event_id: str) -> None:
        now = self._clock.now()
        attributes = event.resource.attributes
        payment = await self._payment_for_resource(event)
        failure_message = _failure_message(attributes, "Payment intent failed")

        self._fail_payment(payment, FAILURE_CODE_PAYMENT_INTENT_FAILED, failure_message, now)
        await self._payment_repo.update(payment)

        reservation = await self._reservation_repo.get_by_id(payment.reservation_id)
        if reservation is None:
            raise ReconciliationFailedError(f"Reservation not found: {payment.reservation_id}")
        await self._fail_reservation(reservation, f"Payment failed: {failure_message}", now)

    # === Helpers ===

    async def _reservation_from_metadata(self, attributes: dict[str, Any]) -> Reservation:
        reservation_id = _as_dict(attributes.get("metadata")).get("reservation_id")
        if not reservation_id:
            raise ReconciliationFailedError(
                "No reservation_id found in checkout session metadata"
            )
        reservation = await self._reservation_repo.get_by_id(reservation_id)
        if reservation is None:
            raise ReconciliationFailedError(f"Reservation not found: {reservation_id}")
        return reservation

    async def _payment_for_resource(self, event: PaymongoEvent) -> Payment:
        attributes = event.resource.attributes
        provider_ids = [event.resource.id]
        intent_id = attributes.get("payment_intent_id")
        if intent_id:
            provider_ids.append(intent_id)
        payment = await self._payment_repo.find_by_provider_ids(*provider_ids)
        if payment is None:
            raise ReconciliationFailedError(f"Payment not found: {event.resource.id}")
        return payment

    async def _create_payment_from_session(
        self,
        reservation: Reservation,
        session_id: str,
        intent_id: str | None,
        line_items: list[dict[str, Any]],
        currency: str,
        attributes: dict[str, Any],
    ) -> Payment:
        now = self._clock.now()
        guest = await self._guest_repo.get_by_id(reservation.guest_id)
        amount = (
            Decimal(total_from_line_items(line_items)) / 100
            if line_items
            else reservation.total_amount
        )
        payment = Payment(
            id=self._id_generator.generate_uuid(),
            reservation_id=reservation.id,
            provider=PaymentProvider.PAYMONGO,
            provider_payment_id=intent_id or session_id,
            provider_payment_intent_id=intent_id,
            amount=amount,
            currency=currency,
            status=PaymentStatus.PROCESSING,
            guest_name=guest.full_name if guest else None,
            guest_email=guest.email if guest else None,
            guest_phone=guest.phone if guest else None,
            provider_metadata={
                "checkout_session_id": session_id,
                "line_items": line_items,
                "client_key": attributes.get("client_key"),
            },
            created_at=now,
            updated_at=now,
        )
        self._logger.info(
            "Payment created from webhook",
            extra={"reservation_id": reservation.id, "session_id": session_id},
        )
        return await self._payment_repo.create(payment)

    async def _record_provider_details(
        self,
        payment: Payment,
        details: dict[str, Any],
        intent_id: str | None,
        intent_attributes: dict[str, Any],
        checkout_session_id: str,
        client_key: str | None,
    ) -> None:
        details_attributes = _as_dict(details.get("attributes"))
        source = _as_dict(details_attributes.get("source"))
        source_type = source.get("type")
        method = payment_method_for_source(source_type)
        if method:
            payment.method = method

        provider_payment = await self._payment_repo.upsert_provider_payment(
            ProviderPayment(
                id=self._id_generator.generate_uuid(),
                payment_id=payment.id,
                payment_intent_id=intent_id,
                payment_method_id=_as_dict(intent_attributes.get("payment_method")).get("id"),
                source_id=source.get("id"),
                checkout_session_id=checkout_session_id,
                provider_status=intent_attributes.get("status") or details_attributes.get("status"),
                payment_method_type=source_type,
                client_key=client_key,
                billing_details=_as_dict(details_attributes.get("billing")),
                intent_metadata=_as_dict(intent_attributes.get("metadata")),
                application_fee=_from_centavos(intent_attributes.get("application_fee")),
                processing_fee=_from_centavos(
                    details_attributes.get("fee", intent_attributes.get("fee"))
                ),
            )
        )

        if source_type == "card":
            await self._payment_repo.upsert_provider_card(
                ProviderCard(
                    id=self._id_generator.generate_uuid(),
                    provider_payment_id=provider_payment.id,
                    brand=source.get("brand"),
                    last4=source.get("last4"),
                    exp_month=source.get("exp_month"),
                    exp_year=source.get("exp_year"),
                    country=source.get("country"),
                )
            )

    def _fail_payment(
        self, payment: Payment, failure_code: str, failure_message: str, now: datetime
    ) -> None:
        if payment.is_successful:
            self._logger.warning(
                "Ignoring failure for a succeeded payment",
                extra={"payment_id": payment.id, "failure_code": failure_code},
            )
            return
        payment.status = PaymentStatus.FAILED
        payment.failure_code = failure_code
        payment.failure_message = failure_message
        payment.processed_at = now
        payment.updated_at = now

    async def _fail_reservation(self, reservation: Reservation, reason: str, now: datetime) -> None:
        if reservation.mark_as_payment_failed(reason, now):
            await self._reservation_repo.save_status(reservation)
