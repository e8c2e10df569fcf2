import logging
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal

from app.application.dtos.payment_dto import CheckoutSessionView
from app.application.interfaces.checkout_session_repo import CheckoutSessionRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.guest_repo import GuestRepo
from app.application.interfaces.id_generator import IdGenerator
from app.application.interfaces.payment_gateway import (
    CheckoutBilling,
    CheckoutLineItem,
    CheckoutSessionRequest,
    PaymentGateway,
)
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.property_repo import PropertyRepo
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.constants import PAYMENT_PROVIDER_PAYMONGO
from app.domain.entities.checkout_session import CheckoutSession, CheckoutSessionStatus
from app.domain.entities.guest import Guest
from app.domain.entities.payment import (
    LineItemType,
    Payment,
    PaymentLineItem,
    PaymentProvider,
    PaymentStatus,
)
from app.domain.entities.reservation import Reservation
from app.domain.errors import ReservationAlreadyPaidError, ReservationNotFoundError


def _plural(count: int, singular: str, plural: str | None = None) -> str:
    return singular if count == 1 else (plural or f"{singular}s")


class InitiatePaymentSessionUseCase:
    """
    Opens (or reuses) a PayMongo checkout session for a pending reservation.

    The gateway is called outside any transaction. Payment, checkout session,
    line items and the reservation's payment reference are then written
    together, so a gateway failure leaves no payment rows behind.
    """

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        guest_repo: GuestRepo,
        property_repo: PropertyRepo,
        payment_repo: PaymentRepo,
        checkout_session_repo: CheckoutSessionRepo,
        payment_gateway: PaymentGateway,
        transaction_manager: TransactionManager,
        id_generator: IdGenerator,
        clock: Clock,
        app_base_url: str,
        payment_method_types: list[str],
        session_ttl_hours: int = 24,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._guest_repo = guest_repo
        self._property_repo = property_repo
        self._payment_repo = payment_repo
        self._checkout_session_repo = checkout_session_repo
        self._payment_gateway = payment_gateway
        self._transaction_manager = transaction_manager
        self._id_generator = id_generator
        self._clock = clock
        self._app_base_url = app_base_url.rstrip("/")
        self._payment_method_types = payment_method_types
        self._session_ttl = timedelta(hours=session_ttl_hours)
        self._logger = logging.getLogger(__name__)

    async def execute(self, reservation_id: str) -> CheckoutSessionView:
        reservation = await self._reservation_repo.get_by_id(reservation_id)
        if not reservation:
            raise ReservationNotFoundError(reservation_id)
        if reservation.is_paid:
            raise ReservationAlreadyPaidError(reservation.id)

        reusable = await self._find_reusable_session(reservation)
        if reusable:
            self._logger.info(
                "Reusing open checkout session",
                extra={"reservation_id": reservation.id, "session_id": reusable.session_id},
            )
            return CheckoutSessionView(
                reservation_id=reservation.id,
                confirmation_number=reservation.confirmation_number,
                session_id=reusable.session_id,
                checkout_url=reusable.url or "",
                reused=True,
            )

        guest = await self._guest_repo.get_by_id(reservation.guest_id)
        if not guest:
            raise ReservationNotFoundError(reservation_id)
        business_unit = await self._property_repo.get_business_unit(reservation.business_unit_id)
        property_name = business_unit.name if business_unit else ""

        success_url = f"{self._app_base_url}/booking/success?reservation_id={reservation.id}"
        cancel_url = f"{self._app_base_url}/booking/cancel?reservation_id={reservation.id}"
        gateway_line_item = CheckoutLineItem(
            name=f"Booking Ref. ({reservation.confirmation_number})",
            description=(
                f"{property_name} - {reservation.nights} "
                f"{_plural(reservation.nights, 'night')}"
            ),
            amount=reservation.total.to_centavos(),
            currency=reservation.currency,
            quantity=1,
        )
        billing = CheckoutBilling(name=guest.full_name, email=guest.email, phone=guest.phone)
        metadata = self._build_metadata(reservation, guest)

        # PaymentGatewayError propagates; the reservation stays PENDING.
        result = await self._payment_gateway.create_checkout_session(
            CheckoutSessionRequest(
                line_items=[gateway_line_item],
                payment_method_types=list(self._payment_method_types),
                billing=billing,
                description=f"Reservation {reservation.confirmation_number} - {property_name}",
                reference_number=reservation.confirmation_number,
                success_url=success_url,
                cancel_url=cancel_url,
                metadata=metadata,
            )
        )

        now = self._clock.now()
        async with self._transaction_manager.start():
            payment = Payment(
                id=self._id_generator.generate_uuid(),
                reservation_id=reservation.id,
                provider=PaymentProvider.PAYMONGO,
                provider_payment_id=result.session_id,
                provider_payment_intent_id=result.payment_intent_id,
                amount=reservation.total_amount,
                currency=reservation.currency,
                room_total=reservation.subtotal,
                taxes_total=reservation.taxes,
                fees_total=reservation.service_fee,
                is_deposit_payment=True,
                guest_name=guest.full_name,
                guest_email=guest.email,
                guest_phone=guest.phone,
                status=PaymentStatus.PENDING,
                provider_metadata={"checkout_session_id": result.session_id},
                created_at=now,
                updated_at=now,
            )
            payment = await self._payment_repo.create(
                payment, await self._build_line_items(reservation, payment.id)
            )
            await self._checkout_session_repo.create(
                CheckoutSession(
                    id=self._id_generator.generate_uuid(),
                    payment_id=payment.id,
                    session_id=result.session_id,
                    url=result.checkout_url,
                    currency=reservation.currency,
                    line_items=[
                        {
                            "currency": gateway_line_item.currency,
                            "amount": gateway_line_item.amount,
                            "description": gateway_line_item.description,
                            "name": gateway_line_item.name,
                            "quantity": gateway_line_item.quantity,
                        }
                    ],
                    success_url=success_url,
                    cancel_url=cancel_url,
                    customer_email=guest.email,
                    billing_details={
                        "name": billing.name,
                        "email": billing.email,
                        "phone": billing.phone,
                    },
                    status=CheckoutSessionStatus.ACTIVE,
                    expires_at=now + self._session_ttl,
                    session_metadata={
                        "reservation_id": reservation.id,
                        "confirmation_number": reservation.confirmation_number,
                    },
                    created_at=now,
                    updated_at=now,
                )
            )
            await self._reservation_repo.set_payment_reference(
                reservation_id=reservation.id,
                payment_provider=PAYMENT_PROVIDER_PAYMONGO,
                payment_intent_id=result.payment_intent_id or result.session_id,
            )

        self._logger.info(
            "Checkout session created",
            extra={
                "reservation_id": reservation.id,
                "confirmation_number": reservation.confirmation_number,
                "session_id": result.session_id,
                "payment_id": payment.id,
            },
        )
        return CheckoutSessionView(
            reservation_id=reservation.id,
            confirmation_number=reservation.confirmation_number,
            session_id=result.session_id,
            checkout_url=result.checkout_url,
            reused=False,
        )

    async def _find_reusable_session(self, reservation: Reservation) -> CheckoutSession | None:
        now = self._clock.now()
        for payment in await self._payment_repo.list_by_reservation(reservation.id):
            if not payment.is_open:
                continue
            session = await self._checkout_session_repo.latest_for_payment(payment.id)
            if session and session.is_usable_at(now):
                return session
        return None

    @staticmethod
    def _build_metadata(reservation: Reservation, guest: Guest) -> dict[str, str]:
        # Webhooks find their way back to the reservation only through this bag.
        room_type_id = reservation.rooms[0].room_type_id if reservation.rooms else ""
        return {
            "reservation_id": reservation.id,
            "confirmation_number": reservation.confirmation_number,
            "business_unit_id": reservation.business_unit_id,
            "guest_id": guest.id,
            "guest_name": guest.full_name,
            "check_in": reservation.check_in_date.isoformat() if reservation.check_in_date else "",
            "check_out": reservation.check_out_date.isoformat() if reservation.check_out_date else "",
            "adults": str(reservation.adults),
            "children": str(reservation.children),
            "nights": str(reservation.nights),
            "room_type_id": room_type_id,
        }

    async def _build_line_items(
        self, reservation: Reservation, payment_id: str
    ) -> list[PaymentLineItem]:
        room = reservation.rooms[0] if reservation.rooms else None
        room_type = (
            await self._property_repo.get_room_type(room.room_type_id) if room else None
        )
        room_name = room_type.name if room_type else "Room"
        occupancy = f"{reservation.adults} {_plural(reservation.adults, 'adult')}"
        if reservation.children > 0:
            occupancy += (
                f" and {reservation.children} "
                f"{_plural(reservation.children, 'child', 'children')}"
            )

        items = [
            PaymentLineItem(
                id=self._id_generator.generate_uuid(),
                payment_id=payment_id,
                item_type=LineItemType.ROOM,
                item_id=room.room_type_id if room else None,
                item_name=(
                    f"{room_name} - {reservation.nights} {_plural(reservation.nights, 'night')}"
                ),
                description=f"Room booking for {occupancy}",
                unit_price=(reservation.subtotal / reservation.nights).quantize(
                    Decimal("0.01"), rounding=ROUND_HALF_UP
                ),
                quantity=reservation.nights,
                total_amount=reservation.subtotal,
                valid_from=reservation.check_in_date,
                valid_to=reservation.check_out_date,
            )
        ]
        if reservation.taxes > 0:
            items.append(
                PaymentLineItem(
                    id=self._id_generator.generate_uuid(),
                    payment_id=payment_id,
                    item_type=LineItemType.TAX,
                    item_name="Government Tax",
                    description="Required government taxes and fees",
                    unit_price=reservation.taxes,
                    quantity=1,
                    total_amount=reservation.taxes,
                )
            )
        if reservation.service_fee > 0:
            items.append(
                PaymentLineItem(
                    id=self._id_generator.generate_uuid(),
                    payment_id=payment_id,
                    item_type=LineItemType.FEE,
                    item_name="Service Fee",
                    description="Hotel service fee",
                    unit_price=reservation.service_fee,
                    quantity=1,
                    total_amount=reservation.service_fee,
                )
            )
        return items
