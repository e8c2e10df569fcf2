import logging

from app.application.dtos.payment_dto import PaymentDetailsDTO, PaymentStatusDTO
from app.application.interfaces.checkout_session_repo import CheckoutSessionRepo
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.reservation_repo import ReservationRepo
from app.domain.entities.payment import Payment, PaymentStatus
from app.domain.errors import DomainError, ReservationNotFoundError

# Every PaymentStatus must appear here: (view status, default message).
PAYMENT_STATUS_VIEW: dict[PaymentStatus, tuple[str, str]] = {
    PaymentStatus.SUCCEEDED: ("paid", "Payment successful! Your booking is confirmed."),
    PaymentStatus.FAILED: ("failed", "Payment failed. Please try again."),
    PaymentStatus.CANCELLED: ("cancelled", "Payment was cancelled."),
    PaymentStatus.EXPIRED: ("failed", "Payment session expired. Please try again."),
    PaymentStatus.PROCESSING: ("pending", "Payment is being processed..."),
    PaymentStatus.PENDING: ("pending", "Payment is being processed..."),
}


class GetPaymentStatusUseCase:
    """Resolves the latest payment of a reservation into the status the booking page polls."""

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        payment_repo: PaymentRepo,
        checkout_session_repo: CheckoutSessionRepo,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo
        self._checkout_session_repo = checkout_session_repo
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        session_id: str | None = None,
        reservation_id: str | None = None,
    ) -> PaymentStatusDTO:
        if not session_id and not reservation_id:
            raise DomainError(
                message="Either sessionId or reservationId is required",
                code="MISSING_LOOKUP_KEY",
            )

        if session_id:
            payment = await self._payment_for_session(session_id)
            if payment is None:
                raise ReservationNotFoundError(session_id)
            lookup_reservation_id = payment.reservation_id
        else:
            payment = None
            lookup_reservation_id = reservation_id

        reservation = await self._reservation_repo.get_by_id(lookup_reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(lookup_reservation_id)

        if payment is None:
            payments = await self._payment_repo.list_by_reservation(reservation.id)
            payment = payments[0] if payments else None

        if payment is None:
            return PaymentStatusDTO(
                status="pending",
                reservation_id=reservation.id,
                confirmation_number=reservation.confirmation_number,
                message="No payment record found",
            )

        status, message = PAYMENT_STATUS_VIEW[payment.status]
        if payment.status == PaymentStatus.FAILED and payment.failure_message:
            message = payment.failure_message

        return PaymentStatusDTO(
            status=status,
            reservation_id=reservation.id,
            confirmation_number=reservation.confirmation_number,
            message=message,
            payment_details=PaymentDetailsDTO(
                payment_id=payment.id,
                amount=payment.amount,
                currency=payment.currency,
                provider=str(getattr(payment.provider, "value", payment.provider)),
                method=payment.method.value if payment.method else None,
                processed_at=payment.processed_at,
            ),
        )

    async def _payment_for_session(self, session_id: str) -> Payment | None:
        checkout_session = await self._checkout_session_repo.get_by_session_id(session_id)
        if checkout_session:
            return await self._payment_repo.get_by_id(checkout_session.payment_id)
        return await self._payment_repo.find_by_provider_ids(session_id)
