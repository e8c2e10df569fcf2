import logging

from app.application.dtos.reservation_dto import BookingRequest, BookingResult
from app.application.use_cases.create_reservation import CreateReservationUseCase
from app.application.use_cases.initiate_payment_session import InitiatePaymentSessionUseCase
from app.application.use_cases.validate_booking import ValidateBookingUseCase
from app.domain.errors import ConfirmationCollisionError, ReservationCreationFailedError


class CreateReservationWithPaymentUseCase:
    """Validate, write the reservation and open its checkout session."""

    def __init__(
        self,
        validate_booking: ValidateBookingUseCase,
        create_reservation: CreateReservationUseCase,
        initiate_payment_session: InitiatePaymentSessionUseCase,
        confirmation_retry_attempts: int = 3,
    ) -> None:
        self._validate_booking = validate_booking
        self._create_reservation = create_reservation
        self._initiate_payment_session = initiate_payment_session
        self._confirmation_retry_attempts = max(1, confirmation_retry_attempts)
        self._logger = logging.getLogger(__name__)

    async def execute(self, request: BookingRequest) -> BookingResult:
        booking = await self._validate_booking.execute(request)

        snapshot = None
        for attempt in range(1, self._confirmation_retry_attempts + 1):
            try:
                snapshot = await self._create_reservation.execute(booking)
                break
            except ConfirmationCollisionError as exc:
                self._logger.warning(
                    "Confirmation number collision, regenerating",
                    extra={"attempt": attempt, "confirmation_number": exc.confirmation_number},
                )
        if snapshot is None:
            raise ReservationCreationFailedError(
                f"Could not allocate a unique confirmation number after "
                f"{self._confirmation_retry_attempts} attempts"
            )

        session = await self._initiate_payment_session.execute(snapshot.reservation_id)
        return BookingResult(
            reservation_id=snapshot.reservation_id,
            confirmation_number=snapshot.confirmation_number,
            checkout_url=session.checkout_url,
            payment_session_id=session.session_id,
        )
