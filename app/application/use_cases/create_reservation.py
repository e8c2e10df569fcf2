import logging
from decimal import ROUND_HALF_UP, Decimal

from app.application.dtos.reservation_dto import ReservationSnapshot, ValidatedBooking
from app.application.interfaces.clock import Clock
from app.application.interfaces.guest_repo import GuestRepo
from app.application.interfaces.id_generator import IdGenerator
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.constants import (
    DEFAULT_CURRENCY,
    GUEST_SOURCE_WEBSITE,
    RESERVATION_SOURCE_WEBSITE,
)
from app.domain.entities.guest import Guest
from app.domain.entities.reservation import (
    Reservation,
    ReservationPaymentStatus,
    ReservationRoom,
    ReservationStatus,
)
from app.domain.errors import DomainError, ReservationCreationFailedError


class CreateReservationUseCase:
    """Writes guest, reservation and its room line in a single transaction."""

    def __init__(
        self,
        guest_repo: GuestRepo,
        reservation_repo: ReservationRepo,
        transaction_manager: TransactionManager,
        id_generator: IdGenerator,
        clock: Clock,
    ) -> None:
        self._guest_repo = guest_repo
        self._reservation_repo = reservation_repo
        self._transaction_manager = transaction_manager
        self._id_generator = id_generator
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, booking: ValidatedBooking) -> ReservationSnapshot:
        request = booking.request
        now = self._clock.now()
        confirmation_number = self._id_generator.generate_confirmation_number(now)

        try:
            async with self._transaction_manager.start():
                guest = await self._upsert_guest(booking)

                reservation = Reservation(
                    id=self._id_generator.generate_uuid(),
                    confirmation_number=confirmation_number,
                    business_unit_id=booking.business_unit.id,
                    guest_id=guest.id,
                    check_in_date=request.check_in_date,
                    check_out_date=request.check_out_date,
                    nights=request.nights,
                    adults=request.adults,
                    children=request.children,
                    subtotal=request.subtotal,
                    taxes=request.taxes,
                    service_fee=request.service_fee,
                    total_amount=request.total_amount,
                    currency=booking.business_unit.primary_currency or DEFAULT_CURRENCY,
                    status=ReservationStatus.PENDING,
                    payment_status=ReservationPaymentStatus.PENDING,
                    source=RESERVATION_SOURCE_WEBSITE,
                    special_requests=request.special_requests,
                    guest_notes=request.guest_notes,
                    created_at=now,
                    updated_at=now,
                )
                room = ReservationRoom(
                    id=self._id_generator.generate_uuid(),
                    reservation_id=reservation.id,
                    room_type_id=booking.room_type.id,
                    base_rate=booking.room_type.base_rate,
                    rate_per_night=self._rate_per_night(request.subtotal, request.nights),
                    nights=request.nights,
                    adults=request.adults,
                    children=request.children,
                    room_subtotal=request.subtotal,
                    total_amount=request.subtotal,
                )
                reservation = await self._reservation_repo.create(reservation, room)
        except DomainError:
            raise
        except Exception as exc:
            self._logger.exception(
                "Reservation transaction failed",
                extra={"confirmation_number": confirmation_number},
            )
            raise ReservationCreationFailedError(str(exc)) from exc

        self._logger.info(
            "Reservation created",
            extra={
                "reservation_id": reservation.id,
                "confirmation_number": reservation.confirmation_number,
                "guest_id": guest.id,
            },
        )
        return ReservationSnapshot(
            reservation_id=reservation.id,
            confirmation_number=reservation.confirmation_number,
            business_unit_id=booking.business_unit.id,
            business_unit_name=booking.business_unit.name,
            room_type_id=booking.room_type.id,
            guest_id=guest.id,
            guest_first_name=guest.first_name,
            guest_last_name=guest.last_name,
            guest_email=guest.email,
            guest_phone=guest.phone,
            check_in_date=reservation.check_in_date,
            check_out_date=reservation.check_out_date,
            nights=reservation.nights,
            adults=reservation.adults,
            children=reservation.children,
            subtotal=reservation.subtotal,
            taxes=reservation.taxes,
            service_fee=reservation.service_fee,
            total_amount=reservation.total_amount,
            currency=reservation.currency,
            status=reservation.status.value,
            payment_status=reservation.payment_status.value,
        )

    async def _upsert_guest(self, booking: ValidatedBooking) -> Guest:
        request = booking.request
        now = self._clock.now()
        existing = await self._guest_repo.find_by_email(booking.business_unit.id, request.email)
        if existing:
            existing.update_contact(request.first_name, request.last_name, request.phone)
            existing.updated_at = now
            return await self._guest_repo.update_contact(existing)

        guest = Guest(
            id=self._id_generator.generate_uuid(),
            business_unit_id=booking.business_unit.id,
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            phone=request.phone,
            source=GUEST_SOURCE_WEBSITE,
            created_at=now,
            updated_at=now,
        )
        return await self._guest_repo.create(guest)

    @staticmethod
    def _rate_per_night(subtotal: Decimal, nights: int) -> Decimal:
        return (subtotal / nights).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
