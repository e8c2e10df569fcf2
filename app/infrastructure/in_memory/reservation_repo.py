from copy import deepcopy

from app.application.interfaces.reservation_repo import ReservationRepo
from app.domain.entities.reservation import Reservation, ReservationRoom
from app.domain.errors import ConfirmationCollisionError


class InMemoryReservationRepo(ReservationRepo):
    def __init__(self) -> None:
        self.reservations: dict[str, Reservation] = {}

    async def create(self, reservation: Reservation, room: ReservationRoom) -> Reservation:
        # Same guarantee as the unique index on confirmation_number
        if any(
            r.confirmation_number == reservation.confirmation_number
            for r in self.reservations.values()
        ):
            raise ConfirmationCollisionError(reservation.confirmation_number)
        reservation.rooms = [room]
        self.reservations[reservation.id] = deepcopy(reservation)
        return reservation

    async def get_by_id(self, reservation_id: str) -> Reservation | None:
        reservation = self.reservations.get(reservation_id)
        return deepcopy(reservation) if reservation else None

    async def set_payment_reference(
        self,
        reservation_id: str,
        payment_provider: str,
        payment_intent_id: str,
    ) -> None:
        if reservation_id not in self.reservations:
            raise ValueError("Reservation not found")
        self.reservations[reservation_id].payment_provider = payment_provider
        self.reservations[reservation_id].payment_intent_id = payment_intent_id

    async def save_status(self, reservation: Reservation) -> None:
        if reservation.id not in self.reservations:
            raise ValueError("Reservation not found")
        stored = self.reservations[reservation.id]
        stored.status = reservation.status
        stored.payment_status = reservation.payment_status
        stored.paid_at = reservation.paid_at
        stored.cancelled_at = reservation.cancelled_at
        stored.cancellation_reason = reservation.cancellation_reason
