from app.domain.entities.reservation import Reservation, ReservationRoom


class ReservationRepo:
    async def create(self, reservation: Reservation, room: ReservationRoom) -> Reservation:
        """
        Inserta la reservación y su habitación.

        Raises:
            ConfirmationCollisionError: si el número de confirmación ya existe.
        """
        raise NotImplementedError

    async def get_by_id(self, reservation_id: str) -> Reservation | None:
        raise NotImplementedError

    async def set_payment_reference(
        self,
        reservation_id: str,
        payment_provider: str,
        payment_intent_id: str,
    ) -> None:
        raise NotImplementedError

    async def save_status(self, reservation: Reservation) -> None:
        """Persiste estado, estado de pago y fechas de pago/cancelación."""
        raise NotImplementedError
