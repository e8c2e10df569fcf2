from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.reservation_repo import ReservationRepo
from app.domain.entities.reservation import (
    Reservation,
    ReservationPaymentStatus,
    ReservationRoom,
    ReservationStatus,
)
from app.domain.errors import ConfirmationCollisionError
from app.infrastructure.db.tables import reservation_rooms, reservations


class ReservationRepoSQL(ReservationRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, reservation: Reservation, room: ReservationRoom) -> Reservation:
        stmt = insert(reservations).values(
            id=reservation.id,
            business_unit_id=reservation.business_unit_id,
            guest_id=reservation.guest_id,
            confirmation_number=reservation.confirmation_number,
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
            source=reservation.source,
            special_requests=reservation.special_requests,
            guest_notes=reservation.guest_notes,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )
        try:
            await self._session.execute(stmt)
        except IntegrityError as exc:
            if "confirmation_number" in str(exc.orig):
                raise ConfirmationCollisionError(reservation.confirmation_number) from exc
            raise

        await self._session.execute(
            insert(reservation_rooms).values(
                id=room.id,
                reservation_id=reservation.id,
                room_type_id=room.room_type_id,
                base_rate=room.base_rate,
                rate_per_night=room.rate_per_night,
                nights=room.nights,
                adults=room.adults,
                children=room.children,
                room_subtotal=room.room_subtotal,
                total_amount=room.total_amount,
            )
        )
        reservation.rooms = [room]
        return reservation

    async def get_by_id(self, reservation_id: str) -> Reservation | None:
        stmt = select(reservations).where(reservations.c.id == reservation_id).limit(1)
        return await self._fetch_one(stmt)

    async def set_payment_reference(
        self,
        reservation_id: str,
        payment_provider: str,
        payment_intent_id: str,
    ) -> None:
        stmt = (
            update(reservations)
            .where(reservations.c.id == reservation_id)
            .values(payment_provider=payment_provider, payment_intent_id=payment_intent_id)
        )
        await self._session.execute(stmt)

    async def save_status(self, reservation: Reservation) -> None:
        stmt = (
            update(reservations)
            .where(reservations.c.id == reservation.id)
            .values(
                status=reservation.status.value,
                payment_status=reservation.payment_status.value,
                paid_at=reservation.paid_at,
                cancelled_at=reservation.cancelled_at,
                cancellation_reason=reservation.cancellation_reason,
            )
        )
        await self._session.execute(stmt)

    async def _fetch_one(self, stmt) -> Reservation | None:
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None
        reservation = self._map_reservation(row)
        rooms_result = await self._session.execute(
            select(reservation_rooms).where(reservation_rooms.c.reservation_id == reservation.id)
        )
        reservation.rooms = [self._map_room(r) for r in rooms_result.mappings().all()]
        return reservation

    def _map_reservation(self, row) -> Reservation:
        return Reservation(
            id=row["id"],
            confirmation_number=row["confirmation_number"],
            business_unit_id=row["business_unit_id"],
            guest_id=row["guest_id"],
            check_in_date=row["check_in_date"],
            check_out_date=row["check_out_date"],
            nights=row["nights"],
            adults=row["adults"],
            children=row["children"],
            subtotal=row["subtotal"],
            taxes=row["taxes"],
            service_fee=row["service_fee"],
            total_amount=row["total_amount"],
            currency=row["currency"],
            status=ReservationStatus(row["status"]),
            payment_status=ReservationPaymentStatus(row["payment_status"]),
            source=row["source"],
            special_requests=row["special_requests"],
            guest_notes=row["guest_notes"],
            payment_provider=row["payment_provider"],
            payment_intent_id=row["payment_intent_id"],
            paid_at=row["paid_at"],
            cancelled_at=row["cancelled_at"],
            cancellation_reason=row["cancellation_reason"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _map_room(self, row) -> ReservationRoom:
        return ReservationRoom(
            id=row["id"],
            reservation_id=row["reservation_id"],
            room_type_id=row["room_type_id"],
            base_rate=row["base_rate"],
            rate_per_night=row["rate_per_night"],
            nights=row["nights"],
            adults=row["adults"],
            children=row["children"],
            room_subtotal=row["room_subtotal"],
            total_amount=row["total_amount"],
        )
