import logging

from app.application.dtos.reservation_dto import BookingRequest, ValidatedBooking
from app.application.interfaces.property_repo import PropertyRepo
from app.domain.errors import (
    InvalidPropertyError,
    InvalidRoomTypeError,
    InvalidStayDatesError,
    OccupancyExceededError,
    PriceMismatchError,
    TooManyAdultsError,
    TooManyChildrenError,
)
from app.domain.value_objects.stay_dates import StayDates


class ValidateBookingUseCase:
    """
    Business checks that run before anything is written.

    The rules are evaluated in a fixed order and the first violation wins,
    so the caller always gets the same error for the same request.
    """

    def __init__(self, property_repo: PropertyRepo) -> None:
        self._property_repo = property_repo
        self._logger = logging.getLogger(__name__)

    async def execute(self, request: BookingRequest) -> ValidatedBooking:
        business_unit = await self._property_repo.get_business_unit(request.business_unit_id)
        if not business_unit or not business_unit.is_active:
            raise InvalidPropertyError(request.business_unit_id)

        room_type = await self._property_repo.get_room_type(request.room_type_id)
        if (
            not room_type
            or not room_type.is_active
            or not room_type.belongs_to(request.business_unit_id)
        ):
            raise InvalidRoomTypeError(request.room_type_id)

        if request.total_guests > room_type.max_occupancy:
            raise OccupancyExceededError(room_type.max_occupancy, request.total_guests)
        if request.adults > room_type.max_adults:
            raise TooManyAdultsError(room_type.max_adults, request.adults)
        if request.children > room_type.max_children:
            raise TooManyChildrenError(room_type.max_children, request.children)

        try:
            StayDates(check_in=request.check_in_date, check_out=request.check_out_date)
        except ValueError as exc:
            raise InvalidStayDatesError() from exc

        expected_total = request.subtotal + request.taxes + request.service_fee
        if expected_total != request.total_amount:
            raise PriceMismatchError(expected_total, request.total_amount)

        self._logger.debug(
            "Booking request validated",
            extra={
                "business_unit_id": business_unit.id,
                "room_type_id": room_type.id,
                "guests": request.total_guests,
            },
        )
        return ValidatedBooking(request=request, business_unit=business_unit, room_type=room_type)
