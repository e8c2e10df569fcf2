from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_use_cases
from app.api.schemas.reservations import (
    CreateReservationWithPaymentRequest,
    CreateReservationWithPaymentResponse,
    PaymentDetailsResponse,
    PaymentStatusResponse,
)
from app.application.dtos.reservation_dto import BookingRequest

router = APIRouter()


def _to_booking_request(payload: CreateReservationWithPaymentRequest) -> BookingRequest:
    return BookingRequest(
        business_unit_id=str(payload.business_unit_id),
        room_type_id=str(payload.room_type_id),
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=str(payload.email),
        phone=payload.phone or None,
        special_requests=payload.special_requests,
        guest_notes=payload.guest_notes,
        check_in_date=payload.check_in_date,
        check_out_date=payload.check_out_date,
        adults=payload.adults,
        children=payload.children,
        nights=payload.nights,
        subtotal=payload.subtotal,
        taxes=payload.taxes,
        service_fee=payload.service_fee,
        total_amount=payload.total_amount,
    )


@router.post(
    "/reservations/create-with-payment",
    response_model=CreateReservationWithPaymentResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
)
async def create_reservation_with_payment(
    payload: CreateReservationWithPaymentRequest,
    use_cases=Depends(get_use_cases),
) -> CreateReservationWithPaymentResponse:
    result = await use_cases["create_reservation_with_payment"].execute(
        _to_booking_request(payload)
    )
    return CreateReservationWithPaymentResponse(
        reservation_id=result.reservation_id,
        confirmation_number=result.confirmation_number,
        checkout_url=result.checkout_url,
        payment_session_id=result.payment_session_id,
    )


@router.post(
    "/reservations/{reservation_id}/checkout-session",
    response_model=CreateReservationWithPaymentResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
)
async def retry_checkout_session(
    reservation_id: str,
    use_cases=Depends(get_use_cases),
) -> CreateReservationWithPaymentResponse:
    view = await use_cases["initiate_payment_session"].execute(reservation_id)
    return CreateReservationWithPaymentResponse(
        reservation_id=view.reservation_id,
        confirmation_number=view.confirmation_number,
        checkout_url=view.checkout_url,
        payment_session_id=view.session_id,
    )


@router.get(
    "/reservations/payment-status",
    response_model=PaymentStatusResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def get_payment_status(
    session_id: str | None = Query(default=None, alias="sessionId"),
    reservation_id: str | None = Query(default=None, alias="reservationId"),
    use_cases=Depends(get_use_cases),
) -> PaymentStatusResponse:
    result = await use_cases["get_payment_status"].execute(
        session_id=session_id,
        reservation_id=reservation_id,
    )
    details = None
    if result.payment_details:
        details = PaymentDetailsResponse(
            payment_id=result.payment_details.payment_id,
            amount=result.payment_details.amount,
            currency=result.payment_details.currency,
            provider=result.payment_details.provider,
            method=result.payment_details.method,
            processed_at=result.payment_details.processed_at,
        )
    return PaymentStatusResponse(
        status=result.status,
        reservation_id=result.reservation_id,
        confirmation_number=result.confirmation_number,
        message=result.message,
        payment_details=details,
    )
