"""DTOs (Data Transfer Objects) de la capa de aplicación."""

from app.application.dtos.payment_dto import (
    CheckoutSessionView,
    PaymentDetailsDTO,
    PaymentStatusDTO,
)
from app.application.dtos.reservation_dto import (
    BookingRequest,
    BookingResult,
    ReservationSnapshot,
    ValidatedBooking,
)
from app.application.dtos.webhook_dto import (
    PaymongoEvent,
    PaymongoResource,
    WebhookAck,
    WebhookDelivery,
)

__all__ = [
    # Reservation DTOs
    "BookingRequest",
    "ValidatedBooking",
    "ReservationSnapshot",
    "BookingResult",
    # Payment DTOs
    "CheckoutSessionView",
    "PaymentDetailsDTO",
    "PaymentStatusDTO",
    # Webhook DTOs
    "PaymongoEvent",
    "PaymongoResource",
    "WebhookDelivery",
    "WebhookAck",
]
