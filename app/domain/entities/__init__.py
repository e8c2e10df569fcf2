"""Entidades del dominio de reservaciones."""

from app.domain.entities.checkout_session import CheckoutSession, CheckoutSessionStatus
from app.domain.entities.guest import Guest
from app.domain.entities.payment import (
    LineItemType,
    Payment,
    PaymentLineItem,
    PaymentMethod,
    PaymentProvider,
    PaymentStatus,
)
from app.domain.entities.property import BusinessUnit, RoomType
from app.domain.entities.provider_payment import ProviderCard, ProviderPayment
from app.domain.entities.reservation import (
    Reservation,
    ReservationPaymentStatus,
    ReservationRoom,
    ReservationStatus,
)
from app.domain.entities.webhook_event import WebhookEvent, WebhookEventStatus

__all__ = [
    # Property
    "BusinessUnit",
    "RoomType",
    # Guest
    "Guest",
    # Reservation
    "Reservation",
    "ReservationRoom",
    "ReservationStatus",
    "ReservationPaymentStatus",
    # Payment
    "Payment",
    "PaymentLineItem",
    "PaymentMethod",
    "PaymentStatus",
    "PaymentProvider",
    "LineItemType",
    # CheckoutSession
    "CheckoutSession",
    "CheckoutSessionStatus",
    # ProviderPayment
    "ProviderPayment",
    "ProviderCard",
    # WebhookEvent
    "WebhookEvent",
    "WebhookEventStatus",
]
