"""
Capa de Dominio - Sistema de Reservaciones de Hotel.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.
Incluye entidades, value objects y excepciones de dominio.

Estructura:
- entities/: Entidades del dominio (Reservation, Payment, WebhookEvent, etc.)
- value_objects/: Objetos de valor inmutables (Money, ConfirmationNumber, StayDates)
- errors.py: Excepciones específicas del dominio
- constants.py: Constantes del dominio
"""

from app.domain.constants import (
    DEFAULT_CURRENCY,
    PAYMENT_PROVIDER_PAYMONGO,
    RESERVATION_SOURCE_WEBSITE,
)
from app.domain.entities import (
    BusinessUnit,
    CheckoutSession,
    CheckoutSessionStatus,
    Guest,
    LineItemType,
    Payment,
    PaymentLineItem,
    PaymentMethod,
    PaymentProvider,
    PaymentStatus,
    ProviderCard,
    ProviderPayment,
    Reservation,
    ReservationPaymentStatus,
    ReservationRoom,
    ReservationStatus,
    RoomType,
    WebhookEvent,
    WebhookEventStatus,
)
from app.domain.errors import (
    ConfirmationCollisionError,
    DomainError,
    InvalidPropertyError,
    InvalidRoomTypeError,
    InvalidSignatureError,
    InvalidStayDatesError,
    MalformedEventError,
    OccupancyExceededError,
    PaymentGatewayError,
    PriceMismatchError,
    ReconciliationFailedError,
    ReservationAlreadyPaidError,
    ReservationCreationFailedError,
    ReservationNotFoundError,
    TooManyAdultsError,
    TooManyChildrenError,
    WebhookConfigurationError,
    WebhookIngressError,
)
from app.domain.value_objects import ConfirmationNumber, Money, StayDates

__all__ = [
    # Constants
    "DEFAULT_CURRENCY",
    "PAYMENT_PROVIDER_PAYMONGO",
    "RESERVATION_SOURCE_WEBSITE",
    # Entities
    "BusinessUnit",
    "RoomType",
    "Guest",
    "Reservation",
    "ReservationRoom",
    "ReservationStatus",
    "ReservationPaymentStatus",
    "Payment",
    "PaymentLineItem",
    "PaymentMethod",
    "PaymentStatus",
    "PaymentProvider",
    "LineItemType",
    "CheckoutSession",
    "CheckoutSessionStatus",
    "ProviderPayment",
    "ProviderCard",
    "WebhookEvent",
    "WebhookEventStatus",
    # Value Objects
    "Money",
    "ConfirmationNumber",
    "StayDates",
    # Errors
    "DomainError",
    "InvalidPropertyError",
    "InvalidRoomTypeError",
    "OccupancyExceededError",
    "TooManyAdultsError",
    "TooManyChildrenError",
    "InvalidStayDatesError",
    "PriceMismatchError",
    "ReservationNotFoundError",
    "ReservationCreationFailedError",
    "ConfirmationCollisionError",
    "ReservationAlreadyPaidError",
    "PaymentGatewayError",
    "WebhookIngressError",
    "WebhookConfigurationError",
    "InvalidSignatureError",
    "MalformedEventError",
    "ReconciliationFailedError",
]
