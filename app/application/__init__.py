"""
Capa de Aplicación - Sistema de Reservaciones de Hotel.

Esta capa contiene los casos de uso, DTOs e interfaces (puertos).
Orquesta la lógica de negocio y define los contratos con la infraestructura.

Estructura:
- use_cases/: Casos de uso del sistema (reserva, sesión de pago, webhooks)
- dtos/: Data Transfer Objects
- interfaces/: Puertos (contratos para adaptadores)
"""

from app.application.dtos import (
    BookingRequest,
    BookingResult,
    CheckoutSessionView,
    PaymentDetailsDTO,
    PaymentStatusDTO,
    PaymongoEvent,
    ReservationSnapshot,
    ValidatedBooking,
    WebhookAck,
    WebhookDelivery,
)
from app.application.interfaces import (
    CheckoutSessionRepo,
    Clock,
    FakeClock,
    FakeIdGenerator,
    GuestRepo,
    IdGenerator,
    PaymentGateway,
    PaymentRepo,
    PropertyRepo,
    RealIdGenerator,
    ReservationRepo,
    SystemClock,
    TransactionManager,
    WebhookEventRepo,
)

__all__ = [
    # DTOs
    "BookingRequest",
    "ValidatedBooking",
    "ReservationSnapshot",
    "BookingResult",
    "CheckoutSessionView",
    "PaymentDetailsDTO",
    "PaymentStatusDTO",
    "PaymongoEvent",
    "WebhookDelivery",
    "WebhookAck",
    # Interfaces - Repositories
    "PropertyRepo",
    "GuestRepo",
    "ReservationRepo",
    "PaymentRepo",
    "CheckoutSessionRepo",
    "WebhookEventRepo",
    # Interfaces - Gateways
    "PaymentGateway",
    # Interfaces - Infrastructure
    "TransactionManager",
    # Interfaces - Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "IdGenerator",
    "RealIdGenerator",
    "FakeIdGenerator",
]
