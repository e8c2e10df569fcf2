"""Interfaces (Puertos) de la capa de aplicación."""

from app.application.interfaces.checkout_session_repo import CheckoutSessionRepo
from app.application.interfaces.clock import Clock, FakeClock, SystemClock
from app.application.interfaces.guest_repo import GuestRepo
from app.application.interfaces.id_generator import (
    FakeIdGenerator,
    IdGenerator,
    RealIdGenerator,
)
from app.application.interfaces.payment_gateway import (
    CheckoutBilling,
    CheckoutLineItem,
    CheckoutSessionRequest,
    CheckoutSessionResult,
    PaymentGateway,
)
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.property_repo import PropertyRepo
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.webhook_event_repo import WebhookEventRepo

__all__ = [
    # Repositories
    "PropertyRepo",
    "GuestRepo",
    "ReservationRepo",
    "PaymentRepo",
    "CheckoutSessionRepo",
    "WebhookEventRepo",
    # Gateways
    "PaymentGateway",
    "CheckoutSessionRequest",
    "CheckoutSessionResult",
    "CheckoutLineItem",
    "CheckoutBilling",
    # Infrastructure
    "TransactionManager",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "IdGenerator",
    "RealIdGenerator",
    "FakeIdGenerator",
]
