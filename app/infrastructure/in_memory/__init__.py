"""Implementaciones in-memory para desarrollo local y testing."""

from app.infrastructure.in_memory.checkout_session_repo import InMemoryCheckoutSessionRepo
from app.infrastructure.in_memory.guest_repo import InMemoryGuestRepo
from app.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from app.infrastructure.in_memory.paymongo_gateway import StubPaymongoGateway as InMemoryPaymongoGateway
from app.infrastructure.in_memory.property_repo import InMemoryPropertyRepo
from app.infrastructure.in_memory.reservation_repo import InMemoryReservationRepo
from app.infrastructure.in_memory.transaction_manager import NoopTransactionManager as InMemoryTransactionManager
from app.infrastructure.in_memory.webhook_event_repo import InMemoryWebhookEventRepo

__all__ = [
    # Repositories
    "InMemoryPropertyRepo",
    "InMemoryGuestRepo",
    "InMemoryReservationRepo",
    "InMemoryPaymentRepo",
    "InMemoryCheckoutSessionRepo",
    "InMemoryWebhookEventRepo",
    # Gateways
    "InMemoryPaymongoGateway",
    # Infrastructure
    "InMemoryTransactionManager",
]
