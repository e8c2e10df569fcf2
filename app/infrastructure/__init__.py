"""
Capa de Infraestructura - Sistema de Reservaciones de Hotel.

Esta capa contiene las implementaciones concretas de los puertos (interfaces).
Incluye adaptadores para bases de datos, la pasarela PayMongo y el modo in-memory.

Estructura:
- db/: Tablas, repositorios SQL y transaction manager (SQLAlchemy async)
- gateways/: Adaptador HTTP de PayMongo y códec de firmas de webhook
- in_memory/: Implementaciones in-memory para desarrollo local y testing
- circuit_breaker.py: Circuit breaker para llamadas a la pasarela
"""

# Database
from app.infrastructure.db.repositories.checkout_session_repo_sql import CheckoutSessionRepoSQL
from app.infrastructure.db.repositories.guest_repo_sql import GuestRepoSQL
from app.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from app.infrastructure.db.repositories.property_repo_sql import PropertyRepoSQL
from app.infrastructure.db.repositories.reservation_repo_sql import ReservationRepoSQL
from app.infrastructure.db.repositories.webhook_event_repo_sql import WebhookEventRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager

# Gateways
from app.infrastructure.gateways.paymongo_gateway import PaymongoGateway

# In-Memory (for testing)
from app.infrastructure.in_memory import (
    InMemoryCheckoutSessionRepo,
    InMemoryGuestRepo,
    InMemoryPaymentRepo,
    InMemoryPaymongoGateway,
    InMemoryPropertyRepo,
    InMemoryReservationRepo,
    InMemoryTransactionManager,
    InMemoryWebhookEventRepo,
)

__all__ = [
    # Database - Repositories SQL
    "PropertyRepoSQL",
    "GuestRepoSQL",
    "ReservationRepoSQL",
    "PaymentRepoSQL",
    "CheckoutSessionRepoSQL",
    "WebhookEventRepoSQL",
    "SQLAlchemyTransactionManager",
    # Gateways
    "PaymongoGateway",
    # In-Memory Implementations
    "InMemoryPropertyRepo",
    "InMemoryGuestRepo",
    "InMemoryReservationRepo",
    "InMemoryPaymentRepo",
    "InMemoryCheckoutSessionRepo",
    "InMemoryWebhookEventRepo",
    "InMemoryPaymongoGateway",
    "InMemoryTransactionManager",
]
