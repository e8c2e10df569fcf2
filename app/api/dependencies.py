from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import AsyncSessionLocal
from app.application.interfaces.checkout_session_repo import CheckoutSessionRepo
from app.application.interfaces.clock import Clock, SystemClock
from app.application.interfaces.guest_repo import GuestRepo
from app.application.interfaces.id_generator import IdGenerator, RealIdGenerator
from app.application.interfaces.payment_gateway import PaymentGateway
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.property_repo import PropertyRepo
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.webhook_event_repo import WebhookEventRepo
from app.application.use_cases.create_reservation import CreateReservationUseCase
from app.application.use_cases.create_reservation_with_payment import (
    CreateReservationWithPaymentUseCase,
)
from app.application.use_cases.get_payment_status import GetPaymentStatusUseCase
from app.application.use_cases.handle_paymongo_webhook import HandlePaymongoWebhookUseCase
from app.application.use_cases.initiate_payment_session import InitiatePaymentSessionUseCase
from app.application.use_cases.reconciliation import PaymentReconciler
from app.application.use_cases.validate_booking import ValidateBookingUseCase
from app.config import Settings, get_settings
from app.infrastructure.db.repositories.checkout_session_repo_sql import CheckoutSessionRepoSQL
from app.infrastructure.db.repositories.guest_repo_sql import GuestRepoSQL
from app.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from app.infrastructure.db.repositories.property_repo_sql import PropertyRepoSQL
from app.infrastructure.db.repositories.reservation_repo_sql import ReservationRepoSQL
from app.infrastructure.db.repositories.webhook_event_repo_sql import WebhookEventRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager
from app.infrastructure.gateways.paymongo_gateway import PaymongoGateway
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


async def get_session(settings: Settings = Depends(get_settings)) -> AsyncSession | None:
    if settings.use_in_memory:
        yield None
        return
    async with AsyncSessionLocal() as session:
        yield session


@lru_cache(maxsize=1)
def _in_memory_bundle():
    property_repo = InMemoryPropertyRepo()
    property_repo.seed_demo()
    return {
        "property_repo": property_repo,
        "guest_repo": InMemoryGuestRepo(),
        "reservation_repo": InMemoryReservationRepo(),
        "payment_repo": InMemoryPaymentRepo(),
        "checkout_session_repo": InMemoryCheckoutSessionRepo(),
        "webhook_event_repo": InMemoryWebhookEventRepo(),
        "payment_gateway": InMemoryPaymongoGateway(),
        "tx_manager": InMemoryTransactionManager(),
    }


def build_use_cases(
    settings: Settings,
    *,
    property_repo: PropertyRepo,
    guest_repo: GuestRepo,
    reservation_repo: ReservationRepo,
    payment_repo: PaymentRepo,
    checkout_session_repo: CheckoutSessionRepo,
    webhook_event_repo: WebhookEventRepo,
    payment_gateway: PaymentGateway,
    tx_manager: TransactionManager,
    id_generator: IdGenerator | None = None,
    clock: Clock | None = None,
) -> dict:
    id_generator = id_generator or RealIdGenerator()
    clock = clock or SystemClock()

    initiate_payment_session = InitiatePaymentSessionUseCase(
        reservation_repo=reservation_repo,
        guest_repo=guest_repo,
        property_repo=property_repo,
        payment_repo=payment_repo,
        checkout_session_repo=checkout_session_repo,
        payment_gateway=payment_gateway,
        transaction_manager=tx_manager,
        id_generator=id_generator,
        clock=clock,
        app_base_url=settings.app_base_url,
        payment_method_types=settings.paymongo_payment_method_types,
        session_ttl_hours=settings.checkout_session_ttl_hours,
    )
    reconciler = PaymentReconciler(
        reservation_repo=reservation_repo,
        guest_repo=guest_repo,
        payment_repo=payment_repo,
        checkout_session_repo=checkout_session_repo,
        id_generator=id_generator,
        clock=clock,
        session_ttl_hours=settings.checkout_session_ttl_hours,
    )
    return {
        "create_reservation_with_payment": CreateReservationWithPaymentUseCase(
            validate_booking=ValidateBookingUseCase(property_repo=property_repo),
            create_reservation=CreateReservationUseCase(
                guest_repo=guest_repo,
                reservation_repo=reservation_repo,
                transaction_manager=tx_manager,
                id_generator=id_generator,
                clock=clock,
            ),
            initiate_payment_session=initiate_payment_session,
            confirmation_retry_attempts=settings.confirmation_retry_attempts,
        ),
        "initiate_payment_session": initiate_payment_session,
        "handle_webhook": HandlePaymongoWebhookUseCase(
            webhook_event_repo=webhook_event_repo,
            reconciler=reconciler,
            payment_gateway=payment_gateway,
            transaction_manager=tx_manager,
            id_generator=id_generator,
            clock=clock,
            webhook_secret=settings.paymongo_webhook_secret,
        ),
        "get_payment_status": GetPaymentStatusUseCase(
            reservation_repo=reservation_repo,
            payment_repo=payment_repo,
            checkout_session_repo=checkout_session_repo,
        ),
    }


def get_use_cases(
    settings: Settings = Depends(get_settings),
    session: AsyncSession | None = Depends(get_session),
):
    if settings.use_in_memory:
        return build_use_cases(settings, **_in_memory_bundle())

    if not session:
        raise RuntimeError("DB session not available")

    return build_use_cases(
        settings,
        property_repo=PropertyRepoSQL(session),
        guest_repo=GuestRepoSQL(session),
        reservation_repo=ReservationRepoSQL(session),
        payment_repo=PaymentRepoSQL(session),
        checkout_session_repo=CheckoutSessionRepoSQL(session),
        webhook_event_repo=WebhookEventRepoSQL(session),
        payment_gateway=PaymongoGateway(
            secret_key=settings.paymongo_secret_key,
            api_base=settings.paymongo_api_base,
            timeout_seconds=settings.paymongo_timeout_seconds,
        ),
        tx_manager=SQLAlchemyTransactionManager(session),
    )
