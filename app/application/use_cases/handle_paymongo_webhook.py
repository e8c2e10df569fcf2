import json
import logging

from pydantic import ValidationError

from app.application.dtos.webhook_dto import PaymongoEvent, WebhookAck, WebhookDelivery
from app.application.interfaces.clock import Clock
from app.application.interfaces.id_generator import IdGenerator
from app.application.interfaces.payment_gateway import PaymentGateway
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.webhook_event_repo import WebhookEventRepo
from app.application.use_cases.reconciliation import PaymentReconciler
from app.domain.entities.webhook_event import WebhookEvent, WebhookEventStatus
from app.domain.errors import MalformedEventError, WebhookConfigurationError


class HandlePaymongoWebhookUseCase:
    """
    Verifies, records and dispatches a PayMongo webhook delivery.

    Ingress errors (configuration, signature, envelope) are raised before
    anything is stored. Once the signature checks out the delivery is always
    acknowledged: a handler failure is kept on the event row as ``failed``
    instead of being reported back to the gateway.
    """

    def __init__(
        self,
        webhook_event_repo: WebhookEventRepo,
        reconciler: PaymentReconciler,
        payment_gateway: PaymentGateway,
        transaction_manager: TransactionManager,
        id_generator: IdGenerator,
        clock: Clock,
        webhook_secret: str | None,
    ) -> None:
        self._webhook_event_repo = webhook_event_repo
        self._reconciler = reconciler
        self._payment_gateway = payment_gateway
        self._transaction_manager = transaction_manager
        self._id_generator = id_generator
        self._clock = clock
        self._webhook_secret = webhook_secret
        self._logger = logging.getLogger(__name__)

    async def execute(self, delivery: WebhookDelivery) -> WebhookAck:
        if not delivery.raw_body or not delivery.signature or not self._webhook_secret:
            self._logger.error("Webhook rejected: missing body, signature or secret")
            raise WebhookConfigurationError()

        self._payment_gateway.verify_webhook_signature(
            payload=delivery.raw_body,
            signature_header=delivery.signature,
            webhook_secret=self._webhook_secret,
        )
        event = self._parse_event(delivery.raw_body)
        self._logger.info(
            "Received valid webhook event",
            extra={
                "event_id": event.event_id,
                "event_type": event.event_type,
                "resource_id": event.resource.id,
            },
        )

        async with self._transaction_manager.start():
            existing = await self._webhook_event_repo.get_by_event_id(event.event_id)
            if existing and existing.is_processed:
                self._logger.info(
                    "Webhook event already processed",
                    extra={"event_id": event.event_id},
                )
                return WebhookAck(received=True, processed=True)

            stored = await self._webhook_event_repo.begin_processing(
                WebhookEvent(
                    id=self._id_generator.generate_uuid(),
                    event_id=event.event_id,
                    event_type=event.event_type,
                    resource_type=event.resource.type,
                    resource_id=event.resource.id,
                    signature=delivery.signature,
                    data=json.loads(delivery.raw_body),
                    headers=dict(delivery.headers),
                    ip_address=delivery.ip_address,
                    status=WebhookEventStatus.PROCESSING,
                    livemode=event.livemode,
                    created_at=self._clock.now(),
                )
            )

        try:
            async with self._transaction_manager.start():
                processed = await self._reconciler.handle(event, stored.id)
        except Exception as exc:
            error = str(exc) or exc.__class__.__name__
            self._logger.exception(
                "Webhook handler failed",
                extra={"event_id": event.event_id, "event_type": event.event_type},
            )
            async with self._transaction_manager.start():
                await self._webhook_event_repo.finish(
                    event_id=event.event_id,
                    status=WebhookEventStatus.FAILED,
                    processed_at=self._clock.now(),
                    error=error,
                )
            return WebhookAck(received=True, processed=False, error=error)

        async with self._transaction_manager.start():
            await self._webhook_event_repo.finish(
                event_id=event.event_id,
                status=WebhookEventStatus.PROCESSED if processed else WebhookEventStatus.IGNORED,
                processed_at=self._clock.now(),
            )
        return WebhookAck(received=True, processed=processed)

    @staticmethod
    def _parse_event(raw_body: bytes) -> PaymongoEvent:
        try:
            return PaymongoEvent.model_validate(json.loads(raw_body))
        except (ValueError, ValidationError) as exc:
            raise MalformedEventError(str(exc).splitlines()[0]) from exc
