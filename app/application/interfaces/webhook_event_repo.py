from datetime import datetime

from app.domain.entities.webhook_event import WebhookEvent, WebhookEventStatus


class WebhookEventRepo:
    async def get_by_event_id(self, event_id: str) -> WebhookEvent | None:
        raise NotImplementedError

    async def begin_processing(self, event: WebhookEvent) -> WebhookEvent:
        """
        Registra el evento en estado processing.

        Primera vez: lo crea. Reintento: incrementa retry_count y vuelve a
        processing, actualizando la firma recibida.
        """
        raise NotImplementedError

    async def finish(
        self,
        event_id: str,
        status: WebhookEventStatus,
        processed_at: datetime,
        error: str | None = None,
    ) -> None:
        raise NotImplementedError
