from copy import deepcopy
from datetime import datetime

from app.application.interfaces.webhook_event_repo import WebhookEventRepo
from app.domain.entities.webhook_event import WebhookEvent, WebhookEventStatus


class InMemoryWebhookEventRepo(WebhookEventRepo):
    def __init__(self) -> None:
        self.events: dict[str, WebhookEvent] = {}

    async def get_by_event_id(self, event_id: str) -> WebhookEvent | None:
        event = self.events.get(event_id)
        return deepcopy(event) if event else None

    async def begin_processing(self, event: WebhookEvent) -> WebhookEvent:
        existing = self.events.get(event.event_id)
        if existing:
            existing.status = WebhookEventStatus.PROCESSING
            existing.retry_count += 1
            existing.signature = event.signature
            existing.error = None
            return deepcopy(existing)

        event.status = WebhookEventStatus.PROCESSING
        event.retry_count = 0
        self.events[event.event_id] = deepcopy(event)
        return event

    async def finish(
        self,
        event_id: str,
        status: WebhookEventStatus,
        processed_at: datetime,
        error: str | None = None,
    ) -> None:
        event = self.events[event_id]
        event.status = status
        event.processed_at = processed_at
        event.error = error
