from datetime import datetime

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.webhook_event_repo import WebhookEventRepo
from app.domain.entities.webhook_event import WebhookEvent, WebhookEventStatus
from app.infrastructure.db.tables import webhook_events


class WebhookEventRepoSQL(WebhookEventRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_event_id(self, event_id: str) -> WebhookEvent | None:
        stmt = select(webhook_events).where(webhook_events.c.event_id == event_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_event(row) if row else None

    async def begin_processing(self, event: WebhookEvent) -> WebhookEvent:
        existing = await self.get_by_event_id(event.event_id)
        if existing:
            stmt = (
                update(webhook_events)
                .where(webhook_events.c.id == existing.id)
                .values(
                    status=WebhookEventStatus.PROCESSING.value,
                    retry_count=webhook_events.c.retry_count + 1,
                    signature=event.signature,
                    error=None,
                )
            )
            await self._session.execute(stmt)
            existing.status = WebhookEventStatus.PROCESSING
            existing.retry_count += 1
            existing.signature = event.signature
            existing.error = None
            return existing

        stmt = insert(webhook_events).values(
            id=event.id,
            event_id=event.event_id,
            event_type=event.event_type,
            resource_type=event.resource_type,
            resource_id=event.resource_id,
            signature=event.signature,
            data=event.data,
            headers=event.headers,
            ip_address=event.ip_address,
            status=WebhookEventStatus.PROCESSING.value,
            retry_count=0,
            livemode=event.livemode,
            created_at=event.created_at,
        )
        await self._session.execute(stmt)
        event.status = WebhookEventStatus.PROCESSING
        event.retry_count = 0
        return event

    async def finish(
        self,
        event_id: str,
        status: WebhookEventStatus,
        processed_at: datetime,
        error: str | None = None,
    ) -> None:
        stmt = (
            update(webhook_events)
            .where(webhook_events.c.event_id == event_id)
            .values(status=status.value, processed_at=processed_at, error=error)
        )
        await self._session.execute(stmt)

    def _map_event(self, row) -> WebhookEvent:
        return WebhookEvent(
            id=row["id"],
            event_id=row["event_id"],
            event_type=row["event_type"],
            resource_type=row["resource_type"],
            resource_id=row["resource_id"],
            signature=row["signature"],
            data=row["data"] or {},
            headers=row["headers"] or {},
            ip_address=row["ip_address"],
            status=WebhookEventStatus(row["status"]),
            retry_count=row["retry_count"],
            livemode=bool(row["livemode"]),
            error=row["error"],
            processed_at=row["processed_at"],
            created_at=row["created_at"],
        )
