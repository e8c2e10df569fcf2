from sqlalchemy import desc, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.checkout_session_repo import CheckoutSessionRepo
from app.domain.entities.checkout_session import CheckoutSession, CheckoutSessionStatus
from app.infrastructure.db.tables import checkout_sessions


class CheckoutSessionRepoSQL(CheckoutSessionRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, checkout_session: CheckoutSession) -> CheckoutSession:
        stmt = insert(checkout_sessions).values(
            id=checkout_session.id,
            payment_id=checkout_session.payment_id,
            session_id=checkout_session.session_id,
            url=checkout_session.url,
            currency=checkout_session.currency,
            line_items=checkout_session.line_items,
            success_url=checkout_session.success_url,
            cancel_url=checkout_session.cancel_url,
            customer_email=checkout_session.customer_email,
            billing_details=checkout_session.billing_details,
            status=checkout_session.status.value,
            expires_at=checkout_session.expires_at,
            session_metadata=checkout_session.session_metadata,
            created_at=checkout_session.created_at,
            updated_at=checkout_session.updated_at,
        )
        await self._session.execute(stmt)
        return checkout_session

    async def get_by_session_id(self, session_id: str) -> CheckoutSession | None:
        stmt = (
            select(checkout_sessions)
            .where(checkout_sessions.c.session_id == session_id)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_session(row) if row else None

    async def latest_for_payment(self, payment_id: str) -> CheckoutSession | None:
        stmt = (
            select(checkout_sessions)
            .where(checkout_sessions.c.payment_id == payment_id)
            .order_by(desc(checkout_sessions.c.created_at))
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_session(row) if row else None

    async def upsert(self, checkout_session: CheckoutSession) -> CheckoutSession:
        existing = await self.get_by_session_id(checkout_session.session_id)
        if not existing:
            return await self.create(checkout_session)

        stmt = (
            update(checkout_sessions)
            .where(checkout_sessions.c.id == existing.id)
            .values(
                status=checkout_session.status.value,
                payment_id=checkout_session.payment_id,
                updated_at=checkout_session.updated_at,
            )
        )
        await self._session.execute(stmt)
        existing.status = checkout_session.status
        existing.payment_id = checkout_session.payment_id
        existing.updated_at = checkout_session.updated_at
        return existing

    def _map_session(self, row) -> CheckoutSession:
        return CheckoutSession(
            id=row["id"],
            payment_id=row["payment_id"],
            session_id=row["session_id"],
            url=row["url"],
            currency=row["currency"],
            line_items=row["line_items"] or [],
            success_url=row["success_url"],
            cancel_url=row["cancel_url"],
            customer_email=row["customer_email"],
            billing_details=row["billing_details"] or {},
            status=CheckoutSessionStatus(row["status"]),
            expires_at=row["expires_at"],
            session_metadata=row["session_metadata"] or {},
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
