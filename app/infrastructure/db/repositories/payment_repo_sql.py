from typing import Sequence

from sqlalchemy import desc, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.payment_repo import PaymentRepo
from app.domain.entities.payment import (
    LineItemType,
    Payment,
    PaymentLineItem,
    PaymentMethod,
    PaymentStatus,
)
from app.domain.entities.provider_payment import ProviderCard, ProviderPayment
from app.infrastructure.db.tables import (
    payment_line_items,
    payments,
    provider_cards,
    provider_payments,
)


def _enum_value(value):
    return value.value if hasattr(value, "value") else value


class PaymentRepoSQL(PaymentRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        payment: Payment,
        line_items: Sequence[PaymentLineItem] = (),
    ) -> Payment:
        stmt = insert(payments).values(
            id=payment.id,
            reservation_id=payment.reservation_id,
            amount=payment.amount,
            currency=payment.currency,
            method=_enum_value(payment.method),
            status=payment.status.value,
            provider=_enum_value(payment.provider),
            provider_payment_id=payment.provider_payment_id,
            provider_payment_intent_id=payment.provider_payment_intent_id,
            room_total=payment.room_total,
            taxes_total=payment.taxes_total,
            fees_total=payment.fees_total,
            guest_name=payment.guest_name,
            guest_email=payment.guest_email,
            guest_phone=payment.guest_phone,
            is_deposit_payment=payment.is_deposit_payment,
            provider_metadata=payment.provider_metadata,
            failure_code=payment.failure_code,
            failure_message=payment.failure_message,
            processed_at=payment.processed_at,
            captured_at=payment.captured_at,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )
        await self._session.execute(stmt)

        for item in line_items:
            await self._session.execute(
                insert(payment_line_items).values(
                    id=item.id,
                    payment_id=payment.id,
                    item_type=item.item_type.value,
                    item_id=item.item_id,
                    item_name=item.item_name,
                    description=item.description,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    total_amount=item.total_amount,
                    valid_from=item.valid_from,
                    valid_to=item.valid_to,
                )
            )
        return payment

    async def get_by_id(self, payment_id: str) -> Payment | None:
        stmt = select(payments).where(payments.c.id == payment_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_payment(row) if row else None

    async def find_by_provider_ids(self, *provider_ids: str) -> Payment | None:
        ids = [pid for pid in provider_ids if pid]
        if not ids:
            return None
        stmt = (
            select(payments)
            .where(
                or_(
                    payments.c.provider_payment_id.in_(ids),
                    payments.c.provider_payment_intent_id.in_(ids),
                )
            )
            .order_by(desc(payments.c.created_at))
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_payment(row) if row else None

    async def find_for_reservation(
        self,
        reservation_id: str,
        provider_id: str,
    ) -> Payment | None:
        stmt = (
            select(payments)
            .where(
                payments.c.reservation_id == reservation_id,
                or_(
                    payments.c.provider_payment_id == provider_id,
                    payments.c.provider_payment_intent_id == provider_id,
                ),
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_payment(row) if row else None

    async def list_by_reservation(self, reservation_id: str) -> Sequence[Payment]:
        stmt = (
            select(payments)
            .where(payments.c.reservation_id == reservation_id)
            .order_by(desc(payments.c.created_at))
        )
        result = await self._session.execute(stmt)
        return [self._map_payment(row) for row in result.mappings().all()]

    async def update(self, payment: Payment) -> Payment:
        stmt = (
            update(payments)
            .where(payments.c.id == payment.id)
            .values(
                status=payment.status.value,
                method=_enum_value(payment.method),
                provider_payment_id=payment.provider_payment_id,
                provider_payment_intent_id=payment.provider_payment_intent_id,
                provider_metadata=payment.provider_metadata,
                failure_code=payment.failure_code,
                failure_message=payment.failure_message,
                processed_at=payment.processed_at,
                captured_at=payment.captured_at,
                updated_at=payment.updated_at,
            )
        )
        await self._session.execute(stmt)
        return payment

    async def list_line_items(self, payment_id: str) -> Sequence[PaymentLineItem]:
        stmt = select(payment_line_items).where(payment_line_items.c.payment_id == payment_id)
        result = await self._session.execute(stmt)
        return [self._map_line_item(row) for row in result.mappings().all()]

    async def upsert_provider_payment(self, provider_payment: ProviderPayment) -> ProviderPayment:
        values = dict(
            payment_intent_id=provider_payment.payment_intent_id,
            payment_method_id=provider_payment.payment_method_id,
            source_id=provider_payment.source_id,
            checkout_session_id=provider_payment.checkout_session_id,
            provider_status=provider_payment.provider_status,
            payment_method_type=provider_payment.payment_method_type,
            client_key=provider_payment.client_key,
            billing_details=provider_payment.billing_details,
            intent_metadata=provider_payment.intent_metadata,
            application_fee=provider_payment.application_fee,
            processing_fee=provider_payment.processing_fee,
        )
        existing = await self.get_provider_payment(provider_payment.payment_id)
        if existing:
            await self._session.execute(
                update(provider_payments)
                .where(provider_payments.c.id == existing.id)
                .values(**values)
            )
            provider_payment.id = existing.id
        else:
            await self._session.execute(
                insert(provider_payments).values(
                    id=provider_payment.id,
                    payment_id=provider_payment.payment_id,
                    **values,
                )
            )
        return provider_payment

    async def get_provider_payment(self, payment_id: str) -> ProviderPayment | None:
        stmt = select(provider_payments).where(provider_payments.c.payment_id == payment_id)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None
        return ProviderPayment(
            id=row["id"],
            payment_id=row["payment_id"],
            payment_intent_id=row["payment_intent_id"],
            payment_method_id=row["payment_method_id"],
            source_id=row["source_id"],
            checkout_session_id=row["checkout_session_id"],
            provider_status=row["provider_status"],
            payment_method_type=row["payment_method_type"],
            client_key=row["client_key"],
            billing_details=row["billing_details"] or {},
            intent_metadata=row["intent_metadata"] or {},
            application_fee=row["application_fee"],
            processing_fee=row["processing_fee"],
        )

    async def upsert_provider_card(self, card: ProviderCard) -> ProviderCard:
        values = dict(
            brand=card.brand,
            last4=card.last4,
            exp_month=card.exp_month,
            exp_year=card.exp_year,
            country=card.country,
        )
        existing = await self.get_provider_card(card.provider_payment_id)
        if existing:
            await self._session.execute(
                update(provider_cards).where(provider_cards.c.id == existing.id).values(**values)
            )
            card.id = existing.id
        else:
            await self._session.execute(
                insert(provider_cards).values(
                    id=card.id,
                    provider_payment_id=card.provider_payment_id,
                    **values,
                )
            )
        return card

    async def get_provider_card(self, provider_payment_id: str) -> ProviderCard | None:
        stmt = select(provider_cards).where(
            provider_cards.c.provider_payment_id == provider_payment_id
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None
        return ProviderCard(
            id=row["id"],
            provider_payment_id=row["provider_payment_id"],
            brand=row["brand"],
            last4=row["last4"],
            exp_month=row["exp_month"],
            exp_year=row["exp_year"],
            country=row["country"],
        )

    def _map_payment(self, row) -> Payment:
        return Payment(
            id=row["id"],
            reservation_id=row["reservation_id"],
            provider=row["provider"],
            provider_payment_id=row["provider_payment_id"],
            provider_payment_intent_id=row["provider_payment_intent_id"],
            amount=row["amount"],
            currency=row["currency"],
            method=PaymentMethod(row["method"]) if row["method"] else None,
            room_total=row["room_total"],
            taxes_total=row["taxes_total"],
            fees_total=row["fees_total"],
            is_deposit_payment=bool(row["is_deposit_payment"]),
            guest_name=row["guest_name"],
            guest_email=row["guest_email"],
            guest_phone=row["guest_phone"],
            status=PaymentStatus(row["status"]),
            provider_metadata=row["provider_metadata"] or {},
            failure_code=row["failure_code"],
            failure_message=row["failure_message"],
            processed_at=row["processed_at"],
            captured_at=row["captured_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _map_line_item(self, row) -> PaymentLineItem:
        return PaymentLineItem(
            id=row["id"],
            payment_id=row["payment_id"],
            item_type=LineItemType(row["item_type"]),
            item_id=row["item_id"],
            item_name=row["item_name"],
            description=row["description"],
            unit_price=row["unit_price"],
            quantity=row["quantity"],
            total_amount=row["total_amount"],
            valid_from=row["valid_from"],
            valid_to=row["valid_to"],
        )
