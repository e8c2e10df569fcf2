from collections import defaultdict
from copy import deepcopy
from typing import Sequence

from app.application.interfaces.payment_repo import PaymentRepo
from app.domain.entities.payment import Payment, PaymentLineItem
from app.domain.entities.provider_payment import ProviderCard, ProviderPayment


class InMemoryPaymentRepo(PaymentRepo):
    def __init__(self) -> None:
        self._by_id: dict[str, Payment] = {}
        self._order: list[str] = []
        self._line_items: dict[str, list[PaymentLineItem]] = defaultdict(list)
        self._provider_payments: dict[str, ProviderPayment] = {}
        self._provider_cards: dict[str, ProviderCard] = {}

    async def create(
        self,
        payment: Payment,
        line_items: Sequence[PaymentLineItem] = (),
    ) -> Payment:
        if payment.provider_payment_id and any(
            p.provider_payment_id == payment.provider_payment_id for p in self._by_id.values()
        ):
            raise ValueError("Provider payment id already exists")
        self._by_id[payment.id] = deepcopy(payment)
        self._order.append(payment.id)
        for item in line_items:
            item.payment_id = payment.id
            self._line_items[payment.id].append(deepcopy(item))
        return payment

    async def get_by_id(self, payment_id: str) -> Payment | None:
        payment = self._by_id.get(payment_id)
        return deepcopy(payment) if payment else None

    async def find_by_provider_ids(self, *provider_ids: str) -> Payment | None:
        ids = [pid for pid in provider_ids if pid]
        for payment_id in reversed(self._order):
            payment = self._by_id[payment_id]
            if any(payment.matches_provider_id(pid) for pid in ids):
                return deepcopy(payment)
        return None

    async def find_for_reservation(
        self,
        reservation_id: str,
        provider_id: str,
    ) -> Payment | None:
        for payment_id in self._order:
            payment = self._by_id[payment_id]
            if payment.reservation_id == reservation_id and payment.matches_provider_id(
                provider_id
            ):
                return deepcopy(payment)
        return None

    async def list_by_reservation(self, reservation_id: str) -> Sequence[Payment]:
        return [
            deepcopy(self._by_id[pid])
            for pid in reversed(self._order)
            if self._by_id[pid].reservation_id == reservation_id
        ]

    async def update(self, payment: Payment) -> Payment:
        if payment.id not in self._by_id:
            raise ValueError("Payment not found")
        self._by_id[payment.id] = deepcopy(payment)
        return payment

    async def list_line_items(self, payment_id: str) -> Sequence[PaymentLineItem]:
        return [deepcopy(item) for item in self._line_items.get(payment_id, [])]

    async def upsert_provider_payment(self, provider_payment: ProviderPayment) -> ProviderPayment:
        existing = self._provider_payments.get(provider_payment.payment_id)
        if existing:
            provider_payment.id = existing.id
        self._provider_payments[provider_payment.payment_id] = deepcopy(provider_payment)
        return provider_payment

    async def get_provider_payment(self, payment_id: str) -> ProviderPayment | None:
        provider_payment = self._provider_payments.get(payment_id)
        return deepcopy(provider_payment) if provider_payment else None

    async def upsert_provider_card(self, card: ProviderCard) -> ProviderCard:
        existing = self._provider_cards.get(card.provider_payment_id)
        if existing:
            card.id = existing.id
        self._provider_cards[card.provider_payment_id] = deepcopy(card)
        return card

    async def get_provider_card(self, provider_payment_id: str) -> ProviderCard | None:
        card = self._provider_cards.get(provider_payment_id)
        return deepcopy(card) if card else None
