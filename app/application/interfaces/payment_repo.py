from typing import Sequence

from app.domain.entities.payment import Payment, PaymentLineItem
from app.domain.entities.provider_payment import ProviderCard, ProviderPayment


class PaymentRepo:
    async def create(
        self,
        payment: Payment,
        line_items: Sequence[PaymentLineItem] = (),
    ) -> Payment:
        raise NotImplementedError

    async def get_by_id(self, payment_id: str) -> Payment | None:
        raise NotImplementedError

    async def find_by_provider_ids(self, *provider_ids: str) -> Payment | None:
        """Busca por id de sesión o de payment intent (cualquiera de los dos)."""
        raise NotImplementedError

    async def find_for_reservation(
        self,
        reservation_id: str,
        provider_id: str,
    ) -> Payment | None:
        raise NotImplementedError

    async def list_by_reservation(self, reservation_id: str) -> Sequence[Payment]:
        """Pagos de la reservación, del más reciente al más antiguo."""
        raise NotImplementedError

    async def update(self, payment: Payment) -> Payment:
        """Persiste estado, método, identificadores de pasarela y datos de falla."""
        raise NotImplementedError

    async def list_line_items(self, payment_id: str) -> Sequence[PaymentLineItem]:
        raise NotImplementedError

    async def upsert_provider_payment(self, provider_payment: ProviderPayment) -> ProviderPayment:
        """Crea o actualiza el detalle de pasarela (uno por payment_id)."""
        raise NotImplementedError

    async def get_provider_payment(self, payment_id: str) -> ProviderPayment | None:
        raise NotImplementedError

    async def upsert_provider_card(self, card: ProviderCard) -> ProviderCard:
        """Crea o actualiza la tarjeta (una por provider_payment_id)."""
        raise NotImplementedError

    async def get_provider_card(self, provider_payment_id: str) -> ProviderCard | None:
        raise NotImplementedError
