from app.domain.entities.checkout_session import CheckoutSession


class CheckoutSessionRepo:
    async def create(self, checkout_session: CheckoutSession) -> CheckoutSession:
        raise NotImplementedError

    async def get_by_session_id(self, session_id: str) -> CheckoutSession | None:
        raise NotImplementedError

    async def latest_for_payment(self, payment_id: str) -> CheckoutSession | None:
        raise NotImplementedError

    async def upsert(self, checkout_session: CheckoutSession) -> CheckoutSession:
        """Crea la sesión si no existe; si existe actualiza estado y payment_id."""
        raise NotImplementedError
