from copy import deepcopy

from app.application.interfaces.checkout_session_repo import CheckoutSessionRepo
from app.domain.entities.checkout_session import CheckoutSession


class InMemoryCheckoutSessionRepo(CheckoutSessionRepo):
    def __init__(self) -> None:
        self.sessions: dict[str, CheckoutSession] = {}

    async def create(self, checkout_session: CheckoutSession) -> CheckoutSession:
        if checkout_session.session_id in self.sessions:
            raise ValueError("Checkout session already exists")
        self.sessions[checkout_session.session_id] = deepcopy(checkout_session)
        return checkout_session

    async def get_by_session_id(self, session_id: str) -> CheckoutSession | None:
        checkout_session = self.sessions.get(session_id)
        return deepcopy(checkout_session) if checkout_session else None

    async def latest_for_payment(self, payment_id: str) -> CheckoutSession | None:
        # dicts keep insertion order, so the last match is the newest
        latest = None
        for checkout_session in self.sessions.values():
            if checkout_session.payment_id == payment_id:
                latest = checkout_session
        return deepcopy(latest) if latest else None

    async def upsert(self, checkout_session: CheckoutSession) -> CheckoutSession:
        existing = self.sessions.get(checkout_session.session_id)
        if not existing:
            return await self.create(checkout_session)
        existing.status = checkout_session.status
        existing.payment_id = checkout_session.payment_id
        existing.updated_at = checkout_session.updated_at
        return deepcopy(existing)
