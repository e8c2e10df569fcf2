from uuid import uuid4

from app.application.interfaces.payment_gateway import (
    CheckoutSessionRequest,
    CheckoutSessionResult,
    PaymentGateway,
)
from app.domain.errors import PaymentGatewayError
from app.infrastructure.gateways.paymongo_signature import verify_signature


class StubPaymongoGateway(PaymentGateway):
    """Answers like PayMongo without network access; signatures are still checked."""

    def __init__(self, checkout_base_url: str = "https://checkout.paymongo.com") -> None:
        self._checkout_base_url = checkout_base_url.rstrip("/")
        self.requests: list[CheckoutSessionRequest] = []
        self.fail_with: PaymentGatewayError | None = None

    async def create_checkout_session(
        self,
        request: CheckoutSessionRequest,
    ) -> CheckoutSessionResult:
        self.requests.append(request)
        if self.fail_with:
            raise self.fail_with

        session_id = f"cs_{uuid4().hex[:24]}"
        intent_id = f"pi_{uuid4().hex[:24]}"
        return CheckoutSessionResult(
            session_id=session_id,
            checkout_url=f"{self._checkout_base_url}/{session_id}",
            payment_intent_id=intent_id,
            status="active",
            raw={"id": session_id, "type": "checkout_session"},
        )

    def verify_webhook_signature(
        self,
        payload: bytes,
        signature_header: str,
        webhook_secret: str,
    ) -> None:
        verify_signature(payload, signature_header, webhook_secret)
