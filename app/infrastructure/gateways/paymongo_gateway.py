import asyncio
import json
import logging
from typing import Any

import httpx

from app.application.interfaces.payment_gateway import (
    CheckoutSessionRequest,
    CheckoutSessionResult,
    PaymentGateway,
)
from app.domain.errors import PaymentGatewayError
from app.infrastructure.circuit_breaker import CircuitBreakerError, paymongo_breaker
from app.infrastructure.gateways.paymongo_signature import verify_signature

logger = logging.getLogger(__name__)


class PaymongoServerError(Exception):
    """5xx answer from PayMongo; raised inside the breaker so it counts as a failure."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"PayMongo returned {status_code}")
        self.status_code = status_code
        self.body = body


def build_checkout_payload(request: CheckoutSessionRequest) -> dict[str, Any]:
    billing: dict[str, Any] = {
        "name": request.billing.name,
        "email": request.billing.email,
    }
    if request.billing.phone:
        billing["phone"] = request.billing.phone

    return {
        "data": {
            "attributes": {
                "billing": billing,
                "line_items": [
                    {
                        "currency": item.currency,
                        "amount": item.amount,
                        "name": item.name,
                        "description": item.description,
                        "quantity": item.quantity,
                    }
                    for item in request.line_items
                ],
                "payment_method_types": list(request.payment_method_types),
                "description": request.description,
                "reference_number": request.reference_number,
                "success_url": request.success_url,
                "cancel_url": request.cancel_url,
                "metadata": dict(request.metadata),
                "send_email_receipt": request.send_email_receipt,
                "show_description": request.show_description,
                "show_line_items": request.show_line_items,
            }
        }
    }


class PaymongoGateway(PaymentGateway):
    def __init__(
        self,
        secret_key: str | None,
        api_base: str = "https://api.paymongo.com/v1",
        timeout_seconds: float = 10.0,
    ) -> None:
        """
        HTTP gateway for PayMongo checkout sessions.

        Args:
            secret_key: PayMongo secret key (``sk_test_...`` / ``sk_live_...``), sent as
                the HTTP Basic username with an empty password.
            api_base: Base URL of the PayMongo API.
            timeout_seconds: Request timeout in seconds.
        """
        self._secret_key = secret_key
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout_seconds

    async def create_checkout_session(
        self,
        request: CheckoutSessionRequest,
    ) -> CheckoutSessionResult:
        """
        Create a hosted checkout session, protected by Circuit Breaker.

        Raises:
            PaymentGatewayError: missing credentials, transport error, non-2xx
                answer or open circuit.
        """
        if not self._secret_key:
            raise PaymentGatewayError("PayMongo secret key is not configured")

        payload = build_checkout_payload(request)
        try:
            # httpx.Client is synchronous so the breaker can track it; run it off the loop
            response = await asyncio.to_thread(paymongo_breaker.call, self._post, payload)
        except CircuitBreakerError as exc:
            logger.error(
                "PayMongo circuit breaker is open - service unavailable",
                extra={"reference_number": request.reference_number, "circuit_state": str(exc)},
            )
            raise PaymentGatewayError(
                "Payment service temporarily unavailable (circuit breaker open)"
            ) from exc
        except PaymongoServerError as exc:
            logger.error(
                "PayMongo server error",
                extra={
                    "reference_number": request.reference_number,
                    "http_status": exc.status_code,
                },
            )
            raise PaymentGatewayError(exc.body or str(exc), http_status=exc.status_code) from exc
        except httpx.TimeoutException as exc:
            logger.warning(
                "PayMongo request timeout",
                extra={"reference_number": request.reference_number, "timeout": self._timeout},
            )
            raise PaymentGatewayError("PayMongo request timed out") from exc
        except httpx.HTTPError as exc:
            logger.error(
                "PayMongo HTTP error",
                exc_info=exc,
                extra={"reference_number": request.reference_number},
            )
            raise PaymentGatewayError(str(exc)) from exc

        body: Any = None
        try:
            body = response.json()
        except json.JSONDecodeError:
            body = None

        if not 200 <= response.status_code < 300:
            logger.error(
                "PayMongo rejected checkout session",
                extra={
                    "reference_number": request.reference_number,
                    "http_status": response.status_code,
                },
            )
            raise PaymentGatewayError(
                _error_detail(body) or response.text,
                http_status=response.status_code,
            )

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict) or not data.get("id"):
            raise PaymentGatewayError(
                "Unexpected PayMongo response", http_status=response.status_code
            )

        attributes = data.get("attributes") or {}
        payment_intent = attributes.get("payment_intent") or {}
        result = CheckoutSessionResult(
            session_id=data["id"],
            checkout_url=attributes.get("checkout_url", ""),
            payment_intent_id=payment_intent.get("id") if isinstance(payment_intent, dict) else None,
            status=attributes.get("status", "active"),
            raw=data,
        )
        logger.info(
            "PayMongo checkout session created",
            extra={"reference_number": request.reference_number, "session_id": result.session_id},
        )
        return result

    def verify_webhook_signature(
        self,
        payload: bytes,
        signature_header: str,
        webhook_secret: str,
    ) -> None:
        verify_signature(payload, signature_header, webhook_secret)

    def _post(self, payload: dict[str, Any]) -> httpx.Response:
        with httpx.Client(
            timeout=self._timeout,
            auth=httpx.BasicAuth(self._secret_key or "", ""),
        ) as client:
            response = client.post(
                f"{self._api_base}/checkout_sessions",
                json=payload,
                headers={"Accept": "application/json"},
            )
        if response.status_code >= 500:
            raise PaymongoServerError(response.status_code, response.text)
        return response


def _error_detail(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    errors = body.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        return errors[0].get("detail") or errors[0].get("code")
    return None
