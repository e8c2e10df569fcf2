from dataclasses import dataclass, field
from typing import Any


@dataclass
class CheckoutLineItem:
    name: str
    description: str
    amount: int  # centavos
    currency: str
    quantity: int = 1


@dataclass
class CheckoutBilling:
    name: str
    email: str
    phone: str | None = None


@dataclass
class CheckoutSessionRequest:
    line_items: list[CheckoutLineItem]
    payment_method_types: list[str]
    billing: CheckoutBilling
    description: str
    reference_number: str
    success_url: str
    cancel_url: str
    metadata: dict[str, str] = field(default_factory=dict)
    send_email_receipt: bool = True
    show_description: bool = True
    show_line_items: bool = True


@dataclass
class CheckoutSessionResult:
    session_id: str
    checkout_url: str
    payment_intent_id: str | None = None
    status: str = "active"
    raw: dict[str, Any] = field(default_factory=dict)


class PaymentGateway:
    async def create_checkout_session(
        self,
        request: CheckoutSessionRequest,
    ) -> CheckoutSessionResult:
        """
        Crea una sesión de checkout hospedada.

        Raises:
            PaymentGatewayError: error de transporte, respuesta no exitosa o
                circuito abierto.
        """
        raise NotImplementedError

    def verify_webhook_signature(
        self,
        payload: bytes,
        signature_header: str,
        webhook_secret: str,
    ) -> None:
        """
        Verifica la firma HMAC de un webhook.

        Raises:
            InvalidSignatureError: si la firma no coincide o el encabezado
                está incompleto.
        """
        raise NotImplementedError
