"""DTOs para pagos."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class CheckoutSessionView:
    """Sesión de checkout a la que se redirige al huésped."""

    reservation_id: str
    confirmation_number: str
    session_id: str
    checkout_url: str
    reused: bool = False


@dataclass
class PaymentDetailsDTO:
    """Detalle del último pago de una reservación."""

    payment_id: str
    amount: Decimal
    currency: str
    provider: str
    method: str | None = None
    processed_at: datetime | None = None


@dataclass
class PaymentStatusDTO:
    """Estado de pago simplificado para la página que consulta el resultado."""

    status: str  # paid | pending | failed | cancelled
    reservation_id: str
    confirmation_number: str
    message: str
    payment_details: PaymentDetailsDTO | None = None
