"""Entidad CheckoutSession - sesión de cobro hospedada en la pasarela."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class CheckoutSessionStatus(str, Enum):
    """Estados de una sesión de checkout."""

    ACTIVE = "active"
    PAID = "paid"
    EXPIRED = "expired"


@dataclass
class CheckoutSession:
    """
    Sesión de checkout de PayMongo asociada a un Payment.

    Guarda la URL a la que se redirige al huésped, las URLs de retorno
    y la expiración que impone la pasarela.
    """

    id: str = ""
    payment_id: str = ""
    session_id: str = ""
    url: str | None = None
    currency: str = "PHP"
    line_items: list[dict[str, Any]] = field(default_factory=list)
    success_url: str | None = None
    cancel_url: str | None = None
    customer_email: str | None = None
    billing_details: dict[str, Any] = field(default_factory=dict)
    status: CheckoutSessionStatus = CheckoutSessionStatus.ACTIVE
    expires_at: datetime | None = None
    session_metadata: dict[str, Any] = field(default_factory=dict)

    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_usable_at(self, now: datetime) -> bool:
        """Verifica si la sesión sigue activa y no ha expirado."""
        if self.status != CheckoutSessionStatus.ACTIVE:
            return False
        return self.expires_at is None or self.expires_at > now
