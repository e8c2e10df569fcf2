"""Entidades ProviderPayment y ProviderCard - detalle específico de PayMongo."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass
class ProviderPayment:
    """Detalle del cobro según la pasarela (uno por Payment)."""

    id: str = ""
    payment_id: str = ""
    payment_intent_id: str | None = None
    payment_method_id: str | None = None
    source_id: str | None = None
    checkout_session_id: str | None = None
    provider_status: str | None = None
    payment_method_type: str | None = None
    client_key: str | None = None
    billing_details: dict[str, Any] = field(default_factory=dict)
    intent_metadata: dict[str, Any] = field(default_factory=dict)
    application_fee: Decimal | None = None
    processing_fee: Decimal | None = None


@dataclass
class ProviderCard:
    """
    Datos no sensibles de la tarjeta usada en el cobro.

    Nunca se guarda el número completo de la tarjeta.
    """

    id: str = ""
    provider_payment_id: str = ""
    brand: str | None = None
    last4: str | None = None
    exp_month: int | None = None
    exp_year: int | None = None
    country: str | None = None
