"""Entidad Payment - representa un intento de cobro de una reservación."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


class PaymentStatus(str, Enum):
    """Estados posibles de un pago."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


class PaymentMethod(str, Enum):
    """Familias de método de pago que reporta la pasarela."""

    CARD = "CARD"
    E_WALLET = "E_WALLET"
    BANK_TRANSFER = "BANK_TRANSFER"
    QR_CODE = "QR_CODE"
    BUY_NOW_PAY_LATER = "BUY_NOW_PAY_LATER"


class PaymentProvider(str, Enum):
    """Proveedores de pago soportados."""

    PAYMONGO = "PAYMONGO"


class LineItemType(str, Enum):
    """Componentes del cobro."""

    ROOM = "ROOM"
    TAX = "TAX"
    FEE = "FEE"


@dataclass
class PaymentLineItem:
    """Componente del cobro (habitación, impuesto o cargo por servicio)."""

    id: str = ""
    payment_id: str = ""
    item_type: LineItemType = LineItemType.ROOM
    item_id: str | None = None
    item_name: str = ""
    description: str | None = None
    unit_price: Decimal = Decimal("0")
    quantity: int = 1
    total_amount: Decimal = Decimal("0")
    valid_from: date | None = None
    valid_to: date | None = None


@dataclass
class Payment:
    """
    Entidad que representa un intento de cobro asociado a una reservación.

    El método se resuelve de forma diferida: se conoce solo cuando la
    pasarela reporta el detalle del pago.
    """

    # Identificadores
    id: str = ""
    reservation_id: str = ""

    # Proveedor
    provider: PaymentProvider | str = PaymentProvider.PAYMONGO
    provider_payment_id: str | None = None
    provider_payment_intent_id: str | None = None

    # Monto
    amount: Decimal = Decimal("0")
    currency: str = "PHP"
    method: PaymentMethod | None = None

    # Desglose
    room_total: Decimal = Decimal("0")
    taxes_total: Decimal = Decimal("0")
    fees_total: Decimal = Decimal("0")
    is_deposit_payment: bool = False

    # Snapshot del huésped
    guest_name: str | None = None
    guest_email: str | None = None
    guest_phone: str | None = None

    # Estado
    status: PaymentStatus = PaymentStatus.PENDING
    provider_metadata: dict[str, Any] = field(default_factory=dict)
    failure_code: str | None = None
    failure_message: str | None = None

    # Timestamps
    processed_at: datetime | None = None
    captured_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # === Propiedades ===

    @property
    def is_successful(self) -> bool:
        """Verifica si el pago fue exitoso."""
        return self.status == PaymentStatus.SUCCEEDED

    @property
    def is_open(self) -> bool:
        """Verifica si el intento sigue abierto (el huésped aún puede pagar)."""
        return self.status in (PaymentStatus.PENDING, PaymentStatus.PROCESSING)

    def matches_provider_id(self, provider_id: str) -> bool:
        """Verifica si el id de la pasarela corresponde a la sesión o al payment intent."""
        return provider_id in (self.provider_payment_id, self.provider_payment_intent_id)
