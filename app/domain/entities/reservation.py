"""Entidad Reservation - Agregado raíz del dominio."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from app.domain.value_objects.money import Money


class ReservationStatus(str, Enum):
    """Estados posibles de una reservación."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    NO_SHOW = "NO_SHOW"


class ReservationPaymentStatus(str, Enum):
    """Estados de pago de una reservación."""

    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    PARTIAL = "PARTIAL"


@dataclass
class ReservationRoom:
    """Habitación reservada dentro de una reservación (una por reserva web)."""

    id: str = ""
    reservation_id: str = ""
    room_type_id: str = ""
    base_rate: Decimal = Decimal("0")
    rate_per_night: Decimal = Decimal("0")
    nights: int = 0
    adults: int = 0
    children: int = 0
    room_subtotal: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")


@dataclass
class Reservation:
    """
    Entidad principal del dominio - Agregado Raíz.

    Representa una reservación de hotel con su desglose de precio y los
    estados de reserva y de pago, que evolucionan de forma independiente.
    """

    # Identificadores
    id: str = ""
    confirmation_number: str = ""

    # Referencias externas (FKs)
    business_unit_id: str = ""
    guest_id: str = ""

    # Fechas y ocupación
    check_in_date: date | None = None
    check_out_date: date | None = None
    nights: int = 0
    adults: int = 1
    children: int = 0

    # Financieros
    subtotal: Decimal = Decimal("0")
    taxes: Decimal = Decimal("0")
    service_fee: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    currency: str = "PHP"

    # Estados
    status: ReservationStatus = ReservationStatus.PENDING
    payment_status: ReservationPaymentStatus = ReservationPaymentStatus.PENDING

    # Datos de la reserva
    source: str = "WEBSITE"
    special_requests: str | None = None
    guest_notes: str | None = None

    # Pasarela
    payment_provider: str | None = None
    payment_intent_id: str | None = None

    # Ciclo de vida
    paid_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Relaciones (no persistidas directamente)
    rooms: list[ReservationRoom] = field(default_factory=list)

    # === Propiedades calculadas ===

    @property
    def total(self) -> Money:
        """Retorna el total como Value Object Money."""
        return Money(amount=self.total_amount, currency_code=self.currency)

    @property
    def is_paid(self) -> bool:
        """Verifica si la reservación está pagada."""
        return self.payment_status == ReservationPaymentStatus.PAID

    # === Métodos de negocio ===

    def mark_as_paid(self, paid_at: datetime) -> None:
        """Marca la reservación como pagada y confirmada."""
        self.payment_status = ReservationPaymentStatus.PAID
        self.status = ReservationStatus.CONFIRMED
        if self.paid_at is None:
            self.paid_at = paid_at

    def mark_as_payment_failed(self, reason: str, failed_at: datetime) -> bool:
        """
        Marca el pago como fallido y cancela la reservación.

        Un evento de falla que llega después del éxito no degrada una
        reservación ya pagada. Retorna False si no hubo cambios.
        """
        if self.is_paid:
            return False
        self.payment_status = ReservationPaymentStatus.FAILED
        self.status = ReservationStatus.CANCELLED
        self.cancelled_at = failed_at
        self.cancellation_reason = reason
        return True
