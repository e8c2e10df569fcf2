"""DTOs para reservaciones."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from app.domain.entities.property import BusinessUnit, RoomType


@dataclass
class BookingRequest:
    """DTO con la solicitud de reserva tal como llega del sitio web."""

    # Identificadores
    business_unit_id: str
    room_type_id: str

    # Datos del huésped
    first_name: str
    last_name: str
    email: str

    # Estancia
    check_in_date: date
    check_out_date: date
    adults: int
    children: int
    nights: int

    # Desglose de precio (calculado por el cliente)
    subtotal: Decimal
    taxes: Decimal
    service_fee: Decimal
    total_amount: Decimal

    phone: str | None = None
    special_requests: str | None = None
    guest_notes: str | None = None

    def __post_init__(self) -> None:
        # Un huésped se identifica por email sin distinguir mayúsculas
        self.email = self.email.strip().lower()

    @property
    def guest_full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def total_guests(self) -> int:
        return self.adults + self.children


@dataclass
class ValidatedBooking:
    """Solicitud que pasó todas las reglas, junto con el catálogo consultado."""

    request: BookingRequest
    business_unit: BusinessUnit
    room_type: RoomType


@dataclass
class ReservationSnapshot:
    """DTO de la reservación recién creada con datos del huésped y la propiedad."""

    reservation_id: str
    confirmation_number: str
    business_unit_id: str
    business_unit_name: str
    room_type_id: str
    guest_id: str
    guest_first_name: str
    guest_last_name: str
    guest_email: str
    guest_phone: str | None
    check_in_date: date
    check_out_date: date
    nights: int
    adults: int
    children: int
    subtotal: Decimal
    taxes: Decimal
    service_fee: Decimal
    total_amount: Decimal
    currency: str
    status: str
    payment_status: str

    @property
    def guest_full_name(self) -> str:
        return f"{self.guest_first_name} {self.guest_last_name}".strip()


@dataclass
class BookingResult:
    """Respuesta del flujo reserva + sesión de pago."""

    reservation_id: str
    confirmation_number: str
    checkout_url: str
    payment_session_id: str
