"""Entidades BusinessUnit y RoomType - catálogo de propiedades (solo lectura)."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class BusinessUnit:
    """Propiedad (hotel) que recibe reservaciones."""

    id: str = ""
    name: str = ""
    city: str | None = None
    country: str | None = None
    primary_currency: str = "PHP"
    is_active: bool = True


@dataclass
class RoomType:
    """
    Tipo de habitación de una propiedad.

    Define la tarifa de lista y los límites de ocupación que valida
    el flujo de reserva.
    """

    id: str = ""
    business_unit_id: str = ""
    name: str = ""
    base_rate: Decimal = Decimal("0")
    max_occupancy: int = 2
    max_adults: int = 2
    max_children: int = 0
    is_active: bool = True

    def belongs_to(self, business_unit_id: str) -> bool:
        """Verifica si el tipo de habitación pertenece a la propiedad."""
        return self.business_unit_id == business_unit_id
