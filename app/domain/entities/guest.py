"""Entidad Guest - huésped de una propiedad."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Guest:
    """
    Huésped identificado por (business_unit_id, email).

    El mismo email en otra propiedad es otro huésped.
    """

    id: str = ""
    business_unit_id: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str | None = None
    is_vip: bool = False
    is_blacklisted: bool = False
    source: str = "WEBSITE"

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def update_contact(self, first_name: str, last_name: str, phone: str | None) -> None:
        """Actualiza nombre y teléfono; el teléfono solo si viene informado."""
        self.first_name = first_name
        self.last_name = last_name
        if phone:
            self.phone = phone
