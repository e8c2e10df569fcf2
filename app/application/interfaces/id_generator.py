"""Interface IdGenerator - Puerto para generación de identificadores únicos."""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime

from app.domain.value_objects.confirmation_number import ConfirmationNumber


class IdGenerator(ABC):
    """
    Puerto para generación de identificadores.

    Permite inyectar implementaciones fake para testing determinista.
    """

    @abstractmethod
    def generate_uuid(self) -> str:
        """
        Genera un UUID v4 único.

        Returns:
            String con UUID en formato estándar (xxxxxxxx-xxxx-xxxx-xxxx-xxxxxxxxxxxx).
        """
        raise NotImplementedError

    @abstractmethod
    def generate_confirmation_number(self, now: datetime) -> str:
        """
        Genera un número de confirmación de reservación.

        Returns:
            String con formato RES-<base36 millis>-<6 caracteres base36>.
        """
        raise NotImplementedError


class RealIdGenerator(IdGenerator):
    """Implementación real con UUIDs aleatorios y sufijos criptográficos."""

    def generate_uuid(self) -> str:
        return str(uuid.uuid4())

    def generate_confirmation_number(self, now: datetime) -> str:
        return ConfirmationNumber.generate(now).value


class FakeIdGenerator(IdGenerator):
    """
    Implementación fake para testing.

    Genera UUIDs predecibles y permite forzar los próximos números de
    confirmación (útil para simular colisiones).
    """

    def __init__(self) -> None:
        self._uuid_counter = 0
        self._queued_confirmations: list[str] = []

    def generate_uuid(self) -> str:
        """Genera un UUID predecible basado en contador."""
        self._uuid_counter += 1
        hex_value = f"{self._uuid_counter:032x}"
        return f"{hex_value[:8]}-{hex_value[8:12]}-{hex_value[12:16]}-{hex_value[16:20]}-{hex_value[20:]}"

    def generate_confirmation_number(self, now: datetime) -> str:
        if self._queued_confirmations:
            return self._queued_confirmations.pop(0)
        return ConfirmationNumber.generate(now).value

    def set_next_confirmation_numbers(self, *numbers: str) -> None:
        """
        Configura los próximos números de confirmación a retornar, en orden.

        Args:
            numbers: Números a retornar en las próximas llamadas.
        """
        self._queued_confirmations.extend(numbers)
