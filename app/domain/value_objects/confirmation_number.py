"""Value Object ConfirmationNumber - número de confirmación visible al huésped."""

import re
import secrets
import string
from dataclasses import dataclass
from datetime import datetime

_BASE36_ALPHABET = string.digits + string.ascii_uppercase


def to_base36(number: int) -> str:
    """Codifica un entero no negativo en base 36 (dígitos + mayúsculas)."""
    if number < 0:
        raise ValueError(f"number no puede ser negativo: {number}")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


@dataclass(frozen=True)
class ConfirmationNumber:
    """
    Value Object inmutable con el número de confirmación de una reservación.

    Formato: RES-<epoch en milisegundos en base 36>-<sufijo aleatorio base 36>
    (ej: RES-MB3K9Q2A-7XK2PQ). Es inmutable una vez asignado.
    """

    value: str

    PREFIX = "RES"
    SUFFIX_LENGTH = 6
    PATTERN = re.compile(r"^RES-[0-9A-Z]+-[0-9A-Z]{6}$")

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("confirmation_number no puede estar vacío")

        if not self.PATTERN.match(self.value):
            raise ValueError(f"confirmation_number con formato inválido: {self.value}")

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls, now: datetime) -> "ConfirmationNumber":
        """Genera un número nuevo a partir del instante actual y un sufijo aleatorio."""
        millis = int(now.timestamp() * 1000)
        suffix = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(cls.SUFFIX_LENGTH))
        return cls(value=f"{cls.PREFIX}-{to_base36(millis)}-{suffix}")

    @classmethod
    def from_string(cls, value: str) -> "ConfirmationNumber":
        """Crea un ConfirmationNumber desde un string existente."""
        return cls(value=value.upper().strip())
