"""Value Object StayDates - rango de fechas de llegada/salida."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class StayDates:
    """
    Value Object inmutable que representa una estancia en el hotel.

    Attributes:
        check_in: Fecha de llegada.
        check_out: Fecha de salida (estrictamente posterior a check_in).
    """

    check_in: date
    check_out: date

    def __post_init__(self) -> None:
        if self.check_out <= self.check_in:
            raise ValueError(
                f"check_out debe ser posterior a check_in: {self.check_out} <= {self.check_in}"
            )

    @property
    def nights(self) -> int:
        """Número de noches de la estancia."""
        return (self.check_out - self.check_in).days

    def __str__(self) -> str:
        return f"{self.check_in.isoformat()} -> {self.check_out.isoformat()}"
