"""Value Objects del dominio de reservaciones."""

from app.domain.value_objects.confirmation_number import ConfirmationNumber
from app.domain.value_objects.money import Money
from app.domain.value_objects.stay_dates import StayDates

__all__ = [
    "ConfirmationNumber",
    "Money",
    "StayDates",
]
