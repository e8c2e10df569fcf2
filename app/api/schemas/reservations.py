from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, condecimal, constr, field_validator
from pydantic.alias_generators import to_camel

Money = condecimal(max_digits=12, decimal_places=2)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateReservationWithPaymentRequest(CamelModel):
    model_config = ConfigDict(extra="forbid")

    business_unit_id: UUID
    room_type_id: UUID

    first_name: constr(strip_whitespace=True, min_length=1, max_length=120)
    last_name: constr(strip_whitespace=True, min_length=1, max_length=120)
    email: EmailStr
    phone: constr(strip_whitespace=True, max_length=50) | None = None
    special_requests: str | None = None
    guest_notes: str | None = None

    check_in_date: date
    check_out_date: date
    adults: int = Field(gt=0)
    children: int = Field(default=0, ge=0)

    nights: int = Field(gt=0)
    subtotal: Money = Field(gt=0)
    taxes: Money = Field(default=Decimal("0"), ge=0)
    service_fee: Money = Field(default=Decimal("0"), ge=0)
    total_amount: Money = Field(gt=0)

    @field_validator("check_in_date", "check_out_date", mode="before")
    @classmethod
    def parse_iso_day(cls, value: Any) -> Any:
        # The booking widget sends full ISO datetimes; only the calendar day matters
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and "T" in value:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        return value

    @field_validator("check_out_date")
    @classmethod
    def validate_dates(cls, value: date, info: Any) -> date:
        check_in = info.data.get("check_in_date")
        if check_in and value <= check_in:
            raise ValueError("checkOutDate must be after checkInDate")
        return value


class CreateReservationWithPaymentResponse(CamelModel):
    reservation_id: str
    confirmation_number: str
    checkout_url: str
    payment_session_id: str


class PaymentDetailsResponse(CamelModel):
    model_config = ConfigDict(
        json_encoders={Decimal: lambda v: format(v, ".2f")},
    )

    payment_id: str
    amount: Money
    currency: constr(min_length=3, max_length=3)
    provider: str
    method: str | None = None
    processed_at: datetime | None = None


class PaymentStatusResponse(CamelModel):
    status: str
    reservation_id: str
    confirmation_number: str
    message: str
    payment_details: PaymentDetailsResponse | None = None


class ErrorResponse(BaseModel):
    error: str
    details: Any | None = None
