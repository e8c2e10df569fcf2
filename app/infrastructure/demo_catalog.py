"""Propiedad de demostración para correr el servicio localmente."""

from dataclasses import asdict
from decimal import Decimal

from app.domain.entities.property import BusinessUnit, RoomType

DEMO_BUSINESS_UNIT_ID = "11111111-1111-4111-8111-111111111111"
DEMO_ROOM_TYPE_ID = "22222222-2222-4222-8222-222222222222"


def demo_business_unit() -> BusinessUnit:
    return BusinessUnit(
        id=DEMO_BUSINESS_UNIT_ID,
        name="Demo Beach Resort",
        city="El Nido",
        country="Philippines",
    )


def demo_room_type() -> RoomType:
    return RoomType(
        id=DEMO_ROOM_TYPE_ID,
        business_unit_id=DEMO_BUSINESS_UNIT_ID,
        name="Deluxe Room",
        base_rate=Decimal("5000.00"),
        max_occupancy=3,
        max_adults=2,
        max_children=1,
    )


def demo_rows() -> tuple[dict, dict]:
    """Las mismas entidades como filas para las tablas business_units y room_types."""
    return asdict(demo_business_unit()), asdict(demo_room_type())
