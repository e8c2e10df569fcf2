from app.application.interfaces.property_repo import PropertyRepo
from app.domain.entities.property import BusinessUnit, RoomType
from app.infrastructure.demo_catalog import demo_business_unit, demo_room_type


class InMemoryPropertyRepo(PropertyRepo):
    def __init__(self) -> None:
        self.business_units: dict[str, BusinessUnit] = {}
        self.room_types: dict[str, RoomType] = {}

    def add_business_unit(self, business_unit: BusinessUnit) -> BusinessUnit:
        self.business_units[business_unit.id] = business_unit
        return business_unit

    def add_room_type(self, room_type: RoomType) -> RoomType:
        self.room_types[room_type.id] = room_type
        return room_type

    def seed_demo(self) -> None:
        """Loads one property with one room type for local runs without a database."""
        self.add_business_unit(demo_business_unit())
        self.add_room_type(demo_room_type())

    async def get_business_unit(self, business_unit_id: str) -> BusinessUnit | None:
        return self.business_units.get(business_unit_id)

    async def get_room_type(self, room_type_id: str) -> RoomType | None:
        return self.room_types.get(room_type_id)
