from app.domain.entities.property import BusinessUnit, RoomType


class PropertyRepo:
    async def get_business_unit(self, business_unit_id: str) -> BusinessUnit | None:
        raise NotImplementedError

    async def get_room_type(self, room_type_id: str) -> RoomType | None:
        raise NotImplementedError
