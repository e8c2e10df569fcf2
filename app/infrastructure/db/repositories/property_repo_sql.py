from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.property_repo import PropertyRepo
from app.domain.entities.property import BusinessUnit, RoomType
from app.infrastructure.db.tables import business_units, room_types


class PropertyRepoSQL(PropertyRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_business_unit(self, business_unit_id: str) -> BusinessUnit | None:
        stmt = select(business_units).where(business_units.c.id == business_unit_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None
        return BusinessUnit(
            id=row["id"],
            name=row["name"],
            city=row["city"],
            country=row["country"],
            primary_currency=row["primary_currency"],
            is_active=bool(row["is_active"]),
        )

    async def get_room_type(self, room_type_id: str) -> RoomType | None:
        stmt = select(room_types).where(room_types.c.id == room_type_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None
        return RoomType(
            id=row["id"],
            business_unit_id=row["business_unit_id"],
            name=row["name"],
            base_rate=row["base_rate"],
            max_occupancy=row["max_occupancy"],
            max_adults=row["max_adults"],
            max_children=row["max_children"],
            is_active=bool(row["is_active"]),
        )
