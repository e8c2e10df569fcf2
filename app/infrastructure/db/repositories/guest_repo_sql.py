from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.guest_repo import GuestRepo
from app.domain.entities.guest import Guest
from app.infrastructure.db.tables import guests


class GuestRepoSQL(GuestRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, guest_id: str) -> Guest | None:
        stmt = select(guests).where(guests.c.id == guest_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_guest(row) if row else None

    async def find_by_email(self, business_unit_id: str, email: str) -> Guest | None:
        stmt = (
            select(guests)
            .where(guests.c.business_unit_id == business_unit_id, guests.c.email == email)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_guest(row) if row else None

    async def create(self, guest: Guest) -> Guest:
        stmt = insert(guests).values(
            id=guest.id,
            business_unit_id=guest.business_unit_id,
            first_name=guest.first_name,
            last_name=guest.last_name,
            email=guest.email,
            phone=guest.phone,
            is_vip=guest.is_vip,
            is_blacklisted=guest.is_blacklisted,
            source=guest.source,
            created_at=guest.created_at,
            updated_at=guest.updated_at,
        )
        await self._session.execute(stmt)
        return guest

    async def update_contact(self, guest: Guest) -> Guest:
        stmt = (
            update(guests)
            .where(guests.c.id == guest.id)
            .values(
                first_name=guest.first_name,
                last_name=guest.last_name,
                phone=guest.phone,
                updated_at=guest.updated_at,
            )
        )
        await self._session.execute(stmt)
        return guest

    def _map_guest(self, row) -> Guest:
        return Guest(
            id=row["id"],
            business_unit_id=row["business_unit_id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            phone=row["phone"],
            is_vip=bool(row["is_vip"]),
            is_blacklisted=bool(row["is_blacklisted"]),
            source=row["source"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
