import logging

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncConnection

from app.infrastructure.db.tables import business_units, metadata, room_types
from app.infrastructure.demo_catalog import demo_rows

logger = logging.getLogger(__name__)


async def seed_demo_data(conn: AsyncConnection) -> bool:
    """
    Creates the tables and inserts the demo property if it is missing.

    Returns True when rows were inserted.
    """
    await conn.run_sync(metadata.create_all)

    business_unit, room_type = demo_rows()
    existing = await conn.execute(
        select(business_units.c.id).where(business_units.c.id == business_unit["id"])
    )
    if existing.first():
        logger.info("Demo property already present", extra={"business_unit_id": business_unit["id"]})
        return False

    await conn.execute(insert(business_units).values(**business_unit))
    await conn.execute(insert(room_types).values(**room_type))
    logger.info(
        "Seeded demo property",
        extra={"business_unit_id": business_unit["id"], "room_type_id": room_type["id"]},
    )
    return True
