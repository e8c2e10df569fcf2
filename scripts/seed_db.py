import asyncio
import logging
import sys
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from app.api.deps import engine  # noqa: E402
from app.infrastructure.db.seed import seed_demo_data  # noqa: E402
from app.infrastructure.demo_catalog import DEMO_BUSINESS_UNIT_ID, DEMO_ROOM_TYPE_ID  # noqa: E402


async def seed():
    async with engine.begin() as conn:
        inserted = await seed_demo_data(conn)
    await engine.dispose()

    print("Seeded demo property." if inserted else "Demo property already present.")
    print(f"businessUnitId={DEMO_BUSINESS_UNIT_ID}")
    print(f"roomTypeId={DEMO_ROOM_TYPE_ID}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(seed())
