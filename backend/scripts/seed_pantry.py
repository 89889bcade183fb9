"""
Seed a handful of pantry staples.

Goes through InventoryStore so seeding follows the same add-or-increment
rules as the API: running it twice doubles the quantities.

Run from the backend directory:
  PYTHONPATH=. python scripts/seed_pantry.py
"""

from __future__ import annotations

import asyncio

from db.database import async_session_maker, create_db_and_tables
from services.inventory_store import InventoryStore

STAPLES = {
    "rice": 3,
    "beans": 2,
    "pasta": 4,
    "flour": 1,
    "olive oil": 1,
    "canned tomatoes": 6,
}


async def seed(store: InventoryStore, staples: dict[str, int] = STAPLES) -> int:
    added = 0
    for name, quantity in staples.items():
        for _ in range(quantity):
            result = await store.add_or_increment(name)
            if not result.ok:
                raise RuntimeError(f"Seeding '{name}' failed: {result.error} {result.detail}")
            added += 1
    return added


async def main() -> None:
    await create_db_and_tables()
    async with async_session_maker() as db:
        added = await seed(InventoryStore(db))
    print(f"[seed_pantry] done. units_added={added}")


if __name__ == "__main__":
    asyncio.run(main())
