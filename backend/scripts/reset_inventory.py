"""
Delete ALL pantry items and stored photos from the database.

Run from the backend directory:
  PYTHONPATH=. python scripts/reset_inventory.py
"""

from __future__ import annotations

import asyncio

from sqlalchemy import delete

from db.database import async_session_maker
from db.image import ImageBlob
from db.inventory.item import InventoryItem


async def reset(db) -> tuple[int, int]:
    res_items = await db.execute(delete(InventoryItem))
    res_images = await db.execute(delete(ImageBlob))
    await db.commit()
    return int(getattr(res_items, "rowcount", 0) or 0), int(getattr(res_images, "rowcount", 0) or 0)


async def main() -> None:
    async with async_session_maker() as db:
        items_n, images_n = await reset(db)
        print(f"Deleted inventory items: {items_n}, images: {images_n}")


if __name__ == "__main__":
    asyncio.run(main())
