"""
Inventory store.

Domain operations over the ``inventory`` table, where each row is keyed by
the item name. Every operation ends by listing the whole collection again and
returns it on an ``InventoryOperationResult`` so callers replace their view
wholesale instead of patching it.

Domain failures (blank name, duplicate rename target, missing item) come back
as failed results rather than exceptions. Database errors are rolled back,
logged and reported as ``TRANSPORT_FAILURE``.
"""

from typing import List, Optional

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import ErrorKind
from core.logging import get_logger
from db.database import upsert_insert
from db.inventory.item import InventoryItem as InventoryItemModel
from schemas.inventory import InventoryItemOut, InventoryOperationResult, clean_item_name

logger = get_logger(__name__)


class InventoryStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_items(self) -> List[InventoryItemOut]:
        res = await self.db.execute(
            select(InventoryItemModel).execution_options(populate_existing=True)
        )
        return [InventoryItemOut(**m.to_schema) for m in res.scalars().all()]

    async def get(self, name: str) -> Optional[InventoryItemOut]:
        if not name:
            return None
        m = await self.db.get(InventoryItemModel, name, populate_existing=True)
        return InventoryItemOut(**m.to_schema) if m else None

    async def failed_result(self, kind: ErrorKind, detail: str) -> InventoryOperationResult:
        """A failed result carrying the current collection."""
        try:
            inventory = await self.list_items()
        except SQLAlchemyError:
            inventory = []
        return InventoryOperationResult.failure(kind, detail, inventory)

    async def ok_result(self, name: Optional[str] = None) -> InventoryOperationResult:
        """A successful result carrying ``name`` (if still present) and the current collection."""
        item = await self.get(name) if name else None
        return InventoryOperationResult.success(await self.list_items(), item=item)

    async def _transport_failure(self, op: str, e: SQLAlchemyError) -> InventoryOperationResult:
        await self.db.rollback()
        logger.error("Inventory operation failed", op=op, error=repr(e))
        return await self.failed_result(ErrorKind.TRANSPORT_FAILURE, f"{op} failed: {e}")

    async def add_or_increment(self, name: str, image_url: Optional[str] = None) -> InventoryOperationResult:
        """Create ``name`` with quantity 1, or add one to an existing item.

        ``image_url`` replaces the stored image only when given.
        """
        try:
            key = clean_item_name(name)
        except ValueError as e:
            logger.warning("Rejected item add", name=name, reason=str(e))
            return await self.failed_result(ErrorKind.INVALID_INPUT, str(e))

        item_tbl = InventoryItemModel.__table__
        on_conflict = {"quantity": item_tbl.c.quantity + 1}
        if image_url:
            on_conflict["image_url"] = image_url
        upsert = (
            upsert_insert(self.db)(item_tbl)
            .values(name=key, quantity=1, image_url=image_url or "")
            .on_conflict_do_update(index_elements=[item_tbl.c.name], set_=on_conflict)
        )
        try:
            await self.db.execute(upsert)
            await self.db.commit()
            result = await self.ok_result(key)
        except SQLAlchemyError as e:
            return await self._transport_failure("add_or_increment", e)

        logger.info("Item added", name=key, quantity=result.item.quantity if result.item else None)
        return result

    async def update_fields(self, name: str, image_url: Optional[str] = None) -> InventoryOperationResult:
        """Merge the given fields into an existing item; quantity is never touched."""
        try:
            if await self.get(name) is None:
                logger.warning("Update on missing item", name=name)
                return await self.failed_result(ErrorKind.NOT_FOUND, f"Item '{name}' does not exist")

            values = {}
            if image_url:
                values["image_url"] = image_url
            if values:
                await self.db.execute(
                    update(InventoryItemModel)
                    .where(InventoryItemModel.name == name)
                    .values(**values)
                    .execution_options(synchronize_session=False)
                )
                await self.db.commit()
                logger.info("Item updated", name=name, fields=sorted(values))
            return await self.ok_result(name)
        except SQLAlchemyError as e:
            return await self._transport_failure("update_fields", e)

    async def decrement_or_remove(self, name: str) -> InventoryOperationResult:
        """Take one off ``name``; the row is deleted instead of reaching zero."""
        try:
            # row lock on Postgres; SQLite serializes writers already
            row = None
            if name:
                row = await self.db.get(
                    InventoryItemModel, name, populate_existing=True, with_for_update=True
                )
            if row is None:
                await self.db.rollback()
                logger.info("Decrement on missing item ignored", name=name)
                return await self.failed_result(ErrorKind.NOT_FOUND, f"Item '{name}' does not exist")

            if row.quantity > 1:
                await self.db.execute(
                    update(InventoryItemModel)
                    .where(InventoryItemModel.name == name)
                    .values(quantity=InventoryItemModel.quantity - 1)
                    .execution_options(synchronize_session=False)
                )
                await self.db.commit()
                result = await self.ok_result(name)
                logger.info("Item decremented", name=name, quantity=result.item.quantity if result.item else None)
                return result

            await self.db.execute(
                delete(InventoryItemModel)
                .where(InventoryItemModel.name == name)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
            logger.info("Item removed", name=name)
            return await self.ok_result()
        except SQLAlchemyError as e:
            return await self._transport_failure("decrement_or_remove", e)

    async def rename(self, old_name: str, new_name: str) -> InventoryOperationResult:
        """Move an item to a new key.

        The copy and the delete commit together, so a failure leaves only the
        old row behind.
        """
        try:
            target = clean_item_name(new_name)
        except ValueError as e:
            return await self.failed_result(ErrorKind.INVALID_INPUT, str(e))

        try:
            if await self.get(target) is not None:
                logger.warning("Rename target already exists", old_name=old_name, new_name=target)
                return await self.failed_result(ErrorKind.DUPLICATE_NAME, f"Item '{target}' already exists")

            source = await self.get(old_name)
            if source is None:
                logger.warning("Rename source does not exist", old_name=old_name, new_name=target)
                return await self.failed_result(ErrorKind.NOT_FOUND, f"Item '{old_name}' does not exist")

            try:
                await self.db.execute(
                    insert(InventoryItemModel).values(
                        name=target, quantity=source.quantity, image_url=source.image_url
                    )
                )
            except IntegrityError:
                await self.db.rollback()
                return await self.failed_result(ErrorKind.DUPLICATE_NAME, f"Item '{target}' already exists")
            await self.db.execute(
                delete(InventoryItemModel)
                .where(InventoryItemModel.name == old_name)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            return await self._transport_failure("rename", e)

        logger.info("Item renamed", old_name=old_name, new_name=target)
        return await self.ok_result(target)

    async def delete(self, name: str) -> InventoryOperationResult:
        try:
            res = await self.db.execute(
                delete(InventoryItemModel)
                .where(InventoryItemModel.name == name)
                .execution_options(synchronize_session=False)
            )
            if not res.rowcount:
                await self.db.rollback()
                return await self.failed_result(ErrorKind.NOT_FOUND, f"Item '{name}' does not exist")
            await self.db.commit()
        except SQLAlchemyError as e:
            return await self._transport_failure("delete", e)

        logger.info("Item deleted", name=name)
        return await self.ok_result()
