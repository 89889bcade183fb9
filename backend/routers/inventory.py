from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import HTTP_STATUS_BY_KIND
from core.logging import get_logger
from db.database import get_async_session
from schemas.inventory import (
    InventoryItemCreate,
    InventoryItemOut,
    InventoryItemRename,
    InventoryItemUpdate,
    InventoryOperationResult,
    QuantityFilter,
)
from schemas.pantry_view import filter_inventory
from services.inventory_store import InventoryStore

router = APIRouter()
logger = get_logger(__name__)


def get_inventory_store(db: AsyncSession = Depends(get_async_session)) -> InventoryStore:
    return InventoryStore(db)


def _raise_for_failure(result: InventoryOperationResult) -> InventoryOperationResult:
    if not result.ok:
        raise HTTPException(
            status_code=HTTP_STATUS_BY_KIND.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR),
            detail=result.detail,
        )
    return result


@router.get("/", response_model=list[InventoryItemOut])
async def list_items(
    search: Optional[str] = Query(None),
    quantity_filter: QuantityFilter = Query("All"),
    store: InventoryStore = Depends(get_inventory_store),
):
    """List every item, optionally narrowed by name search and minimum quantity"""
    try:
        items = await store.list_items()
    except SQLAlchemyError as e:
        logger.error("Listing inventory failed", error=repr(e))
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=f"Failed to list inventory: {e}")
    return filter_inventory(items, search, quantity_filter)


@router.get("/{name}", response_model=InventoryItemOut)
async def get_item(name: str, store: InventoryStore = Depends(get_inventory_store)):
    try:
        item = await store.get(name)
    except SQLAlchemyError as e:
        logger.error("Reading item failed", name=name, error=repr(e))
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=f"Failed to read item: {e}")
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Item '{name}' not found")
    return item


@router.post("/", response_model=InventoryOperationResult)
async def add_item(payload: InventoryItemCreate, store: InventoryStore = Depends(get_inventory_store)):
    """Add an item, or increment its quantity when it already exists"""
    return _raise_for_failure(await store.add_or_increment(payload.name, payload.image_url))


@router.patch("/{name}", response_model=InventoryOperationResult)
async def update_item(
    name: str,
    payload: InventoryItemUpdate,
    store: InventoryStore = Depends(get_inventory_store),
):
    return _raise_for_failure(await store.update_fields(name, payload.image_url))


@router.post("/{name}/decrement", response_model=InventoryOperationResult)
async def decrement_item(name: str, store: InventoryStore = Depends(get_inventory_store)):
    """Decrease the quantity by one; the item is removed when it would reach zero"""
    return _raise_for_failure(await store.decrement_or_remove(name))


@router.post("/{name}/rename", response_model=InventoryOperationResult)
async def rename_item(
    name: str,
    payload: InventoryItemRename,
    store: InventoryStore = Depends(get_inventory_store),
):
    return _raise_for_failure(await store.rename(name, payload.new_name))


@router.delete("/{name}", response_model=InventoryOperationResult)
async def delete_item(name: str, store: InventoryStore = Depends(get_inventory_store)):
    return _raise_for_failure(await store.delete(name))
