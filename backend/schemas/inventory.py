from typing import List, Literal, Optional

from pydantic import BaseModel, field_validator

from core.errors import ErrorKind


QuantityFilter = Literal["All", "1", "5", "10"]


def clean_item_name(v: Optional[str]) -> str:
    """Strip an item name and reject values that cannot be used as a key."""
    v = (v or "").strip()
    if not v:
        raise ValueError("item name is required")
    # names double as keys in blob paths
    if "/" in v:
        raise ValueError("item name cannot contain '/'")
    return v


class InventoryItemCreate(BaseModel):
    name: str
    image_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return clean_item_name(v)


class InventoryItemUpdate(BaseModel):
    image_url: Optional[str] = None

    @field_validator("image_url")
    @classmethod
    def _strip_nullable(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class InventoryItemRename(BaseModel):
    new_name: str

    @field_validator("new_name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return clean_item_name(v)


class InventoryItemOut(BaseModel):
    name: str
    quantity: int
    image_url: str = ""

    class Config:
        from_attributes = True


class InventoryOperationResult(BaseModel):
    """Outcome of one store operation plus the full collection as reloaded afterwards."""
    ok: bool
    error: Optional[ErrorKind] = None
    detail: Optional[str] = None
    item: Optional[InventoryItemOut] = None
    inventory: List[InventoryItemOut] = []

    @classmethod
    def success(cls, inventory: List[InventoryItemOut], item: Optional[InventoryItemOut] = None):
        return cls(ok=True, item=item, inventory=inventory)

    @classmethod
    def failure(cls, kind: ErrorKind, detail: str, inventory: List[InventoryItemOut]):
        return cls(ok=False, error=kind, detail=detail, inventory=inventory)
