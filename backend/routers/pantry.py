from fastapi import APIRouter, Depends
from pydantic import BaseModel

from routers.images import get_image_store
from routers.inventory import get_inventory_store
from schemas.inventory import InventoryItemOut, InventoryOperationResult
from schemas.pantry_view import PantryView
from services.image_assets import ImageAssetStore
from services.inventory_store import InventoryStore
from services.pantry_workflow import submit_item_form

router = APIRouter()


class PantrySubmitOut(BaseModel):
    view: PantryView
    result: InventoryOperationResult
    visible: list[InventoryItemOut]


@router.post("/submit", response_model=PantrySubmitOut)
async def submit(
    view: PantryView,
    store: InventoryStore = Depends(get_inventory_store),
    images: ImageAssetStore = Depends(get_image_store),
):
    """Run the add/edit modal against the store and hand back the updated page state.

    Failures are reported on the returned view (last_error) rather than as an
    HTTP error so the page can keep the modal open.
    """
    result = await submit_item_form(view, store, images)
    return PantrySubmitOut(view=view, result=result, visible=view.visible_items(result.inventory))
