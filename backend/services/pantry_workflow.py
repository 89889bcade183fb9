from core.errors import PantryError
from core.logging import get_logger
from schemas.inventory import InventoryOperationResult
from schemas.pantry_view import PantryView
from services.image_assets import ImageAssetStore
from services.inventory_store import InventoryStore

logger = get_logger(__name__)


async def submit_item_form(view: PantryView, store: InventoryStore, images: ImageAssetStore) -> InventoryOperationResult:
    """
    Apply the add/edit modal to the store.

    - adding: add_or_increment(item_name) with the uploaded photo, if any
    - editing with a new photo: update_fields(current_item) with its URL
    - editing without a photo: rename(current_item, item_name), nothing if the name is unchanged

    The modal closes on success. On failure it stays open with last_error set.
    """
    download_url = ""
    view.uploading = True
    try:
        if view.image:
            download_url = await images.upload(view.current_item or view.item_name, view.image)
    except PantryError as e:
        logger.warning("Photo upload failed", item=view.current_item or view.item_name, kind=e.kind.value)
        view.last_error = e.detail
        return await store.failed_result(e.kind, e.detail)
    finally:
        view.uploading = False

    if view.is_adding_new:
        result = await store.add_or_increment(view.item_name, download_url or None)
    elif view.image:
        result = await store.update_fields(view.current_item or view.item_name, download_url)
    elif (view.item_name or "").strip() == view.current_item:
        # saved without changes
        result = await store.ok_result(view.current_item)
    else:
        result = await store.rename(view.current_item, view.item_name)

    if result.ok:
        view.close()
    else:
        view.last_error = result.detail
    return result
