from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import HTTP_STATUS_BY_KIND, PantryError
from db.database import get_async_session
from schemas.images import ImageUpload, ImageUploadOut
from services.image_assets import ImageAssetStore, blob_key

router = APIRouter()


def get_image_store(db: AsyncSession = Depends(get_async_session)) -> ImageAssetStore:
    return ImageAssetStore(db)


def _http_error(e: PantryError) -> HTTPException:
    return HTTPException(
        status_code=HTTP_STATUS_BY_KIND.get(e.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=e.detail,
    )


@router.post("/upload", response_model=ImageUploadOut, status_code=status.HTTP_201_CREATED)
async def upload_image(payload: ImageUpload, images: ImageAssetStore = Depends(get_image_store)):
    """
    Store a photo for an item under images/{item_key}.
    Accepts a data URL or bare base64; replaces any earlier photo for the key.
    Returns the URL that serves the image (/images/serve/{item_key}).
    """
    try:
        url = await images.upload(payload.item_key, payload.image)
    except PantryError as e:
        raise _http_error(e)
    return ImageUploadOut(key=blob_key(payload.item_key), url=url)


@router.get("/serve/{item_key:path}", response_class=Response)
async def serve_image(item_key: str, images: ImageAssetStore = Depends(get_image_store)):
    """Serve image bytes by item key. No auth so img src works."""
    try:
        data, content_type = await images.fetch(item_key)
    except PantryError as e:
        raise _http_error(e)
    return Response(content=data, media_type=content_type)
