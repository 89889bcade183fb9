import base64
import binascii
from typing import Optional, Tuple
from urllib.parse import quote

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.errors import ErrorKind, PantryError
from core.logging import get_logger
from db.database import upsert_insert
from db.image import ImageBlob
from schemas.inventory import clean_item_name

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "image/jpeg"


def blob_key(item_key: str) -> str:
    return f"images/{item_key}"


def decode_data_url(encoded: str) -> Tuple[bytes, str]:
    """
    Decode a data URL ("data:image/png;base64,....") or a bare base64 string.

    Returns (bytes, content_type). The content type comes from the data URL
    prefix and falls back to image/jpeg.
    """
    content_type = DEFAULT_CONTENT_TYPE
    payload = (encoded or "").strip()
    if "," in payload:
        prefix, payload = payload.split(",", 1)
        if prefix.startswith("data:") and ";" in prefix:
            content_type = prefix.split(";")[0].replace("data:", "").strip().lower() or content_type
    if not content_type.startswith("image/"):
        raise PantryError(ErrorKind.INVALID_INPUT, f"Unsupported content type: {content_type}")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise PantryError(ErrorKind.INVALID_INPUT, "Image payload is not valid base64")
    if not data:
        raise PantryError(ErrorKind.INVALID_INPUT, "Image payload is empty")
    return data, content_type


class ImageAssetStore:
    """Blob storage for item photos.

    Blobs live under ``images/{item_key}``; uploading again under the same key
    overwrites the previous image and keeps the same URL.
    """

    def __init__(self, db: AsyncSession, base_url: Optional[str] = None, max_bytes: Optional[int] = None):
        self.db = db
        self.base_url = settings.public_base_url if base_url is None else base_url.rstrip("/")
        self.max_bytes = settings.max_image_bytes if max_bytes is None else max_bytes

    def download_url(self, item_key: str) -> str:
        return f"{self.base_url}/images/serve/{quote(item_key, safe='')}"

    async def upload(self, item_key: str, encoded_image: str) -> str:
        try:
            item_key = clean_item_name(item_key)
        except ValueError as e:
            raise PantryError(ErrorKind.INVALID_INPUT, str(e))

        data, content_type = decode_data_url(encoded_image)
        if len(data) > self.max_bytes:
            raise PantryError(
                ErrorKind.INVALID_INPUT,
                f"Image is {len(data)} bytes; the limit is {self.max_bytes} bytes",
            )

        key = blob_key(item_key)
        blob_tbl = ImageBlob.__table__
        upsert = (
            upsert_insert(self.db)(blob_tbl)
            .values(key=key, data=data, content_type=content_type)
            .on_conflict_do_update(
                index_elements=[blob_tbl.c.key],
                set_={"data": data, "content_type": content_type},
            )
        )
        try:
            await self.db.execute(upsert)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Image upload failed", key=key, error=repr(e))
            raise PantryError(ErrorKind.TRANSPORT_FAILURE, f"Error uploading image: {e}")

        logger.info("Image stored", key=key, content_type=content_type, size=len(data))
        return self.download_url(item_key)

    async def fetch(self, item_key: str) -> Tuple[bytes, str]:
        try:
            row = await self.db.get(ImageBlob, blob_key(item_key), populate_existing=True)
        except SQLAlchemyError as e:
            raise PantryError(ErrorKind.TRANSPORT_FAILURE, f"Error reading image: {e}")
        if row is None:
            raise PantryError(ErrorKind.NOT_FOUND, f"Image for '{item_key}' not found")
        return bytes(row.data), row.content_type
