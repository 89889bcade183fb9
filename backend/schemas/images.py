from pydantic import BaseModel, field_validator

from schemas.inventory import clean_item_name


class ImageUpload(BaseModel):
    item_key: str
    # data URL ("data:image/png;base64,...") or bare base64
    image: str

    @field_validator("item_key")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        return clean_item_name(v)


class ImageUploadOut(BaseModel):
    key: str
    url: str
