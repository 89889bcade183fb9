from sqlalchemy import Column, LargeBinary, String
from .database import Base


class ImageBlob(Base):
    """Stored image bytes for item photos, keyed by path ``images/{item name}``."""
    __tablename__ = "image_blobs"

    key = Column(String, primary_key=True)
    data = Column(LargeBinary, nullable=False)
    content_type = Column(String(255), nullable=False)
