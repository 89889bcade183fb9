from sqlalchemy import CheckConstraint, Column, Integer, String, Text

from ..database import Base


class InventoryItem(Base):
    __tablename__ = "inventory"
    __table_args__ = (
        # a decrement to zero deletes the row instead
        CheckConstraint("quantity > 0", name="ck_inventory_quantity_positive"),
    )

    # The name is the document key; there is no separate id column.
    name = Column(String, primary_key=True)
    quantity = Column(Integer, nullable=False, default=1)
    image_url = Column(Text, nullable=False, default="")

    @property
    def to_schema(self):
        return {
            "name": self.name,
            "quantity": int(self.quantity),
            "image_url": self.image_url or "",
        }
