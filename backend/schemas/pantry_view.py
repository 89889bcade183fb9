"""
Pantry page state.

Everything the page needs between events lives on one serializable model
that handlers receive and return: search and quantity filters, the add/edit
modal and its form fields, and the last error to show the user.
"""

from typing import Iterable, List, Optional

from pydantic import BaseModel

from schemas.inventory import InventoryItemOut, QuantityFilter


class PantryView(BaseModel):
    search_term: str = ""
    quantity_filter: QuantityFilter = "All"

    modal_open: bool = False
    item_name: str = ""
    image: Optional[str] = None
    current_item: Optional[str] = None
    original_name: str = ""
    is_adding_new: bool = True
    uploading: bool = False
    show_camera: bool = False

    last_error: Optional[str] = None

    def open_add(self) -> None:
        self.close()
        self.modal_open = True

    def open_edit(self, name: str) -> None:
        self.original_name = name
        self.current_item = name
        self.item_name = name
        self.is_adding_new = False
        self.modal_open = True
        self.last_error = None

    def close(self) -> None:
        self.modal_open = False
        self.current_item = None
        self.item_name = ""
        self.image = None
        self.is_adding_new = True
        self.show_camera = False
        self.last_error = None

    def capture(self, data_url: str) -> None:
        self.image = data_url
        self.show_camera = False

    def visible_items(self, items: Iterable[InventoryItemOut]) -> List[InventoryItemOut]:
        return filter_inventory(items, self.search_term, self.quantity_filter)


def filter_inventory(
    items: Iterable[InventoryItemOut],
    search_term: Optional[str] = None,
    quantity_filter: QuantityFilter = "All",
) -> List[InventoryItemOut]:
    """Case-insensitive name search, then a minimum-quantity threshold unless "All"."""
    needle = (search_term or "").lower()
    out = [it for it in items if needle in it.name.lower()]
    if quantity_filter != "All":
        threshold = int(quantity_filter)
        out = [it for it in out if it.quantity >= threshold]
    return out
