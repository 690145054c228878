"""Static drink menu.

Prices are integers in the smallest currency unit (VND). Only items flagged
``has_customization`` accept sugar/ice levels and the aloe topping.
"""

from dataclasses import dataclass

from protean.exceptions import ValidationError


@dataclass(frozen=True)
class MenuItem:
    """A drink or snack that can be added to a cart or an order."""

    id: str
    name: str
    price: int
    has_customization: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "has_customization": self.has_customization,
        }


MENU: dict[str, MenuItem] = {
    item.id: item
    for item in (
        MenuItem("tra-da", "Trà Đá", 15000),
        MenuItem("bim-bim", "Bim Bim", 20000),
        MenuItem("tra-chanh", "Trà Chanh", 25000, has_customization=True),
        MenuItem("tra-quat", "Trà Quất", 30000, has_customization=True),
    )
}


def menu_items() -> list[MenuItem]:
    """Menu in display order."""
    return list(MENU.values())


def get_menu_item(menu_item_id: str) -> MenuItem:
    """Look up a menu item by id, rejecting unknown ids."""
    item = MENU.get(menu_item_id)
    if item is None:
        raise ValidationError({"menu_item_id": [f"Unknown menu item: {menu_item_id}"]})
    return item
