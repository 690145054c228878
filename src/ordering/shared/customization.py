"""Drink customization value object and line item helpers shared by carts and orders."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Integer

from ordering.domain import ordering
from ordering.menu import MenuItem
from ordering.pricing import price_line_item

# Percentages offered by the sugar and ice selectors
LEVEL_CHOICES = (0, 30, 50, 70, 100)
DEFAULT_LEVEL = 50


@ordering.value_object
class Customization:
    """Sugar/ice levels and the aloe topping of a customizable drink.

    Plain items carry no Customization at all, so "not applicable" can never be
    confused with "0% sugar".
    """

    # Optional at field level so plain items store NULL levels
    sugar = Integer(min_value=0, max_value=100)
    ice = Integer(min_value=0, max_value=100)
    topping = Boolean(default=False)

    @invariant.post
    def levels_must_be_offered(self):
        errors = {}
        for field_name in ("sugar", "ice"):
            if getattr(self, field_name) is None:
                errors[field_name] = ["is required"]
        if errors:
            raise ValidationError(errors)

        if self.sugar not in LEVEL_CHOICES:
            errors["sugar"] = [f"Sugar level must be one of {list(LEVEL_CHOICES)}"]
        if self.ice not in LEVEL_CHOICES:
            errors["ice"] = [f"Ice level must be one of {list(LEVEL_CHOICES)}"]
        if errors:
            raise ValidationError(errors)


def customization_for(menu_item: MenuItem, sugar=None, ice=None, topping=False) -> Customization | None:
    """Build the customization for a menu item, or None for plain items."""
    if not menu_item.has_customization:
        return None

    return Customization(
        sugar=DEFAULT_LEVEL if sugar is None else sugar,
        ice=DEFAULT_LEVEL if ice is None else ice,
        topping=bool(topping),
    )


def has_topping(customization: Customization | None) -> bool:
    return bool(customization and customization.topping)


def line_item_data(item) -> dict:
    """Detached dict form of a cart or order line item."""
    customization = item.customization
    return {
        "id": str(item.id),
        "menu_item_id": item.menu_item_id,
        "name": item.name,
        "base_price": item.base_price,
        "quantity": item.quantity,
        "sugar": customization.sugar if customization else None,
        "ice": customization.ice if customization else None,
        "topping": has_topping(customization),
        "total_price": item.total_price,
    }


def reprice(item) -> int:
    """Recompute an item's total from its base price, quantity and topping."""
    return price_line_item(item.base_price, item.quantity, has_topping(item.customization))
