"""Cart aggregate — the customer's in-progress drink selection.

A cart belongs to one client session. Every line item is priced on entry and
repriced whenever its quantity changes. Quantity updates to zero or below
remove the item, and updates or removals of unknown items are silent no-ops so
that a double click on a stale cart view never fails.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Integer, String, ValueObject

from ordering.cart.events import CartCleared, CartItemAdded, CartItemQuantityChanged, CartItemRemoved
from ordering.domain import ordering
from ordering.menu import get_menu_item
from ordering.pricing import order_total, price_line_item
from ordering.shared.customization import (
    Customization,
    customization_for,
    has_topping,
    line_item_data,
    reprice,
)


@ordering.entity(part_of="Cart")
class LineItem:
    """One priced, customized menu selection in a cart."""

    menu_item_id = String(required=True, max_length=50)
    name = String(required=True, max_length=100)
    base_price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    customization = ValueObject(Customization)
    total_price = Integer(required=True, min_value=0)
    added_at = DateTime()

    @property
    def has_topping(self) -> bool:
        return has_topping(self.customization)


@ordering.aggregate
class Cart:
    session_id = String(required=True, max_length=255)
    items = HasMany(LineItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, session_id):
        now = datetime.now(UTC)
        return cls(
            session_id=session_id,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def total(self) -> int:
        return order_total(self.items)

    def find_item(self, item_id):
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    def snapshot(self) -> list[dict]:
        """Detached copy of the line items, in cart order."""
        return [line_item_data(item) for item in self.items]

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, menu_item_id, quantity=1, sugar=None, ice=None, topping=False):
        """Price a menu selection and append it as a new line item."""
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        menu_item = get_menu_item(menu_item_id)
        customization = customization_for(menu_item, sugar=sugar, ice=ice, topping=topping)
        now = datetime.now(UTC)

        item = LineItem(
            menu_item_id=menu_item.id,
            name=menu_item.name,
            base_price=menu_item.price,
            quantity=quantity,
            customization=customization,
            total_price=price_line_item(menu_item.price, quantity, has_topping(customization)),
            added_at=now,
        )
        self.add_items(item)
        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=str(item.id),
                menu_item_id=menu_item.id,
                quantity=quantity,
                total_price=item.total_price,
            )
        )
        return item

    def update_item_quantity(self, item_id, new_quantity):
        """Change an item's quantity; zero or less removes the item."""
        if new_quantity <= 0:
            self.remove_item(item_id)
            return

        item = self.find_item(item_id)
        if item is None:
            return

        previous_quantity = item.quantity
        item.quantity = new_quantity
        item.total_price = reprice(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemQuantityChanged(
                cart_id=str(self.id),
                item_id=str(item.id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
                total_price=item.total_price,
            )
        )

    def remove_item(self, item_id):
        item = self.find_item(item_id)
        if item is None:
            return

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                cart_id=str(self.id),
                item_id=str(item_id),
            )
        )

    def clear(self):
        """Empty the cart."""
        item_count = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                item_count=item_count,
            )
        )
