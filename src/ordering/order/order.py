"""Order aggregate — a submitted cart, owned by the shop.

Orders are created from a detached snapshot of a cart and afterwards only
change through staff actions: status moves and line item edits. The order
total is always recomputed from the items; a total supplied by a caller is
only ever compared, never stored as-is.

State Machine:
    NEW → PROCESSING → COMPLETED
    COMPLETED → PROCESSING (reopen)

Only single-step moves are allowed. NEW → COMPLETED and any move back to NEW
are rejected.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Integer, String, ValueObject

from ordering.domain import ordering
from ordering.menu import get_menu_item
from ordering.order.events import OrderDiscarded, OrderItemsRevised, OrderPlaced, OrderStatusChanged
from ordering.pricing import order_total, price_line_item
from ordering.shared.customization import (
    Customization,
    customization_for,
    has_topping,
    line_item_data,
    reprice,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    NEW = "new"
    PROCESSING = "processing"
    COMPLETED = "completed"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.NEW: {OrderStatus.PROCESSING},
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: {OrderStatus.PROCESSING},  # Reopen
}


def next_statuses(status) -> list[str]:
    """Statuses reachable from ``status`` in a single step."""
    return sorted(s.value for s in _VALID_TRANSITIONS.get(OrderStatus(status), set()))


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line item copied from the customer's cart or added by staff."""

    menu_item_id = String(required=True, max_length=50)
    name = String(required=True, max_length=100)
    base_price = Integer(required=True, min_value=0)
    quantity = Integer(required=True, min_value=1)
    customization = ValueObject(Customization)
    total_price = Integer(required=True, min_value=0)

    @property
    def has_topping(self) -> bool:
        return has_topping(self.customization)


def _build_item(data: dict) -> OrderItem:
    """Create an OrderItem from line item data, repricing it."""
    quantity = data.get("quantity")
    if quantity is None or quantity < 1:
        raise ValidationError({"quantity": ["Quantity must be at least 1"]})

    menu_item = get_menu_item(data.get("menu_item_id"))
    base_price = data.get("base_price")
    if base_price is None:
        base_price = menu_item.price

    customization = customization_for(
        menu_item,
        sugar=data.get("sugar"),
        ice=data.get("ice"),
        topping=data.get("topping", False),
    )
    return OrderItem(
        menu_item_id=menu_item.id,
        name=data.get("name") or menu_item.name,
        base_price=base_price,
        quantity=quantity,
        customization=customization,
        total_price=price_line_item(base_price, quantity, has_topping(customization)),
    )


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    items = HasMany(OrderItem)
    total_amount = Integer(default=0, min_value=0)
    status = String(
        choices=OrderStatus,
        default=OrderStatus.NEW.value,
    )
    placed_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_amount_must_match_items(self):
        if self.total_amount != order_total(self.items):
            raise ValidationError({"total_amount": ["Order total must equal the sum of its line items"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, items_data, total_amount=None):
        """Create a new order from a cart snapshot.

        Args:
            items_data: List of dicts with menu_item_id, name, base_price,
                        quantity, sugar, ice and topping.
            total_amount: Total the customer saw. Rejected if it differs from
                          the recomputed sum of the items.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        items = [_build_item(data) for data in items_data]
        _check_claimed_total(items, total_amount)

        now = datetime.now(UTC)
        order = cls(
            status=OrderStatus.NEW.value,
            placed_at=now,
            updated_at=now,
        )
        with atomic_change(order):
            for item in items:
                order.add_items(item)
            order.total_amount = order_total(order.items)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                items=json.dumps(order.item_snapshot()),
                total_amount=order.total_amount,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def find_item(self, item_id):
        return next((i for i in self.items if str(i.id) == str(item_id)), None)

    def item_snapshot(self) -> list[dict]:
        return [line_item_data(item) for item in self.items]

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate that the current state allows transition to target."""
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _transition_to(self, target_status):
        self._assert_can_transition(target_status)

        previous_status = self.status
        now = datetime.now(UTC)
        self.status = target_status.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous_status,
                new_status=target_status.value,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Order lifecycle transitions
    # -------------------------------------------------------------------
    def mark_processing(self):
        """Staff started preparing the order."""
        self._transition_to(OrderStatus.PROCESSING)

    def complete(self):
        """The order was handed over."""
        self._transition_to(OrderStatus.COMPLETED)

    def reopen(self):
        """Undo a completion, moving the order back to processing."""
        if OrderStatus(self.status) != OrderStatus.COMPLETED:
            raise ValidationError({"status": ["Only completed orders can be reopened"]})
        self._transition_to(OrderStatus.PROCESSING)

    def change_status(self, target_status):
        try:
            target = OrderStatus(target_status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {target_status}"]}) from None
        self._transition_to(target)

    # -------------------------------------------------------------------
    # Item editing
    # -------------------------------------------------------------------
    def _items_revised(self):
        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            OrderItemsRevised(
                order_id=str(self.id),
                items=json.dumps(self.item_snapshot()),
                total_amount=self.total_amount,
                revised_at=now,
            )
        )

    def add_item(self, menu_item_id, quantity=1, sugar=None, ice=None, topping=False):
        """Add a menu item to the order; customizable items default to 50% sugar and ice."""
        item = _build_item(
            {
                "menu_item_id": menu_item_id,
                "quantity": quantity,
                "sugar": sugar,
                "ice": ice,
                "topping": topping,
            }
        )
        with atomic_change(self):
            self.add_items(item)
            self.total_amount = order_total(self.items)

        self._items_revised()
        return item

    def update_item_quantity(self, item_id, new_quantity):
        """Change an item's quantity; zero or less removes it.

        Returns True when the change removed the order's last item and the
        order was discarded.
        """
        if new_quantity <= 0:
            return self.remove_item(item_id)

        item = self.find_item(item_id)
        if item is None:
            raise ValidationError({"item_id": ["Item not found"]})

        with atomic_change(self):
            item.quantity = new_quantity
            item.total_price = reprice(item)
            self.total_amount = order_total(self.items)

        self._items_revised()
        return False

    def remove_item(self, item_id):
        """Remove an item. Removing the last item discards the whole order.

        Returns True when the order was discarded.
        """
        item = self.find_item(item_id)
        if item is None:
            raise ValidationError({"item_id": ["Item not found"]})

        if len(self.items) == 1:
            self.discard()
            return True

        with atomic_change(self):
            self.remove_items(item)
            self.total_amount = order_total(self.items)

        self._items_revised()
        return False

    def revise_items(self, items_data, total_amount=None):
        """Replace every line item, as saved from the admin edit dialog."""
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        items = [_build_item(data) for data in items_data]
        _check_claimed_total(items, total_amount)

        with atomic_change(self):
            for existing in list(self.items):
                self.remove_items(existing)
            for item in items:
                self.add_items(item)
            self.total_amount = order_total(self.items)

        self._items_revised()

    def discard(self):
        """Mark the order for deletion."""
        self.raise_(
            OrderDiscarded(
                order_id=str(self.id),
                discarded_at=datetime.now(UTC),
            )
        )


def _check_claimed_total(items, total_amount):
    if total_amount is not None and total_amount != order_total(items):
        raise ValidationError(
            {"total_amount": [f"Total {total_amount} does not match the items total {order_total(items)}"]}
        )
