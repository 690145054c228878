"""Order modification — commands and handler.

Staff can add, reprice, remove and wholesale-replace line items on any order.
Whenever an edit leaves the order without items, the order is deleted.
"""

import json

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class AddOrderItem:
    """Add a menu item to an existing order."""

    order_id = Identifier(required=True)
    menu_item_id = String(required=True, max_length=50)
    quantity = Integer(default=1, min_value=1)
    sugar = Integer()
    ice = Integer()
    topping = Boolean(default=False)


@ordering.command(part_of="Order")
class UpdateOrderItemQuantity:
    """Change an item's quantity; zero or less removes it."""

    order_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True)


@ordering.command(part_of="Order")
class RemoveOrderItem:
    order_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.command(part_of="Order")
class ReviseOrderItems:
    """Replace every line item of an order in one go."""

    order_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of line item dicts
    total_amount = Integer()


@ordering.command_handler(part_of=Order)
class ModifyOrderHandler:
    @handle(AddOrderItem)
    def add_order_item(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        item = order.add_item(
            menu_item_id=command.menu_item_id,
            quantity=command.quantity,
            sugar=command.sugar,
            ice=command.ice,
            topping=command.topping,
        )
        repo.add(order)
        return str(item.id)

    @handle(UpdateOrderItemQuantity)
    def update_order_item_quantity(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        discarded = order.update_item_quantity(
            item_id=command.item_id,
            new_quantity=command.new_quantity,
        )
        _save(repo, order, discarded)

    @handle(RemoveOrderItem)
    def remove_order_item(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        discarded = order.remove_item(item_id=command.item_id)
        _save(repo, order, discarded)

    @handle(ReviseOrderItems)
    def revise_order_items(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.revise_items(
            items_data=json.loads(command.items),
            total_amount=command.total_amount,
        )
        repo.add(order)


def _save(repo, order, discarded):
    if not discarded:
        repo.add(order)
        return

    repo.delete(order)
    logger.info("Order discarded after its last item was removed", order_id=str(order.id))
