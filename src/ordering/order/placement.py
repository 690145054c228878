"""Order placement — creating an order directly from line item data.

Customers normally go through ``SubmitCart``; this command covers callers that
already hold a detached cart snapshot.
"""

import json

import structlog
from protean import handle
from protean.fields import Integer, Text
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class PlaceOrder:
    items = Text(required=True)  # JSON: list of line item dicts
    total_amount = Integer()


@ordering.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order = Order.place(
            items_data=json.loads(command.items),
            total_amount=command.total_amount,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            total_amount=order.total_amount,
            item_count=len(order.items),
        )
        return str(order.id)
