"""Order status changes driven from the admin board."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class ChangeOrderStatus:
    """Move an order one step: new → processing → completed, or reopen."""

    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@ordering.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(ChangeOrderStatus)
    def change_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous_status = order.status

        order.change_status(command.status)
        repo.add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            previous_status=previous_status,
            new_status=order.status,
        )
