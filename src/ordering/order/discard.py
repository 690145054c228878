"""Order deletion from the admin board."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Order")
class DiscardOrder:
    order_id = Identifier(required=True)


@ordering.command_handler(part_of=Order)
class DiscardOrderHandler:
    @handle(DiscardOrder)
    def discard_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)

        order.discard()
        repo.delete(order)

        logger.info("Order discarded", order_id=str(order.id), status=order.status)
