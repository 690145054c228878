"""Cart submission — turns a cart into a new Order and empties the cart."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


@ordering.command(part_of="Cart")
class SubmitCart:
    cart_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class SubmitCartHandler:
    @handle(SubmitCart)
    def submit_cart(self, command):
        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.get(command.cart_id)

        if not cart.items:
            raise ValidationError({"cart": ["Cannot submit an empty cart"]})

        order = Order.place(items_data=cart.snapshot(), total_amount=cart.total)
        current_domain.repository_for(Order).add(order)

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "Cart submitted",
            cart_id=str(cart.id),
            order_id=str(order.id),
            total_amount=order.total_amount,
            item_count=len(order.items),
        )
        return str(order.id)


def short_reference(order_id: str) -> str:
    """The order code shown to the customer after submission."""
    return str(order_id)[:8]
