"""Cart management — creation and clearing."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering


@ordering.command(part_of="Cart")
class CreateCart:
    """Create an empty cart for a client session."""

    session_id = String(required=True, max_length=255)


@ordering.command(part_of="Cart")
class ClearCart:
    cart_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        cart = Cart.create(session_id=command.session_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.clear()
        repo.add(cart)
