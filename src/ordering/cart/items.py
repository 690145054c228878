"""Cart item management — commands and handler.

Each handler persists the whole cart before returning, so the stored cart
always matches the state the customer last saw.
"""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from ordering.cart.cart import Cart
from ordering.domain import ordering


@ordering.command(part_of="Cart")
class AddToCart:
    cart_id = Identifier(required=True)
    menu_item_id = String(required=True, max_length=50)
    quantity = Integer(required=True, min_value=1)
    sugar = Integer()
    ice = Integer()
    topping = Boolean(default=False)


@ordering.command(part_of="Cart")
class UpdateCartQuantity:
    """Set a line item's quantity; zero or less removes the item."""

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True)


@ordering.command(part_of="Cart")
class RemoveFromCart:
    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        item = cart.add_item(
            menu_item_id=command.menu_item_id,
            quantity=command.quantity,
            sugar=command.sugar,
            ice=command.ice,
            topping=command.topping,
        )
        repo.add(cart)
        return str(item.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.update_item_quantity(
            item_id=command.item_id,
            new_quantity=command.new_quantity,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)
