"""Domain events for the Cart aggregate."""

from protean.fields import Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="Cart")
class CartItemAdded:
    """A priced menu selection was added to the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    menu_item_id = String(required=True)
    quantity = Integer(required=True)
    total_price = Integer(required=True)


@ordering.event(part_of="Cart")
class CartItemQuantityChanged:
    """The quantity of a cart line item was changed and the item repriced."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    total_price = Integer(required=True)


@ordering.event(part_of="Cart")
class CartItemRemoved:
    """A line item was removed from the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.event(part_of="Cart")
class CartCleared:
    """Every line item was removed from the cart, usually after checkout."""

    __version__ = 1

    cart_id = Identifier(required=True)
    item_count = Integer(required=True)
