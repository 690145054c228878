"""Domain events for the Order aggregate.

Every event carries enough data for the admin board to rebuild its view, and
each one triggers a fresh snapshot on the live order feed.
"""

from protean.fields import DateTime, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.event(part_of="Order")
class OrderPlaced:
    """A customer submitted a cart and a new order was created."""

    __version__ = 1

    order_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of line item dicts
    total_amount = Integer(required=True)
    placed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderStatusChanged:
    """Staff moved the order one step through its fulfillment lifecycle."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderItemsRevised:
    """Staff edited the order's line items; carries the full new item list."""

    __version__ = 1

    order_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of line item dicts
    total_amount = Integer(required=True)
    revised_at = DateTime(required=True)


@ordering.event(part_of="Order")
class OrderDiscarded:
    """The order was deleted, explicitly or by removing its last item."""

    __version__ = 1

    order_id = Identifier(required=True)
    discarded_at = DateTime(required=True)
