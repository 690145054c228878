"""Line item pricing — pure functions, no side effects."""

# Aloe topping surcharge, charged once per unit
TOPPING_UNIT_PRICE = 5000


def price_line_item(base_price: int, quantity: int, has_topping: bool) -> int:
    """Total price of a line item.

    ``quantity`` must be at least 1. Callers treat a non-positive quantity as
    a removal signal and never price it.
    """
    if quantity < 1:
        raise ValueError(f"Cannot price a line item with quantity {quantity}")

    total = base_price * quantity
    if has_topping:
        total += TOPPING_UNIT_PRICE * quantity
    return total


def order_total(items) -> int:
    """Sum of the ``total_price`` of every item; 0 when there are none."""
    return sum(item.total_price for item in items)


def format_vnd(amount: int) -> str:
    """Format an amount the way the shop displays it, e.g. ``60.000 VNĐ``."""
    return f"{amount:,}".replace(",", ".") + " VNĐ"
