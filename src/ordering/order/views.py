"""Wire format of an order, shared by the API and the live feed."""

from ordering.order.order import Order


def order_view(order: Order) -> dict:
    return {
        "id": str(order.id),
        "items": order.item_snapshot(),
        "total_amount": order.total_amount,
        "placed_at": order.placed_at.isoformat() if order.placed_at else None,
        "status": order.status,
    }


def order_views(orders) -> list[dict]:
    return [order_view(order) for order in orders]
