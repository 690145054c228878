"""Queries over stored orders used by the admin board and the live feed."""

from protean import atomic_change
from protean.exceptions import ValidationError

from ordering.domain import ordering
from ordering.order.order import Order, OrderStatus


@ordering.repository(part_of=Order)
class OrderRepository:
    def newest_first(self) -> list[Order]:
        """All orders, most recently placed first."""
        return self._dao.query.order_by("-placed_at").all().items

    def with_status(self, status) -> list[Order]:
        """Orders in one status, most recently placed first."""
        try:
            status = OrderStatus(status).value
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {status}"]}) from None
        return self._dao.query.filter(status=status).order_by("-placed_at").all().items

    def delete(self, order: Order) -> None:
        """Remove an order and its line items from storage for good."""
        # Child rows are only deleted when the removal is synced through add()
        with atomic_change(order):
            for item in list(order.items):
                order.remove_items(item)
            order.total_amount = 0
        self.add(order)

        self._dao.delete(order)
