"""Admin order board — the staff view over the live order feed.

The board holds the latest snapshot of all orders, decides when a snapshot
brings new orders (and alerts staff at most once per snapshot), and wraps
every staff action in a command. Actions never raise: each outcome is
recorded as a message for the view to show. Queries given an unknown status
raise ValidationError.

State is guarded by a lock. In the web layer one task owns the board and
the feed callbacks only hand snapshots over to that task.
"""

import json
import threading
from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from notifications.alerts import get_admin_alerts
from ordering.board.reconciliation import has_new_orders, snapshot_ids
from ordering.order.discard import DiscardOrder
from ordering.order.feed import get_order_feed, load_snapshot
from ordering.order.modification import (
    AddOrderItem,
    RemoveOrderItem,
    ReviseOrderItems,
    UpdateOrderItemQuantity,
)
from ordering.order.order import OrderStatus, next_statuses
from ordering.order.status import ChangeOrderStatus

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class BoardMessage:
    level: str  # "success", "warning" or "error"
    text: str


def _error_text(exc) -> str:
    if isinstance(exc, ValidationError):
        return "; ".join(f"{field}: {', '.join(map(str, msgs))}" for field, msgs in exc.messages.items())
    if isinstance(exc, ObjectNotFoundError):
        return "Order not found"
    return str(exc) or exc.__class__.__name__


class OrderBoard:
    def __init__(self, feed=None, alerts=None):
        self._feed = feed
        self._alerts = alerts
        self._lock = threading.RLock()
        self._orders: list[dict] = []
        self._awaiting_first_snapshot = True
        self._unsubscribe = None
        self.messages: list[BoardMessage] = []

    @property
    def feed(self):
        return self._feed or get_order_feed()

    @property
    def alerts(self):
        return self._alerts or get_admin_alerts()

    # -------------------------------------------------------------------
    # Feed lifecycle
    # -------------------------------------------------------------------
    @property
    def connected(self) -> bool:
        with self._lock:
            return self._unsubscribe is not None

    def start(self, on_update=None, on_error=None) -> None:
        """Subscribe to the feed.

        By default snapshots are reconciled on the publishing thread. Callers
        owning the board from another task pass callbacks that forward
        snapshots and errors to ``reconcile`` and ``on_feed_error``.
        """
        with self._lock:
            if self._unsubscribe is not None:
                return
            self._awaiting_first_snapshot = True
            # Marked connected before the initial snapshot is delivered
            self._unsubscribe = lambda: None

        unsubscribe = self.feed.subscribe(on_update or self.reconcile, on_error or self.on_feed_error)
        with self._lock:
            if self._unsubscribe is not None:
                self._unsubscribe = unsubscribe
            else:
                # The initial snapshot failed and on_feed_error already ran
                unsubscribe()

    def stop(self) -> None:
        with self._lock:
            unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()

    def on_feed_error(self, exc) -> None:
        logger.error("Live order feed broke", error=str(exc))
        with self._lock:
            self._unsubscribe = None
        self._record("error", "Lost connection to live orders")

    # -------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------
    def reconcile(self, snapshot) -> bool:
        """Replace the held snapshot. Returns True if it brought new orders."""
        with self._lock:
            previous_ids = snapshot_ids(self._orders)
            first = self._awaiting_first_snapshot
            self._orders = list(snapshot)
            self._awaiting_first_snapshot = False

        current_ids = snapshot_ids(snapshot)
        new_orders = not first and has_new_orders(previous_ids, current_ids)
        if new_orders:
            new_count = len(current_ids - previous_ids)
            logger.info("New orders arrived", new_count=new_count, order_count=len(snapshot))
            self.alerts.notify_new_order(count=new_count)
        return new_orders

    def refresh(self) -> bool:
        """Fetch every order again without raising alerts."""
        try:
            snapshot = load_snapshot()
        except Exception as exc:
            logger.error("Order refresh failed", error=str(exc))
            self._record("error", "Could not load orders")
            return False

        with self._lock:
            self._orders = snapshot
        self._record("success", "Order list refreshed")
        return True

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def orders(self, status=None) -> list[dict]:
        """Held orders, optionally filtered by status."""
        with self._lock:
            orders = list(self._orders)
        if status is None:
            return orders
        try:
            status = OrderStatus(status).value
        except ValueError:
            raise ValidationError({"status": [f"Unknown order status: {status}"]}) from None
        return [order for order in orders if order["status"] == status]

    @property
    def pending_count(self) -> int:
        return len(self.orders(OrderStatus.NEW))

    def next_statuses(self, order: dict) -> list[str]:
        return next_statuses(order["status"])

    def drain_messages(self) -> list[BoardMessage]:
        with self._lock:
            messages, self.messages = self.messages, []
        return messages

    def _record(self, level, text):
        with self._lock:
            self.messages.append(BoardMessage(level, text))

    # -------------------------------------------------------------------
    # Staff actions
    # -------------------------------------------------------------------
    def _run(self, command_cls, fields, success_text, failure_text) -> bool:
        try:
            current_domain.process(command_cls(**fields), asynchronous=False)
        except Exception as exc:
            logger.warning(
                "Board action failed",
                command=command_cls.__name__,
                error=str(exc),
            )
            self._record("error", f"{failure_text}: {_error_text(exc)}")
            return False

        self._record("success", success_text)
        return True

    def change_status(self, order_id, status) -> bool:
        return self._run(
            ChangeOrderStatus,
            {"order_id": order_id, "status": status},
            f"Order marked as {status}",
            "Could not update status",
        )

    def update_item_quantity(self, order_id, item_id, new_quantity) -> bool:
        return self._run(
            UpdateOrderItemQuantity,
            {"order_id": order_id, "item_id": item_id, "new_quantity": new_quantity},
            "Quantity updated",
            "Could not update quantity",
        )

    def remove_item(self, order_id, item_id) -> bool:
        return self._run(
            RemoveOrderItem,
            {"order_id": order_id, "item_id": item_id},
            "Item removed from order",
            "Could not remove item",
        )

    def add_item(self, order_id, menu_item_id, quantity=1, sugar=None, ice=None, topping=False) -> bool:
        return self._run(
            AddOrderItem,
            {
                "order_id": order_id,
                "menu_item_id": menu_item_id,
                "quantity": quantity,
                "sugar": sugar,
                "ice": ice,
                "topping": topping,
            },
            "Item added to order",
            "Could not add item",
        )

    def save_items(self, order_id, items) -> bool:
        """Replace an order's items as edited in the dialog."""
        if not items:
            self._record("error", "An order needs at least one item")
            return False

        return self._run(
            ReviseOrderItems,
            {"order_id": order_id, "items": json.dumps(list(items))},
            "Order changes saved",
            "Could not save changes",
        )

    def delete(self, order_id) -> bool:
        return self._run(
            DiscardOrder,
            {"order_id": order_id},
            "Order deleted",
            "Could not delete order",
        )
