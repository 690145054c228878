"""Live order feed — pushes the full order list to in-process subscribers.

Every order event triggers one fresh snapshot of all orders, newest first.
Subscribers get the current snapshot the moment they subscribe, so a view
never has to fetch separately before listening.

A failure to build a snapshot is terminal for the feed's current
subscribers: each one's ``on_error`` is called and all of them are dropped.
Callers resubscribe explicitly to resume.

Usage:
    unsubscribe = subscribe_to_orders(on_update, on_error)
    ...
    unsubscribe()
"""

import itertools
import threading
from collections.abc import Callable

import structlog
from protean import handle
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.events import OrderDiscarded, OrderItemsRevised, OrderPlaced, OrderStatusChanged
from ordering.order.order import Order
from ordering.order.views import order_views

logger = structlog.get_logger(__name__)

Snapshot = list[dict]


def load_snapshot() -> Snapshot:
    """All orders in wire format, most recently placed first."""
    return order_views(current_domain.repository_for(Order).newest_first())


class _Subscription:
    def __init__(self, on_update, on_error):
        self.on_update = on_update
        self.on_error = on_error


class OrderFeed:
    """Registry of live subscribers to the order list."""

    def __init__(self, loader: Callable[[], Snapshot] = load_snapshot):
        self._loader = loader
        self._subscriptions: dict[int, _Subscription] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def subscribe(self, on_update, on_error=None) -> Callable[[], None]:
        """Register a subscriber and deliver the current snapshot to it.

        Returns an idempotent unsubscribe handle. If the initial snapshot
        cannot be built, ``on_error`` is called and nothing is registered.
        """
        subscription = _Subscription(on_update, on_error)
        try:
            snapshot = self._loader()
        except Exception as exc:
            logger.error("Order snapshot failed on subscribe", error=str(exc))
            self._notify_error(subscription, exc)
            return lambda: None

        with self._lock:
            key = next(self._ids)
            self._subscriptions[key] = subscription

        self._deliver(subscription, snapshot)

        def unsubscribe():
            with self._lock:
                self._subscriptions.pop(key, None)

        return unsubscribe

    def publish(self) -> None:
        """Rebuild the snapshot and push it to every subscriber."""
        with self._lock:
            subscriptions = list(self._subscriptions.values())
        if not subscriptions:
            return

        try:
            snapshot = self._loader()
        except Exception as exc:
            logger.error(
                "Order snapshot failed, dropping subscribers",
                error=str(exc),
                subscriber_count=len(subscriptions),
            )
            with self._lock:
                self._subscriptions.clear()
            for subscription in subscriptions:
                self._notify_error(subscription, exc)
            return

        for subscription in subscriptions:
            self._deliver(subscription, snapshot)

    def _deliver(self, subscription, snapshot):
        try:
            subscription.on_update(list(snapshot))
        except Exception as exc:
            logger.warning("Order feed subscriber failed", error=str(exc))

    def _notify_error(self, subscription, exc):
        if subscription.on_error is None:
            return
        try:
            subscription.on_error(exc)
        except Exception as callback_exc:
            logger.warning("Order feed error callback failed", error=str(callback_exc))


_feed: OrderFeed | None = None


def get_order_feed() -> OrderFeed:
    global _feed
    if _feed is None:
        _feed = OrderFeed()
    return _feed


def reset_order_feed() -> None:
    """Drop the feed and its subscribers. Used in tests."""
    global _feed
    _feed = None


def subscribe_to_orders(on_update, on_error=None) -> Callable[[], None]:
    return get_order_feed().subscribe(on_update, on_error)


@ordering.event_handler(part_of=Order)
class OrderFeedPublisher:
    """Republishes the order list after every committed order change."""

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        get_order_feed().publish()

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        get_order_feed().publish()

    @handle(OrderItemsRevised)
    def on_order_items_revised(self, event: OrderItemsRevised) -> None:
        get_order_feed().publish()

    @handle(OrderDiscarded)
    def on_order_discarded(self, event: OrderDiscarded) -> None:
        get_order_feed().publish()
