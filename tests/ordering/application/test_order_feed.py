"""Application tests for the live order feed."""

import json

import pytest
from ordering.order.discard import DiscardOrder
from ordering.order.feed import OrderFeed, get_order_feed, subscribe_to_orders
from ordering.order.placement import PlaceOrder
from ordering.order.status import ChangeOrderStatus
from protean import current_domain


def _place_order(menu_item_id="tra-da"):
    return current_domain.process(
        PlaceOrder(items=json.dumps([{"menu_item_id": menu_item_id, "quantity": 1}])),
        asynchronous=False,
    )


class _Recorder:
    def __init__(self):
        self.snapshots = []
        self.errors = []

    def on_update(self, snapshot):
        self.snapshots.append(snapshot)

    def on_error(self, exc):
        self.errors.append(exc)

    @property
    def latest_ids(self):
        return [order["id"] for order in self.snapshots[-1]]


class TestSubscribe:
    def test_initial_snapshot_is_delivered_immediately(self):
        order_id = _place_order()
        recorder = _Recorder()

        subscribe_to_orders(recorder.on_update, recorder.on_error)

        assert len(recorder.snapshots) == 1
        assert recorder.latest_ids == [order_id]

    def test_empty_store_delivers_empty_snapshot(self):
        recorder = _Recorder()
        subscribe_to_orders(recorder.on_update)
        assert recorder.snapshots == [[]]

    def test_unsubscribe_is_idempotent(self):
        recorder = _Recorder()
        unsubscribe = subscribe_to_orders(recorder.on_update)

        unsubscribe()
        unsubscribe()

        _place_order()
        assert len(recorder.snapshots) == 1
        assert get_order_feed().subscriber_count == 0


class TestPublish:
    def test_every_order_change_pushes_a_full_snapshot(self):
        recorder = _Recorder()
        subscribe_to_orders(recorder.on_update)

        order_id = _place_order()
        current_domain.process(ChangeOrderStatus(order_id=order_id, status="processing"), asynchronous=False)
        current_domain.process(DiscardOrder(order_id=order_id), asynchronous=False)

        assert len(recorder.snapshots) == 4
        assert recorder.snapshots[1][0]["status"] == "new"
        assert recorder.snapshots[2][0]["status"] == "processing"
        assert recorder.snapshots[3] == []

    def test_snapshots_are_newest_first(self):
        recorder = _Recorder()
        subscribe_to_orders(recorder.on_update)

        first = _place_order()
        second = _place_order("bim-bim")

        assert recorder.latest_ids == [second, first]

    def test_snapshot_uses_order_wire_format(self):
        recorder = _Recorder()
        subscribe_to_orders(recorder.on_update)
        _place_order()

        order = recorder.snapshots[-1][0]
        assert set(order) == {"id", "items", "total_amount", "placed_at", "status"}
        assert order["items"][0]["sugar"] is None
        assert order["total_amount"] == 15000

    def test_failing_subscriber_does_not_affect_others(self):
        def explode(snapshot):
            raise RuntimeError("render failed")

        recorder = _Recorder()
        subscribe_to_orders(explode)
        subscribe_to_orders(recorder.on_update)

        order_id = _place_order()

        assert recorder.latest_ids == [order_id]
        assert get_order_feed().subscriber_count == 2


class TestFeedErrors:
    def test_snapshot_failure_notifies_and_drops_every_subscriber(self):
        calls = {"count": 0}

        def flaky_loader():
            calls["count"] += 1
            if calls["count"] > 2:
                raise ConnectionError("store unreachable")
            return []

        feed = OrderFeed(loader=flaky_loader)
        first, second = _Recorder(), _Recorder()
        feed.subscribe(first.on_update, first.on_error)
        feed.subscribe(second.on_update, second.on_error)

        feed.publish()

        assert len(first.errors) == 1
        assert len(second.errors) == 1
        assert isinstance(first.errors[0], ConnectionError)
        assert feed.subscriber_count == 0

    def test_no_reconnect_after_failure(self):
        calls = {"count": 0}

        def flaky_loader():
            calls["count"] += 1
            if calls["count"] == 2:
                raise ConnectionError("store unreachable")
            return []

        feed = OrderFeed(loader=flaky_loader)
        recorder = _Recorder()
        feed.subscribe(recorder.on_update, recorder.on_error)

        feed.publish()
        feed.publish()

        assert recorder.snapshots == [[]]
        assert len(recorder.errors) == 1

    def test_initial_snapshot_failure_reports_error(self):
        def broken_loader():
            raise ConnectionError("store unreachable")

        feed = OrderFeed(loader=broken_loader)
        recorder = _Recorder()

        unsubscribe = feed.subscribe(recorder.on_update, recorder.on_error)
        unsubscribe()

        assert recorder.snapshots == []
        assert len(recorder.errors) == 1
        assert feed.subscriber_count == 0

    def test_missing_error_callback_is_tolerated(self):
        def broken_loader():
            raise ConnectionError("store unreachable")

        feed = OrderFeed(loader=broken_loader)
        feed.subscribe(lambda snapshot: None)
        assert feed.subscriber_count == 0

    @pytest.mark.parametrize("count", [0, 1])
    def test_publish_without_subscribers_skips_loading(self, count):
        calls = {"count": 0}

        def loader():
            calls["count"] += 1
            return []

        feed = OrderFeed(loader=loader)
        for _ in range(count):
            feed.subscribe(lambda snapshot: None)()

        feed.publish()
        assert calls["count"] == count
