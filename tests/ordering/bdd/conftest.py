"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json

import pytest
from notifications.alerts import AdminAlerts
from notifications.channel.fake_push import FakePushAdapter
from ordering.board.board import OrderBoard
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def context():
    """Container for ids, results and captured errors shared between steps."""
    return {"error": None, "result": None}


@pytest.fixture()
def alerts():
    return AdminAlerts(channel=FakePushAdapter())


@pytest.fixture()
def board(alerts):
    board = OrderBoard(alerts=alerts)
    yield board
    board.stop()


def _place_order(*selections):
    items = [{"menu_item_id": menu_item_id, "quantity": quantity} for quantity, menu_item_id in selections]
    return current_domain.process(PlaceOrder(items=json.dumps(items)), asynchronous=False)


@pytest.fixture()
def place_order():
    """Place an order from (quantity, menu_item_id) pairs; returns the order id."""
    return _place_order


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a placed order of {first_qty:d} "{first}" and {second_qty:d} "{second}"'))
def placed_order(context, first_qty, first, second_qty, second):
    context["order_id"] = _place_order((first_qty, first), (second_qty, second))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(context, status):
    order = current_domain.repository_for(Order).get(context["order_id"])
    assert order.status == status


@then(parsers.cfparse("the order total is {total:d}"))
def order_total_is(context, total):
    order = current_domain.repository_for(Order).get(context["order_id"])
    assert order.total_amount == total


@then("the action fails")
def action_fails(context):
    assert context["result"] is False
