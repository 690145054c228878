"""Application tests for cart submission."""

import pytest
from ordering.cart.cart import Cart
from ordering.cart.checkout import SubmitCart, short_reference
from ordering.cart.items import AddToCart
from ordering.cart.management import CreateCart
from ordering.order.order import Order
from protean import current_domain
from protean.exceptions import ValidationError


@pytest.fixture()
def cart_id():
    return current_domain.process(CreateCart(session_id="sess-checkout"), asynchronous=False)


def _add(cart_id, menu_item_id, **kwargs):
    current_domain.process(AddToCart(cart_id=cart_id, menu_item_id=menu_item_id, **kwargs), asynchronous=False)


class TestSubmitCart:
    def test_two_item_cart_becomes_new_order(self, cart_id):
        _add(cart_id, "tra-chanh", quantity=2, sugar=30, ice=70, topping=True)
        _add(cart_id, "tra-da", quantity=1)

        order_id = current_domain.process(SubmitCart(cart_id=cart_id), asynchronous=False)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.total_amount == 75000
        assert order.status == "new"
        assert len(order.items) == 2
        assert order.items[0].customization.ice == 70

    def test_cart_is_cleared_after_submission(self, cart_id):
        _add(cart_id, "tra-da", quantity=1)

        current_domain.process(SubmitCart(cart_id=cart_id), asynchronous=False)

        cart = current_domain.repository_for(Cart).get(cart_id)
        assert len(cart.items) == 0

    def test_empty_cart_is_rejected(self, cart_id):
        with pytest.raises(ValidationError) as exc:
            current_domain.process(SubmitCart(cart_id=cart_id), asynchronous=False)

        assert "cart" in exc.value.messages
        assert current_domain.repository_for(Order).newest_first() == []

    def test_order_is_decoupled_from_cart(self, cart_id):
        _add(cart_id, "tra-da", quantity=1)
        order_id = current_domain.process(SubmitCart(cart_id=cart_id), asynchronous=False)

        _add(cart_id, "bim-bim", quantity=5)

        order = current_domain.repository_for(Order).get(order_id)
        assert [i.menu_item_id for i in order.items] == ["tra-da"]


class TestShortReference:
    def test_first_eight_characters(self):
        assert short_reference("3f2b9c1d-aaaa-bbbb") == "3f2b9c1d"
