"""FastAPI routes for the Ordering domain — menu, carts, orders and admin."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from notifications.alerts import get_admin_alerts
from ordering.api.schemas import (
    AddOrderItemRequest,
    AddToCartRequest,
    CartIdResponse,
    CartResponse,
    ChangeStatusRequest,
    CheckoutResponse,
    CreateCartRequest,
    ItemIdResponse,
    MenuItemSchema,
    NotificationStateResponse,
    NotificationToggleRequest,
    OrderResponse,
    ReviseItemsRequest,
    StatusResponse,
    UpdateQuantityRequest,
)
from ordering.cart.cart import Cart
from ordering.cart.checkout import SubmitCart, short_reference
from ordering.cart.items import AddToCart, RemoveFromCart, UpdateCartQuantity
from ordering.cart.management import ClearCart, CreateCart
from ordering.menu import menu_items
from ordering.order.discard import DiscardOrder
from ordering.order.modification import (
    AddOrderItem,
    RemoveOrderItem,
    ReviseOrderItems,
    UpdateOrderItemQuantity,
)
from ordering.order.order import Order
from ordering.order.status import ChangeOrderStatus
from ordering.order.views import order_view, order_views
from ordering.pricing import format_vnd

# ---------------------------------------------------------------------------
# Menu Router
# ---------------------------------------------------------------------------
menu_router = APIRouter(prefix="/menu", tags=["menu"])


@menu_router.get("", response_model=list[MenuItemSchema])
async def list_menu() -> list[MenuItemSchema]:
    return [MenuItemSchema(**item.to_dict()) for item in menu_items()]


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


def _cart_response(cart: Cart) -> CartResponse:
    return CartResponse(
        cart_id=str(cart.id),
        session_id=cart.session_id,
        items=cart.snapshot(),
        total_amount=cart.total,
        formatted_total=format_vnd(cart.total),
    )


@cart_router.post("", status_code=201, response_model=CartIdResponse)
async def create_cart(body: CreateCartRequest) -> CartIdResponse:
    command = CreateCart(session_id=body.session_id)
    result = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=result)


@cart_router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str) -> CartResponse:
    cart = current_domain.repository_for(Cart).get(cart_id)
    return _cart_response(cart)


@cart_router.post("/{cart_id}/items", status_code=201, response_model=ItemIdResponse)
async def add_cart_item(cart_id: str, body: AddToCartRequest) -> ItemIdResponse:
    command = AddToCart(
        cart_id=cart_id,
        menu_item_id=body.menu_item_id,
        quantity=body.quantity,
        sugar=body.sugar,
        ice=body.ice,
        topping=body.topping,
    )
    result = current_domain.process(command, asynchronous=False)
    return ItemIdResponse(item_id=result)


@cart_router.put("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def update_cart_item_quantity(cart_id: str, item_id: str, body: UpdateQuantityRequest) -> StatusResponse:
    command = UpdateCartQuantity(
        cart_id=cart_id,
        item_id=item_id,
        new_quantity=body.new_quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, item_id: str) -> StatusResponse:
    command = RemoveFromCart(cart_id=cart_id, item_id=item_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/{cart_id}/items", response_model=StatusResponse)
async def clear_cart(cart_id: str) -> StatusResponse:
    current_domain.process(ClearCart(cart_id=cart_id), asynchronous=False)
    return StatusResponse()


@cart_router.post("/{cart_id}/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout_cart(cart_id: str) -> CheckoutResponse:
    order_id = current_domain.process(SubmitCart(cart_id=cart_id), asynchronous=False)
    return CheckoutResponse(order_id=order_id, reference=short_reference(order_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(status: str | None = None) -> list[OrderResponse]:
    repo = current_domain.repository_for(Order)
    orders = repo.newest_first() if status is None else repo.with_status(status)
    return order_views(orders)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    return order_view(current_domain.repository_for(Order).get(order_id))


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def change_order_status(order_id: str, body: ChangeStatusRequest) -> StatusResponse:
    command = ChangeOrderStatus(order_id=order_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.post("/{order_id}/items", status_code=201, response_model=ItemIdResponse)
async def add_order_item(order_id: str, body: AddOrderItemRequest) -> ItemIdResponse:
    command = AddOrderItem(
        order_id=order_id,
        menu_item_id=body.menu_item_id,
        quantity=body.quantity,
        sugar=body.sugar,
        ice=body.ice,
        topping=body.topping,
    )
    result = current_domain.process(command, asynchronous=False)
    return ItemIdResponse(item_id=result)


@order_router.put("/{order_id}/items", response_model=StatusResponse)
async def revise_order_items(order_id: str, body: ReviseItemsRequest) -> StatusResponse:
    command = ReviseOrderItems(
        order_id=order_id,
        items=json.dumps([item.model_dump() for item in body.items]),
        total_amount=body.total_amount,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.put("/{order_id}/items/{item_id}", response_model=StatusResponse)
async def update_order_item_quantity(order_id: str, item_id: str, body: UpdateQuantityRequest) -> StatusResponse:
    command = UpdateOrderItemQuantity(
        order_id=order_id,
        item_id=item_id,
        new_quantity=body.new_quantity,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.delete("/{order_id}/items/{item_id}", response_model=StatusResponse)
async def remove_order_item(order_id: str, item_id: str) -> StatusResponse:
    command = RemoveOrderItem(order_id=order_id, item_id=item_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def discard_order(order_id: str) -> StatusResponse:
    current_domain.process(DiscardOrder(order_id=order_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.put("/notifications", response_model=NotificationStateResponse)
async def toggle_notifications(body: NotificationToggleRequest) -> NotificationStateResponse:
    alerts = get_admin_alerts()
    if body.enabled:
        alerts.enable()
    else:
        alerts.disable()
    return NotificationStateResponse(enabled=alerts.enabled)
