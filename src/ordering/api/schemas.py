"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class MenuItemSchema(BaseModel):
    id: str
    name: str
    price: int
    has_customization: bool


class LineItemSchema(BaseModel):
    id: str
    menu_item_id: str
    name: str
    base_price: int
    quantity: int
    sugar: int | None = None
    ice: int | None = None
    topping: bool = False
    total_price: int


class EditedItemSchema(BaseModel):
    """A line item as saved from the admin edit dialog."""

    menu_item_id: str
    name: str | None = None
    base_price: int | None = Field(default=None, ge=0)
    quantity: int = Field(ge=1)
    sugar: int | None = None
    ice: int | None = None
    topping: bool = False


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    session_id: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "session_id": "sess-7f3a",
                }
            ]
        }
    }


class AddToCartRequest(BaseModel):
    menu_item_id: str
    quantity: int = Field(ge=1, default=1)
    sugar: int | None = None
    ice: int | None = None
    topping: bool = False

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "menu_item_id": "tra-chanh",
                    "quantity": 2,
                    "sugar": 30,
                    "ice": 70,
                    "topping": True,
                }
            ]
        }
    }


class UpdateQuantityRequest(BaseModel):
    """Quantity of zero or less removes the item."""

    new_quantity: int


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class ChangeStatusRequest(BaseModel):
    status: str


class AddOrderItemRequest(AddToCartRequest):
    pass


class ReviseItemsRequest(BaseModel):
    items: list[EditedItemSchema]
    total_amount: int | None = None


class NotificationToggleRequest(BaseModel):
    enabled: bool


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class CartIdResponse(BaseModel):
    cart_id: str


class ItemIdResponse(BaseModel):
    item_id: str


class CartResponse(BaseModel):
    cart_id: str
    session_id: str
    items: list[LineItemSchema]
    total_amount: int
    formatted_total: str


class CheckoutResponse(BaseModel):
    order_id: str
    reference: str


class OrderResponse(BaseModel):
    id: str
    items: list[LineItemSchema]
    total_amount: int
    placed_at: str | None = None
    status: str


class NotificationStateResponse(BaseModel):
    enabled: bool
