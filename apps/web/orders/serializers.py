"""
Pydantic schemas for the order API.

Request schemas use the camelCase keys clients send; internal results of
the validation pass are plain schemas too so they can be logged and
rendered without touching the ORM.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)

# Largest value a PositiveIntegerField holds on every supported database
MAX_POSITIVE_INT = 2_147_483_647

# Decimal rendered as a fixed 2-place string in JSON output
Money = Annotated[
    Decimal,
    PlainSerializer(
        lambda value: f"{value:.2f}", return_type=str, when_used="json"
    ),
]

# =============================================================================
# Order Placement Request
# =============================================================================


def _reject_non_numeric(value: Any) -> Any:
    if isinstance(value, bool | str):
        raise ValueError("must be a non-negative number")
    return value


class ItemReferenceSchema(BaseModel):
    """Reference to the menu item being ordered."""

    id: int


class VariationSelectorSchema(BaseModel):
    """Selects a variation by size label or by id."""

    size: str | None = None
    id: int | None = None

    @model_validator(mode="after")
    def _require_size_or_id(self) -> "VariationSelectorSchema":
        if not self.size and self.id is None:
            raise ValueError("variation must specify a size or an id")
        return self

    @property
    def label(self) -> str:
        """Human-readable form used in diagnostics."""
        return self.size or str(self.id)


class OrderLineRequestSchema(BaseModel):
    """A single line in an order placement request."""

    item: ItemReferenceSchema
    variation: VariationSelectorSchema
    quantity: int = Field(..., gt=0, le=MAX_POSITIVE_INT)


class PlaceOrderRequest(BaseModel):
    """Request body for POST /api/orders."""

    model_config = ConfigDict(populate_by_name=True)

    order_items: list[OrderLineRequestSchema] = Field(
        ..., alias="orderItems", min_length=1
    )
    delivery_address: str = Field(..., alias="deliveryAddress")
    payment_method: str = Field(..., alias="PaymentMethod")
    delivery_fee: Decimal | None = Field(
        default=None, alias="deliveryFee", ge=0, max_digits=10, decimal_places=2
    )
    time_to_deliver: int | None = Field(
        default=None, alias="timeToDeliver", ge=0, le=MAX_POSITIVE_INT
    )
    notes: str | None = Field(default=None, max_length=1000)
    # Admins may place an order on a customer's behalf
    customer_id: int | None = Field(default=None, alias="customerId")

    @field_validator("delivery_address")
    @classmethod
    def _address_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("delivery address is required")
        return value

    @field_validator("delivery_fee", "time_to_deliver", mode="before")
    @classmethod
    def _numbers_only(cls, value: Any) -> Any:
        return _reject_non_numeric(value)


class UpdateStatusRequest(BaseModel):
    """Request body for PATCH /api/orders/{order_id}."""

    status: str


# =============================================================================
# Validation Results
# =============================================================================


class UnavailableItem(BaseModel):
    """Why a requested line could not be accepted."""

    item: int
    name: str | None = None
    variation: str | None = None
    message: str


class AcceptedLine(BaseModel):
    """A priced order line ready to be persisted."""

    menu_item_id: int
    item_name: str
    quantity: int
    price: Decimal
    variation_size: str
    line_total: Decimal


class MenuValidationResult(BaseModel):
    """Outcome of checking a cart against the live catalog."""

    items_subtotal: Decimal = Decimal("0")
    unavailable_items: list[UnavailableItem] = Field(default_factory=list)
    accepted_lines: list[AcceptedLine] = Field(default_factory=list)
    restaurant_id: int | None = None

    @property
    def is_acceptable(self) -> bool:
        """True when every line passed and a restaurant was resolved."""
        return not self.unavailable_items and self.restaurant_id is not None


# =============================================================================
# Responses
# =============================================================================


class OrderItemResponseSchema(BaseModel):
    """A line item in an order response."""

    id: int
    menu_item_id: int = Field(..., serialization_alias="itemId")
    item_name: str = Field(..., serialization_alias="name")
    quantity: int
    price: Money
    variation_size: str = Field(..., serialization_alias="variationSize")
    line_total: Money = Field(..., serialization_alias="lineTotal")


class PlaceOrderResponse(BaseModel):
    """Data payload for a successful POST /api/orders."""

    order_id: int = Field(..., serialization_alias="orderId")
    items_total: Money = Field(..., serialization_alias="itemsTotal")
    total_price: Money = Field(..., serialization_alias="totalPrice")
    delivery_fee: Money = Field(..., serialization_alias="deliveryFee")
    time_to_deliver: int = Field(..., serialization_alias="timeToDeliver")
    status: str
    order_items: list[OrderItemResponseSchema] = Field(
        ..., serialization_alias="orderItems"
    )


class OrderSummarySchema(BaseModel):
    """An order header as returned by list and detail endpoints."""

    id: int
    customer_id: int = Field(..., serialization_alias="customerId")
    customer_name: str = Field(..., serialization_alias="customerName")
    restaurant_id: int = Field(..., serialization_alias="restaurantId")
    restaurant_name: str = Field(..., serialization_alias="restaurantName")
    admin_id: int | None = Field(None, serialization_alias="adminId")
    delivery_address: str = Field(..., serialization_alias="deliveryAddress")
    delivery_fee: Money = Field(..., serialization_alias="deliveryFee")
    time_to_deliver: int = Field(..., serialization_alias="timeToDeliver")
    payment_method: str = Field(..., serialization_alias="PaymentMethod")
    notes: str
    total_price: Money = Field(..., serialization_alias="totalPrice")
    status: str
    created_at: datetime = Field(..., serialization_alias="createdAt")
    updated_at: datetime = Field(..., serialization_alias="updatedAt")


class OrderDetailResponse(BaseModel):
    """Data payload for GET /api/orders/{order_id}."""

    order: OrderSummarySchema
    order_items: list[OrderItemResponseSchema] = Field(
        ..., serialization_alias="orderItems"
    )


class OrderStatusResponse(BaseModel):
    """Data payload for status updates and cancellations."""

    order_id: int = Field(..., serialization_alias="orderId")
    status: str
    updated_at: datetime = Field(..., serialization_alias="updatedAt")
