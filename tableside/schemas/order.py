"""Order API schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from tableside.schemas.base import ApiModel
from tableside.services.order_status import OrderStatus


class OrderItemPayload(ApiModel):
    """Single order item payload."""

    menu_item_id: str
    quantity: int = Field(default=1, ge=1)


class PublicOrderCreate(ApiModel):
    """Order submitted from a table without authentication."""

    restaurant_id: str
    table_number: int
    items: list[OrderItemPayload] = Field(min_length=1)
    coupon_code: str | None = None
    notes: str | None = None


class OrderLineItemRead(ApiModel):
    """Line snapshot frozen at order creation."""

    menu_item_id: str | None
    name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class OrderRead(ApiModel):
    """Serialized order."""

    id: str
    order_number: str
    restaurant_id: str
    table_number: int
    items: list[OrderLineItemRead]
    subtotal: Decimal
    discount: Decimal
    total: Decimal
    coupon_code: str | None = None
    notes: str | None = None
    status: OrderStatus
    created_at: datetime
    updated_at: datetime


class OrderStatusUpdate(ApiModel):
    status: OrderStatus
