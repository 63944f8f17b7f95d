"""Schema exports."""

from tableside.schemas.cart import CartLine, PriceQuote
from tableside.schemas.coupon import (
    CouponRead,
    CouponRejectionReason,
    CouponType,
    CouponValidateRequest,
    CouponValidateResponse,
)
from tableside.schemas.menu import MenuItemRead, RestaurantRead
from tableside.schemas.order import (
    OrderItemPayload,
    OrderLineItemRead,
    OrderRead,
    OrderStatusUpdate,
    PublicOrderCreate,
)
from tableside.schemas.table import QrValidateRequest, QrValidateResponse, RestaurantSummary, TableSession

__all__ = [
    "CartLine",
    "PriceQuote",
    "CouponRead",
    "CouponRejectionReason",
    "CouponType",
    "CouponValidateRequest",
    "CouponValidateResponse",
    "MenuItemRead",
    "RestaurantRead",
    "OrderItemPayload",
    "OrderLineItemRead",
    "OrderRead",
    "OrderStatusUpdate",
    "PublicOrderCreate",
    "QrValidateRequest",
    "QrValidateResponse",
    "RestaurantSummary",
    "TableSession",
]
