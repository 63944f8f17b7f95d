"""Coupon schemas."""

from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import ConfigDict, Field

from tableside.schemas.base import ApiModel

CouponRejectionReason = Literal[
    "invalid_code",
    "expired",
    "usage_limit_reached",
    "below_minimum",
    "not_applicable_to_customer",
]


class CouponType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    FREE_ITEM = "freeItem"


class CouponRead(ApiModel):
    """Server-issued coupon descriptor."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str | None = None
    type: CouponType
    value: Decimal = Field(ge=0)
    min_order_amount: Decimal | None = None
    max_discount: Decimal | None = None


class CouponValidateRequest(ApiModel):
    code: str
    restaurant_id: str
    order_amount: Decimal = Field(ge=0)


class CouponValidateResponse(ApiModel):
    valid: bool
    coupon: CouponRead | None = None
    reason: CouponRejectionReason | None = None
    message: str | None = None
