"""Cart pricing under coupon rules.

Pure functions over cart lines and an optional coupon. The ordering client
re-prices with them on every cart mutation and the API prices submitted orders
with the same code, so both sides agree by construction.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from tableside.schemas.cart import CartLine, PriceQuote
from tableside.schemas.coupon import CouponRead, CouponType

CENT: Decimal = Decimal("0.01")
ZERO: Decimal = Decimal("0.00")


def to_money(value: Decimal | int | str) -> Decimal:
    """Quantize an amount to cents."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def subtotal_of(lines: Iterable[CartLine]) -> Decimal:
    return to_money(sum((line.unit_price * line.quantity for line in lines), ZERO))


def coupon_meets_minimum(coupon: CouponRead, subtotal: Decimal) -> bool:
    """Return True when subtotal satisfies the coupon's minimum order amount."""
    if coupon.min_order_amount is None:
        return True
    return subtotal >= coupon.min_order_amount


def discount_for(coupon: CouponRead | None, subtotal: Decimal) -> Decimal:
    """Return the discount a coupon grants on subtotal, clamped to [0, subtotal]."""
    if coupon is None or subtotal <= ZERO:
        return ZERO

    if coupon.type == CouponType.PERCENTAGE:
        discount = to_money(subtotal * coupon.value / Decimal(100))
        if coupon.max_discount is not None:
            discount = min(discount, to_money(coupon.max_discount))
    elif coupon.type == CouponType.FIXED:
        discount = to_money(coupon.value)
    else:
        # freeItem coupons are honoured by the restaurant, not priced here.
        discount = ZERO

    return max(ZERO, min(discount, subtotal))


def price(lines: Iterable[CartLine], coupon: CouponRead | None = None) -> PriceQuote:
    """Derive subtotal, discount and total for the given lines.

    A coupon whose minimum order amount is not met grants nothing and the
    quote is flagged with `coupon_eligible=False`.
    """
    subtotal = subtotal_of(lines)
    eligible = coupon is None or coupon_meets_minimum(coupon, subtotal)
    discount = discount_for(coupon, subtotal) if eligible else ZERO
    return PriceQuote(subtotal=subtotal, discount=discount, total=subtotal - discount, coupon_eligible=eligible)
