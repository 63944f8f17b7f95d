"""Coupon eligibility rules evaluated against live usage and validity data."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from tableside.models.coupon import Coupon
from tableside.schemas.coupon import CouponRead, CouponRejectionReason, CouponType
from tableside.services.pricing import coupon_meets_minimum


class CouponRejection(Exception):
    """Raised when a coupon cannot be applied to an order."""

    def __init__(self, reason: CouponRejectionReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def find_coupon(db: Session, restaurant_id: str, code: str) -> Coupon | None:
    """Look up a coupon by code, case-insensitively, within a restaurant."""
    return db.scalar(
        select(Coupon).where(
            Coupon.restaurant_id == restaurant_id,
            func.upper(Coupon.code) == code.strip().upper(),
        )
    )


def to_coupon_read(coupon: Coupon) -> CouponRead:
    return CouponRead(
        code=coupon.code,
        name=coupon.name,
        type=CouponType(coupon.type),
        value=coupon.value,
        min_order_amount=coupon.min_order_amount,
        max_discount=coupon.max_discount,
    )


def evaluate_coupon(
    db: Session,
    *,
    restaurant_id: str,
    code: str,
    order_amount: Decimal,
    now: datetime,
) -> Coupon:
    """Return the coupon if it can be applied now to order_amount."""
    coupon = find_coupon(db, restaurant_id, code) if code.strip() else None
    if coupon is None or not coupon.is_active:
        raise CouponRejection("invalid_code", "Invalid or expired coupon code")

    current = _as_utc(now)
    if coupon.valid_from is not None and current < _as_utc(coupon.valid_from):
        raise CouponRejection("expired", "Coupon has expired")
    if coupon.valid_until is not None and current > _as_utc(coupon.valid_until):
        raise CouponRejection("expired", "Coupon has expired")

    if coupon.usage_limit is not None and coupon.used_count >= coupon.usage_limit:
        raise CouponRejection("usage_limit_reached", "Coupon usage limit reached")

    if not coupon_meets_minimum(to_coupon_read(coupon), order_amount):
        raise CouponRejection(
            "below_minimum",
            f"Minimum order amount of ${coupon.min_order_amount} required",
        )
    return coupon


def redeem_coupon(db: Session, coupon: Coupon) -> bool:
    """Count one use of coupon unless its usage limit is already reached.

    The limit is re-checked inside the UPDATE itself so concurrent orders
    cannot both take the last use. Returns False when no use was left.
    """
    result = db.execute(
        update(Coupon)
        .where(
            Coupon.id == coupon.id,
            or_(Coupon.usage_limit.is_(None), Coupon.used_count < Coupon.usage_limit),
        )
        .values(used_count=Coupon.used_count + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
