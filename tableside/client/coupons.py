"""Coupon validation against the backend."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import get_args

from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from tableside.client.cart import CartStore
from tableside.client.errors import CouponRejectedError, OrderingError, RequestRejectedError
from tableside.client.http import OrderingApi
from tableside.schemas.coupon import CouponRead, CouponRejectionReason

logger = logging.getLogger(__name__)

REJECTION_REASONS: frozenset[str] = frozenset(get_args(CouponRejectionReason))


def _reason_or_default(reason: str | None) -> str:
    return reason if reason in REJECTION_REASONS else "invalid_code"


class CouponValidator:
    """Validates coupons with a network round trip every time.

    Eligibility depends on live usage counters and validity windows, so no
    answer is ever cached.
    """

    def __init__(self, api: OrderingApi) -> None:
        self._api = api

    async def validate(self, code: str, restaurant_id: str, order_amount: Decimal) -> Result[CouponRead, OrderingError]:
        if not code or not code.strip():
            return Failure(CouponRejectedError("Please enter a coupon code", reason="invalid_code"))

        result = await self._api.validate_coupon(code.strip(), restaurant_id, order_amount)
        if not is_successful(result):
            error = result.failure()
            if isinstance(error, RequestRejectedError):
                return Failure(CouponRejectedError(error.message, reason=_reason_or_default(error.reason)))
            return Failure(error)

        response = result.unwrap()
        if not response.valid or response.coupon is None:
            logger.info("[COUPON] %s rejected: %s", code.strip(), response.reason)
            return Failure(
                CouponRejectedError(
                    response.message or "Invalid coupon code",
                    reason=_reason_or_default(response.reason),
                )
            )
        return Success(response.coupon)

    async def apply(self, cart: CartStore, code: str) -> Result[CouponRead, OrderingError]:
        """Validate code for the cart's current subtotal and make it the applied coupon."""
        result = await self.validate(code, cart.restaurant_id, cart.quote.subtotal)
        if is_successful(result):
            cart.apply_coupon(result.unwrap())
        return result
