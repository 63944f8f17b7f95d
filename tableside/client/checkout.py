"""Checkout: turn a cart into exactly one server-side order."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from tableside.client.cart import CartStore, SubmissionGuard
from tableside.client.errors import (
    CouponRejectedError,
    EmptyCartError,
    ItemUnavailableError,
    MissingTableSessionError,
    OrderingError,
    RequestRejectedError,
    SubmissionInProgressError,
)
from tableside.client.coupons import REJECTION_REASONS
from tableside.client.http import OrderingApi
from tableside.schemas.cart import PriceQuote
from tableside.schemas.coupon import CouponRead
from tableside.schemas.order import OrderItemPayload, OrderRead, PublicOrderCreate
from tableside.schemas.table import TableSession
from tableside.services.pricing import coupon_meets_minimum, price

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderHandle:
    """A placed order as echoed by the server, with the client's own quote."""

    order: OrderRead
    client_quote: PriceQuote
    warnings: tuple[str, ...] = ()

    @property
    def order_id(self) -> str:
        return self.order.id


OrderPlacedListener = Callable[[OrderHandle], None]


class CheckoutOrchestrator:
    """Places orders for carts.

    The submission gate belongs to the cart, so orchestrators created by
    different views still allow only one in-flight submission per cart.
    """

    def __init__(self, api: OrderingApi, listeners: list[OrderPlacedListener] | None = None) -> None:
        self._api = api
        self._active = 0
        self._listeners: list[OrderPlacedListener] = list(listeners or [])

    @property
    def in_progress(self) -> bool:
        return self._active > 0

    def add_listener(self, listener: OrderPlacedListener) -> None:
        """Register a downstream collaborator (payment, confirmation) for placed orders."""
        self._listeners.append(listener)

    async def submit(
        self,
        cart: CartStore,
        table_session: TableSession | None,
        coupon: CouponRead | None = None,
        notes: str | None = None,
    ) -> Result[OrderHandle, OrderingError]:
        """Submit cart as an order.

        Fails fast, without a request, on an empty cart, a missing table
        session or a coupon whose minimum the cart no longer meets. While one
        submission for the cart is in flight, from any orchestrator, further
        calls return `SubmissionInProgressError`. The cart is cleared only on success.
        """
        guard: SubmissionGuard = cart.submission_guard
        if not guard.try_acquire():
            return Failure(SubmissionInProgressError("An order is already being placed"))
        self._active += 1
        try:
            applied = coupon if coupon is not None else cart.applied_coupon
            return await self._submit(cart, table_session, applied, notes)
        finally:
            self._active -= 1
            guard.release()

    async def _submit(
        self,
        cart: CartStore,
        table_session: TableSession | None,
        coupon: CouponRead | None,
        notes: str | None,
    ) -> Result[OrderHandle, OrderingError]:
        if cart.is_empty:
            return Failure(EmptyCartError("Your cart is empty"))
        if table_session is None:
            return Failure(MissingTableSessionError("Table number is required"))
        if table_session.restaurant_id != cart.restaurant_id:
            return Failure(MissingTableSessionError("Table session belongs to a different restaurant"))

        quote = price(cart.lines, coupon)
        if coupon is not None and not coupon_meets_minimum(coupon, quote.subtotal):
            return Failure(
                CouponRejectedError(
                    f"Minimum order amount of ${coupon.min_order_amount} required for this coupon",
                    reason="below_minimum",
                )
            )

        payload = PublicOrderCreate(
            restaurant_id=cart.restaurant_id,
            table_number=table_session.table_number,
            items=[OrderItemPayload(menu_item_id=line.menu_item_id, quantity=line.quantity) for line in cart.lines],
            coupon_code=coupon.code if coupon is not None else None,
            notes=(notes or "").strip() or None,
        )
        result = await self._api.create_order(payload)
        if not is_successful(result):
            error = self._translate(result.failure())
            logger.warning("[CHECKOUT] Order for table %s failed: %s", table_session.table_number, error.message)
            return Failure(error)

        order = result.unwrap()
        warnings: list[str] = []
        if order.total != quote.total:
            warnings.append(f"Server total {order.total} differs from cart total {quote.total}")
            logger.warning("[CHECKOUT] Total mismatch for %s: server=%s client=%s", order.order_number, order.total, quote.total)

        handle = OrderHandle(order=order, client_quote=quote, warnings=tuple(warnings))
        cart.clear()
        logger.info("[CHECKOUT] Placed %s total=%s", order.order_number, order.total)

        for listener in list(self._listeners):
            try:
                listener(handle)
            except Exception:
                logger.exception("[CHECKOUT] Order listener failed for %s", order.order_number)
        return Success(handle)

    @staticmethod
    def _translate(error: OrderingError) -> OrderingError:
        if not isinstance(error, RequestRejectedError):
            return error
        if error.reason == "item_unavailable":
            return ItemUnavailableError(error.message)
        if error.reason in REJECTION_REASONS:
            return CouponRejectedError(error.message, reason=error.reason)
        return error
