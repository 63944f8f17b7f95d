"""Central cart store for one restaurant's in-progress order."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import TypeAdapter, ValidationError

from tableside.client.errors import ItemUnavailableError
from tableside.client.storage import CartStorage
from tableside.schemas.cart import CartLine, PriceQuote
from tableside.schemas.coupon import CouponRead
from tableside.schemas.menu import MenuItemRead
from tableside.services.pricing import price

logger = logging.getLogger(__name__)

CartListener = Callable[["CartStore"], None]

_LINES_ADAPTER: TypeAdapter[list[CartLine]] = TypeAdapter(list[CartLine])


def cart_storage_key(restaurant_id: str) -> str:
    return f"cart-{restaurant_id}"


class SubmissionGuard:
    """Single-slot mutual exclusion for order submission.

    `try_acquire` checks and sets without suspending, so on one event loop two
    callers can never both acquire it.
    """

    def __init__(self) -> None:
        self._held = False

    @property
    def in_progress(self) -> bool:
        return self._held

    def try_acquire(self) -> bool:
        if self._held:
            return False
        self._held = True
        return True

    def release(self) -> None:
        self._held = False


class CartStore:
    """Cart lines plus at most one applied coupon, scoped to a restaurant.

    Every mutation re-prices the cart, writes it through to storage (or deletes
    the entry once the cart is empty) and then notifies subscribers. The store
    only ever reads the entry of its own restaurant.
    """

    def __init__(self, storage: CartStorage, restaurant_id: str) -> None:
        self.restaurant_id = restaurant_id
        self._storage = storage
        self._lines: dict[str, CartLine] = {}
        self._coupon: CouponRead | None = None
        self._listeners: list[CartListener] = []
        self.submission_guard = SubmissionGuard()
        self._rehydrate()

    @property
    def storage_key(self) -> str:
        return cart_storage_key(self.restaurant_id)

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @property
    def applied_coupon(self) -> CouponRead | None:
        return self._coupon

    @property
    def quote(self) -> PriceQuote:
        return price(self._lines.values(), self._coupon)

    def line_for(self, menu_item_id: str) -> CartLine | None:
        return self._lines.get(menu_item_id)

    def add_item(self, item: MenuItemRead) -> CartLine:
        """Add one unit of item; raises ItemUnavailableError for unavailable items."""
        if not item.is_available:
            raise ItemUnavailableError(f"{item.name} is currently unavailable", menu_item_id=item.id)

        existing = self._lines.get(item.id)
        if existing is not None:
            line = existing.model_copy(update={"quantity": existing.quantity + 1})
        else:
            line = CartLine(menu_item_id=item.id, name=item.name, unit_price=item.price, quantity=1)
        self._lines[item.id] = line
        self._commit()
        return line

    def remove_one(self, menu_item_id: str) -> None:
        existing = self._lines.get(menu_item_id)
        if existing is None:
            return
        if existing.quantity > 1:
            self._lines[menu_item_id] = existing.model_copy(update={"quantity": existing.quantity - 1})
        else:
            del self._lines[menu_item_id]
        self._commit()

    def set_quantity(self, menu_item_id: str, quantity: int) -> None:
        """Set an absolute quantity; zero or less removes the line."""
        existing = self._lines.get(menu_item_id)
        if existing is None:
            return
        if quantity <= 0:
            del self._lines[menu_item_id]
        else:
            self._lines[menu_item_id] = existing.model_copy(update={"quantity": quantity})
        self._commit()

    def clear(self) -> None:
        self._lines.clear()
        self._coupon = None
        self._commit()

    def apply_coupon(self, coupon: CouponRead) -> None:
        """Replace any applied coupon with coupon."""
        self._coupon = coupon
        self._notify()

    def remove_coupon(self) -> None:
        if self._coupon is None:
            return
        self._coupon = None
        self._notify()

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register listener for post-mutation notifications; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _rehydrate(self) -> None:
        raw = self._storage.get(self.storage_key)
        if not raw:
            return
        try:
            stored = _LINES_ADAPTER.validate_json(raw)
        except ValidationError:
            logger.warning("[CART] Discarding unreadable cart for restaurant %s", self.restaurant_id)
            self._storage.delete(self.storage_key)
            return
        for line in stored:
            existing = self._lines.get(line.menu_item_id)
            if existing is not None:
                line = existing.model_copy(update={"quantity": existing.quantity + line.quantity})
            self._lines[line.menu_item_id] = line

    def _persist(self) -> None:
        if self._lines:
            self._storage.set(self.storage_key, _LINES_ADAPTER.dump_json(self.lines, by_alias=True).decode("utf-8"))
        else:
            self._storage.delete(self.storage_key)

    def _commit(self) -> None:
        self._persist()
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("[CART] Cart listener failed")
