"""Public order creation: validation, price snapshots and coupon redemption."""

from __future__ import annotations

import logging
from datetime import datetime
from uuid import uuid4

from sqlalchemy.orm import Session

from tableside.models.menu import MenuItem
from tableside.models.order import Order, OrderItem
from tableside.models.restaurant import Restaurant
from tableside.schemas.cart import CartLine
from tableside.schemas.order import OrderLineItemRead, OrderRead, PublicOrderCreate
from tableside.services.coupon_service import CouponRejection, evaluate_coupon, redeem_coupon, to_coupon_read
from tableside.services.order_status import OrderStatus
from tableside.services.pricing import price, subtotal_of, to_money
from tableside.services.qr_service import find_table

logger = logging.getLogger(__name__)


class OrderRejected(Exception):
    """Raised when a submitted order cannot be created."""

    def __init__(self, message: str, status_code: int = 400, reason: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.reason = reason


def generate_order_number(now: datetime) -> str:
    return f"ORD-{now:%Y%m%d%H%M%S}-{uuid4().hex[:6].upper()}"


def create_public_order(db: Session, payload: PublicOrderCreate, now: datetime) -> Order:
    """Create a PENDING order from a table submission.

    Prices are snapshotted from the current menu, never taken from the
    payload. The coupon is re-evaluated against the server-side subtotal.
    """
    restaurant: Restaurant | None = db.get(Restaurant, payload.restaurant_id)
    if restaurant is None or not restaurant.is_active:
        raise OrderRejected("Restaurant not found", status_code=404)

    table = find_table(db, restaurant.id, payload.table_number)
    if table is None or not table.is_active:
        raise OrderRejected("Table not found", status_code=404)

    quantities: dict[str, int] = {}
    for item in payload.items:
        quantities[item.menu_item_id] = quantities.get(item.menu_item_id, 0) + item.quantity

    lines: list[CartLine] = []
    for menu_item_id, quantity in quantities.items():
        menu_item: MenuItem | None = db.get(MenuItem, menu_item_id)
        if menu_item is None or menu_item.restaurant_id != restaurant.id:
            raise OrderRejected(f"Invalid menu item: {menu_item_id}")
        if not menu_item.is_available:
            raise OrderRejected(f"Menu item {menu_item.name} is not available", reason="item_unavailable")
        lines.append(
            CartLine(
                menu_item_id=menu_item.id,
                name=menu_item.name,
                unit_price=to_money(menu_item.price),
                quantity=quantity,
            )
        )

    coupon = None
    if payload.coupon_code:
        try:
            coupon = evaluate_coupon(
                db,
                restaurant_id=restaurant.id,
                code=payload.coupon_code,
                order_amount=subtotal_of(lines),
                now=now,
            )
        except CouponRejection as exc:
            raise OrderRejected(exc.message, reason=exc.reason) from exc

    quote = price(lines, to_coupon_read(coupon) if coupon is not None else None)

    order = Order(
        restaurant_id=restaurant.id,
        table_id=table.id,
        order_number=generate_order_number(now),
        status=OrderStatus.PENDING.value,
        coupon_code=coupon.code if coupon is not None else None,
        notes=(payload.notes or "").strip() or None,
        subtotal_amount=quote.subtotal,
        discount_amount=quote.discount,
        total_amount=quote.total,
        created_at=now,
        updated_at=now,
    )
    order.items = [
        OrderItem(
            menu_item_id=line.menu_item_id,
            name=line.name,
            unit_price=line.unit_price,
            quantity=line.quantity,
            subtotal=to_money(line.unit_price * line.quantity),
        )
        for line in lines
    ]
    if coupon is not None and not redeem_coupon(db, coupon):
        raise OrderRejected("Coupon usage limit reached", reason="usage_limit_reached")

    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("[ORDERS] Created %s for table %s total=%s", order.order_number, table.table_number, order.total_amount)
    return order


def serialize_order(order: Order) -> OrderRead:
    return OrderRead(
        id=order.id,
        order_number=order.order_number,
        restaurant_id=order.restaurant_id,
        table_number=order.table.table_number,
        items=[
            OrderLineItemRead(
                menu_item_id=item.menu_item_id,
                name=item.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                subtotal=item.subtotal,
            )
            for item in order.items
        ],
        subtotal=order.subtotal_amount,
        discount=order.discount_amount,
        total=order.total_amount,
        coupon_code=order.coupon_code,
        notes=order.notes,
        status=OrderStatus(order.status),
        created_at=order.created_at,
        updated_at=order.updated_at,
    )
