"""Application models package."""

from tableside.models.cart import CartEntry
from tableside.models.coupon import Coupon
from tableside.models.menu import MenuItem
from tableside.models.order import Order, OrderItem
from tableside.models.restaurant import DiningTable, Restaurant

__all__ = [
    "CartEntry", "Coupon", "DiningTable", "MenuItem", "Order", "OrderItem", "Restaurant",
]
