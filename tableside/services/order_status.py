"""Order status lifecycle shared by the API and the status tracker."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tableside.models.order import Order


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


STATUS_SEQUENCE: list[OrderStatus] = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.COMPLETED,
]

TERMINAL_STATUSES: frozenset[OrderStatus] = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

ALLOWED_TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY, OrderStatus.CANCELLED},
    OrderStatus.READY: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


class InvalidStatusTransition(Exception):
    """Raised when staff try to move an order outside the allowed transitions."""

    def __init__(self, current: OrderStatus, new: OrderStatus) -> None:
        super().__init__(f"Cannot move order from {current.value} to {new.value}")
        self.current = current
        self.new = new


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    """Return whether staff may move an order from current to new status."""
    return new in ALLOWED_TRANSITIONS.get(current, set())


def is_forward(current: OrderStatus, new: OrderStatus) -> bool:
    """Return whether an observed change keeps the order moving forward.

    Observers may miss intermediate steps between two polls, so any later step
    in the sequence counts as forward. Cancellation is forward from every
    non-terminal status. Nothing is forward from a terminal status.
    """
    if is_terminal(current):
        return False
    if new == OrderStatus.CANCELLED:
        return True
    return STATUS_SEQUENCE.index(new) > STATUS_SEQUENCE.index(current)


def set_status(order: Order, new_status: OrderStatus, now: datetime) -> None:
    """Apply a staff transition and bump the order's update timestamp."""
    current = OrderStatus(order.status)
    if not can_transition(current, new_status):
        raise InvalidStatusTransition(current, new_status)
    order.status = new_status.value
    order.updated_at = now
