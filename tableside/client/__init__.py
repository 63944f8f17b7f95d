"""Customer ordering client: table sessions, cart, coupons, checkout and status tracking."""

from tableside.client.cart import CartStore, SubmissionGuard, cart_storage_key
from tableside.client.checkout import CheckoutOrchestrator, OrderHandle
from tableside.client.coupons import CouponValidator
from tableside.client.errors import (
    CouponRejectedError,
    EmptyCartError,
    InvalidCodeError,
    ItemUnavailableError,
    MissingTableSessionError,
    NetworkError,
    OrderingError,
    OrderNotFoundError,
    RequestRejectedError,
    RequestTimeoutError,
    ServerError,
    SubmissionInProgressError,
)
from tableside.client.http import OrderingApi
from tableside.client.resolver import TableSessionResolver
from tableside.client.storage import CartStorage, InMemoryCartStorage, SqlCartStorage
from tableside.client.tracker import OrderStatusTracker, StatusAnomaly, TrackingSession

__all__ = [
    "CartStore",
    "cart_storage_key",
    "CheckoutOrchestrator",
    "OrderHandle",
    "SubmissionGuard",
    "CouponValidator",
    "CouponRejectedError",
    "EmptyCartError",
    "InvalidCodeError",
    "ItemUnavailableError",
    "MissingTableSessionError",
    "NetworkError",
    "OrderingError",
    "OrderNotFoundError",
    "RequestRejectedError",
    "RequestTimeoutError",
    "ServerError",
    "SubmissionInProgressError",
    "OrderingApi",
    "TableSessionResolver",
    "CartStorage",
    "InMemoryCartStorage",
    "SqlCartStorage",
    "OrderStatusTracker",
    "StatusAnomaly",
    "TrackingSession",
]
