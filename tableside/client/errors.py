"""Error values returned by the ordering client.

Network-facing components never raise these; they return them inside
`returns.result.Failure`. `retryable` tells the caller whether the same
request may succeed if repeated later.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class OrderingError(Exception):
    message: str

    retryable: ClassVar[bool] = False

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class InvalidCodeError(OrderingError):
    pass


@dataclass(frozen=True)
class EmptyCartError(OrderingError):
    pass


@dataclass(frozen=True)
class MissingTableSessionError(OrderingError):
    pass


@dataclass(frozen=True)
class CouponRejectedError(OrderingError):
    reason: str

    def __str__(self) -> str:  # pragma: no cover
        return f"coupon_rejected: {self.reason} ({self.message})"


@dataclass(frozen=True)
class ItemUnavailableError(OrderingError):
    menu_item_id: str | None = None


@dataclass(frozen=True)
class RequestRejectedError(OrderingError):
    status_code: int
    reason: str | None = None

    def __str__(self) -> str:  # pragma: no cover
        return f"rejected: status={self.status_code} ({self.message})"


@dataclass(frozen=True)
class OrderNotFoundError(OrderingError):
    order_id: str


@dataclass(frozen=True)
class UnexpectedResponseError(OrderingError):
    pass


@dataclass(frozen=True)
class SubmissionInProgressError(OrderingError):
    pass


@dataclass(frozen=True)
class TransientError(OrderingError):
    retryable: ClassVar[bool] = True


@dataclass(frozen=True)
class RequestTimeoutError(TransientError):
    pass


@dataclass(frozen=True)
class NetworkError(TransientError):
    pass


@dataclass(frozen=True)
class ServerError(TransientError):
    status_code: int

    def __str__(self) -> str:  # pragma: no cover
        return f"server_error: status={self.status_code} ({self.message})"
