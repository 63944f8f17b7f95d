"""Async HTTP access to the public ordering API."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError
from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from tableside.client.errors import (
    NetworkError,
    OrderingError,
    OrderNotFoundError,
    RequestRejectedError,
    RequestTimeoutError,
    ServerError,
    UnexpectedResponseError,
)
from tableside.core.config import settings
from tableside.schemas.coupon import CouponValidateRequest, CouponValidateResponse
from tableside.schemas.menu import MenuItemRead, RestaurantRead
from tableside.schemas.order import OrderRead, PublicOrderCreate
from tableside.schemas.table import QrValidateRequest, QrValidateResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _error_message(response: httpx.Response) -> tuple[str, str | None]:
    fallback = f"Request failed with status {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback, None
    if not isinstance(body, dict):
        return fallback, None
    message = body.get("message")
    reason = body.get("reason")
    return (str(message) if message else fallback), (str(reason) if reason else None)


def _parse(model_type: Any, body: Any) -> Result[Any, OrderingError]:
    try:
        return Success(TypeAdapter(model_type).validate_python(body))
    except ValidationError as exc:
        logger.warning("Malformed response body: %s", exc.error_count())
        return Failure(UnexpectedResponseError("Malformed response from server"))


class OrderingApi:
    """Thin typed wrapper over the public endpoints.

    Every method returns a `Result`; transport problems, timeouts and error
    statuses become `OrderingError` values instead of exceptions. `timeout`
    bounds each httpx phase and also the request as a whole.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._deadline = timeout if timeout is not None else settings.request_timeout_seconds
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=self._deadline,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> OrderingApi:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Result[Any, OrderingError]:
        try:
            response = await asyncio.wait_for(self._client.request(method, path, json=payload), timeout=self._deadline)
        except (httpx.TimeoutException, asyncio.TimeoutError):
            return Failure(RequestTimeoutError(f"{method} {path} timed out"))
        except httpx.HTTPError as exc:
            return Failure(NetworkError(f"{method} {path} failed: {exc.__class__.__name__}"))

        if response.status_code >= 500:
            message, _ = _error_message(response)
            return Failure(ServerError(message, status_code=response.status_code))
        if response.status_code >= 400:
            message, reason = _error_message(response)
            return Failure(RequestRejectedError(message, status_code=response.status_code, reason=reason))

        try:
            return Success(response.json())
        except ValueError:
            return Failure(UnexpectedResponseError("Response body is not JSON"))

    async def validate_qr(self, qr_data: str) -> Result[QrValidateResponse, OrderingError]:
        body = QrValidateRequest(qr_data=qr_data).to_wire()
        result = await self._request("POST", "/tables/validate-qr", body)
        return result.bind(lambda data: _parse(QrValidateResponse, data))

    async def get_restaurant(self, restaurant_id: str) -> Result[RestaurantRead, OrderingError]:
        result = await self._request("GET", f"/restaurants/public/{restaurant_id}")
        return result.bind(lambda data: _parse(RestaurantRead, data))

    async def list_menu_items(self, restaurant_id: str) -> Result[list[MenuItemRead], OrderingError]:
        result = await self._request("GET", f"/items/public/{restaurant_id}")
        return result.bind(lambda data: _parse(list[MenuItemRead], data))

    async def validate_coupon(
        self, code: str, restaurant_id: str, order_amount: Decimal
    ) -> Result[CouponValidateResponse, OrderingError]:
        body = CouponValidateRequest(code=code, restaurant_id=restaurant_id, order_amount=order_amount).to_wire()
        result = await self._request("POST", "/coupons/validate", body)
        return result.bind(lambda data: _parse(CouponValidateResponse, data))

    async def create_order(self, payload: PublicOrderCreate) -> Result[OrderRead, OrderingError]:
        result = await self._request("POST", "/billing/orders/public", payload.to_wire())
        return result.bind(lambda data: _parse(OrderRead, data))

    async def get_order(self, order_id: str) -> Result[OrderRead, OrderingError]:
        result = await self._request("GET", f"/billing/orders/public/{order_id}")
        if not is_successful(result):
            error = result.failure()
            if isinstance(error, RequestRejectedError) and error.status_code == 404:
                return Failure(OrderNotFoundError(error.message, order_id=order_id))
            return result
        return result.bind(lambda data: _parse(OrderRead, data))
