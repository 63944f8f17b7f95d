"""Resolve scanned or typed table codes into table sessions."""

from __future__ import annotations

import logging

from returns.pipeline import is_successful
from returns.result import Failure, Result, Success

from tableside.client.errors import InvalidCodeError, OrderingError, RequestRejectedError
from tableside.client.http import OrderingApi
from tableside.schemas.table import TableSession

logger = logging.getLogger(__name__)


class TableSessionResolver:
    """Turns a raw QR payload into a `TableSession` via the backend.

    The payload format is never interpreted here; the backend decides whether
    it names a real, active table.
    """

    def __init__(self, api: OrderingApi) -> None:
        self._api = api

    async def resolve(self, raw_code: str) -> Result[TableSession, OrderingError]:
        if not raw_code or not raw_code.strip():
            return Failure(InvalidCodeError("Please scan or enter a table code"))

        result = await self._api.validate_qr(raw_code)
        if not is_successful(result):
            error = result.failure()
            if isinstance(error, RequestRejectedError):
                logger.warning("[QR] Code rejected: %s", error.message)
                return Failure(InvalidCodeError(error.message))
            return Failure(error)

        response = result.unwrap()
        if not response.valid or response.table_number is None:
            return Failure(InvalidCodeError("Invalid QR code"))

        return Success(
            TableSession(
                restaurant_id=response.restaurant_id,
                table_number=response.table_number,
                restaurant_name=response.restaurant.name,
            )
        )
