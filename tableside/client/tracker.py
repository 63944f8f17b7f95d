"""Poll the backend for an order's status until it reaches a terminal state."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass

from returns.pipeline import is_successful
from returns.result import Result

from tableside.client.errors import OrderingError, OrderNotFoundError
from tableside.client.http import OrderingApi
from tableside.core.config import settings
from tableside.schemas.order import OrderRead
from tableside.services.order_status import OrderStatus, is_forward, is_terminal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusAnomaly:
    """Server reported a status that would move the order backwards."""

    order_id: str
    current: OrderStatus
    reported: OrderStatus


StatusListener = Callable[[OrderRead], None]
AnomalyListener = Callable[[StatusAnomaly], None]


def _register(listeners: list, listener: Callable) -> Callable[[], None]:
    listeners.append(listener)

    def unsubscribe() -> None:
        if listener in listeners:
            listeners.remove(listener)

    return unsubscribe


class TrackingSession:
    """Handle for one order's polling loop.

    The loop fetches once immediately, then once per interval while the status
    is non-terminal. A fetch is never issued while the previous one is still
    outstanding. `stop()` cancels the pending poll and no result arriving
    afterwards is applied.
    """

    def __init__(self, api: OrderingApi, order_id: str, interval: float) -> None:
        self.order_id = order_id
        self.order: OrderRead | None = None
        self.last_error: OrderingError | None = None
        self.history: list[OrderStatus] = []
        self.anomalies: list[StatusAnomaly] = []
        self._api = api
        self._interval = interval
        self._stopped = False
        self._stream_closed = False
        self._listeners: list[StatusListener] = []
        self._anomaly_listeners: list[AnomalyListener] = []
        self._updates: asyncio.Queue[OrderRead | None] = asyncio.Queue()
        self._task: asyncio.Task[None] | None = None

    @property
    def status(self) -> OrderStatus | None:
        return self.history[-1] if self.history else None

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=f"track-order-{self.order_id}")
        logger.info("[TRACKER] Tracking order %s every %ss", self.order_id, self._interval)

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.info("[TRACKER] Stopped tracking order %s", self.order_id)
        self._close_stream()

    async def wait_closed(self) -> None:
        """Wait for the polling loop to finish; re-raises if it crashed."""
        if self._task is None:
            return
        await asyncio.wait({self._task})
        if not self._task.cancelled() and self._task.exception() is not None:
            raise self._task.exception()

    async def __aenter__(self) -> TrackingSession:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.stop()
        await self.wait_closed()

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Call listener with the order each time its status changes."""
        return _register(self._listeners, listener)

    def on_anomaly(self, listener: AnomalyListener) -> Callable[[], None]:
        return _register(self._anomaly_listeners, listener)

    async def updates(self) -> AsyncIterator[OrderRead]:
        """Yield the order on every accepted status change until tracking ends.

        Intended for a single consumer.
        """
        while True:
            order = await self._updates.get()
            if order is None:
                return
            yield order

    async def _run(self) -> None:
        try:
            while not self._stopped:
                result = await self._api.get_order(self.order_id)
                if self._stopped:
                    return
                self._apply(result)
                if isinstance(self.last_error, OrderNotFoundError):
                    logger.warning("[TRACKER] Order %s not found; tracking ended", self.order_id)
                    return
                if self.status is not None and is_terminal(self.status):
                    logger.info("[TRACKER] Order %s reached %s", self.order_id, self.status.value)
                    return
                await asyncio.sleep(self._interval)
        finally:
            self._close_stream()

    def _close_stream(self) -> None:
        if not self._stream_closed:
            self._stream_closed = True
            self._updates.put_nowait(None)

    def _apply(self, result: Result[OrderRead, OrderingError]) -> None:
        if not is_successful(result):
            self.last_error = result.failure()
            logger.warning("[TRACKER] Poll for order %s failed: %s", self.order_id, self.last_error.message)
            return

        order = result.unwrap()
        self.last_error = None
        current = self.status
        reported = order.status

        if current is None or (reported != current and is_forward(current, reported)):
            self.order = order
            self.history.append(reported)
            if current is not None:
                logger.info("[TRACKER] Order %s: %s -> %s", self.order_id, current.value, reported.value)
            self._publish(order)
        elif reported == current:
            self.order = order
        else:
            self._flag_anomaly(StatusAnomaly(order_id=self.order_id, current=current, reported=reported))

    def _publish(self, order: OrderRead) -> None:
        self._updates.put_nowait(order)
        for listener in list(self._listeners):
            try:
                listener(order)
            except Exception:
                logger.exception("[TRACKER] Status listener failed for order %s", self.order_id)

    def _flag_anomaly(self, anomaly: StatusAnomaly) -> None:
        self.anomalies.append(anomaly)
        logger.warning(
            "[TRACKER] Ignoring backward status for order %s: %s -> %s",
            anomaly.order_id,
            anomaly.current.value,
            anomaly.reported.value,
        )
        for listener in list(self._anomaly_listeners):
            try:
                listener(anomaly)
            except Exception:
                logger.exception("[TRACKER] Anomaly listener failed for order %s", self.order_id)


class OrderStatusTracker:
    """Creates polling sessions; `track` must be called from a running event loop."""

    def __init__(self, api: OrderingApi, interval: float | None = None) -> None:
        self._api = api
        self._interval = interval if interval is not None else settings.order_poll_interval_seconds

    def track(self, order_id: str) -> TrackingSession:
        session = TrackingSession(self._api, order_id, self._interval)
        session.start()
        return session
