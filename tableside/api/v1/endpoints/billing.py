"""Public order endpoints used by table customers, plus the staff status update."""

import logging
import secrets
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from tableside.core.config import settings
from tableside.db.session import get_db
from tableside.models.order import Order
from tableside.schemas.order import OrderRead, OrderStatusUpdate, PublicOrderCreate
from tableside.services.order_service import OrderRejected, create_public_order, serialize_order
from tableside.services.order_status import InvalidStatusTransition, set_status

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


def _require_staff_key(api_key: str | None) -> None:
    if not settings.staff_api_key:
        raise HTTPException(status_code=503, detail="Status updates are disabled")
    if api_key is None or not secrets.compare_digest(api_key, settings.staff_api_key):
        raise HTTPException(status_code=401, detail="Invalid API key")


def _get_order_or_404(db: Session, order_id: str) -> Order:
    order: Order | None = db.get(Order, order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.post("/orders/public", response_model=OrderRead, status_code=201)
def create_order(payload: PublicOrderCreate, db: Session = Depends(get_db)) -> OrderRead:
    """Create an order from a table; totals are computed server-side."""
    try:
        order = create_public_order(db, payload, now=datetime.now(timezone.utc))
    except OrderRejected as exc:
        db.rollback()
        raise HTTPException(
            status_code=exc.status_code,
            detail={"message": exc.message, "reason": exc.reason},
        ) from exc
    return serialize_order(order)


@router.get("/orders/public/{order_id}", response_model=OrderRead)
def get_order(order_id: str, db: Session = Depends(get_db)) -> OrderRead:
    return serialize_order(_get_order_or_404(db, order_id))


@router.patch("/orders/{order_id}/status", response_model=OrderRead)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    api_key: str | None = Header(default=None, alias="x-api-key"),
) -> OrderRead:
    """Move an order one step forward, or cancel it."""
    _require_staff_key(api_key)
    order = _get_order_or_404(db, order_id)
    try:
        set_status(order, payload.status, datetime.now(timezone.utc))
    except InvalidStatusTransition as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    db.commit()
    db.refresh(order)
    logger.info("[ORDERS] %s moved to %s", order.order_number, order.status)
    return serialize_order(order)
