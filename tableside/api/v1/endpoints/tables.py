"""Table QR validation endpoint."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tableside.db.session import get_db
from tableside.schemas.table import QrValidateRequest, QrValidateResponse, RestaurantSummary
from tableside.services.qr_service import InvalidQrCode, parse_qr_payload, resolve_table

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/validate-qr", response_model=QrValidateResponse)
def validate_qr(payload: QrValidateRequest, db: Session = Depends(get_db)) -> QrValidateResponse:
    """Resolve a scanned payload to an active restaurant table."""
    try:
        restaurant, table = resolve_table(db, parse_qr_payload(payload.qr_data))
    except InvalidQrCode as exc:
        logger.warning("[QR] Rejected payload: %s", exc.message)
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

    return QrValidateResponse(
        restaurant_id=restaurant.id,
        table_number=table.table_number,
        restaurant=RestaurantSummary(id=restaurant.id, name=restaurant.name),
    )
