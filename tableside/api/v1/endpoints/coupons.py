"""Coupon validation endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tableside.db.session import get_db
from tableside.schemas.coupon import CouponValidateRequest, CouponValidateResponse
from tableside.services.coupon_service import CouponRejection, evaluate_coupon, to_coupon_read

router: APIRouter = APIRouter()


@router.post("/validate", response_model=CouponValidateResponse, response_model_exclude_none=True)
def validate_coupon(payload: CouponValidateRequest, db: Session = Depends(get_db)) -> CouponValidateResponse:
    """Check a coupon against live usage counters and validity dates."""
    try:
        coupon = evaluate_coupon(
            db,
            restaurant_id=payload.restaurant_id,
            code=payload.code,
            order_amount=payload.order_amount,
            now=datetime.now(timezone.utc),
        )
    except CouponRejection as exc:
        return CouponValidateResponse(valid=False, reason=exc.reason, message=exc.message)
    return CouponValidateResponse(valid=True, coupon=to_coupon_read(coupon))
