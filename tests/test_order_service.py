"""Order creation service: coupon redemption under concurrent orders."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import select, update

from tableside.models import Coupon, Order
from tableside.schemas.order import OrderItemPayload, PublicOrderCreate
from tableside.services import order_service
from tableside.services.coupon_service import redeem_coupon
from tableside.services.order_service import OrderRejected, create_public_order


def _add_limited_coupon(session_factory, restaurant_id: str, code: str = "LIMIT1") -> None:
    with session_factory() as db:
        db.add(Coupon(restaurant_id=restaurant_id, code=code, type="fixed", value=Decimal("5.00"), usage_limit=1))
        db.commit()


def _payload(seeded, code: str) -> PublicOrderCreate:
    return PublicOrderCreate(
        restaurant_id=seeded.restaurant_id,
        table_number=1,
        items=[OrderItemPayload(menu_item_id=seeded.burger_id, quantity=1)],
        coupon_code=code,
    )


def test_last_coupon_use_taken_after_evaluation_rejects_order(seeded, session_factory, monkeypatch) -> None:
    _add_limited_coupon(session_factory, seeded.restaurant_id)
    evaluate = order_service.evaluate_coupon

    def evaluate_then_competing_order_redeems(db, **kwargs):
        coupon = evaluate(db, **kwargs)
        with session_factory() as other:
            other.execute(update(Coupon).where(Coupon.code == "LIMIT1").values(used_count=Coupon.used_count + 1))
            other.commit()
        return coupon

    monkeypatch.setattr(order_service, "evaluate_coupon", evaluate_then_competing_order_redeems)

    with session_factory() as db:
        with pytest.raises(OrderRejected) as excinfo:
            create_public_order(db, _payload(seeded, "LIMIT1"), now=datetime.now(timezone.utc))
        db.rollback()

    assert excinfo.value.reason == "usage_limit_reached"
    with session_factory() as db:
        assert db.scalar(select(Coupon.used_count).where(Coupon.code == "LIMIT1")) == 1
        assert db.scalars(select(Order)).all() == []


def test_limited_coupon_is_redeemed_exactly_once(seeded, session_factory) -> None:
    _add_limited_coupon(session_factory, seeded.restaurant_id)

    with session_factory() as db:
        first = create_public_order(db, _payload(seeded, "LIMIT1"), now=datetime.now(timezone.utc))
        assert first.coupon_code == "LIMIT1"
    with session_factory() as db:
        with pytest.raises(OrderRejected) as excinfo:
            create_public_order(db, _payload(seeded, "LIMIT1"), now=datetime.now(timezone.utc))
        db.rollback()

    assert excinfo.value.reason == "usage_limit_reached"
    with session_factory() as db:
        assert db.scalar(select(Coupon.used_count).where(Coupon.code == "LIMIT1")) == 1


def test_redeem_coupon_without_limit_always_counts(seeded, session_factory) -> None:
    with session_factory() as db:
        coupon = db.scalar(select(Coupon).where(Coupon.code == "TWENTY"))
        assert redeem_coupon(db, coupon) is True
        assert redeem_coupon(db, coupon) is True
        db.commit()

    with session_factory() as db:
        assert db.scalar(select(Coupon.used_count).where(Coupon.code == "TWENTY")) == 2
