"""Shared fixtures: a file-backed SQLite API database seeded with one restaurant."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from tableside.client.http import OrderingApi
from tableside.core.config import settings
from tableside.db import session as db_session
from tableside.db.base import Base
from tableside.main import app
from tableside.models import Coupon, DiningTable, MenuItem, Restaurant


def _build_test_engine(db_file: Path) -> Engine:
    return create_engine(
        f"sqlite:///{db_file}",
        connect_args={"check_same_thread": False},
    )


@dataclass
class SeededRestaurant:
    restaurant_id: str
    other_restaurant_id: str
    burger_id: str
    fries_id: str
    soup_id: str
    other_item_id: str


@pytest.fixture
def session_factory(tmp_path: Path, monkeypatch) -> sessionmaker[Session]:
    engine = _build_test_engine(tmp_path / "test_api.db")
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    monkeypatch.setattr(db_session, "engine", engine)
    monkeypatch.setattr(db_session, "SessionLocal", testing_session_local)
    monkeypatch.setattr(settings, "seed_demo_data", False)
    return testing_session_local


@pytest.fixture
def seeded(session_factory: sessionmaker[Session]) -> SeededRestaurant:
    now = datetime.now(timezone.utc)
    with session_factory() as db:
        restaurant = Restaurant(name="Corner Diner")
        other = Restaurant(name="Harbour Grill")
        db.add_all([restaurant, other])
        db.flush()

        db.add_all(
            [
                DiningTable(restaurant_id=restaurant.id, table_number=1),
                DiningTable(restaurant_id=restaurant.id, table_number=2),
                DiningTable(restaurant_id=restaurant.id, table_number=9, is_active=False),
                DiningTable(restaurant_id=other.id, table_number=1),
            ]
        )
        burger = MenuItem(restaurant_id=restaurant.id, name="Burger", category="Mains", price=Decimal("10.00"))
        fries = MenuItem(restaurant_id=restaurant.id, name="Fries", category="Sides", price=Decimal("4.50"))
        soup = MenuItem(
            restaurant_id=restaurant.id, name="Soup", category="Starters", price=Decimal("6.00"), is_available=False
        )
        other_item = MenuItem(restaurant_id=other.id, name="Fish", category="Mains", price=Decimal("15.00"))
        db.add_all([burger, fries, soup, other_item])
        db.add_all(
            [
                Coupon(
                    restaurant_id=restaurant.id,
                    code="SAVE10",
                    type="fixed",
                    value=Decimal("10.00"),
                    min_order_amount=Decimal("15.00"),
                ),
                Coupon(
                    restaurant_id=restaurant.id,
                    code="TWENTY",
                    type="percentage",
                    value=Decimal("20"),
                    max_discount=Decimal("10.00"),
                ),
                Coupon(
                    restaurant_id=restaurant.id,
                    code="OLD",
                    type="fixed",
                    value=Decimal("5.00"),
                    valid_until=now - timedelta(days=1),
                ),
                Coupon(
                    restaurant_id=restaurant.id,
                    code="ONCE",
                    type="fixed",
                    value=Decimal("5.00"),
                    usage_limit=1,
                    used_count=1,
                ),
                Coupon(
                    restaurant_id=restaurant.id,
                    code="PAUSED",
                    type="fixed",
                    value=Decimal("5.00"),
                    is_active=False,
                ),
            ]
        )
        db.commit()
        return SeededRestaurant(
            restaurant_id=restaurant.id,
            other_restaurant_id=other.id,
            burger_id=burger.id,
            fries_id=fries.id,
            soup_id=soup.id,
            other_item_id=other_item.id,
        )


def asgi_api(timeout: float = 5.0) -> OrderingApi:
    """Client wired to the in-process API app."""
    return OrderingApi(
        base_url="http://testserver/api",
        timeout=timeout,
        transport=httpx.ASGITransport(app=app),
    )


@pytest.fixture
def make_api():
    return asgi_api
