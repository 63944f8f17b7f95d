"""Database seeding helpers."""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from tableside.models import Coupon, DiningTable, MenuItem, Restaurant

logger = logging.getLogger(__name__)

DEMO_RESTAURANT_NAME: str = "Demo Bistro"
DEMO_MENU: list[tuple[str, str, str]] = [
    ("Burger", "Mains", "10.00"),
    ("Margherita Pizza", "Mains", "12.50"),
    ("Tomato Soup", "Starters", "6.00"),
    ("Lemonade", "Drinks", "3.50"),
]


def ensure_demo_data(session: Session) -> bool:
    """Create a demo restaurant with tables, menu and SAVE10 coupon on an empty DB."""
    if session.scalar(select(Restaurant).limit(1)) is not None:
        return False

    restaurant = Restaurant(name=DEMO_RESTAURANT_NAME, address="1 Demo Street")
    session.add(restaurant)
    session.flush()

    for table_number in (1, 2, 3):
        session.add(DiningTable(restaurant_id=restaurant.id, table_number=table_number))
    for name, category, amount in DEMO_MENU:
        session.add(MenuItem(restaurant_id=restaurant.id, name=name, category=category, price=Decimal(amount)))
    session.add(
        Coupon(
            restaurant_id=restaurant.id,
            code="SAVE10",
            name="10 off orders from 15",
            type="fixed",
            value=Decimal("10.00"),
            min_order_amount=Decimal("15.00"),
        )
    )
    session.commit()
    logger.info("[BOOTSTRAP] Demo restaurant id=%s; scan /menu/%s?table=1", restaurant.id, restaurant.id)
    return True
