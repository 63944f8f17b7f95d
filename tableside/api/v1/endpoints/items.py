"""Public menu endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from tableside.db.session import get_db
from tableside.models.menu import MenuItem
from tableside.models.restaurant import Restaurant
from tableside.schemas.menu import MenuItemRead

router: APIRouter = APIRouter()


@router.get("/public/{restaurant_id}", response_model=list[MenuItemRead])
def list_public_menu_items(restaurant_id: str, db: Session = Depends(get_db)) -> list[MenuItem]:
    """Return the full menu; unavailable items are listed and flagged."""
    restaurant: Restaurant | None = db.get(Restaurant, restaurant_id)
    if restaurant is None or not restaurant.is_active:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return list(
        db.scalars(
            select(MenuItem)
            .where(MenuItem.restaurant_id == restaurant_id)
            .order_by(MenuItem.category.asc(), MenuItem.name.asc())
        ).all()
    )
