"""Public restaurant endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tableside.db.session import get_db
from tableside.models.restaurant import Restaurant
from tableside.schemas.menu import RestaurantRead

router: APIRouter = APIRouter()


@router.get("/public/{restaurant_id}", response_model=RestaurantRead)
def get_public_restaurant(restaurant_id: str, db: Session = Depends(get_db)) -> Restaurant:
    restaurant: Restaurant | None = db.get(Restaurant, restaurant_id)
    if restaurant is None or not restaurant.is_active:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    return restaurant
