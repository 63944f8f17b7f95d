"""Menu and restaurant schemas."""

from decimal import Decimal

from pydantic import Field

from tableside.schemas.base import ApiModel


class RestaurantRead(ApiModel):
    """Public restaurant descriptor."""

    id: str
    name: str
    address: str | None = None


class MenuItemRead(ApiModel):
    """Menu item as served to customers; read-only reference data."""

    id: str
    name: str
    description: str | None = None
    price: Decimal = Field(ge=0)
    category: str
    is_available: bool = True
