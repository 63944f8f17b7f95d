"""Cart and pricing schemas."""

from decimal import Decimal

from pydantic import ConfigDict, Field

from tableside.schemas.base import ApiModel


class CartLine(ApiModel):
    """One distinct menu item and its quantity within a cart."""

    model_config = ConfigDict(frozen=True)

    menu_item_id: str
    name: str = ""
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=1)


class PriceQuote(ApiModel):
    """Priced cart. `coupon_eligible` is False while an applied coupon's minimum is not met."""

    model_config = ConfigDict(frozen=True)

    subtotal: Decimal
    discount: Decimal
    total: Decimal
    coupon_eligible: bool = True
