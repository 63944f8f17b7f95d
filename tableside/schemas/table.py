"""Table QR code schemas."""

from pydantic import ConfigDict

from tableside.schemas.base import ApiModel


class QrValidateRequest(ApiModel):
    qr_data: str


class RestaurantSummary(ApiModel):
    id: str
    name: str


class QrValidateResponse(ApiModel):
    """Backend answer for a scanned code."""

    restaurant_id: str
    table_number: int | None
    restaurant: RestaurantSummary
    valid: bool = True


class TableSession(ApiModel):
    """Resolved restaurant/table pair scoping one ordering flow."""

    model_config = ConfigDict(frozen=True)

    restaurant_id: str
    table_number: int
    restaurant_name: str
