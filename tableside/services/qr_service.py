"""Table QR code parsing and lookup."""

from __future__ import annotations

import json
from dataclasses import dataclass
from urllib.parse import parse_qs, urlsplit

from sqlalchemy import select
from sqlalchemy.orm import Session

from tableside.models.restaurant import DiningTable, Restaurant

MENU_PATH_MARKER: str = "/menu/"


class InvalidQrCode(Exception):
    """Raised when a scanned payload cannot be resolved to a table."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass(frozen=True)
class QrTarget:
    restaurant_id: str
    table_number: int | None


def _parse_table_number(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    return None


def _parse_menu_url(data: str) -> QrTarget | None:
    parts = urlsplit(data)
    path = parts.path or data
    if MENU_PATH_MARKER not in path:
        return None
    restaurant_id = path.split(MENU_PATH_MARKER, 1)[1].split("/", 1)[0].strip()
    if not restaurant_id:
        return None
    table_values = parse_qs(parts.query).get("table", [])
    table_number = _parse_table_number(table_values[0]) if table_values else None
    return QrTarget(restaurant_id=restaurant_id, table_number=table_number)


def _parse_json_payload(data: str) -> QrTarget | None:
    try:
        payload = json.loads(data)
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    restaurant_id = payload.get("restaurantId")
    if not isinstance(restaurant_id, str) or not restaurant_id.strip():
        return None
    table_value = payload.get("table", payload.get("tableNumber"))
    return QrTarget(restaurant_id=restaurant_id.strip(), table_number=_parse_table_number(table_value))


def parse_qr_payload(raw: str) -> QrTarget:
    """Parse a menu URL (`/menu/<id>?table=<n>`) or a JSON object payload."""
    data = (raw or "").strip()
    target: QrTarget | None = None
    if data.startswith("{"):
        target = _parse_json_payload(data)
    elif MENU_PATH_MARKER in data:
        target = _parse_menu_url(data)
    if target is None:
        raise InvalidQrCode("Invalid QR code format")
    return target


def resolve_table(db: Session, target: QrTarget) -> tuple[Restaurant, DiningTable]:
    """Return the active restaurant and table a parsed payload points to."""
    restaurant: Restaurant | None = db.get(Restaurant, target.restaurant_id)
    if restaurant is None or not restaurant.is_active:
        raise InvalidQrCode("Restaurant not found", status_code=404)
    if target.table_number is None:
        raise InvalidQrCode("Table not found", status_code=404)

    table = find_table(db, restaurant.id, target.table_number)
    if table is None or not table.is_active:
        raise InvalidQrCode("Table not found", status_code=404)
    return restaurant, table


def find_table(db: Session, restaurant_id: str, table_number: int) -> DiningTable | None:
    return db.scalar(
        select(DiningTable).where(
            DiningTable.restaurant_id == restaurant_id,
            DiningTable.table_number == table_number,
        )
    )
