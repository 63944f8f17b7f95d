"""Public ordering API integration tests."""

from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy import select

from tableside.core.config import settings
from tableside.main import app
from tableside.models import Coupon, MenuItem, Order


def test_validate_qr_resolves_menu_url(seeded) -> None:
    with TestClient(app) as client:
        response = client.post(
            "/api/tables/validate-qr",
            json={"qrData": f"https://order.example.com/menu/{seeded.restaurant_id}?table=2"},
        )

    assert response.status_code == 200
    body = response.json()
    assert body["restaurantId"] == seeded.restaurant_id
    assert body["tableNumber"] == 2
    assert body["restaurant"]["name"] == "Corner Diner"
    assert body["valid"] is True


def test_validate_qr_rejects_bad_payloads(seeded) -> None:
    cases = [
        ("garbage", 400, "Invalid QR code format"),
        ("/menu/unknown-restaurant?table=1", 404, "Restaurant not found"),
        (f"/menu/{seeded.restaurant_id}?table=42", 404, "Table not found"),
        (f"/menu/{seeded.restaurant_id}?table=9", 404, "Table not found"),
        (f"/menu/{seeded.restaurant_id}", 404, "Table not found"),
    ]
    with TestClient(app) as client:
        for qr_data, status_code, message in cases:
            response = client.post("/api/tables/validate-qr", json={"qrData": qr_data})
            assert response.status_code == status_code, qr_data
            assert response.json() == {"message": message}


def test_public_restaurant_and_menu(seeded) -> None:
    with TestClient(app) as client:
        restaurant = client.get(f"/api/restaurants/public/{seeded.restaurant_id}")
        menu = client.get(f"/api/items/public/{seeded.restaurant_id}")
        missing = client.get("/api/items/public/nope")

    assert restaurant.status_code == 200
    assert restaurant.json()["name"] == "Corner Diner"
    assert menu.status_code == 200
    items = menu.json()
    assert [item["name"] for item in items] == ["Burger", "Fries", "Soup"]
    assert items[0]["price"] == "10.00"
    assert items[2]["isAvailable"] is False
    assert missing.status_code == 404


def test_coupon_validation_outcomes(seeded) -> None:
    def validate(client: TestClient, code: str, amount: str) -> dict:
        response = client.post(
            "/api/coupons/validate",
            json={"code": code, "restaurantId": seeded.restaurant_id, "orderAmount": amount},
        )
        assert response.status_code == 200
        return response.json()

    with TestClient(app) as client:
        applied = validate(client, "save10", "20.00")
        below = validate(client, "SAVE10", "12.00")
        expired = validate(client, "OLD", "50")
        exhausted = validate(client, "ONCE", "50")
        paused = validate(client, "PAUSED", "50")
        unknown = validate(client, "NOPE", "50")

    assert applied["valid"] is True
    assert applied["coupon"] == {"code": "SAVE10", "type": "fixed", "value": "10.00", "minOrderAmount": "15.00"}
    assert below == {"valid": False, "reason": "below_minimum", "message": "Minimum order amount of $15.00 required"}
    assert expired["reason"] == "expired"
    assert exhausted["reason"] == "usage_limit_reached"
    assert paused["reason"] == "invalid_code"
    assert unknown["reason"] == "invalid_code"


def test_public_order_is_priced_server_side(seeded, session_factory) -> None:
    with TestClient(app) as client:
        response = client.post(
            "/api/billing/orders/public",
            json={
                "restaurantId": seeded.restaurant_id,
                "tableNumber": 1,
                "items": [
                    {"menuItemId": seeded.burger_id, "quantity": 2},
                    {"menuItemId": seeded.fries_id, "quantity": 1},
                ],
                "couponCode": "twenty",
                "notes": "  no onions ",
            },
        )
        fetched = client.get(f"/api/billing/orders/public/{response.json()['id']}")

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "PENDING"
    assert body["orderNumber"].startswith("ORD-")
    assert body["tableNumber"] == 1
    assert body["subtotal"] == "24.50"
    assert body["discount"] == "4.90"
    assert body["total"] == "19.60"
    assert body["couponCode"] == "TWENTY"
    assert body["notes"] == "no onions"
    assert [(item["name"], item["quantity"], item["subtotal"]) for item in body["items"]] == [
        ("Burger", 2, "20.00"),
        ("Fries", 1, "4.50"),
    ]
    assert fetched.status_code == 200
    assert fetched.json()["id"] == body["id"]

    with session_factory() as db:
        coupon = db.scalar(select(Coupon).where(Coupon.code == "TWENTY"))
        assert coupon.used_count == 1


def test_public_order_line_prices_are_snapshots(seeded, session_factory) -> None:
    with TestClient(app) as client:
        created = client.post(
            "/api/billing/orders/public",
            json={
                "restaurantId": seeded.restaurant_id,
                "tableNumber": 1,
                "items": [{"menuItemId": seeded.burger_id, "quantity": 1}],
            },
        ).json()

        with session_factory() as db:
            db.get(MenuItem, seeded.burger_id).price = Decimal("99.00")
            db.commit()

        fetched = client.get(f"/api/billing/orders/public/{created['id']}").json()

    assert fetched["items"][0]["unitPrice"] == "10.00"
    assert fetched["total"] == "10.00"


def test_public_order_rejections(seeded, session_factory) -> None:
    base = {"restaurantId": seeded.restaurant_id, "tableNumber": 1}
    with TestClient(app) as client:
        unavailable = client.post(
            "/api/billing/orders/public",
            json={**base, "items": [{"menuItemId": seeded.soup_id, "quantity": 1}]},
        )
        foreign = client.post(
            "/api/billing/orders/public",
            json={**base, "items": [{"menuItemId": seeded.other_item_id, "quantity": 1}]},
        )
        below_minimum = client.post(
            "/api/billing/orders/public",
            json={**base, "items": [{"menuItemId": seeded.fries_id, "quantity": 1}], "couponCode": "SAVE10"},
        )
        no_table = client.post(
            "/api/billing/orders/public",
            json={**base, "tableNumber": 77, "items": [{"menuItemId": seeded.fries_id, "quantity": 1}]},
        )
        empty = client.post("/api/billing/orders/public", json={**base, "items": []})
        missing = client.get("/api/billing/orders/public/does-not-exist")

    assert unavailable.status_code == 400
    assert unavailable.json() == {"message": "Menu item Soup is not available", "reason": "item_unavailable"}
    assert foreign.status_code == 400
    assert foreign.json()["message"] == f"Invalid menu item: {seeded.other_item_id}"
    assert below_minimum.status_code == 400
    assert below_minimum.json()["reason"] == "below_minimum"
    assert no_table.status_code == 404
    assert empty.status_code == 422
    assert "message" in empty.json()
    assert missing.status_code == 404
    assert missing.json() == {"message": "Order not found"}

    with session_factory() as db:
        assert db.scalars(select(Order)).all() == []


def test_staff_status_updates_follow_allowed_transitions(seeded, monkeypatch) -> None:
    monkeypatch.setattr(settings, "staff_api_key", "kitchen-key")
    with TestClient(app) as client:
        order_id = client.post(
            "/api/billing/orders/public",
            json={
                "restaurantId": seeded.restaurant_id,
                "tableNumber": 2,
                "items": [{"menuItemId": seeded.burger_id, "quantity": 1}],
            },
        ).json()["id"]

        unauthorized = client.patch(
            f"/api/billing/orders/{order_id}/status",
            json={"status": "CONFIRMED"},
            headers={"x-api-key": "wrong"},
        )
        confirmed = client.patch(
            f"/api/billing/orders/{order_id}/status",
            json={"status": "CONFIRMED"},
            headers={"x-api-key": "kitchen-key"},
        )
        skipped = client.patch(
            f"/api/billing/orders/{order_id}/status",
            json={"status": "COMPLETED"},
            headers={"x-api-key": "kitchen-key"},
        )

    assert unauthorized.status_code == 401
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "CONFIRMED"
    assert skipped.status_code == 409
    assert skipped.json() == {"message": "Cannot move order from CONFIRMED to COMPLETED"}


def test_status_updates_disabled_without_staff_key(seeded, monkeypatch) -> None:
    monkeypatch.setattr(settings, "staff_api_key", "")
    with TestClient(app) as client:
        response = client.patch(
            "/api/billing/orders/anything/status",
            json={"status": "CONFIRMED"},
            headers={"x-api-key": "x"},
        )

    assert response.status_code == 503
