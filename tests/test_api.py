"""Tests for the JSON API through Flask's test client."""

import pytest


ORDER = {
    "line_items": [
        {"device_index": 0, "quantity": 1000, "service_type": "print-only"},
    ],
    "shipping_type": "pickup",
}


@pytest.fixture
def saved_quote(client):
    response = client.post("/api/quotes", json={
        "client_name": "Acme <b>Vapes</b>",
        "account_manager": "Kyle",
        "order": ORDER,
    })
    assert response.status_code == 201
    return response.get_json()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        data = response.get_json()

        assert response.status_code == 200
        assert data["status"] == "ok"
        assert data["checks"]["devices"] == 3


class TestPricing:
    def test_price_order(self, client):
        response = client.post("/api/quotes/price", json=ORDER)
        data = response.get_json()

        assert response.status_code == 200
        assert data["quote"]["total_quote"] == pytest.approx(765.0)
        assert data["quote"]["pricing_tier_label"] == "1,000-2,999 units"
        assert data["profit"]["margin_status"] == "good"
        assert data["order"]["line_items"][0]["device"]["name"] == "1mg Disposable"

    def test_price_legacy_record(self, client):
        response = client.post("/api/quotes/price", json={
            "selectedDevice": 0, "quantity": 1000, "shippingType": "pickup",
        })

        assert response.status_code == 200
        assert response.get_json()["quote"]["total_quote"] == pytest.approx(765.0)

    def test_empty_order(self, client):
        response = client.post("/api/quotes/price", json={"line_items": []})

        assert response.status_code == 400
        assert response.get_json()["error"] == "EmptyOrder"

    def test_negative_quantity(self, client):
        response = client.post("/api/quotes/price", json={
            "line_items": [{"device_index": 0, "quantity": -5}],
        })

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidQuantity"

    def test_unknown_device(self, client):
        response = client.post("/api/quotes/price", json={
            "line_items": [{"device_index": 42, "quantity": 5}],
        })

        assert response.status_code == 404
        assert response.get_json()["error"] == "DeviceNotFound"

    @pytest.mark.parametrize("body", [{}, {"lineitems": ORDER["line_items"]}])
    def test_missing_line_items_is_empty_order(self, client, body):
        response = client.post("/api/quotes/price", json=body)

        assert response.status_code == 400
        assert response.get_json()["error"] == "EmptyOrder"

    def test_non_object_line_item(self, client):
        response = client.post("/api/quotes/price", json={"line_items": ["x"]})

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidOrderSetting"

    @pytest.mark.parametrize("device", [
        {"name": "Pen", "capacity": 40, "unit_cost": 1.0, "pricing_tiers": [{"price": 2.0}]},
        {"name": "Pen", "capacity": 40, "unit_cost": "abc", "pricing_tiers": [{"min_qty": 0, "price": 2.0}]},
    ])
    def test_malformed_embedded_device(self, client, device):
        response = client.post("/api/quotes/price", json={
            "line_items": [{"device": device, "quantity": 100}],
        })

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidDevice"

    def test_sample_run_must_be_boolean(self, client):
        response = client.post("/api/quotes/price", json=dict(ORDER, sample_run="false"))

        assert response.status_code == 400
        assert response.get_json()["details"]["setting"] == "sample_run"

    def test_sample_run_false_skips_fee(self, client):
        response = client.post("/api/quotes/price", json=dict(ORDER, sample_run=False))

        assert response.status_code == 200
        assert response.get_json()["quote"]["sample_fee"] == 0

    def test_body_must_be_object(self, client):
        response = client.post("/api/quotes/price", data="nope", content_type="application/json")
        assert response.status_code == 400


class TestSavedQuotes:
    def test_save_sanitizes_client_name(self, saved_quote):
        assert saved_quote["client_name"] == "Acme Vapes"
        assert saved_quote["status"] == "pending"

    def test_save_requires_client_name(self, client):
        response = client.post("/api/quotes", json={"client_name": "", "order": ORDER})

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidOrderSetting"

    def test_list_and_get(self, client, saved_quote):
        listed = client.get("/api/quotes?q=acme").get_json()
        assert [q["quote_id"] for q in listed["quotes"]] == [saved_quote["quote_id"]]
        assert listed["status_counts"]["pending"] == 1

        response = client.get(f"/api/quotes/{saved_quote['quote_id']}")
        assert response.get_json()["total_quote"] == pytest.approx(765.0)

    def test_get_missing(self, client):
        response = client.get("/api/quotes/quote-404")

        assert response.status_code == 404
        assert response.get_json()["error"] == "QuoteNotFound"

    def test_status(self, client, saved_quote):
        quote_id = saved_quote["quote_id"]
        response = client.post(f"/api/quotes/{quote_id}/status", json={"status": "won"})
        assert response.get_json()["status"] == "won"

        response = client.post(f"/api/quotes/{quote_id}/status", json={"status": "bogus"})
        assert response.status_code == 400

    def test_filter_by_status(self, client, saved_quote):
        assert client.get("/api/quotes?status=won").get_json()["quotes"] == []
        assert client.get("/api/quotes?status=bogus").status_code == 400

    def test_duplicate_and_customers(self, client, saved_quote):
        response = client.post(f"/api/quotes/{saved_quote['quote_id']}/duplicate")
        assert response.status_code == 201
        assert response.get_json()["client_name"] == "Acme Vapes (Copy)"

        customers = client.get("/api/customers").get_json()["customers"]
        assert {c["client_name"] for c in customers} == {"Acme Vapes", "Acme Vapes (Copy)"}

    def test_compare(self, client, saved_quote):
        current = dict(ORDER, line_items=[{"device_index": 0, "quantity": 2000}])
        response = client.post(f"/api/quotes/{saved_quote['quote_id']}/compare", json=current)
        data = response.get_json()

        assert response.status_code == 200
        assert data["difference"]["total_quantity"] == 1000

    def test_delete(self, client, saved_quote):
        quote_id = saved_quote["quote_id"]
        assert client.delete(f"/api/quotes/{quote_id}").status_code == 200
        assert client.get(f"/api/quotes/{quote_id}").status_code == 404


class TestDevices:
    def test_list(self, client):
        devices = client.get("/api/devices").get_json()["devices"]

        assert [d["index"] for d in devices] == [0, 1, 2]
        assert devices[2]["name"] == "MK Lighter"

    def test_add_update_delete(self, client):
        response = client.post("/api/devices", json={
            "name": "<i>Pen</i>", "capacity": 40, "unit_cost": 2.0,
        })
        assert response.status_code == 201
        assert response.get_json()["name"] == "Pen"
        assert response.get_json()["pricing_tiers"][0]["price"] == 2.44

        response = client.put("/api/devices/3", json={
            "pricing_tiers": [{"min_qty": 0, "price": 3.0}],
        })
        assert response.get_json()["pricing_tiers"] == [{"min_qty": 0, "price": 3.0}]

        response = client.delete("/api/devices/3")
        assert len(response.get_json()["devices"]) == 3

    def test_invalid_device(self, client):
        response = client.post("/api/devices", json={"name": "Pen", "capacity": 0, "unit_cost": 1})

        assert response.status_code == 400
        assert response.get_json()["error"] == "InvalidDevice"

    def test_non_numeric_capacity(self, client):
        response = client.post("/api/devices", json={"name": "Pen", "capacity": "lots", "unit_cost": 1})
        assert response.status_code == 400

    def test_missing_tier_fallback(self, client):
        response = client.put("/api/devices/0", json={
            "pricing_tiers": [{"min_qty": 100, "price": 3.0}],
        })

        assert response.status_code == 400
        assert response.get_json()["error"] == "MissingFallbackTier"


class TestAccountManagers:
    def test_add_and_delete(self, client):
        response = client.post("/api/account-managers", json={"name": "Dana"})
        assert response.status_code == 201
        assert "Dana" in response.get_json()["account_managers"]

        assert client.delete("/api/account-managers/Dana").status_code == 200
        assert client.delete("/api/account-managers/Dana").status_code == 404

    def test_duplicate_manager(self, client):
        response = client.post("/api/account-managers", json={"name": "Ryan"})
        assert response.status_code == 400
