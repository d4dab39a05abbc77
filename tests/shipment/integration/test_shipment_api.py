"""Integration tests for the shipment console API via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from shipment.api.errors import register_exception_handlers
from shipment.api.routes import courier_router, shipment_router


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(shipment_router)
    app.include_router(courier_router)
    register_exception_handlers(app)
    return TestClient(app)


def _add_courier(client, courier_id, name):
    response = client.post(
        "/couriers",
        json={"courier_id": courier_id, "display_name": name, "email": f"{courier_id}@example.com"},
    )
    assert response.status_code == 201


def _register(client, order_id="ord-api-001", item_ids=("i1",), **overrides):
    payload = {
        "order_id": order_id,
        "buyer_id": "buyer-api-001",
        "buyer_name": "Api Buyer",
        "address": {"address_line1": "Main street 5", "city": "Famagusta"},
        "items": [
            {"item_id": item_id, "seller_id": "seller-1", "seller_name": "Corner Shop", "product_id": f"prod-{item_id}"}
            for item_id in item_ids
        ],
    }
    payload.update(overrides)
    response = client.post("/shipment/orders", json=payload)
    assert response.status_code == 201
    return response.json()["order_id"]


def _keys(order_id, *item_ids):
    return {"item_keys": [{"order_id": order_id, "item_id": item_id} for item_id in item_ids]}


class TestRegisterOrderAPI:
    def test_register_returns_201(self, client):
        assert _register(client) == "ord-api-001"

    def test_registered_items_wait_for_gathering(self, client):
        _register(client, item_ids=("i1", "i2"))

        groups = client.get("/shipment/gathering/unassigned").json()

        assert len(groups) == 1
        assert groups[0]["seller_name"] == "Corner Shop"
        assert groups[0]["total_items"] == 2

    def test_duplicate_registration_returns_400(self, client):
        _register(client)
        response = client.post(
            "/shipment/orders",
            json={
                "order_id": "ord-api-001",
                "buyer_id": "buyer-api-001",
                "address": {"address_line1": "Main street 5", "city": "Famagusta"},
                "items": [{"item_id": "i1", "seller_id": "seller-1", "product_id": "prod-i1"}],
            },
        )
        assert response.status_code == 400

    def test_both_destinations_returns_400(self, client):
        response = client.post(
            "/shipment/orders",
            json={
                "order_id": "ord-api-002",
                "buyer_id": "buyer-api-001",
                "address": {"address_line1": "Main street 5", "city": "Famagusta"},
                "pickup_point": {"pickup_point_id": "pp-1", "name": "Kiosk", "address": "Square 1"},
                "items": [{"item_id": "i1", "seller_id": "seller-1", "product_id": "prod-i1"}],
            },
        )
        assert response.status_code == 400

    def test_empty_items_rejected_by_schema(self, client):
        response = client.post(
            "/shipment/orders",
            json={"order_id": "ord-api-003", "buyer_id": "buyer-api-001", "items": []},
        )
        assert response.status_code == 422


class TestGatheringAPI:
    def test_assign_and_gather(self, client):
        _add_courier(client, "G1", "Gina Gatherer")
        _register(client)

        response = client.post("/shipment/gathering/assign", json={**_keys("ord-api-001", "i1"), "gatherer_id": "G1"})
        assert response.status_code == 200
        assert response.json()["succeeded"] == ["orders/ord-api-001/items/i1"]

        assigned = client.get("/shipment/gathering/assigned").json()
        assert assigned[0]["items"][0]["gathered_by_name"] == "Gina Gatherer"

        response = client.post("/shipment/gathering/gathered", json=_keys("ord-api-001", "i1"))
        assert response.json()["succeeded"] == ["orders/ord-api-001/items/i1"]

    def test_assign_to_unknown_courier_returns_404(self, client):
        _register(client)
        response = client.post("/shipment/gathering/assign", json={**_keys("ord-api-001", "i1"), "gatherer_id": "nobody"})
        assert response.status_code == 404

    def test_invalid_transition_reported_per_item(self, client):
        _register(client)
        response = client.post("/shipment/gathering/gathered", json=_keys("ord-api-001", "i1"))
        body = response.json()
        assert response.status_code == 200
        assert body["failed"] == ["orders/ord-api-001/items/i1"]
        assert "orders/ord-api-001/items/i1" in body["errors"]

    def test_arrival_makes_order_ready(self, client):
        _add_courier(client, "G1", "Gina Gatherer")
        _register(client)
        client.post("/shipment/gathering/assign", json={**_keys("ord-api-001", "i1"), "gatherer_id": "G1"})

        response = client.post("/shipment/gathering/arrived", json=_keys("ord-api-001", "i1"))

        assert response.json()["ready_orders"] == ["ord-api-001"]
        unassigned = client.get("/shipment/distribution/unassigned").json()
        assert [entry["order"]["order_id"] for entry in unassigned] == ["ord-api-001"]

    def test_item_failure_and_note(self, client):
        _register(client)

        response = client.put("/shipment/orders/ord-api-001/items/i1/failure", json={"reason": "Seller closed"})
        assert response.json() == {"status": "gathering_failed"}

        response = client.put("/shipment/orders/ord-api-001/items/i1/note", json={"note": "  call first  "})
        assert response.json() == {"status": "note_updated"}

        item = client.get("/shipment/gathering/assigned").json()[0]["items"][0]
        assert item["gathering_status"] == "failed"
        assert item["warehouse_note"] == "call first"

    def test_unknown_item_returns_404(self, client):
        response = client.put("/shipment/orders/missing/items/i1/note", json={"note": "x"})
        assert response.status_code == 404


class TestDistributionAPI:
    def test_incomplete_order_requires_confirmation(self, client):
        _add_courier(client, "D1", "Dora Driver")
        _register(client, item_ids=("i1", "i2"))
        client.post("/shipment/transfer/to-distribution", json=_keys("ord-api-001", "i1"))

        response = client.post("/shipment/distribution/assign", json={"order_ids": ["ord-api-001"], "distributor_id": "D1"})

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "confirmation_required"
        assert body["shortfalls"] == {"ord-api-001": {"present": ["i1"], "missing": ["i2"]}}

        response = client.post(
            "/shipment/distribution/assign",
            json={"order_ids": ["ord-api-001"], "distributor_id": "D1", "confirm_incomplete": True},
        )
        assert response.status_code == 200
        assert response.json()["succeeded"] == ["ord-api-001"]

    def test_full_delivery_shows_in_archive(self, client):
        _add_courier(client, "D1", "Dora Driver")
        _register(client)
        client.post("/shipment/transfer/to-distribution", json=_keys("ord-api-001", "i1"))
        client.post("/shipment/distribution/assign", json={"order_ids": ["ord-api-001"], "distributor_id": "D1"})
        client.post("/shipment/distribution/in-transit", json={"order_ids": ["ord-api-001"]})

        response = client.post("/shipment/distribution/delivered", json={"order_ids": ["ord-api-001"]})
        assert response.json()["succeeded"] == ["ord-api-001"]

        archive = client.get("/shipment/delivered", params={"window": "today"}).json()
        assert archive["stats"]["total"] == 1
        entry = archive["orders"][0]
        assert entry["order"]["distributed_by"] == "D1"
        assert entry["partial_delivery"] is False
        assert entry["delivery_duration_seconds"] >= 0

    def test_reversal_of_partial_delivery_is_blocked(self, client):
        _add_courier(client, "D1", "Dora Driver")
        _register(client, item_ids=("i1", "i2"))
        client.post("/shipment/transfer/to-distribution", json=_keys("ord-api-001", "i1"))
        client.post(
            "/shipment/distribution/assign",
            json={"order_ids": ["ord-api-001"], "distributor_id": "D1", "confirm_incomplete": True},
        )
        client.post("/shipment/distribution/delivered", json={"order_ids": ["ord-api-001"]})

        response = client.post("/shipment/transfer/to-gathering", json={"order_ids": ["ord-api-001"]})

        assert response.status_code == 409
        assert response.json()["error"] == "reversal_blocked"
        assert response.json()["order_ids"] == ["ord-api-001"]

    def test_unassign_without_distributor_returns_400(self, client):
        _register(client)
        response = client.put("/shipment/orders/ord-api-001/unassign-distributor")
        assert response.status_code == 400

    def test_invalid_window_returns_422(self, client):
        response = client.get("/shipment/delivered", params={"window": "decade"})
        assert response.status_code == 422


class TestCourierAPI:
    def test_add_list_and_remove(self, client):
        _add_courier(client, "G1", "Gina Gatherer")
        _add_courier(client, "D1", "Dora Driver")

        names = [courier["display_name"] for courier in client.get("/couriers").json()]
        assert names == ["Dora Driver", "Gina Gatherer"]

        assert client.delete("/couriers/G1").json() == {"status": "courier_removed"}
        assert [courier["courier_id"] for courier in client.get("/couriers").json()] == ["D1"]

    def test_workload(self, client):
        _add_courier(client, "G1", "Gina Gatherer")
        _register(client, item_ids=("i1", "i2"))
        client.post("/shipment/gathering/assign", json={**_keys("ord-api-001", "i1", "i2"), "gatherer_id": "G1"})

        body = client.get("/couriers/G1/workload").json()

        assert body["gathering_count"] == 2
        assert body["distribution_count"] == 0

    def test_workload_of_unknown_courier_returns_404(self, client):
        assert client.get("/couriers/nobody/workload").status_code == 404
