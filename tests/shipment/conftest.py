import json
from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def shipment_bed():
    from shipment.domain import shipment

    bed = DomainFixture(shipment)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(shipment_bed):
    with shipment_bed.domain_context():
        yield


@pytest.fixture()
def register_order():
    """Register an order through the command, returning its id.

    ``items`` is a list of ``(item_id, seller_id)`` pairs or item dicts.
    Orders registered later get later timestamps.
    """
    from shipment.order.registration import RegisterShipmentOrder

    counter = {"n": 0}

    def _register(order_id="ord-001", items=(("item-1", "seller-1"),), buyer_name="Ayse Buyer", **overrides):
        counter["n"] += 1
        item_dicts = []
        for item in items:
            if isinstance(item, dict):
                item_dicts.append(item)
                continue
            item_id, seller_id = item
            item_dicts.append(
                {
                    "item_id": item_id,
                    "seller_id": seller_id,
                    "seller_name": f"Shop {seller_id}",
                    "product_id": f"prod-{item_id}",
                    "product_name": f"Product {item_id}",
                    "quantity": 1,
                    "seller_address": {"address_line1": f"{seller_id} street 1"},
                }
            )
        fields = {
            "order_id": order_id,
            "buyer_id": "buyer-001",
            "buyer_name": buyer_name,
            "delivery_option": "normal",
            "timestamp": datetime(2026, 1, 1, tzinfo=UTC) + timedelta(minutes=counter["n"]),
            "address": json.dumps({"address_line1": "Main street 5", "city": "Famagusta"}),
            "items": json.dumps(item_dicts),
        }
        fields.update(overrides)
        return current_domain.process(RegisterShipmentOrder(**fields), asynchronous=False)

    return _register


@pytest.fixture()
def couriers():
    """Register gatherer G1/G2 and distributor D1/D2 as active couriers."""
    from shipment.courier.management import AddCourier

    for courier_id, name in (("G1", "Gina Gatherer"), ("G2", "Gus Gatherer"), ("D1", "Dora Driver"), ("D2", "Dan Driver")):
        current_domain.process(
            AddCourier(courier_id=courier_id, display_name=name, email=f"{courier_id.lower()}@Example.com"),
            asynchronous=False,
        )
    return ["G1", "G2", "D1", "D2"]
