"""Application tests for the courier registry and workload queries."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from shipment.courier.management import AddCourier, RemoveCourier, get_active_courier, list_active_couriers
from shipment.shared.keys import ItemKey
from shipment.workflow.distribution import assign_orders_to_distributor, mark_orders_delivered
from shipment.workflow.gathering import assign_items_to_gatherer, mark_items_arrived, mark_items_gathered
from shipment.workflow.transfer import transfer_items_to_distribution
from shipment.workflow.workload import courier_workload, courier_workloads


class TestCourierRegistry:
    def test_list_active_couriers_sorted_by_name(self, couriers):
        current_domain.process(RemoveCourier(courier_id="G2"), asynchronous=False)
        names = [courier.display_name for courier in list_active_couriers()]
        assert names == ["Dan Driver", "Dora Driver", "Gina Gatherer"]

    def test_adding_active_courier_again_is_rejected(self, couriers):
        with pytest.raises(ValidationError):
            current_domain.process(
                AddCourier(courier_id="G1", display_name="Gina", email="g1@example.com"), asynchronous=False
            )

    def test_removed_courier_can_be_added_back(self, couriers):
        current_domain.process(RemoveCourier(courier_id="G1"), asynchronous=False)
        current_domain.process(
            AddCourier(courier_id="G1", display_name="Gina Again", email="g1@example.com"), asynchronous=False
        )
        assert get_active_courier("G1").display_name == "Gina Again"

    def test_inactive_courier_is_not_found(self, couriers):
        current_domain.process(RemoveCourier(courier_id="D2"), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            get_active_courier("D2")

    def test_email_is_normalised(self, couriers):
        assert get_active_courier("G1").email == "g1@example.com"


class TestWorkload:
    def test_counts_open_gathering_and_distribution_work(self, register_order, couriers):
        register_order("ord-001", items=[("i1", "s1"), ("i2", "s1"), ("i3", "s1")])
        keys = [ItemKey("ord-001", f"i{n}") for n in (1, 2, 3)]
        assign_items_to_gatherer(keys, "G1")
        mark_items_gathered(keys[1:2])
        mark_items_arrived(keys[2:])

        register_order("ord-002", items=[("i1", "s1")])
        register_order("ord-003", items=[("i1", "s1")])
        transfer_items_to_distribution([ItemKey("ord-002", "i1"), ItemKey("ord-003", "i1")])
        assign_orders_to_distributor(["ord-002", "ord-003"], "D1")
        mark_orders_delivered(["ord-003"])

        gatherer = courier_workload("G1")
        assert {str(item.key) for item in gatherer.gathering} == {"orders/ord-001/items/i1", "orders/ord-001/items/i2"}
        assert gatherer.distribution_count == 0

        distributor = courier_workload("D1")
        assert [order.order_id for order in distributor.distribution] == ["ord-002"]

    def test_workloads_for_every_active_courier(self, couriers):
        workloads = courier_workloads()
        assert sorted(workload.courier_id for workload in workloads) == sorted(couriers)
        assert all(workload.gathering_count == 0 for workload in workloads)
