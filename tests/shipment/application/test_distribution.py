"""Application tests for the distribution stage."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from shipment.item.item import ShipmentItem
from shipment.order.order import DistributionStatus, ShipmentOrder
from shipment.shared.keys import ItemKey
from shipment.workflow.distribution import (
    assign_orders_to_distributor,
    list_assigned_distribution_orders,
    list_unassigned_distribution_orders,
    mark_orders_delivered,
    mark_orders_in_transit,
    record_order_failure,
    unassign_distributor,
    update_order_note,
)
from shipment.workflow.exceptions import IncompleteOrderRequiresConfirmation
from shipment.workflow.gathering import assign_items_to_gatherer, mark_items_arrived
from shipment.workflow.transfer import transfer_items_to_distribution


def _order(order_id):
    return current_domain.repository_for(ShipmentOrder).get(order_id)


def _item(order_id, item_id):
    return current_domain.repository_for(ShipmentItem).get_by_key(ItemKey(order_id, item_id))


def _ready_order(register_order, order_id="ord-001", item_ids=("i1", "i2")):
    register_order(order_id, items=[(item_id, "s1") for item_id in item_ids])
    transfer_items_to_distribution([ItemKey(order_id, item_id) for item_id in item_ids])
    return order_id


def _incomplete_order(register_order, order_id="ord-001"):
    """Order with i1 at the warehouse and i2 still out with the gatherer."""
    register_order(order_id, items=[("i1", "s1"), ("i2", "s1")])
    assign_items_to_gatherer([ItemKey(order_id, "i1"), ItemKey(order_id, "i2")], "G1")
    mark_items_arrived([ItemKey(order_id, "i1")])
    return order_id


def _ids(combined_orders):
    return [combined.order_id for combined in combined_orders]


class TestEligibilityLists:
    def test_ready_order_is_unassigned(self, register_order):
        _ready_order(register_order)
        assert _ids(list_unassigned_distribution_orders()) == ["ord-001"]
        assert list_assigned_distribution_orders() == []

    def test_incomplete_order_with_staged_item_is_unassigned(self, register_order, couriers):
        _incomplete_order(register_order)
        assert _ids(list_unassigned_distribution_orders()) == ["ord-001"]

    def test_order_with_nothing_staged_is_not_listed(self, register_order):
        register_order("ord-001", items=[("i1", "s1")])
        assert list_unassigned_distribution_orders() == []
        assert list_assigned_distribution_orders() == []

    def test_assigned_and_failed_orders_are_in_assigned_column(self, register_order, couriers):
        _ready_order(register_order, "ord-001")
        _ready_order(register_order, "ord-002")
        assign_orders_to_distributor(["ord-001", "ord-002"], "D1")
        record_order_failure("ord-002", "Buyer not home")

        assert _ids(list_assigned_distribution_orders()) == ["ord-002", "ord-001"]
        assert list_unassigned_distribution_orders() == []

    def test_incomplete_assigned_order_is_in_assigned_column(self, register_order, couriers):
        _incomplete_order(register_order)
        assign_orders_to_distributor(["ord-001"], "D1", confirm_incomplete=True)
        assert _ids(list_assigned_distribution_orders()) == ["ord-001"]
        assert list_unassigned_distribution_orders() == []

    def test_lists_are_newest_first(self, register_order):
        _ready_order(register_order, "ord-001")
        _ready_order(register_order, "ord-002")
        assert _ids(list_unassigned_distribution_orders()) == ["ord-002", "ord-001"]

    def test_search(self, register_order):
        _ready_order(register_order, "ord-001")
        register_order("ord-002", items=[("i1", "s1")], buyer_name="Mehmet Buyer")
        transfer_items_to_distribution([ItemKey("ord-002", "i1")])
        assert _ids(list_unassigned_distribution_orders(search="mehmet")) == ["ord-002"]


class TestAssignOrdersToDistributor:
    def test_assign_ready_orders(self, register_order, couriers):
        _ready_order(register_order)
        result = assign_orders_to_distributor(["ord-001"], "D1")

        assert result.succeeded == ["ord-001"]
        order = _order("ord-001")
        assert order.distribution_status == DistributionStatus.ASSIGNED.value
        assert order.distributed_by == "D1"
        assert order.distributed_by_name == "Dora Driver"
        assert order.distributed_at is not None

    def test_incomplete_order_requires_confirmation(self, register_order, couriers):
        _ready_order(register_order, "ord-001")
        _incomplete_order(register_order, "ord-002")

        with pytest.raises(IncompleteOrderRequiresConfirmation) as exc:
            assign_orders_to_distributor(["ord-001", "ord-002"], "D1")

        assert exc.value.shortfalls == {"ord-002": {"present": ["i1"], "missing": ["i2"]}}
        # Nothing was written, not even the complete order
        assert _order("ord-001").distribution_status == DistributionStatus.READY.value
        assert _order("ord-002").distributed_by is None

    def test_confirmed_incomplete_order_is_assigned(self, register_order, couriers):
        _incomplete_order(register_order)
        result = assign_orders_to_distributor(["ord-001"], "D1", confirm_incomplete=True)
        assert result.succeeded == ["ord-001"]
        assert _order("ord-001").distribution_status == DistributionStatus.ASSIGNED.value

    def test_order_with_nothing_staged_fails(self, register_order, couriers):
        register_order("ord-001", items=[("i1", "s1")])
        result = assign_orders_to_distributor(["ord-001"], "D1", confirm_incomplete=True)
        assert result.failed == ["ord-001"]
        assert _order("ord-001").distribution_status is None

    def test_unknown_order_is_reported(self, register_order, couriers):
        _ready_order(register_order)
        result = assign_orders_to_distributor(["ord-001", "ord-404"], "D1")
        assert result.succeeded == ["ord-001"]
        assert result.failed == ["ord-404"]

    def test_unknown_distributor(self, register_order):
        _ready_order(register_order)
        with pytest.raises(ObjectNotFoundError):
            assign_orders_to_distributor(["ord-001"], "nobody")


class TestUnassignAndTransit:
    def test_unassign_distributor(self, register_order, couriers):
        _ready_order(register_order)
        assign_orders_to_distributor(["ord-001"], "D1")

        unassign_distributor("ord-001")

        order = _order("ord-001")
        assert order.distribution_status == DistributionStatus.READY.value
        assert order.distributed_by is None
        assert order.distributed_by_name is None

    def test_unassign_without_distributor_is_rejected(self, register_order):
        _ready_order(register_order)
        with pytest.raises(ValidationError):
            unassign_distributor("ord-001")

    def test_in_transit(self, register_order, couriers):
        _ready_order(register_order, "ord-001")
        _ready_order(register_order, "ord-002")
        assign_orders_to_distributor(["ord-001"], "D1")

        result = mark_orders_in_transit(["ord-001", "ord-002"])

        assert result.succeeded == ["ord-001"]
        assert result.failed == ["ord-002"]
        assert _order("ord-001").distribution_status == DistributionStatus.DISTRIBUTED.value


class TestMarkOrdersDelivered:
    def test_full_delivery_keeps_distributor(self, register_order, couriers):
        _ready_order(register_order)
        assign_orders_to_distributor(["ord-001"], "D1")

        result = mark_orders_delivered(["ord-001"])

        assert result.succeeded == ["ord-001"]
        order = _order("ord-001")
        assert order.distribution_status == DistributionStatus.DELIVERED.value
        assert order.delivered_at is not None
        assert order.distributed_by == "D1"
        assert _item("ord-001", "i1").delivered_in_partial is True
        assert _item("ord-001", "i2").delivered_in_partial is True

    def test_incomplete_delivery_releases_distributor(self, register_order, couriers):
        _incomplete_order(register_order)
        assign_orders_to_distributor(["ord-001"], "D1", confirm_incomplete=True)

        mark_orders_delivered(["ord-001"])

        order = _order("ord-001")
        assert order.distribution_status == DistributionStatus.DELIVERED.value
        assert order.distributed_by is None
        assert _item("ord-001", "i1").delivered_in_partial is True
        assert _item("ord-001", "i2").delivered_in_partial is False
        assert _ids(list_assigned_distribution_orders()) == ["ord-001"]

    def test_order_with_nothing_staged_fails(self, register_order):
        register_order("ord-001", items=[("i1", "s1")])
        result = mark_orders_delivered(["ord-001"])
        assert result.failed == ["ord-001"]
        assert _order("ord-001").delivered_at is None


class TestOrderNotes:
    def test_update_note(self, register_order):
        register_order("ord-001")
        update_order_note("ord-001", "Leave with neighbour")
        assert _order("ord-001").warehouse_note == "Leave with neighbour"
