"""FastAPI routes for the shipment console."""

import json

from fastapi import APIRouter
from protean.utils.globals import current_domain

from shipment.api.schemas import (
    AddCourierRequest,
    ArchiveStatusRequest,
    ArchiveToggleResponse,
    AssignDistributorRequest,
    AssignGathererRequest,
    BoostRequest,
    BoostResponse,
    BulkResultResponse,
    CombinedOrderResponse,
    CourierResponse,
    CourierWorkloadResponse,
    DeliveredResponse,
    DeliveryStatsResponse,
    FailureRequest,
    ItemKeysRequest,
    ItemResponse,
    NoteRequest,
    OrderIdResponse,
    OrderIdsRequest,
    OrderResponse,
    RegisterOrderRequest,
    SellerGroupResponse,
    StatusResponse,
    TransferResultResponse,
)
from shipment.catalogue import get_backend
from shipment.catalogue.port import BoostItem
from shipment.courier.management import AddCourier, RemoveCourier, list_active_couriers
from shipment.order.registration import RegisterShipmentOrder
from shipment.shared.keys import ItemKey
from shipment.workflow import archive, distribution, gathering, transfer
from shipment.workflow.predicates import classify_order
from shipment.workflow.workload import courier_workload, courier_workloads


# ---------------------------------------------------------------------------
# Response builders
# ---------------------------------------------------------------------------
def _vo_dict(value_object):
    return value_object.to_dict() if value_object else None


def _item_response(item) -> ItemResponse:
    return ItemResponse(
        order_id=item.order_id,
        item_id=item.item_id,
        product_id=item.product_id,
        product_name=item.product_name,
        quantity=item.quantity,
        seller_id=item.seller_id,
        seller_name=item.seller_name,
        buyer_name=item.buyer_name,
        gathering_status=item.gathering_status,
        gathered_by=item.gathered_by,
        gathered_by_name=item.gathered_by_name,
        gathered_at=item.gathered_at,
        arrived_at=item.arrived_at,
        failure_reason=item.failure_reason,
        delivered_in_partial=bool(item.delivered_in_partial),
        partial_delivery_at=item.partial_delivery_at,
        warehouse_note=item.warehouse_note,
    )


def _group_response(group) -> SellerGroupResponse:
    return SellerGroupResponse(
        seller_id=group.seller_id,
        seller_name=group.seller_name,
        is_shop_product=group.is_shop_product,
        seller_address=_vo_dict(group.seller_address),
        seller_contact_no=group.seller_contact_no,
        total_items=group.total_items,
        items=[_item_response(item) for item in group.items],
    )


def _order_response(order) -> OrderResponse:
    return OrderResponse(
        order_id=order.order_id,
        buyer_id=order.buyer_id,
        buyer_name=order.buyer_name,
        delivery_option=order.delivery_option,
        timestamp=order.timestamp,
        address=_vo_dict(order.address),
        pickup_point=_vo_dict(order.pickup_point),
        all_items_gathered=bool(order.all_items_gathered),
        distribution_status=order.distribution_status,
        distributed_by=order.distributed_by,
        distributed_by_name=order.distributed_by_name,
        distributed_at=order.distributed_at,
        delivered_at=order.delivered_at,
        failure_reason=order.failure_reason,
        warehouse_note=order.warehouse_note,
    )


def _combined_response(combined) -> CombinedOrderResponse:
    duration = archive.delivery_duration(combined.order)
    return CombinedOrderResponse(
        order=_order_response(combined.order),
        items=[_item_response(item) for item in combined.items],
        badge=classify_order(combined).value,
        partial_delivery=archive.is_partial_delivery(combined),
        delivery_duration_seconds=duration.total_seconds() if duration is not None else None,
    )


def _bulk_response(result) -> BulkResultResponse:
    return BulkResultResponse(
        succeeded=[str(key) for key in result.succeeded],
        failed=[str(key) for key in result.failed],
        errors={str(key): error for key, error in result.errors.items()},
    )


def _transfer_response(result) -> TransferResultResponse:
    return TransferResultResponse(
        **_bulk_response(result).model_dump(),
        ready_orders=result.ready_orders,
        stale_orders=result.stale_orders,
    )


def _keys(body: ItemKeysRequest) -> list[ItemKey]:
    return [ItemKey(key.order_id, key.item_id) for key in body.item_keys]


# ---------------------------------------------------------------------------
# Shipment Router
# ---------------------------------------------------------------------------
shipment_router = APIRouter(prefix="/shipment", tags=["shipment"])


@shipment_router.post("/orders", status_code=201, response_model=OrderIdResponse)
async def register_order(body: RegisterOrderRequest) -> OrderIdResponse:
    """Register a purchased order and its items for fulfillment."""
    command = RegisterShipmentOrder(
        order_id=body.order_id,
        buyer_id=body.buyer_id,
        buyer_name=body.buyer_name,
        delivery_option=body.delivery_option,
        timestamp=body.timestamp,
        address=json.dumps(body.address.model_dump()) if body.address else None,
        pickup_point=json.dumps(body.pickup_point.model_dump()) if body.pickup_point else None,
        items=json.dumps([item.model_dump() for item in body.items]),
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderIdResponse(order_id=result)


# Gathering ---------------------------------------------------------------
@shipment_router.get("/gathering/unassigned", response_model=list[SellerGroupResponse])
async def unassigned_gathering(search: str | None = None) -> list[SellerGroupResponse]:
    return [_group_response(group) for group in gathering.list_unassigned_gathering_groups(search)]


@shipment_router.get("/gathering/assigned", response_model=list[SellerGroupResponse])
async def assigned_gathering(search: str | None = None) -> list[SellerGroupResponse]:
    return [_group_response(group) for group in gathering.list_assigned_gathering_groups(search)]


@shipment_router.post("/gathering/assign", response_model=BulkResultResponse)
async def assign_gatherer(body: AssignGathererRequest) -> BulkResultResponse:
    return _bulk_response(gathering.assign_items_to_gatherer(_keys(body), body.gatherer_id))


@shipment_router.post("/gathering/gathered", response_model=BulkResultResponse)
async def mark_gathered(body: ItemKeysRequest) -> BulkResultResponse:
    return _bulk_response(gathering.mark_items_gathered(_keys(body)))


@shipment_router.post("/gathering/arrived", response_model=TransferResultResponse)
async def mark_arrived(body: ItemKeysRequest) -> TransferResultResponse:
    """Record warehouse arrival; orders with every item staged become ready."""
    return _transfer_response(gathering.mark_items_arrived(_keys(body)))


@shipment_router.put("/orders/{order_id}/items/{item_id}/unassign", response_model=StatusResponse)
async def unassign_gatherer(order_id: str, item_id: str) -> StatusResponse:
    gathering.unassign_gatherer(order_id, item_id)
    return StatusResponse(status="gatherer_unassigned")


@shipment_router.put("/orders/{order_id}/items/{item_id}/failure", response_model=StatusResponse)
async def record_item_failure(order_id: str, item_id: str, body: FailureRequest) -> StatusResponse:
    gathering.record_item_failure(order_id, item_id, body.reason, body.notes)
    return StatusResponse(status="gathering_failed")


@shipment_router.put("/orders/{order_id}/items/{item_id}/note", response_model=StatusResponse)
async def update_item_note(order_id: str, item_id: str, body: NoteRequest) -> StatusResponse:
    gathering.update_item_note(order_id, item_id, body.note)
    return StatusResponse(status="note_updated")


# Transfers ---------------------------------------------------------------
@shipment_router.post("/transfer/to-distribution", response_model=TransferResultResponse)
async def transfer_to_distribution(body: ItemKeysRequest) -> TransferResultResponse:
    return _transfer_response(transfer.transfer_items_to_distribution(_keys(body)))


@shipment_router.post("/transfer/to-gathering", response_model=BulkResultResponse)
async def transfer_to_gathering(body: OrderIdsRequest) -> BulkResultResponse:
    return _bulk_response(transfer.transfer_orders_to_gathering(body.order_ids))


# Distribution ------------------------------------------------------------
@shipment_router.get("/distribution/unassigned", response_model=list[CombinedOrderResponse])
async def unassigned_distribution(search: str | None = None) -> list[CombinedOrderResponse]:
    return [_combined_response(combined) for combined in distribution.list_unassigned_distribution_orders(search)]


@shipment_router.get("/distribution/assigned", response_model=list[CombinedOrderResponse])
async def assigned_distribution(search: str | None = None) -> list[CombinedOrderResponse]:
    return [_combined_response(combined) for combined in distribution.list_assigned_distribution_orders(search)]


@shipment_router.post("/distribution/assign", response_model=BulkResultResponse)
async def assign_distributor(body: AssignDistributorRequest) -> BulkResultResponse:
    result = distribution.assign_orders_to_distributor(
        body.order_ids, body.distributor_id, confirm_incomplete=body.confirm_incomplete
    )
    return _bulk_response(result)


@shipment_router.post("/distribution/in-transit", response_model=BulkResultResponse)
async def mark_in_transit(body: OrderIdsRequest) -> BulkResultResponse:
    return _bulk_response(distribution.mark_orders_in_transit(body.order_ids))


@shipment_router.post("/distribution/delivered", response_model=BulkResultResponse)
async def mark_delivered(body: OrderIdsRequest) -> BulkResultResponse:
    return _bulk_response(distribution.mark_orders_delivered(body.order_ids))


@shipment_router.put("/orders/{order_id}/unassign-distributor", response_model=StatusResponse)
async def unassign_distributor(order_id: str) -> StatusResponse:
    distribution.unassign_distributor(order_id)
    return StatusResponse(status="distributor_unassigned")


@shipment_router.put("/orders/{order_id}/failure", response_model=StatusResponse)
async def record_order_failure(order_id: str, body: FailureRequest) -> StatusResponse:
    distribution.record_order_failure(order_id, body.reason, body.notes)
    return StatusResponse(status="distribution_failed")


@shipment_router.put("/orders/{order_id}/note", response_model=StatusResponse)
async def update_order_note(order_id: str, body: NoteRequest) -> StatusResponse:
    distribution.update_order_note(order_id, body.note)
    return StatusResponse(status="note_updated")


# Delivered archive -------------------------------------------------------
@shipment_router.get("/delivered", response_model=DeliveredResponse)
async def delivered(window: archive.DeliveryWindow = archive.DeliveryWindow.TODAY, search: str | None = None):
    orders = archive.list_delivered(window, search=search)
    stats = archive.delivery_stats(orders)
    return DeliveredResponse(
        window=window.value,
        orders=[_combined_response(combined) for combined in orders],
        stats=DeliveryStatsResponse(today=stats.today, week=stats.week, total=stats.total),
    )


# ---------------------------------------------------------------------------
# Courier Router
# ---------------------------------------------------------------------------
courier_router = APIRouter(prefix="/couriers", tags=["couriers"])


def _workload_response(workload) -> CourierWorkloadResponse:
    return CourierWorkloadResponse(
        courier_id=workload.courier_id,
        display_name=workload.display_name,
        gathering_count=workload.gathering_count,
        distribution_count=workload.distribution_count,
        gathering_items=[str(item.key) for item in workload.gathering],
        distribution_orders=[order.order_id for order in workload.distribution],
    )


@courier_router.get("", response_model=list[CourierResponse])
async def list_couriers() -> list[CourierResponse]:
    return [
        CourierResponse(
            courier_id=courier.courier_id,
            display_name=courier.display_name,
            email=courier.email,
            is_active=courier.is_active,
        )
        for courier in list_active_couriers()
    ]


@courier_router.post("", status_code=201, response_model=StatusResponse)
async def add_courier(body: AddCourierRequest) -> StatusResponse:
    command = AddCourier(courier_id=body.courier_id, display_name=body.display_name, email=body.email)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="courier_added")


@courier_router.delete("/{courier_id}", response_model=StatusResponse)
async def remove_courier(courier_id: str) -> StatusResponse:
    current_domain.process(RemoveCourier(courier_id=courier_id), asynchronous=False)
    return StatusResponse(status="courier_removed")


@courier_router.get("/workloads", response_model=list[CourierWorkloadResponse])
async def workloads() -> list[CourierWorkloadResponse]:
    return [_workload_response(workload) for workload in courier_workloads()]


@courier_router.get("/{courier_id}/workload", response_model=CourierWorkloadResponse)
async def workload(courier_id: str) -> CourierWorkloadResponse:
    return _workload_response(courier_workload(courier_id))


# ---------------------------------------------------------------------------
# Catalogue Router
# ---------------------------------------------------------------------------
catalogue_router = APIRouter(prefix="/catalogue", tags=["catalogue"])


@catalogue_router.put("/products/{product_id}/archive-status", response_model=ArchiveToggleResponse)
async def toggle_archive_status(product_id: str, body: ArchiveStatusRequest) -> ArchiveToggleResponse:
    result = get_backend().toggle_product_archive_status(
        product_id,
        body.archive_status,
        body.collection,
        shop_id=body.shop_id,
        needs_update=body.needs_update,
        archive_reason=body.archive_reason,
    )
    return ArchiveToggleResponse(
        success=result.success,
        product_id=result.product_id,
        archived=result.archived,
        collection=result.collection,
        failure_reason=result.failure_reason,
    )


@catalogue_router.post("/boosts", response_model=BoostResponse)
async def boost_products(body: BoostRequest) -> BoostResponse:
    items = [BoostItem(product_id=item.product_id, collection=item.collection, shop_id=item.shop_id) for item in body.items]
    result = get_backend().boost_products(items, body.boost_duration)
    return BoostResponse(
        success=result.success,
        boosted=list(result.boosted),
        boost_duration=result.boost_duration,
        expires_at=result.expires_at,
        failure_reason=result.failure_reason,
    )
