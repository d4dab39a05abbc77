"""Pydantic API schemas for the shipment console.

These are the external API contracts — separate from domain commands.
The API layer translates between these schemas and the workflow functions.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class ItemKeyRequest(BaseModel):
    order_id: str
    item_id: str


class ItemKeysRequest(BaseModel):
    item_keys: list[ItemKeyRequest] = Field(min_length=1)


class AssignGathererRequest(ItemKeysRequest):
    gatherer_id: str


class OrderIdsRequest(BaseModel):
    order_ids: list[str] = Field(min_length=1)


class AssignDistributorRequest(OrderIdsRequest):
    distributor_id: str
    confirm_incomplete: bool = False


class FailureRequest(BaseModel):
    reason: str
    notes: str | None = None


class NoteRequest(BaseModel):
    note: str | None = None


class SellerAddressRequest(BaseModel):
    address_line1: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class ShippingAddressRequest(BaseModel):
    address_line1: str
    address_line2: str | None = None
    city: str
    phone_number: str | None = None


class PickupPointRequest(BaseModel):
    pickup_point_id: str
    name: str
    address: str
    phone: str | None = None
    hours: str | None = None
    contact_person: str | None = None
    notes: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class OrderItemRequest(BaseModel):
    item_id: str
    seller_id: str
    seller_name: str | None = None
    is_shop_product: bool = False
    shop_id: str | None = None
    product_id: str
    product_name: str | None = None
    quantity: int = Field(default=1, ge=1)
    seller_address: SellerAddressRequest | None = None
    seller_contact_no: str | None = None


class RegisterOrderRequest(BaseModel):
    order_id: str
    buyer_id: str
    buyer_name: str | None = None
    delivery_option: str = "normal"
    timestamp: datetime | None = None
    address: ShippingAddressRequest | None = None
    pickup_point: PickupPointRequest | None = None
    items: list[OrderItemRequest] = Field(min_length=1)


class AddCourierRequest(BaseModel):
    courier_id: str
    display_name: str
    email: str


class ArchiveStatusRequest(BaseModel):
    archive_status: bool
    collection: str
    shop_id: str | None = None
    needs_update: bool | None = None
    archive_reason: str | None = None


class BoostItemRequest(BaseModel):
    product_id: str
    collection: str
    shop_id: str | None = None


class BoostRequest(BaseModel):
    items: list[BoostItemRequest]
    boost_duration: int


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str


class OrderIdResponse(BaseModel):
    order_id: str


class BulkResultResponse(BaseModel):
    succeeded: list[str]
    failed: list[str]
    errors: dict[str, str]


class TransferResultResponse(BulkResultResponse):
    ready_orders: list[str]
    stale_orders: dict[str, str]


class ItemResponse(BaseModel):
    order_id: str
    item_id: str
    product_id: str
    product_name: str | None = None
    quantity: int
    seller_id: str
    seller_name: str | None = None
    buyer_name: str | None = None
    gathering_status: str
    gathered_by: str | None = None
    gathered_by_name: str | None = None
    gathered_at: datetime | None = None
    arrived_at: datetime | None = None
    failure_reason: str | None = None
    delivered_in_partial: bool = False
    partial_delivery_at: datetime | None = None
    warehouse_note: str | None = None


class SellerGroupResponse(BaseModel):
    seller_id: str
    seller_name: str | None = None
    is_shop_product: bool
    seller_address: dict | None = None
    seller_contact_no: str | None = None
    total_items: int
    items: list[ItemResponse]


class OrderResponse(BaseModel):
    order_id: str
    buyer_id: str | None = None
    buyer_name: str | None = None
    delivery_option: str
    timestamp: datetime
    address: dict | None = None
    pickup_point: dict | None = None
    all_items_gathered: bool
    distribution_status: str | None = None
    distributed_by: str | None = None
    distributed_by_name: str | None = None
    distributed_at: datetime | None = None
    delivered_at: datetime | None = None
    failure_reason: str | None = None
    warehouse_note: str | None = None


class CombinedOrderResponse(BaseModel):
    order: OrderResponse
    items: list[ItemResponse]
    badge: str
    partial_delivery: bool
    delivery_duration_seconds: float | None = None


class DeliveryStatsResponse(BaseModel):
    today: int
    week: int
    total: int


class DeliveredResponse(BaseModel):
    window: str
    orders: list[CombinedOrderResponse]
    stats: DeliveryStatsResponse


class CourierResponse(BaseModel):
    courier_id: str
    display_name: str
    email: str
    is_active: bool


class CourierWorkloadResponse(BaseModel):
    courier_id: str
    display_name: str
    gathering_count: int
    distribution_count: int
    gathering_items: list[str]
    distribution_orders: list[str]


class ArchiveToggleResponse(BaseModel):
    success: bool
    product_id: str
    archived: bool | None = None
    collection: str | None = None
    failure_reason: str | None = None


class BoostResponse(BaseModel):
    success: bool
    boosted: list[str]
    boost_duration: int | None = None
    expires_at: datetime | None = None
    failure_reason: str | None = None
