"""Order registration — the entry point used when a purchase completes.

Creates the order header and all of its line items, every item starting in
the ``pending`` gathering state.
"""

import json
from datetime import UTC, datetime

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from shipment.domain import shipment
from shipment.item.item import SellerAddress, ShipmentItem
from shipment.order.order import ShipmentOrder
from shipment.utils.logging import get_logger

logger = get_logger(__name__)


@shipment.command(part_of="ShipmentOrder")
class RegisterShipmentOrder:
    order_id = Identifier(required=True)
    buyer_id = Identifier(required=True)
    buyer_name = String(max_length=255)
    delivery_option = String(max_length=20)
    timestamp = DateTime()
    address = Text()  # JSON ShippingAddress dict
    pickup_point = Text()  # JSON PickupPoint dict
    items = Text(required=True)  # JSON list of item dicts


def _loads(value):
    return json.loads(value) if isinstance(value, str) else value


@shipment.command_handler(part_of=ShipmentOrder)
class RegisterShipmentOrderHandler:
    @handle(RegisterShipmentOrder)
    def register_shipment_order(self, command):
        items_data = _loads(command.items) or []
        if not items_data:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        order_repo = current_domain.repository_for(ShipmentOrder)
        try:
            order_repo.get(command.order_id)
        except ObjectNotFoundError:
            pass
        else:
            raise ValidationError({"order_id": [f"Order {command.order_id} is already registered"]})

        timestamp = command.timestamp or datetime.now(UTC)
        order = ShipmentOrder.register(
            order_id=command.order_id,
            buyer_id=command.buyer_id,
            buyer_name=command.buyer_name,
            delivery_option=command.delivery_option,
            timestamp=timestamp,
            address=_loads(command.address),
            pickup_point=_loads(command.pickup_point),
            item_count=len(items_data),
        )
        order_repo.add(order)

        item_repo = current_domain.repository_for(ShipmentItem)
        for data in items_data:
            seller_address = data.get("seller_address")
            item = ShipmentItem(
                order_id=order.order_id,
                item_id=data["item_id"],
                buyer_id=command.buyer_id,
                buyer_name=command.buyer_name,
                seller_id=data["seller_id"],
                seller_name=data.get("seller_name"),
                is_shop_product=data.get("is_shop_product", False),
                shop_id=data.get("shop_id"),
                product_id=data["product_id"],
                product_name=data.get("product_name"),
                quantity=data.get("quantity", 1),
                delivery_option=order.delivery_option,
                timestamp=timestamp,
                seller_address=SellerAddress(**seller_address) if seller_address else None,
                seller_contact_no=data.get("seller_contact_no"),
            )
            item_repo.add(item)

        logger.info("Shipment order registered", order_id=order.order_id, items=len(items_data))
        return order.order_id
