"""Shipment bounded context — Gathering, Distribution and Delivery.

Moves an order's line items from seller pickup to the central warehouse
(gathering), hands whole orders to distributors (distribution) and records
what actually reached the buyer, including partial deliveries. Every
transition is an operator action; there is no background scheduler.
"""

from protean.domain import Domain

from shipment.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

shipment = Domain(name="shipment")
