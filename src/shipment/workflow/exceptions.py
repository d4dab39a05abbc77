"""Precondition failures raised before a bulk operation writes anything."""

from protean.exceptions import InvalidOperationError


class IncompleteOrderRequiresConfirmation(InvalidOperationError):
    """Some orders still wait for items and the operator has not confirmed.

    ``shortfalls`` maps each incomplete order id to the item ids that are at
    the warehouse (``present``) and those still missing (``missing``).
    """

    def __init__(self, shortfalls: dict[str, dict[str, list[str]]]):
        self.shortfalls = shortfalls
        super().__init__(f"Orders {', '.join(sorted(shortfalls))} are incomplete; confirm to assign them anyway")


class CannotReverseDeliveredPartial(InvalidOperationError):
    """Partially delivered orders cannot be sent back to gathering."""

    def __init__(self, order_ids: list[str]):
        self.order_ids = order_ids
        super().__init__(f"Orders {', '.join(order_ids)} were partially delivered and cannot return to gathering")
