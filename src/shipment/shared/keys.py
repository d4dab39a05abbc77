"""Composite identity of an order line item."""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class ItemKey:
    """Addresses ``orders/{order_id}/items/{item_id}`` in the store.

    Hashable, so it can be used directly in selections and result sets.
    """

    order_id: str
    item_id: str

    @classmethod
    def of(cls, item) -> "ItemKey":
        return cls(order_id=str(item.order_id), item_id=str(item.item_id))

    def __str__(self) -> str:
        return f"orders/{self.order_id}/items/{self.item_id}"
