"""Operator gathering board with optimistic assignment.

The board moves selected items into the assigned column before the writes
happen. When some writes fail it rolls back to the snapshot taken before
the move, re-applies the items that did succeed and leaves only the failed
ones selected, so the operator can retry them.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from shipment.item.item import ShipmentItem
from shipment.shared.keys import ItemKey
from shipment.utils.logging import get_logger
from shipment.workflow.gathering import (
    SellerGroup,
    assign_items_to_gatherer,
    group_items_by_seller,
    list_assigned_gathering_groups,
    list_unassigned_gathering_groups,
)
from shipment.workflow.results import BulkResult

logger = get_logger(__name__)


class Selection:
    def __init__(self, keys: Iterable[ItemKey] = ()):
        self._keys: set[ItemKey] = set(keys)

    def __contains__(self, key: ItemKey) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def keys(self) -> list[ItemKey]:
        return sorted(self._keys)

    def toggle_item(self, key: ItemKey) -> None:
        if key in self._keys:
            self._keys.discard(key)
        else:
            self._keys.add(key)

    def toggle_group(self, group: SellerGroup) -> None:
        """Select every item of the group, or deselect them all if already selected."""
        keys = set(group.item_keys)
        if keys <= self._keys:
            self._keys -= keys
        else:
            self._keys |= keys

    def replace(self, keys: Iterable[ItemKey]) -> None:
        self._keys = set(keys)

    def clear(self) -> None:
        self._keys.clear()


@dataclass(frozen=True)
class BoardSnapshot:
    unassigned: tuple[ShipmentItem, ...]
    assigned: tuple[ShipmentItem, ...]


@dataclass
class GatheringBoard:
    unassigned: list[SellerGroup] = field(default_factory=list)
    assigned: list[SellerGroup] = field(default_factory=list)
    selection: Selection = field(default_factory=Selection)

    @classmethod
    def load(cls, search: str | None = None) -> "GatheringBoard":
        return cls(
            unassigned=list_unassigned_gathering_groups(search),
            assigned=list_assigned_gathering_groups(search),
        )

    @staticmethod
    def _flatten(groups: list[SellerGroup]) -> list[ShipmentItem]:
        return [item for group in groups for item in group.items]

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            unassigned=tuple(self._flatten(self.unassigned)),
            assigned=tuple(self._flatten(self.assigned)),
        )

    def restore(self, snapshot: BoardSnapshot) -> None:
        self.unassigned = group_items_by_seller(snapshot.unassigned)
        self.assigned = group_items_by_seller(snapshot.assigned)

    def _move_to_assigned(self, keys: Iterable[ItemKey]) -> None:
        keys = set(keys)
        remaining = self._flatten(self.unassigned)
        moved = [item for item in remaining if item.key in keys]
        self.unassigned = group_items_by_seller(item for item in remaining if item.key not in keys)
        self.assigned = group_items_by_seller(moved + self._flatten(self.assigned))

    def assign_selected(self, gatherer_id: str) -> BulkResult:
        """Optimistically assign the selected items to a gatherer."""
        keys = self.selection.keys
        if not keys:
            return BulkResult()

        snapshot = self.snapshot()
        self._move_to_assigned(keys)
        self.selection.clear()

        try:
            result = assign_items_to_gatherer(keys, gatherer_id)
        except Exception:
            self.restore(snapshot)
            self.selection.replace(keys)
            raise

        if result.failed:
            logger.warning("Board assignment partially failed", failed=[str(key) for key in result.failed])
            self.restore(snapshot)
            self._move_to_assigned(result.succeeded)
            self.selection.replace(result.failed)
        return result
