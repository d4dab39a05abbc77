"""Outcome of bulk operations.

Bulk operations write one document per command. A failed write never rolls
back the ones that already succeeded, so results list both sides.
"""

from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from shipment.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BulkResult:
    succeeded: list = field(default_factory=list)
    failed: list = field(default_factory=list)
    errors: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def record_success(self, key: Hashable) -> None:
        self.succeeded.append(key)

    def record_failure(self, key: Hashable, error: Exception | str) -> None:
        self.failed.append(key)
        self.errors[key] = str(error)


@dataclass
class TransferResult(BulkResult):
    """Item writes plus the order readiness recomputation that followed them."""

    ready_orders: list[str] = field(default_factory=list)
    stale_orders: dict[str, str] = field(default_factory=dict)


def process_each(keyed_commands: Iterable[tuple[Hashable, object]], result: BulkResult | None = None) -> BulkResult:
    """Process each command in its own unit of work, collecting failures."""
    result = result if result is not None else BulkResult()
    for key, command in keyed_commands:
        try:
            current_domain.process(command, asynchronous=False)
        except Exception as exc:
            logger.warning("Shipment write failed", key=str(key), error=str(exc))
            result.record_failure(key, exc)
        else:
            result.record_success(key)
    return result
