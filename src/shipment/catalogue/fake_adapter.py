"""Fake catalogue backend — in-memory catalogue for testing and development.

Tracks the archive state and boost expiry of every product it has seen.
Configurable success/failure behavior for integration testing.
"""

from datetime import UTC, datetime, timedelta

from shipment.catalogue.port import (
    MAX_BOOST_MINUTES,
    PRODUCT_COLLECTIONS,
    ArchiveToggleResult,
    BoostItem,
    BoostResult,
    CatalogueBackend,
)


class FakeCatalogueBackend(CatalogueBackend):
    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Catalogue backend unavailable"
        self.archived: dict[str, dict] = {}
        self.boosted: dict[str, datetime] = {}

    def configure(self, should_succeed: bool = True, failure_reason: str = "Catalogue backend unavailable"):
        """Configure the fake backend behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def toggle_product_archive_status(
        self,
        product_id: str,
        archive_status: bool,
        collection: str,
        shop_id: str | None = None,
        needs_update: bool | None = None,
        archive_reason: str | None = None,
    ) -> ArchiveToggleResult:
        if not self.should_succeed:
            return ArchiveToggleResult(success=False, product_id=product_id, failure_reason=self.failure_reason)
        if collection not in PRODUCT_COLLECTIONS:
            return ArchiveToggleResult(
                success=False, product_id=product_id, failure_reason=f"Unknown collection: {collection}"
            )

        if archive_status:
            self.archived[product_id] = {
                "collection": collection,
                "shop_id": shop_id,
                "needs_update": bool(needs_update),
                "archive_reason": archive_reason,
            }
        elif self.archived.pop(product_id, None) is None:
            return ArchiveToggleResult(
                success=False, product_id=product_id, failure_reason=f"Product {product_id} is not archived"
            )

        return ArchiveToggleResult(success=True, product_id=product_id, archived=archive_status, collection=collection)

    def boost_products(self, items: list[BoostItem], boost_duration: int) -> BoostResult:
        if not self.should_succeed:
            return BoostResult(success=False, failure_reason=self.failure_reason)
        if not items:
            return BoostResult(success=False, failure_reason="No products to boost")
        if not 0 < boost_duration <= MAX_BOOST_MINUTES:
            return BoostResult(
                success=False, failure_reason=f"Boost duration must be between 1 and {MAX_BOOST_MINUTES} minutes"
            )

        expires_at = datetime.now(UTC) + timedelta(minutes=boost_duration)
        for item in items:
            self.boosted[item.product_id] = expires_at
        return BoostResult(
            success=True,
            boosted=tuple(item.product_id for item in items),
            boost_duration=boost_duration,
            expires_at=expires_at,
        )
