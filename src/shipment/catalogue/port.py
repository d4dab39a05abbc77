"""Catalogue backend port — the server-side catalogue operations the console calls.

The console never edits catalogue documents directly; it asks the backend to
archive/unarchive a product or to boost a set of products. Adapters are
swapped via configuration.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

# Product collections the backend knows how to move between
PRODUCT_COLLECTIONS = ("products", "shop_products", "paused_products", "paused_shop_products")

# A boost runs for at most a week
MAX_BOOST_MINUTES = 7 * 24 * 60


@dataclass(frozen=True)
class BoostItem:
    product_id: str
    collection: str
    shop_id: str | None = None


@dataclass(frozen=True)
class ArchiveToggleResult:
    """Result of archiving or unarchiving a product."""

    success: bool
    product_id: str
    archived: bool | None = None
    collection: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class BoostResult:
    success: bool
    boosted: tuple[str, ...] = ()
    boost_duration: int | None = None
    expires_at: datetime | None = None
    failure_reason: str | None = None


class CatalogueBackend(ABC):
    """Abstract interface for catalogue backends."""

    @abstractmethod
    def toggle_product_archive_status(
        self,
        product_id: str,
        archive_status: bool,
        collection: str,
        shop_id: str | None = None,
        needs_update: bool | None = None,
        archive_reason: str | None = None,
    ) -> ArchiveToggleResult:
        """Archive (``archive_status=True``) or restore a product."""
        ...

    @abstractmethod
    def boost_products(self, items: list[BoostItem], boost_duration: int) -> BoostResult:
        """Boost products for ``boost_duration`` minutes."""
        ...
