"""Catalogue backend factory.

Provides get_backend() / set_backend() to swap implementations. The adapter
is chosen by the CATALOGUE_BACKEND environment variable and defaults to the
in-memory FakeCatalogueBackend.
"""

import os

from shipment.catalogue.port import CatalogueBackend

_current_backend: CatalogueBackend | None = None


def get_backend() -> CatalogueBackend:
    """Return the configured catalogue backend (singleton)."""
    global _current_backend
    if _current_backend is None:
        adapter = os.environ.get("CATALOGUE_BACKEND", "fake")
        if adapter == "fake":
            from shipment.catalogue.fake_adapter import FakeCatalogueBackend

            _current_backend = FakeCatalogueBackend()
        else:
            raise ValueError(f"Unknown catalogue backend: {adapter}")
    return _current_backend


def set_backend(backend: CatalogueBackend) -> None:
    """Override the active catalogue backend (useful for tests)."""
    global _current_backend
    _current_backend = backend


def reset_backend() -> None:
    global _current_backend
    _current_backend = None
