"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from catalogo.catalog import Catalog
from catalogo.config import Settings

# Global Catalog instance (initialized on app startup)
_catalog: Catalog | None = None


def init_catalog(settings: Settings | None = None) -> Catalog:
    """Initialize the global Catalog instance."""
    global _catalog  # noqa: PLW0603
    _catalog = Catalog(settings)
    return _catalog


def close_catalog() -> None:
    """Close the global Catalog instance."""
    global _catalog  # noqa: PLW0603
    if _catalog is not None:
        _catalog.close()
        _catalog = None


def get_catalog() -> Generator[Catalog, None, None]:
    """Dependency that provides the Catalog instance."""
    if _catalog is None:
        raise RuntimeError("Catalog not initialized. Call init_catalog() first.")
    yield _catalog


# Type alias for dependency injection
CatalogDep = Annotated[Catalog, Depends(get_catalog)]
